"""Define typed configuration models for asset builds.

Use `AssetMillConfig` to load, validate, and persist runtime settings.
"""

import os
import logging
import yaml
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List
from enum import Enum

from .core.paths import COMPILE_TARGETS

logger = logging.getLogger("asset_mill.config")


class AssetGroup(Enum):
    """Enumerate asset classifications."""

    STYLESHEETS = "stylesheets"
    JAVASCRIPTS = "javascripts"


@dataclass
class ExtensionConfig:
    """Source extensions per group and their compile targets."""

    stylesheets: List[str] = field(default_factory=lambda: [
        "css", "sass", "scss", "less", "styl", "stylus", "gss",
    ])
    javascripts: List[str] = field(default_factory=lambda: [
        "js", "coffee", "ts", "tsx", "jsx", "dart", "roy",
    ])
    compile_targets: Dict[str, str] = field(default_factory=lambda: dict(COMPILE_TARGETS))


@dataclass
class RemoteConfig:
    """Settings for fetching remotely hosted assets."""

    timeout_seconds: float = 30.0
    user_agent: str = "AssetMill"
    verify_ssl: bool = True


_SUPPORTED_CONFIG_VERSION = 1
_FILTER_ALIAS_KEYS = {"engine", "arguments", "environments", "groups", "pattern"}


@dataclass
class AssetMillConfig:
    """Master build configuration."""

    config_version: int = 1
    environment: str = "production"
    production_build: bool = True
    public_dir: str = "./public"
    build_dir: str = "./public/builds"
    log_level: str = "INFO"
    extensions: ExtensionConfig = field(default_factory=ExtensionConfig)
    remote: RemoteConfig = field(default_factory=RemoteConfig)
    # alias -> {"engine": ..., "arguments": [...], "environments": [...],
    #           "groups": [...], "pattern": "*.css"}
    filters: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_yaml(cls, path: str) -> "AssetMillConfig":
        """Load configuration from a YAML file and validate it."""
        config = cls()
        if path and os.path.exists(path):
            try:
                with open(path, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid YAML in config file {path}: {exc}") from exc
            if not isinstance(data, dict):
                raise ValueError(
                    f"Config file {path} must contain a mapping, got {type(data).__name__}"
                )
            yaml_version = data.get("config_version", 1)
            if isinstance(yaml_version, int) and yaml_version > _SUPPORTED_CONFIG_VERSION:
                logger.warning(
                    "Config %s declares config_version=%d but only %d is supported. "
                    "Unknown keys will be ignored.",
                    path, yaml_version, _SUPPORTED_CONFIG_VERSION,
                )
            _merge_dict_to_dataclass(config, data)
        elif path:
            logger.warning("Config file %s not found; using defaults.", path)
        config.validate()
        return config

    def to_yaml(self, path: str):
        """Persist the configuration to ``path``."""
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(asdict(self), f, default_flow_style=False, sort_keys=False)

    def group_for_extension(self, ext: str):
        """Return the ``AssetGroup`` whose source extensions include ``ext``."""
        ext = ext.lower().lstrip(".")
        if ext in self.extensions.javascripts:
            return AssetGroup.JAVASCRIPTS
        if ext in self.extensions.stylesheets:
            return AssetGroup.STYLESHEETS
        return None

    def validate(self):
        """Validate every section; raise one ValueError listing all problems."""
        errors = []

        if not isinstance(self.environment, str) or not self.environment.strip():
            errors.append("environment must be a non-empty string")
        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"log_level must be a standard level name, got '{self.log_level}'")
        if self.remote.timeout_seconds <= 0:
            errors.append("remote.timeout_seconds must be > 0")

        overlap = set(self.extensions.stylesheets) & set(self.extensions.javascripts)
        if overlap:
            errors.append(
                "extensions listed for both stylesheets and javascripts: "
                + ", ".join(sorted(overlap))
            )
        for src, target in self.extensions.compile_targets.items():
            if not isinstance(target, str) or not target or "." in target:
                errors.append(
                    f"extensions.compile_targets['{src}'] must be a bare extension, "
                    f"got {target!r}"
                )

        valid_groups = {g.value for g in AssetGroup}
        for alias, spec in self.filters.items():
            if not isinstance(spec, dict):
                errors.append(f"filters.{alias} must be a mapping")
                continue
            unknown = set(spec) - _FILTER_ALIAS_KEYS
            if unknown:
                errors.append(f"filters.{alias} has unknown keys: {sorted(unknown)}")
            args = spec.get("arguments", [])
            if not isinstance(args, list):
                errors.append(f"filters.{alias}.arguments must be a list")
            groups = spec.get("groups", [])
            if not isinstance(groups, list) or not set(groups) <= valid_groups:
                errors.append(
                    f"filters.{alias}.groups must be a list drawn from {sorted(valid_groups)}"
                )
            envs = spec.get("environments", [])
            if not isinstance(envs, list) or not all(isinstance(e, str) and e for e in envs):
                errors.append(f"filters.{alias}.environments must be a list of names")
            pattern = spec.get("pattern")
            if pattern is not None and (not isinstance(pattern, str) or not pattern):
                errors.append(f"filters.{alias}.pattern must be a non-empty string")

        if errors:
            raise ValueError(
                "Configuration validation failed:\n" +
                "\n".join(f"  - {e}" for e in errors)
            )


def _merge_dict_to_dataclass(obj, data: dict, _path: str = ""):
    import dataclasses
    for key, value in data.items():
        full_key = f"{_path}{key}"
        if not hasattr(obj, key):
            logger.warning("Unknown config key ignored: '%s'", full_key)
            continue
        field_val = getattr(obj, key)
        if dataclasses.is_dataclass(field_val) and isinstance(value, dict):
            _merge_dict_to_dataclass(field_val, value, f"{full_key}.")
            continue
        if value is None and field_val is not None:
            logger.warning(
                "Config key '%s' is null but field default is %s. Using default value.",
                full_key, type(field_val).__name__,
            )
            continue
        expected_type = type(field_val)
        if (field_val is not None
                and not isinstance(value, expected_type)
                and not (expected_type is float and isinstance(value, int))):
            logger.warning(
                "Config type mismatch for '%s': expected %s, got %s (%r). Using default value.",
                full_key, expected_type.__name__, type(value).__name__, value,
            )
            continue
        if expected_type is float and isinstance(value, int):
            value = float(value)
        # Merge dicts instead of replacing (preserves defaults)
        if isinstance(field_val, dict) and isinstance(value, dict):
            field_val.update(value)
        else:
            setattr(obj, key, value)
