"""Construct `Filter` objects from names, config aliases and import paths."""

import importlib
import logging
from typing import Any, Callable, Dict, Optional

from .config import AssetMillConfig
from .engines import BUILTIN_ENGINES
from .filter import Filter, Resolution

logger = logging.getLogger("asset_mill.factory")


class FilterFactory:
    """Registry mapping filter names to engine constructors.

    Names resolve, in order, against registered engines, against aliases
    declared under ``filters`` in the config, and finally as an import path
    (``package.module:Engine`` or ``package.module.Engine``).
    """

    def __init__(self, config: Optional[AssetMillConfig] = None,
                 registry: Optional[Dict[str, Any]] = None,
                 environment: Optional[str] = None):
        self.config = config or AssetMillConfig()
        self.environment = environment or self.config.environment
        self._registry: Dict[str, Any] = dict(BUILTIN_ENGINES)
        if registry:
            for name, constructor in registry.items():
                self.register(name, constructor)

    def register(self, name: str, constructor: Callable) -> "FilterFactory":
        if not isinstance(name, str) or not name:
            raise ValueError("Engine name must be a non-empty string")
        if not callable(constructor):
            raise TypeError(f"Engine constructor for '{name}' must be callable")
        self._registry[name] = constructor
        logger.debug("Registered filter engine '%s' -> %r", name, constructor)
        return self

    def registered(self) -> list:
        return sorted(set(self._registry) | set(self.config.filters))

    def resolve(self, name: str) -> Resolution:
        """Resolve ``name`` to an engine constructor without raising."""
        seen = set()
        current = name
        while current not in self._registry and current in self.config.filters:
            if current in seen:
                return Resolution(name, error=f"alias cycle through '{current}'")
            seen.add(current)
            current = self.config.filters[current].get("engine", current)
            if current in seen:
                return Resolution(name, error=f"alias cycle through '{current}'")

        if current in self._registry:
            return Resolution(name, engine=self._registry[current])
        return self._import_engine(name, current)

    @staticmethod
    def _import_engine(name: str, path: str) -> Resolution:
        if ":" in path:
            module_name, _, attr = path.partition(":")
        else:
            module_name, _, attr = path.rpartition(".")
        if not module_name or not attr:
            return Resolution(name, error=f"unknown filter engine '{path}'")
        try:
            module = importlib.import_module(module_name)
        except ImportError as exc:
            return Resolution(name, error=f"cannot import '{module_name}': {exc}")
        engine = getattr(module, attr, None)
        if engine is None:
            return Resolution(name, error=f"'{module_name}' has no attribute '{attr}'")
        return Resolution(name, engine=engine)

    def make(self, filter_or_name, arguments=None,
             environment: Optional[str] = None) -> Filter:
        """Return a `Filter` for a name, or pass a `Filter` instance through."""
        if isinstance(filter_or_name, Filter):
            if arguments:
                filter_or_name.set_arguments(*arguments)
            return filter_or_name
        if not isinstance(filter_or_name, str):
            raise TypeError(
                f"apply() expects a filter name or Filter, got {type(filter_or_name).__name__}"
            )

        alias = self.config.filters.get(filter_or_name, {})
        if arguments is None:
            arguments = alias.get("arguments", [])
        flt = Filter(
            filter_or_name,
            arguments,
            environment or self.environment,
            resolver=self.resolve,
        )
        # Listing both groups is the same as listing none.
        groups = set(alias.get("groups", []))
        if groups == {"javascripts"}:
            flt.when_asset_is_javascript()
        elif groups == {"stylesheets"}:
            flt.when_asset_is_stylesheet()
        if alias.get("environments"):
            flt.when_environment_is(*alias["environments"])
        if alias.get("pattern"):
            flt.when_asset_is(alias["pattern"])
        return flt
