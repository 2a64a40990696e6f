"""The `Asset` entity: path identity plus its filter pipeline.

An asset is built by loading its raw source once, resolving which of its
filters are active for the build context, running every active engine's
``filter_load`` hook and then every ``filter_dump`` hook in the same order.
Each dump sees the content left by the previous one.
"""

import logging
import re
import sys
from typing import Dict, Optional, Union

from .config import AssetGroup
from .core import (
    AssetSnapshot, BuildContext,
    get_extension, get_usable_extension, get_usable_path, get_fingerprinted_path,
)
from .factory import FilterFactory
from .filter import Filter, FilterResolutionError

logger = logging.getLogger("asset_mill.asset")

# Sorts after every explicitly ordered asset.
UNORDERED = sys.maxsize

_REMOTE_RE = re.compile(r"^(?:[A-Za-z][A-Za-z0-9+.\-]*:)?//")


class AssetBuildError(RuntimeError):
    """Raised when a filter fails while an asset is being built."""

    def __init__(self, asset: str, filter_name: str, phase: str, cause: BaseException):
        super().__init__(
            f"Filter '{filter_name}' failed during {phase} of asset '{asset}': "
            f"{type(cause).__name__}: {cause}"
        )
        self.asset = asset
        self.filter = filter_name
        self.phase = phase


class Asset:
    """A single stylesheet, script or remote URL and the filters applied to it."""

    def __init__(self, files, factory: FilterFactory, absolute_path: str,
                 relative_path: str, environment: Optional[str] = None):
        self.files = files
        self.factory = factory
        self.absolute_path = absolute_path
        self.relative_path = relative_path
        self.environment = environment or factory.environment
        self.group: Optional[AssetGroup] = None
        self.order_value = UNORDERED
        self.excluded = False
        self.is_raw_asset = False
        self.filters: Dict[str, Filter] = {}
        self.content: Optional[str] = None
        self.last_modified = None
        if not self.is_remote():
            self.last_modified = files.last_modified(absolute_path)

    def __repr__(self):
        return f"Asset({self.relative_path!r}, group={self.get_group()!r})"

    @property
    def _compile_targets(self):
        return self.factory.config.extensions.compile_targets

    def get_relative_path(self) -> str:
        return self.relative_path

    def get_absolute_path(self) -> str:
        return self.absolute_path

    def get_last_modified(self):
        return self.last_modified

    def get_extension(self) -> str:
        return get_extension(self.relative_path)

    def get_usable_extension(self) -> str:
        return get_usable_extension(self.relative_path, self._compile_targets)

    def get_usable_path(self) -> str:
        return get_usable_path(self.relative_path, self._compile_targets)

    def get_fingerprinted_path(self) -> str:
        """Usable path tagged with a digest of the built content.

        An asset that has not been built yet hashes as empty content.
        """
        return get_fingerprinted_path(self.get_usable_path(), self.content)

    def is_remote(self) -> bool:
        return bool(_REMOTE_RE.match(self.absolute_path))

    def set_group(self, group: Union[AssetGroup, str, None]) -> "Asset":
        if group is None or isinstance(group, AssetGroup):
            self.group = group
        else:
            try:
                self.group = AssetGroup(group)
            except ValueError:
                raise ValueError(
                    f"Unknown asset group {group!r}; expected one of "
                    f"{[g.value for g in AssetGroup]}"
                ) from None
        return self

    def get_group(self) -> Optional[str]:
        return self.group.value if self.group else None

    def get_effective_group(self) -> str:
        """Explicit group, else inferred from the usable extension."""
        if self.group is not None:
            return self.group.value
        inferred = self.factory.config.group_for_extension(self.get_usable_extension())
        return (inferred or AssetGroup.STYLESHEETS).value

    def is_stylesheet(self) -> bool:
        return self.get_effective_group() == AssetGroup.STYLESHEETS.value

    def is_javascript(self) -> bool:
        return self.get_effective_group() == AssetGroup.JAVASCRIPTS.value

    def exclude(self) -> "Asset":
        self.excluded = True
        return self

    def is_excluded(self) -> bool:
        return self.excluded

    def raw(self) -> "Asset":
        """Mark the asset to be served from source instead of its build."""
        self.is_raw_asset = True
        return self

    def is_raw(self) -> bool:
        return self.is_raw_asset

    def set_order(self, order: int) -> "Asset":
        if isinstance(order, bool) or not isinstance(order, int) or order < 1:
            raise ValueError(f"Asset order must be a positive integer, got {order!r}")
        self.order_value = order
        return self

    def order(self, order: int) -> "Asset":
        return self.set_order(order)

    def first(self) -> "Asset":
        return self.set_order(1)

    def second(self) -> "Asset":
        return self.set_order(2)

    def third(self) -> "Asset":
        return self.set_order(3)

    def get_order(self) -> int:
        return self.order_value

    def is_ordered(self) -> bool:
        return self.order_value != UNORDERED

    def get_content(self) -> Optional[str]:
        return self.content

    def set_content(self, content: Optional[str]) -> "Asset":
        self.content = content
        return self

    def apply(self, filter_or_name, arguments=None) -> Filter:
        """Register a filter and return it so restrictions can be chained."""
        if isinstance(filter_or_name, Filter):
            owner = filter_or_name.get_resource()
            if owner is not None and owner is not self:
                raise ValueError(
                    f"Filter '{filter_or_name.get_filter()}' already belongs to {owner!r}"
                )
        flt = self.factory.make(filter_or_name, arguments, self.environment)
        flt.set_resource(self)
        name = flt.get_filter()
        # Re-applying a name moves it to the end.
        self.filters.pop(name, None)
        self.filters[name] = flt
        logger.debug("Applied filter '%s' to %s", name, self.relative_path)
        return flt

    def get_filters(self) -> Dict[str, Filter]:
        return dict(self.filters)

    def snapshot(self, environment: Optional[str] = None,
                 production: Optional[bool] = None) -> AssetSnapshot:
        """Freeze what restrictions are allowed to see about this asset."""
        if production is None:
            production = self.factory.config.production_build
        return AssetSnapshot(
            relative_path=self.relative_path,
            group=self.get_effective_group(),
            environment=environment or self.environment,
            production=bool(production),
        )

    def prepare_filters(self, environment: Optional[str] = None,
                        production: Optional[bool] = None) -> Dict[str, Filter]:
        """Return the active, resolvable filters in application order."""
        snapshot = self.snapshot(environment, production)
        prepared = {}
        for name, flt in self.filters.items():
            if not flt.passes(snapshot):
                continue
            resolution = flt.get_class_name()
            if not resolution.ok:
                logger.warning(
                    "Skipping filter '%s' on %s: %s",
                    name, self.relative_path, resolution.error,
                )
                continue
            prepared[name] = flt
        return prepared

    def _load(self) -> str:
        if self.is_remote():
            data = self.files.get_remote(self.absolute_path)
        else:
            data = self.files.get_contents(self.absolute_path)
        if isinstance(data, bytes):
            return data.decode("utf-8-sig")
        return str(data)

    def build(self, environment: Optional[str] = None,
              production: Optional[bool] = None) -> str:
        """Load the source and fold it through the active filters."""
        context = BuildContext(
            relative_path=self.relative_path,
            absolute_path=self.absolute_path,
            content=self._load(),
            environment=environment or self.environment,
        )
        filters = self.prepare_filters(environment, production)
        logger.debug("Building %s with %d active filter(s): %s",
                     self.relative_path, len(filters), ", ".join(filters) or "-")

        engines = []
        for name, flt in filters.items():
            try:
                engines.append((name, flt.get_instance()))
            except (FilterResolutionError, TypeError, ValueError) as exc:
                logger.warning(
                    "Skipping filter '%s' on %s: %s", name, self.relative_path, exc,
                )

        for phase in ("load", "dump"):
            for name, engine in engines:
                try:
                    getattr(engine, f"filter_{phase}")(context)
                except Exception as exc:
                    raise AssetBuildError(self.relative_path, name, phase, exc) from exc

        self.content = context.get_content()
        return self.content
