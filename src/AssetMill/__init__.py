"""Provide package metadata and the public API of `AssetMill`."""

from .asset import Asset, AssetBuildError, UNORDERED
from .config import AssetGroup, AssetMillConfig
from .core import BuildContext, Filesystem, RemoteFetchError
from .engines import FilterEngine
from .factory import FilterFactory
from .filter import Filter, FilterResolutionError, Resolution

__version__ = "0.3.0"

__all__ = [
    "__version__",
    "Asset", "AssetBuildError", "UNORDERED",
    "AssetGroup", "AssetMillConfig",
    "BuildContext", "Filesystem", "RemoteFetchError",
    "FilterEngine", "FilterFactory",
    "Filter", "FilterResolutionError", "Resolution",
]
