"""Built-in filter engines, keyed by the name filters are applied under."""

from .base import FilterEngine, CallableFilter, is_filter_engine
from .banner import BannerFilter
from .minify import CssMinFilter
from .replace import ReplaceFilter, RegexReplaceFilter

BUILTIN_ENGINES = {
    "ReplaceFilter": ReplaceFilter,
    "RegexReplaceFilter": RegexReplaceFilter,
    "CssMinFilter": CssMinFilter,
    "BannerFilter": BannerFilter,
    "CallableFilter": CallableFilter,
}

__all__ = [
    "FilterEngine", "CallableFilter", "is_filter_engine",
    "BannerFilter", "CssMinFilter", "ReplaceFilter", "RegexReplaceFilter",
    "BUILTIN_ENGINES",
]
