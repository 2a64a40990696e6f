"""Literal and regular-expression substitution engines."""

import logging
import re

from ..core import BuildContext
from .base import FilterEngine

logger = logging.getLogger("asset_mill.engines.replace")


class ReplaceFilter(FilterEngine):
    """Replace ``search`` with ``replace`` (all occurrences unless ``count``)."""

    def __init__(self, search: str, replace: str = "", count: int = -1):
        if not isinstance(search, str) or not search:
            raise ValueError("ReplaceFilter search must be a non-empty string")
        self.search = search
        self.replace = str(replace)
        self.count = int(count)

    def filter_load(self, context: BuildContext) -> None:
        hits = context.get_content().count(self.search)
        context.metadata.setdefault("replacements", {})[self.search] = hits

    def filter_dump(self, context: BuildContext) -> None:
        context.set_content(
            context.get_content().replace(self.search, self.replace, self.count)
        )


class RegexReplaceFilter(FilterEngine):
    """Substitute every match of ``pattern`` with ``replace``."""

    def __init__(self, pattern: str, replace: str = "", flags: int = 0):
        try:
            self.regex = re.compile(pattern, flags)
        except re.error as exc:
            raise ValueError(f"Invalid RegexReplaceFilter pattern {pattern!r}: {exc}") from exc
        self.replace = replace

    def filter_dump(self, context: BuildContext) -> None:
        content, n = self.regex.subn(self.replace, context.get_content())
        logger.debug("%s: %d substitution(s) for /%s/",
                     context.relative_path, n, self.regex.pattern)
        context.set_content(content)
