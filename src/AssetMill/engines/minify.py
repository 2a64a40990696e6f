"""Lightweight stylesheet minification."""

import re

from ..core import BuildContext
from .base import FilterEngine

# /*! ... */ comments are license banners and survive minification.
_COMMENT_RE = re.compile(r"/\*(?!!).*?\*/", re.DOTALL)
_WHITESPACE_RE = re.compile(r"\s+")
_PUNCTUATION_RE = re.compile(r"\s*([{};:,>])\s*")


class CssMinFilter(FilterEngine):
    """Strip comments and redundant whitespace from CSS."""

    def __init__(self, keep_banners: bool = True):
        self.keep_banners = keep_banners

    def filter_load(self, context: BuildContext) -> None:
        context.metadata["cssmin_input_size"] = len(context.get_content())

    def filter_dump(self, context: BuildContext) -> None:
        css = context.get_content()
        if self.keep_banners:
            css = _COMMENT_RE.sub("", css)
        else:
            css = re.sub(r"/\*.*?\*/", "", css, flags=re.DOTALL)
        css = _WHITESPACE_RE.sub(" ", css)
        css = _PUNCTUATION_RE.sub(r"\1", css)
        css = css.replace(";}", "}")
        context.set_content(css.strip())
