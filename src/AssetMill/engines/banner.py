"""Prepend or append a fixed banner to built content."""

from ..core import BuildContext
from .base import FilterEngine


class BannerFilter(FilterEngine):
    """Add ``text`` at the top or bottom of the content.

    ``{path}`` in the text is replaced with the asset's relative path.
    """

    def __init__(self, text: str, position: str = "top"):
        if position not in ("top", "bottom"):
            raise ValueError(f"BannerFilter position must be 'top' or 'bottom', got {position!r}")
        self.text = str(text)
        self.position = position

    def filter_dump(self, context: BuildContext) -> None:
        banner = self.text.replace("{path}", context.relative_path)
        content = context.get_content()
        if self.position == "top":
            context.set_content(f"{banner}\n{content}")
        else:
            context.set_content(f"{content}\n{banner}")
