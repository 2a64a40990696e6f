"""Build-context records shared by assets, filters and engines."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class AssetSnapshot:
    """Read-only view of an asset that restrictions are evaluated against."""

    relative_path: str
    group: Optional[str]
    environment: str
    production: bool = True

    @property
    def basename(self) -> str:
        return self.relative_path.replace("\\", "/").rsplit("/", 1)[-1]


@dataclass
class BuildContext:
    """Mutable content buffer handed to each engine's load and dump hooks."""

    relative_path: str
    absolute_path: str
    content: str = ""
    environment: str = "production"
    metadata: Dict[str, Any] = field(default_factory=dict)

    def get_content(self) -> str:
        return self.content

    def set_content(self, content: str) -> None:
        """Replace the buffer; engines must hand back text, not bytes."""
        if not isinstance(content, str):
            raise TypeError(
                f"BuildContext content must be str, got {type(content).__name__}"
            )
        self.content = content
