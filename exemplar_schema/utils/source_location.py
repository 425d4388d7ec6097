from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


JsonPointer = str


@dataclass(frozen=True)
class SourceLocation:
    file_path: Optional[str] = None
    line: Optional[int] = None  # 1-based
    column: Optional[int] = None  # 1-based

    @classmethod
    def unknown(cls) -> "SourceLocation":
        return cls()

    @property
    def is_known(self) -> bool:
        return self.line is not None

    def as_compact_string(self) -> str:
        """Render as ``file:line`` (``file:line:column`` when the column is known).

        Unknown parts render as ``?``. Error messages embed this verbatim.
        """
        file_path = self.file_path or "?"
        if self.line is None:
            return f"{file_path}:?"
        if self.column is None:
            return f"{file_path}:{self.line}"
        return f"{file_path}:{self.line}:{self.column}"

    def __str__(self) -> str:
        return self.as_compact_string()


def source_from_mark(mark: Any, file_path: Optional[str] = None) -> SourceLocation:
    """Create a SourceLocation from a PyYAML mark (0-based line/column)."""
    if mark is None:
        return SourceLocation(file_path=file_path)

    return SourceLocation(
        file_path=file_path if file_path is not None else _mark_name(mark),
        line=int(mark.line) + 1,
        column=int(mark.column) + 1,
    )


def _mark_name(mark: Any) -> Optional[str]:
    name = getattr(mark, "name", None)
    # PyYAML names string streams "<unicode string>"
    if not name or name.startswith("<"):
        return None
    return name


def _jp_escape(token: str) -> str:
    # JSON Pointer escaping: "~" -> "~0", "/" -> "~1"
    return token.replace("~", "~0").replace("/", "~1")


def join_path(base: Optional[JsonPointer], token: Any) -> JsonPointer:
    if not base:
        return f"/{_jp_escape(str(token))}"
    return f"{base}/{_jp_escape(str(token))}"
