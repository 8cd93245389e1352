"""Editor-facing models exchanged with the host bridge.

Line numbers here are 0-based, matching editor document models.  The request
builder and the citation navigator translate to and from the 1-based numbers
used on the wire.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Column that reaches past the end of any line; hosts clamp it to the line length.
END_OF_LINE = 2**31 - 1


class _EditorModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class EditorSelection(_EditorModel):
    """Selection of the active editor at the moment a message is sent."""

    start_line: int = Field(ge=0)
    end_line: int = Field(ge=0)
    active_line: int = Field(ge=0)
    is_empty: bool

    @classmethod
    def cursor(cls, line: int) -> "EditorSelection":
        """An empty selection with the caret on *line* (0-based)."""
        return cls(start_line=line, end_line=line, active_line=line, is_empty=True)

    @classmethod
    def span(cls, start_line: int, end_line: int) -> "EditorSelection":
        """A non-empty selection covering *start_line*..*end_line* (0-based)."""
        return cls(start_line=start_line, end_line=end_line, active_line=end_line, is_empty=False)


class DocumentContext(_EditorModel):
    """Active document snapshot: workspace-relative path plus selection."""

    relative_path: str = Field(min_length=1)
    selection: EditorSelection | None = None


class NavigationTarget(_EditorModel):
    """Where to open, what to select, and how to scroll."""

    path: Path
    start_line: int = Field(ge=0)
    end_line: int = Field(ge=0)
    start_column: int = 0
    end_column: int = END_OF_LINE
    reveal: Literal["center"] = "center"
