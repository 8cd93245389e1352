"""Transcript and webhook answer models.

``SourceCitation`` and ``RagAnswer`` describe the webhook's success payload
after normalization; ``ConversationTurn`` is one entry of the session
transcript.  All of them are frozen: a turn never changes once appended.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from rag_chat.errors import CitationParseError
from rag_chat.services.citations import parse_line_range

NO_ANSWER = "No answer received"


class Role(str, Enum):
    """Author of a transcript turn."""

    USER = "user"
    ASSISTANT = "assistant"
    ERROR = "error"


class SourceCitation(BaseModel):
    """A supporting code snippet returned by the webhook."""

    model_config = ConfigDict(frozen=True)

    file: str = Field(min_length=1, description="Path relative to the workspace root")
    language: str = ""
    lines: str = Field(description="'42' or '10-20', 1-based and inclusive")
    score: float = 0.0

    @field_validator("lines", mode="before")
    @classmethod
    def _coerce_line_number(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("lines")
    @classmethod
    def _check_line_range(cls, value: str) -> str:
        try:
            parse_line_range(value)
        except CitationParseError as exc:
            raise ValueError(str(exc)) from exc
        return value

    @computed_field  # type: ignore[prop-decorator]
    @property
    def reference(self) -> str:
        """Copyable ``file:lines`` reference."""
        return f"{self.file}:{self.lines}"

    def summary(self) -> str:
        """Display line shown under the file name in the sources list."""
        return f"Lines: {self.lines} | Score: {self.score:.3f}"


class RagAnswer(BaseModel):
    """Normalized successful webhook response."""

    model_config = ConfigDict(frozen=True)

    answer: str = NO_ANSWER
    sources: tuple[SourceCitation, ...] = ()
    sources_count: float | None = None

    @field_validator("answer", mode="before")
    @classmethod
    def _default_empty_answer(cls, value: object) -> object:
        return value or NO_ANSWER

    @field_validator("sources", mode="before")
    @classmethod
    def _default_missing_sources(cls, value: object) -> object:
        return value or ()


class ConversationTurn(BaseModel):
    """One immutable entry of the session transcript."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str
    sources: tuple[SourceCitation, ...] = ()

    @model_validator(mode="after")
    def _sources_only_on_assistant(self) -> "ConversationTurn":
        if self.sources and self.role is not Role.ASSISTANT:
            msg = f"{self.role.value} turns cannot carry sources"
            raise ValueError(msg)
        return self

    @classmethod
    def user(cls, content: str) -> "ConversationTurn":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, answer: RagAnswer) -> "ConversationTurn":
        return cls(role=Role.ASSISTANT, content=answer.answer, sources=answer.sources)

    @classmethod
    def error(cls, exc: BaseException | str) -> "ConversationTurn":
        return cls(role=Role.ERROR, content=f"Error: {exc}")
