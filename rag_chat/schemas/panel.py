"""Tagged messages exchanged between the chat panel and the session.

Inbound (panel -> session): ``sendMessage``, ``openFile``.
Outbound (session -> panel): ``addMessage``, ``showLoading``, ``hideLoading``,
``loadHistory``.  The host bridge reuses the same transport for
``revealRange`` and ``showError``.

Every message is a JSON object discriminated by its ``type`` field.
"""

from dataclasses import asdict
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from rag_chat.schemas.chat import ConversationTurn, Role
from rag_chat.schemas.editor import DocumentContext, NavigationTarget
from rag_chat.services.citations import find_inline_citations


class _Message(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Inbound
# ---------------------------------------------------------------------------


class SendMessage(_Message):
    """User submitted text, with the editor context captured at submit time."""

    type: Literal["sendMessage"] = "sendMessage"
    message: str
    context: DocumentContext | None = None


class OpenFile(_Message):
    """User clicked a citation."""

    type: Literal["openFile"] = "openFile"
    file: str
    lines: str

    @field_validator("lines", mode="before")
    @classmethod
    def _coerce_line_number(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


InboundMessage = Annotated[SendMessage | OpenFile, Field(discriminator="type")]

inbound_adapter: TypeAdapter[SendMessage | OpenFile] = TypeAdapter(InboundMessage)


# ---------------------------------------------------------------------------
# Outbound
# ---------------------------------------------------------------------------


class InlineReference(BaseModel):
    """A ``path:lines`` link found in an assistant answer."""

    file: str
    lines: str
    text: str


class AddMessage(_Message):
    type: Literal["addMessage"] = "addMessage"
    message: ConversationTurn
    references: list[InlineReference] = Field(default_factory=list)

    @classmethod
    def for_turn(cls, turn: ConversationTurn) -> "AddMessage":
        """Wrap *turn*, extracting inline references from assistant answers."""
        references: list[InlineReference] = []
        if turn.role is Role.ASSISTANT:
            references = [
                InlineReference(**asdict(found)) for found in find_inline_citations(turn.content)
            ]
        return cls(message=turn, references=references)


class ShowLoading(_Message):
    type: Literal["showLoading"] = "showLoading"


class HideLoading(_Message):
    type: Literal["hideLoading"] = "hideLoading"


class LoadHistory(_Message):
    type: Literal["loadHistory"] = "loadHistory"
    messages: list[ConversationTurn]


class RevealRange(_Message):
    """Host request: open the target document and select the range."""

    type: Literal["revealRange"] = "revealRange"
    target: NavigationTarget


class ShowError(_Message):
    """Host request: show a transient error notification."""

    type: Literal["showError"] = "showError"
    message: str


OutboundMessage = Annotated[
    AddMessage | ShowLoading | HideLoading | LoadHistory | RevealRange | ShowError,
    Field(discriminator="type"),
]

outbound_adapter: TypeAdapter[
    AddMessage | ShowLoading | HideLoading | LoadHistory | RevealRange | ShowError
] = TypeAdapter(OutboundMessage)
