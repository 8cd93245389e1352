"""Tests for the tagged panel message schemas and their wire encoding."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from rag_chat.schemas.chat import ConversationTurn, RagAnswer
from rag_chat.schemas.editor import NavigationTarget
from rag_chat.schemas.panel import (
    AddMessage,
    HideLoading,
    OpenFile,
    RevealRange,
    SendMessage,
    ShowLoading,
    inbound_adapter,
)
from rag_chat.services.channel import encode


class TestInbound:
    def test_send_message_with_context(self) -> None:
        message = inbound_adapter.validate_json(
            '{"type": "sendMessage", "message": "hi",'
            ' "context": {"relativePath": "src/a.py",'
            ' "selection": {"startLine": 1, "endLine": 1, "activeLine": 1, "isEmpty": true}}}'
        )

        assert isinstance(message, SendMessage)
        assert message.context is not None
        assert message.context.relative_path == "src/a.py"
        assert message.context.selection is not None
        assert message.context.selection.is_empty is True

    def test_send_message_without_context(self) -> None:
        message = inbound_adapter.validate_python({"type": "sendMessage", "message": "hi"})
        assert message == SendMessage(message="hi")

    def test_open_file_coerces_integer_lines(self) -> None:
        message = inbound_adapter.validate_python({"type": "openFile", "file": "a.py", "lines": 42})
        assert message == OpenFile(file="a.py", lines="42")

    @pytest.mark.parametrize(
        "payload",
        [
            {"type": "addMessage", "message": "x"},
            {"type": "openFile", "file": "a.py"},
            {"message": "no type"},
            {"type": "sendMessage", "message": "x", "context": {"relativePath": ""}},
        ],
    )
    def test_rejects_unknown_or_incomplete_messages(self, payload: dict) -> None:
        with pytest.raises(ValidationError):
            inbound_adapter.validate_python(payload)


class TestOutbound:
    def test_loading_messages_encode_to_type_only(self) -> None:
        assert encode(ShowLoading()) == {"type": "showLoading"}
        assert encode(HideLoading()) == {"type": "hideLoading"}

    def test_error_turn_has_no_references(self) -> None:
        turn = ConversationTurn.error("see a.py:3")
        assert AddMessage.for_turn(turn).references == []

    def test_assistant_references_in_order(self) -> None:
        turn = ConversationTurn.assistant(RagAnswer(answer="a.py:1 then b/c.ts:2-9"))
        refs = AddMessage.for_turn(turn).references
        assert [r.text for r in refs] == ["a.py:1", "b/c.ts:2-9"]

    def test_reveal_range_uses_camel_case(self) -> None:
        target = NavigationTarget(path=Path("/w/a.py"), start_line=3, end_line=5)
        assert encode(RevealRange(target=target)) == {
            "type": "revealRange",
            "target": {
                "path": "/w/a.py",
                "startLine": 3,
                "endLine": 5,
                "startColumn": 0,
                "endColumn": 2**31 - 1,
                "reveal": "center",
            },
        }
