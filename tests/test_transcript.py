"""Tests for the append-only transcript and the turn model."""

import pytest
from pydantic import ValidationError

from rag_chat.schemas.chat import ConversationTurn, RagAnswer, Role, SourceCitation
from rag_chat.services.transcript import Transcript


def test_append_preserves_insertion_order() -> None:
    transcript = Transcript()
    turns = [
        ConversationTurn.user("same"),
        ConversationTurn.error("boom"),
        ConversationTurn.user("same"),
    ]
    for turn in turns:
        transcript.append(turn)

    assert transcript.snapshot() == tuple(turns)
    assert len(transcript) == 3


def test_duplicates_are_kept() -> None:
    transcript = Transcript()
    turn = ConversationTurn.user("hello")
    transcript.append(turn)
    transcript.append(turn)
    assert len(transcript) == 2


def test_snapshot_is_an_immutable_copy() -> None:
    transcript = Transcript()
    transcript.append(ConversationTurn.user("one"))
    snapshot = transcript.snapshot()

    transcript.append(ConversationTurn.user("two"))

    assert isinstance(snapshot, tuple)
    assert len(snapshot) == 1
    assert [t.content for t in transcript] == ["one", "two"]


def test_no_remove_or_update_operations() -> None:
    transcript = Transcript()
    for name in ("remove", "pop", "clear", "update", "__setitem__", "__delitem__"):
        assert not hasattr(transcript, name)


def test_turns_are_frozen() -> None:
    turn = ConversationTurn.user("hi")
    with pytest.raises(ValidationError):
        turn.content = "changed"  # type: ignore[misc]


def test_role_is_a_closed_enum() -> None:
    with pytest.raises(ValidationError):
        ConversationTurn.model_validate({"role": "system", "content": "x"})
    assert {r.value for r in Role} == {"user", "assistant", "error"}


def test_only_assistant_turns_carry_sources() -> None:
    source = SourceCitation(file="a.py", lines="1")
    with pytest.raises(ValidationError, match="cannot carry sources"):
        ConversationTurn(role=Role.USER, content="x", sources=(source,))


def test_assistant_turn_from_answer() -> None:
    source = SourceCitation(file="a.py", lines="3-4", score=0.5)
    turn = ConversationTurn.assistant(RagAnswer(answer="yes", sources=(source,)))

    assert turn.role is Role.ASSISTANT
    assert turn.content == "yes"
    assert turn.sources == (source,)


def test_error_turn_prefix() -> None:
    assert ConversationTurn.error("not found").content == "Error: not found"


def test_turn_json_shape() -> None:
    turn = ConversationTurn.user("hi")
    assert turn.model_dump(mode="json") == {"role": "user", "content": "hi", "sources": []}
