"""Append-only session transcript."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from rag_chat.schemas.chat import ConversationTurn


class Transcript:
    """Ordered record of conversation turns for one panel session.

    Turns are frozen models, so handing them out is safe; ``snapshot`` returns
    a tuple so callers cannot reorder or drop entries either.  There is no way
    to remove or replace a turn.
    """

    def __init__(self) -> None:
        self._turns: list[ConversationTurn] = []

    def append(self, turn: ConversationTurn) -> None:
        self._turns.append(turn)

    def snapshot(self) -> tuple[ConversationTurn, ...]:
        return tuple(self._turns)

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[ConversationTurn]:
        return iter(self.snapshot())
