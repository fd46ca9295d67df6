from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple

from .Stream import SourcePos


class MessageType(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Message:
    """A diagnostic message, optionally attached to a source position."""
    kind: MessageType
    text: str
    pos: Optional[SourcePos] = None

    @classmethod
    def info(cls, text: str, pos: Optional[SourcePos] = None) -> 'Message':
        return cls(MessageType.INFO, text, pos)

    @classmethod
    def warning(cls, text: str, pos: Optional[SourcePos] = None) -> 'Message':
        return cls(MessageType.WARNING, text, pos)

    @classmethod
    def error(cls, text: str, pos: Optional[SourcePos] = None) -> 'Message':
        return cls(MessageType.ERROR, text, pos)

    def __str__(self) -> str:
        if self.pos is None:
            return f"{self.kind.value}: {self.text}"
        return f"{self.kind.value} at {self.pos}: {self.text}"


class ParseLog:
    """
    Ordered collection of diagnostics accumulated during a parse.

    The log never influences control flow. Messages are kept in a tuple, so
    a snapshot is just a reference to the current tuple and restoring it is
    an assignment. The price is that `add` copies the tuple, so n appends
    cost O(n^2). Logs stay small in practice: `or_` and `optional` drop the
    messages of discarded branches.
    """

    def __init__(self, messages: Tuple[Message, ...] = ()):
        self._messages: Tuple[Message, ...] = tuple(messages)

    @property
    def messages(self) -> Tuple[Message, ...]:
        return self._messages

    def add(self, msg: Message) -> None:
        """Append a message."""
        self._messages = self._messages + (msg,)

    def clear(self) -> None:
        self._messages = ()

    def with_(self, msg: Message) -> None:
        """Replace every message logged so far with `msg`."""
        self._messages = (msg,)

    def last(self) -> Optional[Message]:
        return self._messages[-1] if self._messages else None

    def errors(self) -> Tuple[Message, ...]:
        return tuple(m for m in self._messages if m.kind is MessageType.ERROR)

    def snapshot(self) -> Tuple[Message, ...]:
        return self._messages

    def restore(self, snapshot: Tuple[Message, ...]) -> None:
        self._messages = snapshot

    def format_error(self) -> str:
        """Human readable description of the most specific failure."""
        msg = self.last()
        if msg is None:
            return "parse error: no diagnostics"
        return f"Parse error: {msg}"

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def __getitem__(self, i: int) -> Message:
        return self._messages[i]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParseLog):
            return NotImplemented
        return self._messages == other._messages

    def __repr__(self) -> str:
        return f"ParseLog({list(self._messages)!r})"
