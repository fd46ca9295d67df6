from dataclasses import dataclass, field
from typing import Any, Generic, Optional, Sequence, TypeVar

Tok = TypeVar('Tok')  # Type of a single token in the input


@dataclass(frozen=True)
class SourcePos:
    """Represents a position in the input stream."""
    line: int = 1
    column: int = 1
    name: str = ""

    def update(self, token: Any) -> 'SourcePos':
        """Return the position after consuming a token (e.g., character)."""
        if token == '\n':
            return SourcePos(self.line + 1, 1, self.name)
        return SourcePos(self.line, self.column + 1, self.name)

    def __str__(self) -> str:
        if self.name:
            return f"{self.name} line {self.line}, column {self.column}"
        return f"line {self.line}, column {self.column}"


@dataclass
class SequenceStream(Generic[Tok]):
    """
    A cursor over an indexable sequence of tokens.

    The data itself is never copied or sliced while parsing: only the index
    and the position move, so snapshot/restore is O(1).
    """
    data: Sequence[Tok]
    index: int = 0
    pos: SourcePos = field(default_factory=SourcePos)

    def _next_pos(self, token: Tok) -> SourcePos:
        # Generic tokens carry no layout, one column per token
        return SourcePos(self.pos.line, self.pos.column + 1, self.pos.name)

    def peek(self) -> Optional[Tok]:
        """
        Return the next token without consuming it, or None at end of input.

        A sequence may hold None itself, so test `at_end()` to detect exhaustion.
        """
        if self.index >= len(self.data):
            return None
        return self.data[self.index]

    def advance(self) -> Optional[Tok]:
        """Consume and return the next token, or None at end of input."""
        if self.index >= len(self.data):
            return None
        token = self.data[self.index]
        self.pos = self._next_pos(token)
        self.index += 1
        return token

    def at_end(self) -> bool:
        return self.index >= len(self.data)

    @property
    def position(self) -> SourcePos:
        return self.pos

    @property
    def remaining(self) -> Sequence[Tok]:
        """The unconsumed suffix of the input."""
        return self.data[self.index:]

    def snapshot(self) -> 'SequenceStream[Tok]':
        """Return an independent copy of the current cursor state."""
        return self.__class__(self.data, self.index, self.pos)

    def restore(self, snapshot: 'SequenceStream[Tok]') -> None:
        """Move the cursor back (or forward) to a previously taken snapshot."""
        self.data = snapshot.data
        self.index = snapshot.index
        self.pos = snapshot.pos

    def __len__(self) -> int:
        return len(self.data) - self.index


class CharStream(SequenceStream[str]):
    """A stream over text which tracks line and column numbers."""

    def __init__(self, data: str, index: int = 0, pos: Optional[SourcePos] = None, name: str = ""):
        super().__init__(data, index, pos if pos is not None else SourcePos(name=name))

    def _next_pos(self, token: str) -> SourcePos:
        return self.pos.update(token)

    def as_str(self) -> str:
        """Return the remaining, unconsumed text."""
        return self.data[self.index:]

    def __repr__(self) -> str:
        rest = self.as_str()
        preview = rest[:30] + ('...' if len(rest) > 30 else '')
        return f"CharStream({preview!r} at {self.pos})"
