import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Optional, Tuple, TypeVar

from .Log import Message, ParseLog
from .Stream import SequenceStream

T = TypeVar('T')  # Generic type for parser results
U = TypeVar('U')
V = TypeVar('V')

logger = logging.getLogger(__name__)

Stream = SequenceStream


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful parse result. Failure is represented by None."""
    value: T


Outcome = Optional[Ok[T]]
ParseFn = Callable[[Stream, ParseLog], Optional[Ok[T]]]


def _check_callable(f: Any, where: str) -> None:
    if not callable(f):
        raise TypeError(f"{where}: expected a callable, got {type(f).__name__}")


class Parsec(Generic[T]):
    """
    A parser: something that attempts to consume a prefix of a stream.

    `parse(stream, log)` mutates the stream and the log and returns `Ok(value)`
    on success or None on failure. Every combinator below guarantees that a
    failed attempt leaves the stream exactly where it was before the attempt.

    Parsec objects hold no mutable state, so a single instance can be shared
    and reused by any number of grammars.
    """

    def __init__(self, parse_fn: ParseFn, name: Optional[str] = None):
        _check_callable(parse_fn, "Parsec")
        self.parse_fn = parse_fn
        self.name = name

    def parse(self, stream: Stream, log: ParseLog) -> Outcome:
        return self.parse_fn(stream, log)

    def __call__(self, stream: Stream, log: ParseLog) -> Outcome:
        return self.parse_fn(stream, log)

    def exec(self, stream: Stream) -> Tuple[Outcome, ParseLog]:
        """Run the parser once with a fresh log; return the outcome and the log."""
        log = ParseLog()
        return self.parse(stream, log), log

    def named(self, name: str) -> 'Parsec[T]':
        """Return the same parser under a name used by repr and tracing."""
        return Parsec(self.parse_fn, name)

    def __repr__(self) -> str:
        if self.name:
            return f"<Parsec {self.name}>"
        return f"<Parsec at {id(self):#x}>"

    # Sequence: run self, then other, pair the results
    def and_(self, other: 'Parsec[U]') -> 'Parsec[Tuple[T, U]]':
        def parse(stream: Stream, log: ParseLog) -> Outcome:
            start = stream.snapshot()
            first = self.parse(stream, log)
            if first is None:
                stream.restore(start)
                return None
            second = other.parse(stream, log)
            if second is None:
                # Roll back past self as well, partial matches are never kept
                stream.restore(start)
                return None
            return Ok((first.value, second.value))
        return Parsec(parse)

    # Ordered choice: the first alternative that succeeds wins
    def or_(self, other: 'Parsec[T]') -> 'Parsec[T]':
        def parse(stream: Stream, log: ParseLog) -> Outcome:
            start = stream.snapshot()
            logged = log.snapshot()
            res = self.parse(stream, log)
            if res is not None:
                return res
            stream.restore(start)
            log.restore(logged)
            res = other.parse(stream, log)
            if res is None:
                # Only the second branch's diagnostics survive
                stream.restore(start)
            return res
        return Parsec(parse)

    def left(self, other: 'Parsec[Any]') -> 'Parsec[T]':
        """Run both, keep the result of self."""
        return self.and_(other).map(lambda pair: pair[0])

    def right(self, other: 'Parsec[U]') -> 'Parsec[U]':
        """Run both, keep the result of other."""
        return self.and_(other).map(lambda pair: pair[1])

    def mid(self, middle: 'Parsec[U]', last: 'Parsec[Any]') -> 'Parsec[U]':
        """Run self, middle and last in sequence, keep the middle result."""
        return self.and_(middle).and_(last).map(lambda triple: triple[0][1])

    # Functor map
    def map(self, f: Callable[[T], U]) -> 'Parsec[U]':
        _check_callable(f, "map")

        def parse(stream: Stream, log: ParseLog) -> Outcome:
            res = self.parse(stream, log)
            if res is None:
                return None
            return Ok(f(res.value))
        return Parsec(parse)

    def map_option(self, f: Callable[[T], Optional[U]]) -> 'Parsec[U]':
        """Like map, but a None from `f` turns the success into a failure."""
        _check_callable(f, "map_option")

        def parse(stream: Stream, log: ParseLog) -> Outcome:
            start = stream.snapshot()
            res = self.parse(stream, log)
            if res is None:
                stream.restore(start)
                return None
            value = f(res.value)
            if value is None:
                stream.restore(start)
                return None
            return Ok(value)
        return Parsec(parse)

    def map_result(self, f: Callable[[T], U]) -> 'Parsec[U]':
        """
        Like map, but an exception raised by `f` turns the success into a
        failure. The exception text is appended to the log as an error.
        """
        _check_callable(f, "map_result")

        def parse(stream: Stream, log: ParseLog) -> Outcome:
            start = stream.snapshot()
            res = self.parse(stream, log)
            if res is None:
                stream.restore(start)
                return None
            try:
                value = f(res.value)
            except Exception as e:
                stream.restore(start)
                log.add(Message.error(str(e) or type(e).__name__, start.position))
                return None
            return Ok(value)
        return Parsec(parse)

    # Monadic bind (>>=)
    def bind(self, f: Callable[[T], 'Parsec[U]']) -> 'Parsec[U]':
        # f picks the next parser from the value just parsed
        _check_callable(f, "bind")

        def parse(stream: Stream, log: ParseLog) -> Outcome:
            start = stream.snapshot()
            res = self.parse(stream, log)
            if res is None:
                stream.restore(start)
                return None
            next_res = f(res.value).parse(stream, log)
            if next_res is None:
                stream.restore(start)
            return next_res
        return Parsec(parse)

    # Applicative apply (<*>): self yields a function, other its argument
    def compose(self, other: 'Parsec[U]') -> 'Parsec[V]':
        def parse(stream: Stream, log: ParseLog) -> Outcome:
            start = stream.snapshot()
            pf = self.parse(stream, log)
            if pf is None:
                stream.restore(start)
                return None
            px = other.parse(stream, log)
            if px is None:
                stream.restore(start)
                return None
            return Ok(pf.value(px.value))
        return Parsec(parse)

    def _repeat(self, stream: Stream, log: ParseLog, results: List[Any]) -> None:
        # Keeps parsing until failure, leaving stream/log after the last success
        while True:
            before = stream.snapshot()
            logged = log.snapshot()
            res = self.parse(stream, log)
            if res is None:
                stream.restore(before)
                log.restore(logged)
                return
            if stream == before:
                # A success that consumes nothing would repeat forever
                stream.restore(before)
                log.restore(logged)
                log.add(Message.warning(
                    "repetition stopped: parser succeeded without consuming input",
                    before.position))
                logger.debug("%r succeeded without consuming input at %s", self, before.position)
                return
            results.append(res.value)

    def many(self) -> 'Parsec[List[T]]':
        """Zero or more occurrences. Never fails."""
        def parse(stream: Stream, log: ParseLog) -> Outcome:
            results: List[T] = []
            self._repeat(stream, log, results)
            return Ok(results)
        return Parsec(parse)

    def some(self) -> 'Parsec[List[T]]':
        """One or more occurrences."""
        def parse(stream: Stream, log: ParseLog) -> Outcome:
            start = stream.snapshot()
            logged = log.snapshot()
            first = self.parse(stream, log)
            if first is None:
                stream.restore(start)
                return None
            if stream == start:
                # Same outcome as many() would give: nothing to repeat
                stream.restore(start)
                log.restore(logged)
                log.add(Message.warning(
                    "repetition stopped: parser succeeded without consuming input",
                    start.position))
                return None
            results = [first.value]
            self._repeat(stream, log, results)
            return Ok(results)
        return Parsec(parse)

    def skip_many(self) -> 'Parsec[None]':
        """Zero or more occurrences, results discarded."""
        return self.many().map(lambda _: None)

    def optional(self) -> 'Parsec[Optional[T]]':
        """Always succeeds: the result of self, or None (nothing consumed, nothing logged)."""
        def parse(stream: Stream, log: ParseLog) -> Outcome:
            start = stream.snapshot()
            logged = log.snapshot()
            res = self.parse(stream, log)
            if res is None:
                stream.restore(start)
                log.restore(logged)
                return Ok(None)
            return res
        return Parsec(parse)

    # Label (<?>)
    def label(self, msg: str) -> 'Parsec[T]':
        def parse(stream: Stream, log: ParseLog) -> Outcome:
            start = stream.snapshot()
            res = self.parse(stream, log)
            if res is None:
                stream.restore(start)
                log.with_(Message.error(f"expecting {msg}", start.position))
            return res
        return Parsec(parse, self.name or msg)

    def _log_on_failure(self, make_msg: Callable[..., Message], text: str) -> 'Parsec[T]':
        def parse(stream: Stream, log: ParseLog) -> Outcome:
            start = stream.snapshot()
            res = self.parse(stream, log)
            if res is None:
                stream.restore(start)
                log.add(make_msg(text, start.position))
            return res
        return Parsec(parse, self.name)

    def info(self, text: str) -> 'Parsec[T]':
        """Append an info message when self fails."""
        return self._log_on_failure(Message.info, text)

    def warn(self, text: str) -> 'Parsec[T]':
        """Append a warning when self fails."""
        return self._log_on_failure(Message.warning, text)

    def error(self, text: str) -> 'Parsec[T]':
        """Append an error when self fails."""
        return self._log_on_failure(Message.error, text)

    def recover(self, fallback: T) -> 'Parsec[T]':
        """Succeed with `fallback` (consuming nothing) when self fails."""
        def parse(stream: Stream, log: ParseLog) -> Outcome:
            start = stream.snapshot()
            res = self.parse(stream, log)
            if res is None:
                stream.restore(start)
                return Ok(fallback)
            return res
        return Parsec(parse, self.name)

    def inspect(self) -> 'Parsec[Tuple[Outcome, Stream]]':
        """Always succeed with the outcome of self and a snapshot of the stream after it."""
        def parse(stream: Stream, log: ParseLog) -> Outcome:
            res = self.parse(stream, log)
            return Ok((res, stream.snapshot()))
        return Parsec(parse)

    # Operator sugar
    def __or__(self, other: 'Parsec[T]') -> 'Parsec[T]':
        if not isinstance(other, Parsec):
            return NotImplemented
        return self.or_(other)

    def __and__(self, other: 'Parsec[U]') -> 'Parsec[Tuple[T, U]]':
        if not isinstance(other, Parsec):
            return NotImplemented
        return self.and_(other)

    def __lshift__(self, other: 'Parsec[Any]') -> 'Parsec[T]':
        if not isinstance(other, Parsec):
            return NotImplemented
        return self.left(other)

    def __rshift__(self, other: 'Parsec[U]') -> 'Parsec[U]':
        if not isinstance(other, Parsec):
            return NotImplemented
        return self.right(other)

    def __mul__(self, other: 'Parsec[U]') -> 'Parsec[V]':
        if not isinstance(other, Parsec):
            return NotImplemented
        return self.compose(other)
