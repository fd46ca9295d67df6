from typing import Any, Callable, List, Optional, Sequence, Tuple, TypeVar, Union

from .Log import Message, ParseLog
from .Parsec import Ok, Outcome, Parsec, Stream, T, U, V, _check_callable
from .Stream import CharStream, SequenceStream, SourcePos

Tok = TypeVar('Tok')


def empty() -> Parsec[Any]:
    """A parser that always fails and touches nothing. Identity of or_."""
    def parse(stream: Stream, log: ParseLog) -> Outcome:
        return None
    return Parsec(parse, "empty")


def pure(value: T) -> Parsec[T]:
    """Return a parser that succeeds with a value without consuming input."""
    def parse(stream: Stream, log: ParseLog) -> Outcome:
        return Ok(value)
    return Parsec(parse, f"pure({value!r})")


def fail(msg: str) -> Parsec[Any]:
    """A parser that always fails with a message."""
    def parse(stream: Stream, log: ParseLog) -> Outcome:
        log.with_(Message.error(msg, stream.position))
        return None
    return Parsec(parse, "fail")


def token(show_tok: Callable[[Tok], str], test_tok: Callable[[Tok], Optional[T]]) -> Parsec[T]:
    """Parse a single token for which `test_tok` returns something other than None."""
    def parse(stream: Stream, log: ParseLog) -> Outcome:
        if stream.at_end():
            log.with_(Message.error("unexpected end of input", stream.position))
            return None
        tok = stream.peek()
        result = test_tok(tok)
        if result is None:
            log.with_(Message.error(f"unexpected {show_tok(tok)}", stream.position))
            return None
        stream.advance()
        return Ok(result)
    return Parsec(parse)


# Free-function forms of the core combinators

def and_(p1: Parsec[T], p2: Parsec[U]) -> Parsec[Tuple[T, U]]:
    return p1.and_(p2)


def or_(p1: Parsec[T], p2: Parsec[T]) -> Parsec[T]:
    return p1.or_(p2)


def left(p1: Parsec[T], p2: Parsec[Any]) -> Parsec[T]:
    return p1.left(p2)


def right(p1: Parsec[Any], p2: Parsec[U]) -> Parsec[U]:
    return p1.right(p2)


def mid(p1: Parsec[Any], p2: Parsec[U], p3: Parsec[Any]) -> Parsec[U]:
    return p1.mid(p2, p3)


def compose(pf: Parsec[Callable[[U], V]], px: Parsec[U]) -> Parsec[V]:
    return pf.compose(px)


def map(p: Parsec[T], f: Callable[[T], U]) -> Parsec[U]:
    return p.map(f)


def map_option(p: Parsec[T], f: Callable[[T], Optional[U]]) -> Parsec[U]:
    return p.map_option(f)


def map_result(p: Parsec[T], f: Callable[[T], U]) -> Parsec[U]:
    return p.map_result(f)


def bind(p: Parsec[T], f: Callable[[T], Parsec[U]]) -> Parsec[U]:
    return p.bind(f)


def many(p: Parsec[T]) -> Parsec[List[T]]:
    """Parse zero or more occurrences of `p`."""
    return p.many()


def some(p: Parsec[T]) -> Parsec[List[T]]:
    """Parse one or more occurrences of `p`."""
    return p.some()


many1 = some


def skip_many(p: Parsec[Any]) -> Parsec[None]:
    """Skips zero or more occurrences of `p`."""
    return p.skip_many()


def optional(p: Parsec[T]) -> Parsec[Optional[T]]:
    return p.optional()


# Recursion

def lazy(fn: Callable[[], Parsec[T]]) -> Parsec[T]:
    """
    Defer building a parser until parse time.

    Use it when a rule refers to a named function that builds the rule
    itself (directly or through other rules)::

        def expr():
            return (term() << char('+')).and_(lazy(expr)) | term()
    """
    _check_callable(fn, "lazy")

    def parse(stream: Stream, log: ParseLog) -> Outcome:
        return fn().parse(stream, log)
    return Parsec(parse, "lazy")


def fix(f: Callable[[Parsec[T]], Parsec[T]]) -> Parsec[T]:
    """
    Fixpoint combinator: fix(f) behaves like f(fix(f)).

    `f` receives the resulting parser and returns its one-level expansion.
    The expansion is only built when parsing, so recursion is bounded by the
    input rather than unfolding at construction time::

        ones = fix(lambda it: (char('1') >> it) | char('0'))

    Left-recursive grammars never consume before recursing and end in a
    RecursionError; they are not supported.
    """
    _check_callable(f, "fix")

    def parse(stream: Stream, log: ParseLog) -> Outcome:
        return f(this).parse(stream, log)
    this: Parsec[T] = Parsec(parse, "fix")
    return this


def run_parser(parser: Parsec[T],
               data: Union[str, Sequence[Any]],
               source_name: str = "") -> Tuple[Outcome, ParseLog, Stream]:
    """Run `parser` over `data`; return the outcome, the log and the final stream."""
    if isinstance(data, str):
        stream: Stream = CharStream(data, name=source_name)
    else:
        stream = SequenceStream(data, pos=SourcePos(name=source_name))
    res, log = parser.exec(stream)
    return res, log, stream
