import re
from typing import Callable, Iterable, Union

from .Log import Message, ParseLog
from .Parsec import Ok, Outcome, Parsec, Stream, T
from .Prim import mid, skip_many


# Core function: Succeeds if the character satisfies a predicate
def satisfy(f: Callable[[str], bool]) -> Parsec[str]:
    """Succeeds for any character where f returns True. Returns the parsed character."""
    def parse(stream: Stream, log: ParseLog) -> Outcome:
        if stream.at_end():
            log.with_(Message.error("unexpected end of input.", stream.position))
            return None
        ch = stream.peek()
        if not f(ch):
            log.with_(Message.error(f"'{ch}' does not satisfy required conditions.", stream.position))
            return None
        stream.advance()
        return Ok(ch)
    return Parsec(parse, "satisfy")


# Helper function: Parses a single character
def char(c: str) -> Parsec[str]:
    """Parses a single character c and returns it."""
    def parse(stream: Stream, log: ParseLog) -> Outcome:
        if stream.at_end():
            log.with_(Message.error("unexpected end of input.", stream.position))
            return None
        ch = stream.peek()
        if ch != c:
            log.with_(Message.error(f"expecting '{c}', but got '{ch}'.", stream.position))
            return None
        stream.advance()
        return Ok(ch)
    return Parsec(parse, f"'{c}'")


def string(s: str) -> Parsec[str]:
    """Parses the exact string s and returns it."""
    def parse(stream: Stream, log: ParseLog) -> Outcome:
        start = stream.snapshot()
        for expected in s:
            if stream.at_end() or stream.advance() != expected:
                stream.restore(start)
                log.with_(Message.error(f"expecting \"{s}\".", start.position))
                return None
        return Ok(s)
    return Parsec(parse, f'"{s}"')


literal = string


def regex(pattern: Union[str, 're.Pattern[str]']) -> Parsec[str]:
    """
    Parses the text the regular expression matches at the current
    position and returns it. Works on text streams only.

    The pattern is compiled once, so an invalid one raises re.error here.
    Matching starts at the cursor, which means `^` only anchors at the very
    start of the input.
    """
    compiled = re.compile(pattern)

    def parse(stream: Stream, log: ParseLog) -> Outcome:
        m = compiled.match(stream.data, stream.index)
        if m is None:
            log.with_(Message.error(f"expecting \"{compiled.pattern}\".", stream.position))
            return None
        # One character at a time so line and column stay right
        for _ in range(m.end() - stream.index):
            stream.advance()
        return Ok(m.group())
    return Parsec(parse, f"/{compiled.pattern}/")


def one_of(cs: Iterable[str]) -> Parsec[str]:
    """Succeeds if the current character is in cs. Returns the parsed character."""
    chars = ''.join(cs)
    return satisfy(lambda c: c in chars).label(f"one of {chars}")


def none_of(cs: Iterable[str]) -> Parsec[str]:
    """Succeeds if the current character is not in cs. Returns the parsed character."""
    chars = ''.join(cs)
    return satisfy(lambda c: c not in chars).label(f"none of {chars}")


def any_char() -> Parsec[str]:
    return satisfy(lambda _: True)


def space() -> Parsec[str]:
    return satisfy(str.isspace).label("space")


def spaces() -> Parsec[None]:
    """Skips zero or more whitespace characters."""
    return skip_many(space())


def newline() -> Parsec[str]:
    return char('\n').label("lf new-line")


def tab() -> Parsec[str]:
    return char('\t').label("tab")


def upper() -> Parsec[str]:
    return satisfy(str.isupper).label("uppercase letter")


def lower() -> Parsec[str]:
    return satisfy(str.islower).label("lowercase letter")


def alpha_num() -> Parsec[str]:
    return satisfy(str.isalnum).label("letter or digit")


def letter() -> Parsec[str]:
    return satisfy(str.isalpha).label("letter")


def digit() -> Parsec[str]:
    """Parses an ASCII digit and returns it."""
    return satisfy(lambda c: '0' <= c <= '9').label("digit")


def trim(p: Parsec[T]) -> Parsec[T]:
    """Parses p surrounded by optional whitespace."""
    return mid(spaces(), p, spaces())
