import logging
from functools import reduce
from typing import Any, Callable, List, Optional, Tuple, TypeVar, Union

from .Log import Message, ParseLog
from .Parsec import Ok, Outcome, Parsec, Stream, T
from .Prim import fail, many, optional, pure, some

logger = logging.getLogger(__name__)

OpFuncType = Callable[[T, T], T]


# 1. choice: Tries parsers in order until one succeeds
def choice(parsers: List[Parsec[T]]) -> Parsec[T]:
    """
    Applies a list of parsers in order until one succeeds.
    Returns the value of the succeeding parser, or fails if none succeed.
    """
    if not parsers:
        return fail("no alternatives")
    return reduce(lambda acc, p: acc.or_(p), parsers[1:], parsers[0])


# 2. count: Parses n occurrences of a parser
def count(n: int, p: Parsec[T]) -> Parsec[List[T]]:
    if n < 0:
        raise ValueError(f"count: n must be non-negative, got {n}")
    if n == 0:
        return pure([])

    def parse(stream: Stream, log: ParseLog) -> Outcome:
        start = stream.snapshot()
        results = []
        for _ in range(n):
            res = p.parse(stream, log)
            if res is None:
                stream.restore(start)
                return None
            results.append(res.value)
        return Ok(results)
    return Parsec(parse)


# 3. between: Parses an opening parser, a main parser, and a closing parser
def between(open: Parsec[Any], close: Parsec[Any], p: Parsec[T]) -> Parsec[T]:
    """
    Parses 'open', then 'p', then 'close', returning the result of 'p'.
    """
    return open.mid(p, close)


# 4. option: Tries a parser, returning a default value on failure
def option(x: T, p: Parsec[T]) -> Parsec[T]:
    return p.or_(pure(x))


# 5. sepBy1 / sepBy
def sep_by1(p: Parsec[T], sep: Parsec[Any]) -> Parsec[List[T]]:
    """
    Parses one or more occurrences of p separated by sep, returning a list of p's results.
    A trailing separator is left unconsumed.
    """
    return p.and_(many(sep.right(p))).map(lambda pair: [pair[0]] + pair[1])


def sep_by(p: Parsec[T], sep: Parsec[Any]) -> Parsec[List[T]]:
    return sep_by1(p, sep).or_(pure([]))


# 6. endBy: each occurrence is followed by sep
def end_by(p: Parsec[T], sep: Parsec[Any]) -> Parsec[List[T]]:
    return many(p.left(sep))


def end_by1(p: Parsec[T], sep: Parsec[Any]) -> Parsec[List[T]]:
    return some(p.left(sep))


# 7. sepEndBy: separated and optionally ended by sep
def sep_end_by(p: Parsec[T], sep: Parsec[Any]) -> Parsec[List[T]]:
    return sep_by(p, sep).left(optional(sep))


def sep_end_by1(p: Parsec[T], sep: Parsec[Any]) -> Parsec[List[T]]:
    return sep_by1(p, sep).left(optional(sep))


def _scan_op_chain(term: Parsec[T], op: Parsec[OpFuncType]) -> Parsec[List[Union[T, OpFuncType]]]:
    """
    Parses `term (op term)*` into a flat list [t1, op1, t2, ..., tN].
    An operator that is not followed by a term is left unconsumed.
    """
    return term.and_(many(op.and_(term))).map(
        lambda pair: [pair[0]] + [x for op_term in pair[1] for x in op_term])


# 8. chainl1: Left-associative operator chain
def chainl1(p: Parsec[T], op: Parsec[OpFuncType]) -> Parsec[T]:
    def fold_left(items: List[Any]) -> T:
        acc = items[0]
        for i in range(1, len(items), 2):
            acc = items[i](acc, items[i + 1])
        return acc
    return _scan_op_chain(p, op).map(fold_left)


# 9. chainr1: Right-associative operator chain
def chainr1(p: Parsec[T], op: Parsec[OpFuncType]) -> Parsec[T]:
    def fold_right(items: List[Any]) -> T:
        acc = items[-1]
        for i in range(len(items) - 2, 0, -2):
            acc = items[i](items[i - 1], acc)
        return acc
    return _scan_op_chain(p, op).map(fold_right)


def chainl(p: Parsec[T], op: Parsec[OpFuncType], x: T) -> Parsec[T]:
    return chainl1(p, op).or_(pure(x))


def chainr(p: Parsec[T], op: Parsec[OpFuncType], x: T) -> Parsec[T]:
    return chainr1(p, op).or_(pure(x))


# 10. lookAhead: Parse without consuming input
def look_ahead(p: Parsec[T]) -> Parsec[T]:
    def parse(stream: Stream, log: ParseLog) -> Outcome:
        start = stream.snapshot()
        res = p.parse(stream, log)
        stream.restore(start)
        return res
    return Parsec(parse)


# 11. notFollowedBy: Succeeds only if p fails
def not_followed_by(p: Parsec[Any]) -> Parsec[None]:
    def parse(stream: Stream, log: ParseLog) -> Outcome:
        start = stream.snapshot()
        logged = log.snapshot()
        res = p.parse(stream, log)
        stream.restore(start)
        log.restore(logged)
        if res is None:
            return Ok(None)
        log.with_(Message.error(f"unexpected {res.value!r}", start.position))
        return None
    return Parsec(parse)


# 12. anyToken: Accepts any single token
def any_token() -> Parsec[Any]:
    def parse(stream: Stream, log: ParseLog) -> Outcome:
        if stream.at_end():
            log.with_(Message.error("unexpected end of input", stream.position))
            return None
        return Ok(stream.advance())
    return Parsec(parse, "any token")


# 13. eof: Succeeds only at the end of input
def eof() -> Parsec[None]:
    def parse(stream: Stream, log: ParseLog) -> Outcome:
        if stream.at_end():
            return Ok(None)
        tok = stream.peek()
        log.with_(Message.error(f"expecting end of input, but got {tok!r}", stream.position))
        return None
    return Parsec(parse, "end of input")


# 14. manyTill: Parses p zero or more times until end succeeds
def many_till(p: Parsec[T], end: Parsec[Any]) -> Parsec[List[T]]:
    def parse(stream: Stream, log: ParseLog) -> Outcome:
        start = stream.snapshot()
        results = []
        while True:
            before = stream.snapshot()
            logged = log.snapshot()
            if end.parse(stream, log) is not None:
                return Ok(results)
            stream.restore(before)
            log.restore(logged)
            res = p.parse(stream, log)
            if res is None or stream == before:
                stream.restore(start)
                return None
            results.append(res.value)
    return Parsec(parse)


# Free-function forms of the diagnostic combinators

def label(p: Parsec[T], msg: str) -> Parsec[T]:
    return p.label(msg)


def info(p: Parsec[T], msg: str) -> Parsec[T]:
    return p.info(msg)


def warn(p: Parsec[T], msg: str) -> Parsec[T]:
    return p.warn(msg)


def error(p: Parsec[T], msg: str) -> Parsec[T]:
    return p.error(msg)


def recover(p: Parsec[T], fallback: T) -> Parsec[T]:
    return p.recover(fallback)


def inspect(p: Parsec[T]) -> Parsec[Tuple[Optional[Ok[T]], Stream]]:
    return p.inspect()


# 15. parserTrace: Debugging parser that logs the remaining input
def parser_trace(label_str: str) -> Parsec[None]:
    def parse(stream: Stream, log: ParseLog) -> Outcome:
        rest = stream.remaining
        logger.debug("%s: %r%s at %s", label_str, rest[:30], '...' if len(rest) > 30 else '',
                     stream.position)
        return Ok(None)
    return Parsec(parse)


# 16. parserTraced: Debugging parser that traces execution and backtracking
def parser_traced(label_str: str, p: Parsec[T]) -> Parsec[T]:
    trace_enter = parser_trace(label_str)
    trace_backtrack = parser_trace(f"{label_str} backtracked")

    def parse(stream: Stream, log: ParseLog) -> Outcome:
        trace_enter.parse(stream, log)
        res = p.parse(stream, log)
        if res is None:
            trace_backtrack.parse(stream, log)
        return res
    return Parsec(parse, p.name or label_str)
