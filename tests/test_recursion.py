import sys

import pytest

from btparsec.Char import char, digit, trim
from btparsec.Combinators import between
from btparsec.Parsec import Ok
from btparsec.Prim import fix, lazy, many, optional, run_parser, some
from btparsec.Stream import CharStream


def test_stack_safety():
    # many() is a loop, its depth does not grow with the input
    old_limit = sys.getrecursionlimit()
    sys.setrecursionlimit(1000)
    try:
        n = 5000
        parser = many(char('a'))
        res, logs, st = run_parser(parser, "a" * n)
    finally:
        sys.setrecursionlimit(old_limit)
    assert len(res.value) == n
    assert st.as_str() == ""


def test_fix_builds_nothing_until_parsed():
    calls = []

    def expand(it):
        calls.append(1)
        return (char('(') >> it << char(')')) | char('x')

    nested = fix(expand)
    assert calls == []
    assert run_parser(nested, "((x))")[0] == Ok('x')
    assert len(calls) == 3


def test_fix_failure_restores():
    nested = fix(lambda it: (char('(') >> it << char(')')) | char('x'))
    res, logs, st = run_parser(nested, "((x)")
    assert res is None
    assert st.as_str() == "((x)"


def test_fix_is_reusable_between_runs():
    ones = fix(lambda it: (char('1') & it).map(lambda pair: pair[0] + pair[1]) | char('0'))
    assert run_parser(ones, "110")[0] == Ok("110")
    assert run_parser(ones, "0")[0] == Ok("0")
    assert run_parser(ones, "11")[0] is None


def test_mutually_recursive_fix():
    # expr   := term '+' expr | term
    # term   := factor '*' term | factor
    # factor := '(' expr ')' | uint
    def uint():
        return some(digit()).map(lambda ds: int(''.join(ds)))

    def build_expr(expr):
        factor = between(char('('), char(')'), expr) | uint()
        term = fix(lambda term: ((factor << char('*')) & term).map(lambda p: p[0] * p[1]) | factor)
        return ((term << char('+')) & expr).map(lambda p: p[0] + p[1]) | term

    expr = fix(build_expr)
    res, logs, st = run_parser(expr, "1+2*(3+4)")
    assert res == Ok(15)
    assert st.as_str() == ""
    assert len(logs) == 0


def test_left_recursion_is_not_supported():
    looping = fix(lambda it: (it << char('+')) | char('1'))
    with pytest.raises(RecursionError):
        run_parser(looping, "1+1")


# --- Arithmetic evaluator built with lazy() ---
#
# expr    := term ('+'|'-') expr | term
# term    := factor ('*'|'/') term | factor
# factor  := '(' expr ')' | float
# float   := uint ['.' uint]

def uint():
    return some(digit()).map(''.join)


def number():
    return trim(
        (uint() & optional(char('.') & lazy(uint)))
        .map_result(lambda p: float(p[0] + (p[1][0] + p[1][1] if p[1] else '')))
    )


def factor():
    return (trim(char('(')) >> lazy(expr) << trim(char(')'))) | number()


def term():
    op = trim(char('*') | char('/'))
    return ((factor() & op) & lazy(term)).map(
        lambda t: t[0][0] * t[1] if t[0][1] == '*' else t[0][0] / t[1]
    ) | lazy(factor)


def expr():
    op = trim(char('+') | char('-'))
    return ((term() & op) & lazy(expr)).map(
        lambda t: t[0][0] + t[1] if t[0][1] == '+' else t[0][0] - t[1]
    ) | lazy(term)


@pytest.mark.parametrize("text, expected", [
    ("2+4*(6+0)/1", 2 + 4 * (6 + 0) / 1),
    (" 2 + 4 * ( 6 + 0 ) / 1 ", 2 + 4 * (6 + 0) / 1),
    ("1.9/(2.6+0.8)+1.7", 1.9 / (2.6 + 0.8) + 1.7),
    ("1.9 / ( 2.6 + 0.8 ) + 1.7 ", 1.9 / (2.6 + 0.8) + 1.7),
])
def test_calculator(text, expected):
    stream = CharStream(text)
    res, logs = expr().exec(stream)
    assert res == Ok(pytest.approx(expected))
    assert stream.as_str() == ""
    assert len(logs) == 0


def test_calculator_failure_is_logged():
    stream = CharStream("(1+")
    res, logs = expr().exec(stream)
    assert res is None
    assert stream.as_str() == "(1+"
    assert len(logs) >= 1
