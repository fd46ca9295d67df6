# tests/conftest.py
import pytest

from btparsec.Stream import CharStream


def outcome_and_state(parser, input_str):
    """Run a parser and collect everything observable except the log."""
    stream = CharStream(input_str, name="test")
    res, log = parser.exec(stream)
    return res, stream.as_str(), stream.pos


@pytest.fixture(scope="session")
def assert_equivalent():
    """
    Two parsers are equivalent on an input when they produce the same
    outcome and leave the stream at the same place.
    """
    def _check(p1, p2, input_str):
        lhs = outcome_and_state(p1, input_str)
        rhs = outcome_and_state(p2, input_str)
        assert lhs == rhs, f"{lhs} != {rhs} on {input_str!r}"

    return _check
