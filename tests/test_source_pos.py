from hypothesis import given
from hypothesis import strategies as st

from btparsec.Stream import CharStream, SequenceStream, SourcePos


def slow_reference_update(pos, text):
    line, column = pos.line, pos.column
    for ch in text:
        if ch == '\n':
            line, column = line + 1, 1
        else:
            column += 1
    return SourcePos(line, column, pos.name)


@given(st.text())
def test_char_stream_position_matches_reference(text):
    stream = CharStream(text, name="test")
    while stream.advance() is not None:
        pass
    assert stream.position == slow_reference_update(SourcePos(1, 1, "test"), text)
    assert stream.as_str() == ""


def test_source_pos_str():
    assert str(SourcePos(3, 7, "main.txt")) == "main.txt line 3, column 7"
    assert str(SourcePos(3, 7)) == "line 3, column 7"


def test_advance_and_peek():
    stream = CharStream("ab\nc")
    assert stream.peek() == 'a'
    assert stream.advance() == 'a'
    assert stream.advance() == 'b'
    assert stream.position == SourcePos(1, 3)
    assert stream.advance() == '\n'
    assert stream.position == SourcePos(2, 1)
    assert stream.advance() == 'c'
    assert stream.at_end()
    assert stream.advance() is None
    assert stream.position == SourcePos(2, 2)


def test_snapshot_restore_is_exact():
    stream = CharStream("hello\nworld")
    stream.advance()
    snap = stream.snapshot()
    for _ in range(7):
        stream.advance()
    assert stream != snap
    stream.restore(snap)
    assert stream == snap
    assert stream.as_str() == "ello\nworld"
    assert stream.position == SourcePos(1, 2)


def test_snapshot_is_independent():
    stream = CharStream("abc")
    snap = stream.snapshot()
    stream.advance()
    assert snap.as_str() == "abc"
    assert snap.index == 0


def test_sequence_stream_over_tokens():
    stream = SequenceStream([10, 20, 30])
    assert len(stream) == 3
    assert stream.advance() == 10
    assert stream.position == SourcePos(1, 2)
    assert list(stream.remaining) == [20, 30]
    assert len(stream) == 2
