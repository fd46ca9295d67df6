from btparsec.Log import Message, MessageType, ParseLog
from btparsec.Stream import SourcePos


def test_add_appends_in_order():
    log = ParseLog()
    log.add(Message.info("first"))
    log.add(Message.warning("second"))
    assert len(log) == 2
    assert [m.text for m in log] == ["first", "second"]
    assert log[1].kind is MessageType.WARNING


def test_with_replaces_everything():
    log = ParseLog()
    log.add(Message.info("a"))
    log.add(Message.error("b"))
    log.with_(Message.error("most specific"))
    assert len(log) == 1
    assert log.last().text == "most specific"


def test_snapshot_restore():
    log = ParseLog()
    log.add(Message.info("kept"))
    snap = log.snapshot()
    log.add(Message.error("dropped"))
    log.with_(Message.error("also dropped"))
    log.restore(snap)
    assert log == ParseLog((Message.info("kept"),))


def test_errors_filter():
    log = ParseLog()
    log.add(Message.info("i"))
    log.add(Message.error("e"))
    assert [m.text for m in log.errors()] == ["e"]


def test_message_str():
    assert str(Message.error("boom")) == "error: boom"
    assert str(Message.warning("hm", SourcePos(2, 4))) == "warning at line 2, column 4: hm"


def test_format_error():
    log = ParseLog()
    assert "no diagnostics" in log.format_error()
    log.add(Message.error("expecting 'x'", SourcePos(1, 1)))
    assert log.format_error() == "Parse error: error at line 1, column 1: expecting 'x'"


def test_clear():
    log = ParseLog()
    log.add(Message.info("a"))
    log.add(Message.error("b"))
    log.clear()
    assert len(log) == 0
    assert log.last() is None
