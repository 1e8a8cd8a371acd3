import io

import pytest

import main


def _run(monkeypatch, capsys, script, argv=("main.py",)):
    monkeypatch.setattr("sys.stdin", io.StringIO(script))
    status = main.main(list(argv))
    captured = capsys.readouterr()
    return status, captured.out.splitlines(), captured.err


def test_demo_session(monkeypatch, capsys):
    script = (
        "INSERT 1 2 3 -1 2 100 -1 0 6 3 -10 0 234 -112\n"
        "CONTAINS 1000\n"
        "CONTAINS 100\n"
        "LIST\n"
        "DELETE 100\n"
        "DELETE 100\n"
        "EXIT\n"
        "LIST\n"
    )
    status, out, _ = _run(monkeypatch, capsys, script)
    assert status == 0
    assert out == [
        "OK",
        "0",
        "1",
        "-112 -10 -1 -1 0 0 1 2 2 3 3 6 100 234",
        "1",
        "0",
    ]


def test_eof_exits_cleanly(monkeypatch, capsys):
    status, out, _ = _run(monkeypatch, capsys, "insert 5\n\nlist\n")
    assert status == 0
    assert out == ["OK", "5"]


@pytest.mark.parametrize(
    "line, reply",
    [
        ("FROB 1", main.ERR_UNKNOWN_CMD),
        ('INSERT "1', main.ERR_SYNTAX),
        ("INSERT", main.ERR_USAGE_INSERT),
        ("INSERT one", main.ERR_KEY_NOT_INT),
        ("DELETE", main.ERR_USAGE_DELETE),
        ("DELETE 1 2", main.ERR_USAGE_DELETE),
        ("CONTAINS x", main.ERR_KEY_NOT_INT),
        ("LIST now", main.ERR_USAGE_NOARGS),
    ],
)
def test_bad_commands(monkeypatch, capsys, line, reply):
    status, out, _ = _run(monkeypatch, capsys, line + "\n")
    assert status == 0
    assert out == [reply]


def test_stats_reports_min_degree(monkeypatch, capsys):
    status, out, _ = _run(monkeypatch, capsys, "STATS\n", argv=("main.py", "4"))
    assert status == 0
    assert out[0].startswith("min_degree=4 height=1 ")
    assert "size=0" in out[0]


@pytest.mark.parametrize("t", ["1", "abc"])
def test_invalid_min_degree(monkeypatch, capsys, t):
    status, out, err = _run(monkeypatch, capsys, "", argv=("main.py", t))
    assert status == 2
    assert out == []
    assert "invalid minimum degree" in err


def test_tree_failure_replies_internal_and_continues(monkeypatch, capsys, caplog):
    def broken(self, value):
        raise RuntimeError("boom")

    monkeypatch.setattr(main.BTree, "delete", broken)
    status, out, _ = _run(monkeypatch, capsys, "DELETE 1\nINSERT 2\nLIST\n")
    assert status == 0
    assert out == [main.ERR_INTERNAL, "OK", "2"]
    assert [r.name for r in caplog.records] == ["btree.main"]
    assert caplog.records[0].exc_info[0] is RuntimeError


def test_repl_logger_has_no_handler_of_its_own():
    assert main._logger.handlers == []
    assert main._logger.propagate
    assert main._logger.parent.name == "btree"
