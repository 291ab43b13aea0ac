import logging

from beamform.storage import FileStorage


def test_save_creates_parents_and_loads(tmp_path):
    store = FileStorage(tmp_path)
    assert store.save_text("nested/dir/profile.csv", "a,b\n1,2\n") is True
    assert (tmp_path / "nested" / "dir" / "profile.csv").exists()
    assert store.load_text("nested/dir/profile.csv") == "a,b\n1,2\n"


def test_absolute_names_ignore_root(tmp_path):
    store = FileStorage(tmp_path / "unused")
    target = tmp_path / "abs.txt"
    store.save_text(str(target), "x")
    assert FileStorage().load_text(str(target)) == "x"


def test_missing_returns_none(tmp_path, caplog):
    store = FileStorage(tmp_path)
    with caplog.at_level(logging.DEBUG, logger="beamform.storage"):
        assert store.load_text("nope.csv") is None
    assert any("nope.csv" in r.getMessage() for r in caplog.records)


def test_unreadable_returns_none(tmp_path):
    store = FileStorage(tmp_path)
    (tmp_path / "dir.csv").mkdir()
    assert store.load_text("dir.csv") is None
    (tmp_path / "latin1.csv").write_bytes(b"caf\xe9\xff")
    assert store.load_text("latin1.csv") is None
