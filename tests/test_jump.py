import logging
import os
from pathlib import Path

import pytest

from zmethoxy import jump
from zmethoxy.utils.history import HistoryRecord, HistoryStore
from zmethoxy.utils.history_file import HistoryFile

NOW = 1_700_000_000
DAY = 24 * 60 * 60


@pytest.fixture
def history_file(tmp_path: Path) -> HistoryFile:
    return HistoryFile(tmp_path / "state")


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch) -> Path:
    cwd = tmp_path / "cwd"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    return cwd


def _seed(history_file: HistoryFile, *records: HistoryRecord) -> None:
    assert history_file.save(HistoryStore(records))


class TestVisitExistingDirectory:
    def test_records_canonical_path_and_returns_raw(self, tmp_path, history_file):
        target = tmp_path / "work" / "proj"
        target.mkdir(parents=True)
        raw = str(tmp_path / "work" / ".." / "work" / "proj")
        assert jump.visit([raw], history_file, now=NOW) == raw
        record = history_file.load().get(str(target.resolve()))
        assert record == HistoryRecord(str(target.resolve()), NOW, 1)

    def test_repeat_visit_counts_up(self, tmp_path, history_file):
        target = tmp_path / "proj"
        target.mkdir()
        jump.visit([str(target)], history_file, now=NOW)
        jump.visit([str(target)], history_file, now=NOW + 60)
        store = history_file.load()
        assert len(store) == 1
        assert store.get(str(target.resolve())).times_used == 2
        assert store.get(str(target.resolve())).last_used == NOW + 60

    def test_relative_directory(self, workdir, history_file):
        (workdir / "sub").mkdir()
        assert jump.visit(["sub"], history_file, now=NOW) == "sub"
        assert history_file.load().get(str((workdir / "sub").resolve())) is not None


def test_missing_absolute_path_is_returned_unchanged(history_file):
    assert jump.visit(["/definitely/not/here"], history_file, now=NOW) == "/definitely/not/here"
    assert not history_file.path.exists()


class TestVisitFromHistory:
    def test_best_match_is_returned_and_touched(self, workdir, history_file):
        _seed(
            history_file,
            HistoryRecord("/srv/alice/projects/foo", NOW - 10 * DAY, 3),
            HistoryRecord("/srv/alice/projects/bar", NOW - 10, 1),
        )
        assert jump.visit(["proj", "foo"], history_file, now=NOW) == "/srv/alice/projects/foo"
        foo = history_file.load().get("/srv/alice/projects/foo")
        assert (foo.times_used, foo.last_used) == (4, NOW)

    def test_no_match_stays_in_cwd(self, workdir, history_file):
        _seed(history_file, HistoryRecord("/srv/alice", NOW, 1))
        before = history_file.path.read_bytes()
        assert jump.visit(["nomatch"], history_file, now=NOW) == os.getcwd()
        assert history_file.path.read_bytes() == before

    def test_unscoreable_match_stays_in_cwd(self, workdir, history_file):
        _seed(history_file, HistoryRecord("/srv/future", NOW + 100, 1))
        assert jump.visit(["future"], history_file, now=NOW) == os.getcwd()

    def test_empty_history_stays_in_cwd(self, workdir, history_file):
        assert jump.visit(["anything"], history_file, now=NOW) == os.getcwd()


class TestVisitPrevious:
    def test_old_dir(self, tmp_path, history_file, monkeypatch):
        monkeypatch.setenv("OLD_DIR", str(tmp_path))
        assert jump.visit_previous(history_file, now=NOW) == str(tmp_path)

    def test_unset_old_dir_warns_and_uses_history(self, workdir, history_file, monkeypatch, caplog):
        monkeypatch.delenv("OLD_DIR", raising=False)
        _seed(history_file, HistoryRecord("/srv/a", NOW - 30 * DAY, 1), HistoryRecord("/srv/b", NOW, 1))
        with caplog.at_level(logging.WARNING):
            assert jump.visit_previous(history_file, now=NOW) == "/srv/b"
        assert "OLD_DIR is not set" in caplog.text


class TestFinishPick:
    def test_choice_is_counted(self, history_file):
        _seed(history_file, HistoryRecord("/srv/a", NOW - DAY, 2))
        assert jump.finish_pick("/srv/a", history_file, now=NOW) == "/srv/a"
        assert history_file.load().get("/srv/a") == HistoryRecord("/srv/a", NOW, 3)

    def test_cancel_stays_in_cwd_without_saving(self, workdir, history_file):
        assert jump.finish_pick(None, history_file, now=NOW) == os.getcwd()
        assert not history_file.path.exists()

    def test_cancel_from_deleted_cwd_goes_home(self, tmp_path, history_file, monkeypatch, caplog):
        gone = tmp_path / "gone"
        gone.mkdir()
        monkeypatch.chdir(gone)
        gone.rmdir()
        monkeypatch.setenv("HOME", str(tmp_path))
        with caplog.at_level(logging.WARNING):
            assert jump.finish_pick(None, history_file) == str(tmp_path)
        assert "Cannot determine current directory" in caplog.text


def test_format_records_skips_future_entries(caplog):
    records = [
        HistoryRecord("/srv/a b", NOW - 3 * DAY - 5, 12),
        HistoryRecord("/srv/future", NOW + 5, 1),
        HistoryRecord("/srv/now", NOW, 1),
    ]
    with caplog.at_level(logging.WARNING):
        lines = jump.format_records(records, now=NOW)
    assert lines == ["   3  12 /srv/a b", "   0   1 /srv/now"]
    assert "/srv/future" in caplog.text


def test_history_and_match_lines(history_file):
    _seed(history_file, HistoryRecord("/srv/src", NOW, 1), HistoryRecord("/srv/docs", NOW, 2))
    assert jump.history_lines(history_file, now=NOW) == ["   0   2 /srv/docs", "   0   1 /srv/src"]
    assert jump.match_lines(["src"], history_file, now=NOW) == ["   0   1 /srv/src"]
    assert jump.match_lines(["zzz"], history_file, now=NOW) == []


def test_cut_keeps_path_column(caplog):
    lines = ["   3  12 /srv/a b\n", "oops\n", "   0   1 /srv/src\n"]
    with caplog.at_level(logging.WARNING):
        assert list(jump.cut(lines)) == ["/srv/a b", "/srv/src"]
    assert "Invalid line format" in caplog.text
