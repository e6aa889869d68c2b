"""
Tests for HistoryStore: bounded log, load/save and the default location.
"""

from augshell.interface.history import HISTORY_SIZE, HistoryStore, default_history_path


class TestCapacity:
    """The log never holds more than `capacity` entries."""

    def test_default_capacity(self):
        """Default capacity is 500 entries."""
        assert HistoryStore(None).capacity == HISTORY_SIZE == 500

    def test_oldest_entries_are_evicted(self):
        """Appending past capacity drops the oldest entries first."""
        history = HistoryStore(None, capacity=3)
        for line in ("a", "b", "c", "d", "e"):
            history.append(line)
        assert history.entries() == ["c", "d", "e"]
        assert len(history) == 3

    def test_zero_capacity_records_nothing(self):
        """A capacity of zero disables recording."""
        history = HistoryStore(None, capacity=0)
        history.append("ls /")
        assert history.entries() == []

    def test_subscribers_see_appended_lines(self):
        """Listeners are notified of each appended line until unsubscribed."""
        seen = []
        history = HistoryStore(None)
        history.subscribe(seen.append)
        history.append("get /a")
        history.unsubscribe(seen.append)
        history.append("get /b")
        assert seen == ["get /a"]


class TestPersistence:
    """Loading and saving the history file."""

    def test_round_trip_through_file(self, tmp_path):
        """Saved entries are loaded back in order."""
        path = tmp_path / "history"
        first = HistoryStore(path)
        first.append("set /a 1")
        first.append("print /a")
        assert first.save() is True

        second = HistoryStore(path)
        assert second.load() == 2
        assert second.entries() == ["set /a 1", "print /a"]

    def test_save_keeps_newest_entries(self, tmp_path):
        """Only the newest `capacity` entries reach the file."""
        path = tmp_path / "history"
        history = HistoryStore(path, capacity=2)
        for line in ("one", "two", "three"):
            history.append(line)
        history.save()
        assert path.read_text(encoding="utf-8").splitlines() == ["two", "three"]

    def test_load_skips_libedit_header_and_blank_lines(self, tmp_path):
        """The libedit header and empty lines are not history entries."""
        path = tmp_path / "history"
        path.write_text("_HiStOrY_V2_\nls /\n\nget /a\n", encoding="utf-8")
        history = HistoryStore(path)
        history.load()
        assert history.entries() == ["ls /", "get /a"]

    def test_load_truncates_to_capacity(self, tmp_path):
        """A longer file keeps only its newest entries."""
        path = tmp_path / "history"
        path.write_text("".join(f"cmd{i}\n" for i in range(10)), encoding="utf-8")
        history = HistoryStore(path, capacity=4)
        history.load()
        assert history.entries() == ["cmd6", "cmd7", "cmd8", "cmd9"]

    def test_missing_file_is_not_an_error(self, tmp_path):
        """A missing file loads nothing."""
        assert HistoryStore(tmp_path / "absent").load() == 0

    def test_session_only_history(self):
        """Without a path, save reports that nothing was written."""
        history = HistoryStore(None)
        history.append("ls /")
        assert history.load() == 0
        assert history.save() is False

    def test_unwritable_location(self, tmp_path):
        """Saving into a missing directory fails softly."""
        history = HistoryStore(tmp_path / "missing" / "history")
        history.append("ls /")
        assert history.save() is False


class TestDefaultLocation:
    """~/.augeas/history resolution."""

    def test_creates_augeas_directory(self, tmp_path):
        """The .augeas directory is created on demand."""
        path = default_history_path(home=tmp_path)
        assert path == tmp_path / ".augeas" / "history"
        assert (tmp_path / ".augeas").is_dir()

    def test_unusable_home_gives_none(self, tmp_path):
        """If the directory cannot be created, history is session-only."""
        blocker = tmp_path / "file"
        blocker.write_text("not a directory", encoding="utf-8")
        assert default_history_path(home=blocker) is None
