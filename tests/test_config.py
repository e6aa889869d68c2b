"""
Tests for the layered configuration loader.
"""

from pathlib import Path

import pytest

from augshell.store.config import DEFAULTS, load_config


def write_toml(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text)
    return path


class TestDefaults:
    """Nothing configured."""

    def test_builtin_defaults(self):
        config = load_config(files=[], environ={})
        assert config.root is None
        assert config.loadpath == ()
        assert config.history_size == DEFAULTS["HISTORY_SIZE"]
        assert config.prompt == "augshell> "
        assert config.frontend == "auto"
        assert config.enable_completion is True
        assert config.log_level is None

    def test_missing_files_are_ignored(self, tmp_path):
        config = load_config(files=[tmp_path / "absent.toml"], environ={})
        assert config.history_size == DEFAULTS["HISTORY_SIZE"]


class TestLayers:
    """Files, then environment, then explicit overrides."""

    def test_nested_tables_are_flattened(self, tmp_path):
        """[history] size = 10 becomes HISTORY_SIZE."""
        path = write_toml(tmp_path, "a.toml", '[history]\nsize = 10\nfile = "/tmp/h"\n')
        config = load_config(files=[path], environ={})
        assert config.history_size == 10
        assert config.history_file == Path("/tmp/h")

    def test_later_files_win(self, tmp_path):
        first = write_toml(tmp_path, "a.toml", 'prompt = "one> "\nfrontend = "plain"\n')
        second = write_toml(tmp_path, "b.toml", 'prompt = "two> "\n')
        config = load_config(files=[first, second], environ={})
        assert config.prompt == "two> "
        assert config.frontend == "plain"

    def test_environment_beats_files(self, tmp_path):
        path = write_toml(tmp_path, "a.toml", "history_size = 10\n")
        config = load_config(files=[path], environ={"AUGSHELL_HISTORY_SIZE": "20"})
        assert config.history_size == 20

    def test_augeas_variables(self):
        """AUGEAS_ROOT and AUGEAS_LENS_LIB are honoured."""
        config = load_config(files=[], environ={
            "AUGEAS_ROOT": "/srv/root",
            "AUGEAS_LENS_LIB": "/opt/lenses:/usr/local/lenses",
        })
        assert config.root == Path("/srv/root")
        assert config.loadpath == ("/opt/lenses", "/usr/local/lenses")

    def test_overrides_skip_none(self):
        config = load_config(files=[], environ={}).with_overrides(
            frontend="readline", root=None)
        assert config.frontend == "readline"
        assert config.root is None

    def test_unknown_keys_are_kept(self, tmp_path):
        path = write_toml(tmp_path, "a.toml", "colour = true\n")
        assert load_config(files=[path], environ={}).extra == {"COLOUR": True}


class TestValidation:
    """Bad values are rejected with ValueError."""

    @pytest.mark.parametrize("environ", [
        {"AUGSHELL_HISTORY_SIZE": "-1"},
        {"AUGSHELL_HISTORY_SIZE": "lots"},
        {"AUGSHELL_FRONTEND": "curses"},
        {"AUGSHELL_LOG_LEVEL": "LOUD"},
        {"AUGSHELL_ENABLE_COMPLETION": "maybe"},
    ])
    def test_invalid(self, environ):
        with pytest.raises(ValueError):
            load_config(files=[], environ=environ)

    def test_boolean_strings(self):
        config = load_config(files=[], environ={"AUGSHELL_ENABLE_COMPLETION": "off"})
        assert config.enable_completion is False

    def test_log_level_case_insensitive(self):
        assert load_config(files=[], environ={"AUGSHELL_LOG_LEVEL": "debug"}).log_level == "DEBUG"
