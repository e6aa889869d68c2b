"""
Tests for startup, command-line parsing and the top-level run modes.

The store opener is replaced by a lambda returning the in-memory FakeStore,
so no libaugeas is needed.
"""

from io import StringIO

import pytest

from augshell.__main__ import create_parser, options_from_args, run
from augshell.boot import BootError, LaunchOptions, boot_sequence, open_store
from augshell.session import Mode
from augshell.store import ErrorCode, OpenFlags, TreeStoreError, load_config


@pytest.fixture
def config(tmp_path):
    return load_config(files=[], environ={}).with_overrides(history_file=tmp_path / "history")


@pytest.fixture
def streams():
    return StringIO(), StringIO()


def boot_kwargs(store, config, streams):
    stdout, stderr = streams
    return {
        "config": config,
        "opener": lambda root, loadpath, flags: store,
        "stdout": stdout,
        "stderr": stderr,
    }


class TestCommandLine:
    """argparse surface."""

    def test_flags(self):
        parsed = create_parser().parse_args(["-b", "-n", "--span", "-A", "-r", "/srv", "-I", "a", "-I", "b"])
        options = options_from_args(parsed)
        assert options.flags == (OpenFlags.SAVE_BACKUP | OpenFlags.SAVE_NEWFILE
                                 | OpenFlags.ENABLE_SPAN | OpenFlags.NO_MODL_AUTOLOAD)
        assert options.root == "/srv"
        assert options.include == ["a", "b"]

    def test_version_skips_autoload(self):
        options = options_from_args(create_parser().parse_args(["--version"]))
        assert options.version
        assert options.flags & OpenFlags.NO_MODL_AUTOLOAD

    def test_command_words(self):
        """Everything after the options is one command, options included."""
        options = options_from_args(create_parser().parse_args(["-s", "set", "/files/a", "-x"]))
        assert options.autosave
        assert options.command == ["set", "/files/a", "-x"]

    def test_transforms_and_modes(self):
        options = options_from_args(create_parser().parse_args(
            ["-t", "Hosts incl /etc/myhosts", "-l", "-f", "script.lua", "-e", "-i"]))
        assert options.transforms == ["Hosts incl /etc/myhosts"]
        assert (options.use_lua, options.input_file, options.echo, options.interactive) == (
            True, "script.lua", True, True)


class TestOpenStore:
    """Opening the tree store."""

    def test_failure_is_reported(self, config, streams):
        stdout, stderr = streams

        def broken(root, loadpath, flags):
            raise TreeStoreError("Cannot find lens", code=ErrorCode.ENOLENS, minor="Hosts.lns")

        with pytest.raises(BootError):
            open_store(LaunchOptions(), config, opener=broken, stdout=stdout, stderr=stderr)
        assert stderr.getvalue() == (
            "Failed to initialize Augeas\n"
            "error: Cannot find lens\n"
            "error: Hosts.lns\n"
        )

    def test_timing(self, fake_store, config, streams):
        stdout, stderr = streams
        open_store(LaunchOptions(timing=True), config,
                   opener=lambda root, loadpath, flags: fake_store, stdout=stdout, stderr=stderr)
        assert stdout.getvalue().startswith("Initializing augeas ... done\nTime: ")

    def test_arguments_passed_to_opener(self, fake_store, config, streams):
        stdout, stderr = streams
        seen = []

        def opener(root, loadpath, flags):
            seen.append((root, list(loadpath), flags))
            return fake_store

        config = config.with_overrides(loadpath=("/usr/local/lenses",))
        options = LaunchOptions(root="/srv", include=["/opt/lenses"], flags=OpenFlags.NO_LOAD)
        open_store(options, config, opener=opener, stdout=stdout, stderr=stderr)
        assert seen == [("/srv", ["/opt/lenses", "/usr/local/lenses"], OpenFlags.NO_LOAD)]


class TestBootSequence:
    """Session construction."""

    def test_native_session(self, fake_store, config, streams):
        state = boot_sequence(LaunchOptions(echo=True), **boot_kwargs(fake_store, config, streams))
        session = state.session
        assert session.mode is Mode.NATIVE
        assert session.echo is True
        assert session.prompt == config.prompt
        assert state.loaded_count > 0
        assert session.evaluator.comment_prefix == "#"
        session.close()
        assert fake_store.closed == 1

    def test_transforms_applied_then_loaded(self, fake_store, config, streams):
        options = LaunchOptions(transforms=["Hosts.lns incl /etc/myhosts", "Hosts.lns both /x"])
        state = boot_sequence(options, **boot_kwargs(fake_store, config, streams))
        assert fake_store.transforms == [("Hosts.lns", "/etc/myhosts", False)]
        assert fake_store.loads == 1
        assert "error: Failed to add transform Hosts.lns both /x:" in streams[1].getvalue()
        state.session.close()

    def test_invalid_configuration(self, fake_store, streams, monkeypatch):
        monkeypatch.setenv("AUGSHELL_FRONTEND", "curses")
        stdout, stderr = streams
        with pytest.raises(BootError):
            boot_sequence(LaunchOptions(), opener=lambda r, l, f: fake_store,
                          stdout=stdout, stderr=stderr)
        assert stderr.getvalue().startswith("error: invalid configuration:")


class TestRun:
    """Top-level modes."""

    def test_version(self, fake_store, config, streams):
        fake_store.set("/augeas/version", "1.14.1")
        assert run(LaunchOptions(version=True), **boot_kwargs(fake_store, config, streams)) == 0
        assert streams[1].getvalue().startswith("augshell 1.14.1 <http://augeas.net/>\n")
        assert fake_store.closed == 1

    def test_single_command_then_save(self, fake_store, config, streams):
        status = run(LaunchOptions(command=["set", "/files/a", "1"]),
                     **boot_kwargs(fake_store, config, streams))
        assert status == 0
        assert fake_store.nodes["/files/a"] == "1"
        assert fake_store.calls[-1] == ("save",)

    def test_failing_single_command(self, fake_store, config, streams):
        assert run(LaunchOptions(command=["get"]), **boot_kwargs(fake_store, config, streams)) == 1

    def test_commands_from_file(self, fake_store, config, streams, tmp_path):
        script = tmp_path / "cmds"
        script.write_text("set /files/a 1\nquit\nset /files/b 2\n")
        status = run(LaunchOptions(input_file=str(script)), **boot_kwargs(fake_store, config, streams))
        assert status == 0
        assert fake_store.nodes["/files/a"] == "1"
        assert "/files/b" not in fake_store.nodes

    def test_missing_command_file(self, fake_store, config, streams, tmp_path):
        status = run(LaunchOptions(input_file=str(tmp_path / "absent")),
                     **boot_kwargs(fake_store, config, streams))
        assert status == 1
        assert streams[1].getvalue().startswith("Failed to open ")

    def test_lua_file(self, fake_store, config, streams, tmp_path):
        script = tmp_path / "run.lua"
        script.write_text('aug_set("/files/a", "lua")\n')
        status = run(LaunchOptions(use_lua=True, input_file=str(script)),
                     **boot_kwargs(fake_store, config, streams))
        assert status == 0
        assert fake_store.nodes["/files/a"] == "lua"

    def test_failing_lua_file(self, fake_store, config, streams, tmp_path):
        """The Lua error text is printed as is."""
        script = tmp_path / "bad.lua"
        script.write_text('aug_get("/files/etc/hosts/*/ipaddr")\n')
        status = run(LaunchOptions(use_lua=True, input_file=str(script)),
                     **boot_kwargs(fake_store, config, streams))
        assert status == 1
        assert "Too many matches" in streams[1].getvalue()
        assert not streams[1].getvalue().startswith("error:")

    def test_boot_failure(self, config, streams):
        def broken(root, loadpath, flags):
            raise TreeStoreError("no memory", code=ErrorCode.ENOMEM)

        stdout, stderr = streams
        assert run(LaunchOptions(), config=config, opener=broken, stdout=stdout, stderr=stderr) == 1
        assert stderr.getvalue() == "Failed to initialize Augeas\nOut of memory.\n"
