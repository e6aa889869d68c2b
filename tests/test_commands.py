"""
Tests for the command registry, the @command decorator and the loader.
"""

import pytest

from augshell.commands import REGISTRY, CommandRegistry, command


def make_registry():
    registry = CommandRegistry()

    @command(registry=registry, example="greet /a", aliases=["hi"])
    def greet_node(session, path, greeting=None):
        """Say hello to PATH."""

    return registry


class TestRegistry:
    """Registration and lookup."""

    def test_decorator_metadata(self):
        """Name, description and parameters come from the function."""
        cmd = make_registry().get("greet-node")
        assert cmd.description == "Say hello to PATH."
        assert cmd.param_names == ["path", "greeting"]
        assert cmd.category == "general"

    def test_alias_lookup(self):
        registry = make_registry()
        assert registry.get("hi") is registry.get("greet-node")
        assert registry.names() == ["greet-node", "hi"]
        assert len(registry.all()) == 1

    def test_names_are_case_sensitive(self):
        assert make_registry().get("GREET-NODE") is None

    def test_collisions_rejected(self):
        """A name already used as an alias cannot be registered again."""
        registry = make_registry()
        with pytest.raises(ValueError):
            @command(registry=registry, name="hi")
            def other(session):
                pass

    def test_categories_keep_declaration_order(self):
        registry = CommandRegistry()

        @command(registry=registry, category="b")
        def one(session):
            pass

        @command(registry=registry, category="a")
        def two(session):
            pass

        assert list(registry.categories()) == ["b", "a"]


class TestLoadedCommands:
    """The native command set as loaded by load_commands()."""

    def test_every_native_command_registered(self):
        expected = {
            "quit", "help", "errors", "get", "label", "set", "setm", "clear", "clearm",
            "touch", "rm", "mv", "cp", "rename", "ins", "match", "ls", "print",
            "dump-xml", "span", "defvar", "defnode", "save", "load", "transform",
            "store", "retrieve",
        }
        assert expected <= {c.name for c in REGISTRY.all()}

    def test_aliases(self):
        assert REGISTRY.get("move").name == "mv"
        assert REGISTRY.get("copy").name == "cp"
        assert REGISTRY.get("insert").name == "ins"

    def test_categories_have_headings(self):
        for category in ("nodes", "query", "files", "general"):
            assert REGISTRY.category_description(category)
