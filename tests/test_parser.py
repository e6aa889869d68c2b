"""
Tests for native command line tokenizing and argument binding.
"""

import pytest

from augshell.commands import REGISTRY, CommandError
from augshell.interface.parser import bind_args, build_usage, tokenize


class TestTokenize:
    """Whitespace splitting that respects quotes and predicates."""

    def test_plain_words(self):
        assert tokenize("set /files/a  value") == ["set", "/files/a", "value"]

    def test_top_level_quotes_are_removed(self):
        """Quoted values may contain spaces."""
        assert tokenize('set /a "hello world"') == ["set", "/a", "hello world"]
        assert tokenize("set /a 'it is'") == ["set", "/a", "it is"]

    def test_predicates_stay_intact(self):
        """Spaces and quotes inside [...] belong to the path."""
        line = "match /files/etc/hosts/*[canonical = 'local host']"
        assert tokenize(line) == ["match", "/files/etc/hosts/*[canonical = 'local host']"]

    def test_backslash_escapes_next_character(self):
        """A backslash keeps a space inside the word."""
        assert tokenize(r"set /a/b\ c x") == ["set", "/a/b c", "x"]

    def test_empty_quotes_make_empty_token(self):
        assert tokenize('set /a ""') == ["set", "/a", ""]

    def test_blank_line(self):
        assert tokenize("   ") == []

    def test_unbalanced_quote_is_an_error(self):
        with pytest.raises(CommandError):
            tokenize('set /a "open')

    def test_unbalanced_bracket_is_an_error(self):
        with pytest.raises(CommandError):
            tokenize("get /a[1")


class TestBindArgs:
    """Positional binding against a command's signature."""

    def test_optional_arguments_get_defaults(self):
        """Missing optional arguments take their default."""
        assert bind_args(REGISTRY.get("set"), ["/a"]) == ("/a", None)

    def test_not_enough_arguments(self):
        with pytest.raises(CommandError, match="Not enough arguments for mv"):
            bind_args(REGISTRY.get("mv"), ["/a"])

    def test_too_many_arguments(self):
        with pytest.raises(CommandError, match="Command get takes only 1 arguments"):
            bind_args(REGISTRY.get("get"), ["/a", "/b"])


class TestUsage:
    """Usage strings derived from signatures."""

    def test_required_and_optional(self):
        command_obj = REGISTRY.get("match")
        assert build_usage(command_obj.name, command_obj.callback) == "match <path> [value]"

    def test_no_arguments(self):
        command_obj = REGISTRY.get("save")
        assert build_usage(command_obj.name, command_obj.callback) == "save"
