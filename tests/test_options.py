from __future__ import annotations

import dataclasses
import unittest

from htmlsnip import DEFAULT_OPTIONS, TruncateOptions, resolve_options


class TestTruncateOptions(unittest.TestCase):
    def test_defaults(self) -> None:
        assert DEFAULT_OPTIONS.break_words is True
        assert DEFAULT_OPTIONS.suffix is None
        assert DEFAULT_OPTIONS.enclose_suffix_in_tags is False

    def test_flags_are_normalized_to_bool(self) -> None:
        options = TruncateOptions(break_words=0, enclose_suffix_in_tags="yes")
        assert options.break_words is False
        assert options.enclose_suffix_in_tags is True

    def test_rejects_invalid_suffix(self) -> None:
        with self.assertRaises(TypeError):
            TruncateOptions(suffix=5)

    def test_options_are_frozen(self) -> None:
        with self.assertRaises(dataclasses.FrozenInstanceError):
            DEFAULT_OPTIONS.suffix = "..."  # type: ignore[misc]

    def test_resolve_suffix(self) -> None:
        assert TruncateOptions(suffix="...").resolve_suffix() == "..."
        assert TruncateOptions().resolve_suffix() is None
        assert TruncateOptions(suffix=lambda: "!").resolve_suffix() == "!"


class TestResolveOptions(unittest.TestCase):
    def test_none_gives_defaults(self) -> None:
        assert resolve_options() is DEFAULT_OPTIONS

    def test_string_is_suffix_shorthand(self) -> None:
        options = resolve_options("...")
        assert options == TruncateOptions(suffix="...")

    def test_options_instance_is_used_as_is(self) -> None:
        options = TruncateOptions(break_words=False)
        assert resolve_options(options) is options

    def test_overrides_merge_without_mutating(self) -> None:
        base = TruncateOptions(suffix="...")
        merged = resolve_options(base, break_words=False)
        assert merged.suffix == "..."
        assert merged.break_words is False
        assert base.break_words is True
        assert DEFAULT_OPTIONS == TruncateOptions()

    def test_overrides_on_string_shorthand(self) -> None:
        merged = resolve_options("...", enclose_suffix_in_tags=True)
        assert merged == TruncateOptions(suffix="...", enclose_suffix_in_tags=True)

    def test_unknown_override_rejected(self) -> None:
        with self.assertRaises(TypeError):
            resolve_options(breakWords=False)

    def test_invalid_options_type_rejected(self) -> None:
        with self.assertRaises(TypeError):
            resolve_options({"suffix": "..."})  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
