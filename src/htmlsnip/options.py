"""Truncation options.

Options are immutable. Callers build their own instance (or pass a bare
string as a suffix shorthand) and ``resolve_options`` merges per-call
overrides functionally; ``DEFAULT_OPTIONS`` is never modified.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, fields, replace
from typing import Any

Suffix = str | Callable[[], str] | None


@dataclass(frozen=True, slots=True)
class TruncateOptions:
    """How a document is cut once the visible-character budget runs out.

    - `break_words`: when True a word may be cut exactly at the budget; when
      False a word that does not fit is dropped whole.
    - `suffix`: text appended once when something was cut. A zero-argument
      callable is invoked lazily, at most once per call.
    - `enclose_suffix_in_tags`: place the suffix before the synthesized
      closing tags (inside the last open element) instead of after them.
    """

    break_words: bool = True
    suffix: Suffix = None
    enclose_suffix_in_tags: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "break_words", bool(self.break_words))
        object.__setattr__(self, "enclose_suffix_in_tags", bool(self.enclose_suffix_in_tags))

        suffix = self.suffix
        if suffix is not None and not isinstance(suffix, str) and not callable(suffix):
            raise TypeError(f"suffix must be a string, a callable or None, not {type(suffix).__name__}")

    def resolve_suffix(self) -> str | None:
        """Return the suffix text, calling the producer if one was given."""
        suffix = self.suffix
        if suffix is None or isinstance(suffix, str):
            return suffix
        text = suffix()
        if not isinstance(text, str):
            raise TypeError(f"suffix callable must return a string, not {type(text).__name__}")
        return text


DEFAULT_OPTIONS: TruncateOptions = TruncateOptions()

_OPTION_NAMES = frozenset(f.name for f in fields(TruncateOptions))


def resolve_options(options: TruncateOptions | str | None = None, **overrides: Any) -> TruncateOptions:
    """Combine ``options`` and keyword overrides into one ``TruncateOptions``.

    A bare string is shorthand for ``TruncateOptions(suffix=that_string)``.
    """
    if options is None:
        resolved = DEFAULT_OPTIONS
    elif isinstance(options, str):
        resolved = replace(DEFAULT_OPTIONS, suffix=options)
    elif isinstance(options, TruncateOptions):
        resolved = options
    else:
        raise TypeError(f"options must be TruncateOptions, a string or None, not {type(options).__name__}")

    unknown = set(overrides) - _OPTION_NAMES
    if unknown:
        raise TypeError(f"Unknown truncate option(s): {', '.join(sorted(unknown))}")

    if overrides:
        resolved = replace(resolved, **overrides)
    return resolved
