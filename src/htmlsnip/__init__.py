from .options import DEFAULT_OPTIONS, TruncateOptions, resolve_options
from .tokens import OpenTag, ParseError
from .truncator import MarkupMismatchError, Truncator, html_substring, truncate

__all__ = [
    "DEFAULT_OPTIONS",
    "MarkupMismatchError",
    "OpenTag",
    "ParseError",
    "TruncateOptions",
    "Truncator",
    "html_substring",
    "resolve_options",
    "truncate",
]
