from .charclass import is_optional_closing_element, is_void_element


class OpenTag:
    """An opening tag that has been scanned but not necessarily written yet.

    ``attrs`` is everything between the tag name and ``>`` exactly as it
    appeared in the source (attributes, whitespace, a trailing ``/``).
    Records are never mutated after scanning.
    """

    __slots__ = ("attrs", "is_optional_void", "is_void", "name", "self_closing")

    def __init__(self, name, attrs=""):
        self.name = name
        self.attrs = attrs
        self.is_void = is_void_element(name)
        self.is_optional_void = is_optional_closing_element(name)
        self.self_closing = attrs.endswith("/")

    @property
    def is_standalone(self):
        """True when the tag needs no content to justify being written."""
        return self.is_void or self.self_closing

    @property
    def needs_closing(self):
        return not (self.is_void or self.is_optional_void or self.self_closing)

    def as_string(self):
        return f"<{self.name}{self.attrs}>"

    def closing(self):
        return f"</{self.name}>"

    def __repr__(self):
        closing = " /" if self.self_closing else ""
        return f"<start:{self.name}{closing} {self.attrs!r}>"


class ParseError:
    """Represents a markup error with location information."""

    __slots__ = ("code", "column", "line", "message", "offset")

    def __init__(self, code, line=None, column=None, message=None, offset=None):
        self.code = code
        self.line = line
        self.column = column
        self.message = message or code
        self.offset = offset

    @classmethod
    def at_offset(cls, code, source, offset, message=None):
        """Build an error for ``offset`` (a code point index into ``source``)."""
        line = source.count("\n", 0, offset) + 1
        column = offset - (source.rfind("\n", 0, offset) + 1)
        return cls(code, line=line, column=column, message=message, offset=offset)

    def __repr__(self):
        if self.line is not None and self.column is not None:
            return f"ParseError({self.code!r}, line={self.line}, column={self.column})"
        return f"ParseError({self.code!r})"

    def __str__(self):
        if self.line is not None and self.column is not None:
            if self.message != self.code:
                return f"({self.line},{self.column}): {self.code} - {self.message}"
            return f"({self.line},{self.column}): {self.code}"
        if self.message != self.code:
            return f"{self.code} - {self.message}"
        return self.code

    def __eq__(self, other):
        if not isinstance(other, ParseError):
            return NotImplemented
        return (
            self.code == other.code
            and self.line == other.line
            and self.column == other.column
            and self.offset == other.offset
        )

    __hash__ = None  # Unhashable since we define __eq__
