"""Character and tag-name classification.

Pure predicates used by the scanner and the truncation driver. Everything
here is stateless and safe to share between threads.
"""

from .constants import DIGIT_CHARS, OPTIONAL_CLOSING_ELEMENTS, VOID_ELEMENTS, WHITESPACE_CHARS

_ASCII_LOWER_TABLE = str.maketrans({chr(code): chr(code + 32) for code in range(65, 91)})

_VOID_ELEMENTS = frozenset(VOID_ELEMENTS)
_OPTIONAL_CLOSING_ELEMENTS = frozenset(OPTIONAL_CLOSING_ELEMENTS)


class SmallCharSet:
    __slots__ = ("_mask",)

    def __init__(self, chars):
        mask = 0
        for c in chars:
            code = ord(c)
            if code >= 128:
                raise ValueError("SmallCharSet only supports ASCII")
            mask |= 1 << code
        self._mask = mask

    def contains(self, c):
        if len(c) != 1:
            return False
        code = ord(c)
        if code >= 128:
            return False
        return (self._mask >> code) & 1 == 1

    __contains__ = contains


WHITESPACE = SmallCharSet(WHITESPACE_CHARS)
DIGITS = SmallCharSet(DIGIT_CHARS)


def is_letter(c):
    """Return True for a single character with distinct upper and lower case forms.

    Uncased scripts (CJK, Thai, ...) are not letters, so every such character
    is a word boundary.
    """
    return len(c) == 1 and c.lower() != c.upper()


def is_digit(c):
    return DIGITS.contains(c)


def is_whitespace(c):
    return WHITESPACE.contains(c)


def ascii_lower(name):
    return name.translate(_ASCII_LOWER_TABLE)


def is_void_element(name):
    return ascii_lower(name) in _VOID_ELEMENTS


def is_optional_closing_element(name):
    return ascii_lower(name) in _OPTIONAL_CLOSING_ELEMENTS


def must_have_closing_tag(name):
    """An element needs an explicit closing tag unless it is void or optional-closing."""
    return not (is_void_element(name) or is_optional_closing_element(name))
