"""Markup recognisers used by the truncation driver.

Every function takes the source as a sequence of characters plus the
position to start from, and returns ``(value, end)`` where ``end`` is the
position right after the recognised construct, or None when the input
there is not that construct. None always means "treat the leading
character as literal text"; the scanners never raise.
"""

from .charclass import is_digit, is_letter, is_whitespace
from .tokens import OpenTag

_ENTITY_STOP = frozenset("<&")


def scan_open_tag(chars, pos):
    """Scan ``name attrs>`` starting right after ``<``.

    The name is a maximal run of letters and digits. Whatever follows, up to
    the first ``>``, is kept verbatim as the tag's attributes; there is no
    attribute grammar, so a ``>`` inside a quoted value ends the tag.
    """
    length = len(chars)
    start = pos
    while pos < length and (is_letter(chars[pos]) or is_digit(chars[pos])):
        pos += 1
    if pos == start:
        return None

    name = "".join(chars[start:pos])
    attrs_start = pos
    while pos < length and chars[pos] != ">":
        pos += 1
    if pos >= length:
        return None

    return OpenTag(name, "".join(chars[attrs_start:pos])), pos + 1


def scan_close_tag(chars, pos):
    """Scan ``name>`` starting right after ``</``; the name is everything up to ``>``."""
    length = len(chars)
    start = pos
    while pos < length and chars[pos] != ">":
        pos += 1
    if pos >= length:
        return None
    return "".join(chars[start:pos]).strip(), pos + 1


def scan_comment(chars, pos):
    """Scan ``!--body-->`` starting right after ``<`` and return the body."""
    if "".join(chars[pos : pos + 3]) != "!--":
        return None
    length = len(chars)
    start = pos + 3
    end = start
    while end + 2 < length:
        if chars[end] == "-" and chars[end + 1] == "-" and chars[end + 2] == ">":
            return "".join(chars[start:end]), end + 3
        end += 1
    return None


def scan_entity(chars, pos):
    """Scan a character reference body starting right after ``&``.

    Returns the whole reference including ``&`` and ``;``. Whitespace, ``<``
    or ``&`` before the ``;``, an empty body, or running out of input mean
    the ``&`` is just an ampersand.
    """
    length = len(chars)
    start = pos
    while pos < length:
        c = chars[pos]
        if c == ";":
            if pos == start:
                return None
            return "&" + "".join(chars[start : pos + 1]), pos + 1
        if is_whitespace(c) or c in _ENTITY_STOP:
            return None
        pos += 1
    return None
