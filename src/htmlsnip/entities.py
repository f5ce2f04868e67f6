"""HTML5 character reference decoding.

The truncator never rewrites references; it only needs to know what a
complete ``&...;`` span stands for so it can decide whether the reference
continues a word. Supports named references (&amp;, &eacute;) and numeric
ones (&#60;, &#x3C;).
"""

import html.entities

# Python's complete HTML5 entity list. Keys include the trailing semicolon
# where the reference requires one (e.g. "amp;", "lang;").
_HTML5_ENTITIES = html.entities.html5

NAMED_ENTITIES = {}
for key, value in _HTML5_ENTITIES.items():
    if key.endswith(";"):
        NAMED_ENTITIES[key[:-1]] = value
    else:
        NAMED_ENTITIES.setdefault(key, value)

# HTML5 numeric character reference replacements (§13.2.5.73)
NUMERIC_REPLACEMENTS = {
    0x00: "\ufffd",  # NULL
    0x80: "\u20ac",  # EURO SIGN
    0x82: "\u201a",  # SINGLE LOW-9 QUOTATION MARK
    0x83: "\u0192",  # LATIN SMALL LETTER F WITH HOOK
    0x84: "\u201e",  # DOUBLE LOW-9 QUOTATION MARK
    0x85: "\u2026",  # HORIZONTAL ELLIPSIS
    0x86: "\u2020",  # DAGGER
    0x87: "\u2021",  # DOUBLE DAGGER
    0x88: "\u02c6",  # MODIFIER LETTER CIRCUMFLEX ACCENT
    0x89: "\u2030",  # PER MILLE SIGN
    0x8a: "\u0160",  # LATIN CAPITAL LETTER S WITH CARON
    0x8b: "\u2039",  # SINGLE LEFT-POINTING ANGLE QUOTATION MARK
    0x8c: "\u0152",  # LATIN CAPITAL LIGATURE OE
    0x8e: "\u017d",  # LATIN CAPITAL LETTER Z WITH CARON
    0x91: "\u2018",  # LEFT SINGLE QUOTATION MARK
    0x92: "\u2019",  # RIGHT SINGLE QUOTATION MARK
    0x93: "\u201c",  # LEFT DOUBLE QUOTATION MARK
    0x94: "\u201d",  # RIGHT DOUBLE QUOTATION MARK
    0x95: "\u2022",  # BULLET
    0x96: "\u2013",  # EN DASH
    0x97: "\u2014",  # EM DASH
    0x98: "\u02dc",  # SMALL TILDE
    0x99: "\u2122",  # TRADE MARK SIGN
    0x9a: "\u0161",  # LATIN SMALL LETTER S WITH CARON
    0x9b: "\u203a",  # SINGLE RIGHT-POINTING ANGLE QUOTATION MARK
    0x9c: "\u0153",  # LATIN SMALL LIGATURE OE
    0x9e: "\u017e",  # LATIN SMALL LETTER Z WITH CARON
    0x9f: "\u0178",  # LATIN CAPITAL LETTER Y WITH DIAERESIS
}

_DEC_DIGITS = frozenset("0123456789")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

# Longest digit runs that can still be <= 0x10FFFF once leading zeros are gone
_MAX_HEX_DIGITS = 6
_MAX_DEC_DIGITS = 7


def decode_numeric_entity(text, is_hex=False):
    """Decode the digits of a numeric character reference like &#60; or &#x3C;.

    Args:
        text: The numeric part (without &# or ;)
        is_hex: Whether this is hexadecimal (&#x) or decimal (&#)

    Returns:
        The decoded character, or None if invalid
    """
    allowed = _HEX_DIGITS if is_hex else _DEC_DIGITS
    if not text or any(c not in allowed for c in text):
        return None
    digits = text.lstrip("0")
    if len(digits) > (_MAX_HEX_DIGITS if is_hex else _MAX_DEC_DIGITS):
        return "\ufffd"
    codepoint = int(digits or "0", 16 if is_hex else 10)

    if codepoint in NUMERIC_REPLACEMENTS:
        return NUMERIC_REPLACEMENTS[codepoint]

    # Invalid ranges per HTML5 spec
    if codepoint > 0x10FFFF:
        return "\ufffd"
    if 0xD800 <= codepoint <= 0xDFFF:
        return "\ufffd"

    return chr(codepoint)


def decode_reference(reference):
    """Decode a complete reference such as ``&amp;`` or ``&#x3C;``.

    Returns the decoded text, or None when the reference is unknown or
    malformed. Unknown references are still treated as one visible unit by
    the truncator; they just never continue a word.
    """
    if not (reference.startswith("&") and reference.endswith(";")):
        return None
    body = reference[1:-1]
    if not body:
        return None

    if body[0] == "#":
        digits = body[1:]
        is_hex = False
        if digits[:1] in ("x", "X"):
            is_hex = True
            digits = digits[1:]
        if not digits:
            return None
        return decode_numeric_entity(digits, is_hex=is_hex)

    return NAMED_ENTITIES.get(body)
