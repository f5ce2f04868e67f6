"""HTML Element Constants

Static vocabulary consulted while truncating. Elements are kept in lists to
maintain a stable iteration order; the predicates in ``htmlsnip.charclass``
build frozensets from them for lookups.

Usage:
    from htmlsnip.constants import VOID_ELEMENTS, OPTIONAL_CLOSING_ELEMENTS

References:
    - https://html.spec.whatwg.org/multipage/syntax.html#void-elements
    - https://html.spec.whatwg.org/multipage/syntax.html#optional-tags
"""

# Elements that never have content or a closing tag
VOID_ELEMENTS = [
    "area",
    "base",
    "br",
    "col",
    "embed",
    "hr",
    "img",
    "input",
    "link",
    "menuitem",
    "meta",
    "param",
    "source",
    "track",
    "wbr",
]

# Elements whose closing tag may be omitted. They are written when content
# needs them but never get a synthesized closing tag.
OPTIONAL_CLOSING_ELEMENTS = [
    "li",
]

# Characters treated as whitespace when deciding word boundaries
WHITESPACE_CHARS = " \t\r\n"

DIGIT_CHARS = "0123456789"

COMMENT_START = "<!--"
COMMENT_END = "-->"
