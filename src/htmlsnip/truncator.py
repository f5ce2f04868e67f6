"""Truncate HTML to a number of visible characters.

A single pass over the source. Opening tags are queued and only written once
visible text inside them is written (or, for void and self-closed tags, at
the end), so an element whose content was cut away entirely leaves no trace.
Every written element that needs a closing tag is remembered on a stack and
closed in reverse order at the end.

Visible characters are everything outside tags: text, character references
(one unit each, never split) and comment bodies (counted, by policy).
"""

from collections import deque

from .buffer import WordBuffer
from .charclass import ascii_lower, is_letter, is_whitespace, must_have_closing_tag
from .constants import COMMENT_END, COMMENT_START
from .entities import decode_reference
from .options import resolve_options
from .scanner import scan_close_tag, scan_comment, scan_entity, scan_open_tag
from .tokens import ParseError


class MarkupMismatchError(ValueError):
    """A closing tag does not match any element that is still open.

    ``error`` is a ``ParseError`` locating the ``<`` of the closing tag.
    """

    def __init__(self, tag, error):
        self.tag = tag
        self.error = error
        super().__init__(error.message)

    @property
    def offset(self):
        return self.error.offset


class Truncator:
    """State for one truncation run.

    Build one per call and call ``run()`` once. Nothing is shared between
    instances apart from the immutable vocabulary tables.
    """

    __slots__ = (
        "chars",
        "clipped",
        "close_stack",
        "current",
        "debug_enabled",
        "finished",
        "last_comment_end",
        "last_tag_end",
        "length",
        "open_queue",
        "opts",
        "pos",
        "result",
        "source",
        "suffix_added",
        "word",
    )

    def __init__(self, source, length, options=None, *, debug=False, **overrides):
        if source is None:
            source = ""
        if not isinstance(source, str):
            raise TypeError(f"source must be a string, not {type(source).__name__}")
        if isinstance(length, bool) or not isinstance(length, int):
            raise TypeError(f"length must be an integer, not {type(length).__name__}")
        if length < 0:
            raise ValueError(f"length must be non-negative, got {length}")

        self.source = source
        self.length = length
        self.opts = resolve_options(options, **overrides)
        self.debug_enabled = bool(debug)

        # Code points; a Python str already iterates that way.
        self.chars = list(source)
        # A scan starting past these can never find its terminator.
        self.last_tag_end = source.rfind(">")
        self.last_comment_end = source.rfind("-->")
        self.pos = 0
        self.current = 0
        self.word = WordBuffer()
        self.open_queue = deque()  # scanned, not yet written
        self.close_stack = []  # closing tags owed for written elements
        self.result = []
        self.suffix_added = False
        self.clipped = False  # a comment body was cut short
        self.finished = False

    def debug(self, message, indent=4):
        if self.debug_enabled:
            print(f"{' ' * indent}{message}")

    def run(self):
        if self.finished:
            raise RuntimeError("Truncator.run() can only be called once")
        self.finished = True

        self.debug(f"truncate: {len(self.chars)} chars to {self.length} visible", indent=0)
        chars = self.chars
        total = len(chars)

        while self.current < self.length and self.pos < total:
            c = chars[self.pos]
            self.pos += 1

            if c == "<":
                if not self._flush_word():
                    break
                if not self._state_tag_open():
                    break
            elif c == "&":
                if not self._state_character_reference():
                    break
            elif not self._push_text(c, letter=is_letter(c), space=is_whitespace(c)):
                break

        self.debug(f"scan stopped at {self.pos}/{total}, {self.current} visible written")
        return self._finish()

    # Scanning states

    def _state_tag_open(self):
        """Handle the character after ``<``. Returns False to stop scanning."""
        chars = self.chars
        start = self.pos - 1
        nxt = chars[self.pos] if self.pos < len(chars) else None

        if nxt == "!":
            comment = self._scan_comment(self.pos)
            if comment is None:
                return self._push_literal("<")
            body, end = comment
            return self._write_comment(body, end)

        if nxt == "/":
            return self._state_close_tag(start)

        scanned = self._scan_tag(scan_open_tag, self.pos)
        if scanned is None:
            return self._push_literal("<")
        tag, self.pos = scanned
        self.open_queue.append(tag)
        if self.debug_enabled:
            self.debug(f"queued {tag!r}")
        return True

    def _state_close_tag(self, offset):
        # Everything still queued is an ancestor of whatever this closes.
        self._open_tags()

        scanned = self._scan_tag(scan_close_tag, self.pos + 1)
        if scanned is None:
            return self._push_literal("<")
        name, self.pos = scanned

        if must_have_closing_tag(name):
            wanted = ascii_lower(f"</{name}>")
            stack = self.close_stack
            while stack:
                if ascii_lower(stack.pop()) == wanted:
                    break
            else:
                self._raise_mismatch(name, offset)

        if self.current >= self.length and self.opts.enclose_suffix_in_tags and self._is_truncated():
            self.result.append(self._take_suffix())

        self.result.append(f"</{name}>")
        self.debug(f"closed </{name}>")
        return True

    def _state_character_reference(self):
        scanned = scan_entity(self.chars, self.pos)
        if scanned is None:
            return self._push_literal("&")
        reference, self.pos = scanned

        decoded = decode_reference(reference)
        letter = decoded is not None and is_letter(decoded)
        space = decoded is not None and is_whitespace(decoded)
        return self._push_text(reference, letter=letter, space=space)

    def _scan_tag(self, scanner, pos):
        if pos > self.last_tag_end:
            return None
        return scanner(self.chars, pos)

    def _scan_comment(self, pos):
        # pos is at "!"; the body starts three characters later
        if pos + 3 > self.last_comment_end:
            return None
        return scan_comment(self.chars, pos)

    # Word buffer

    def _push_literal(self, c):
        return self._push_text(c, letter=False, space=False)

    def _push_text(self, unit, letter, space):
        """Add one visible unit to the pending word. Returns False to stop scanning."""
        word = self.word
        flushed = True
        if not letter and word.has_word:
            word.has_word = False
            flushed = self._flush_word()
        if not space:
            word.has_word = True
        word.push_back(unit)
        return flushed

    def _flush_word(self):
        """Move as much of the pending word to the result as the budget allows.

        Returns False when nothing could be written: the budget is spent, or
        (with ``break_words`` off) the whole word does not fit.
        """
        word = self.word
        if word.is_empty():
            return True

        remaining = self.length - self.current
        if self.opts.break_words:
            addable = max(min(remaining, len(word)), 0)
            if addable == 0:
                return False
        elif len(word) <= remaining:
            addable = len(word)
        else:
            self.debug(f"word of {len(word)} does not fit in {remaining}")
            return False

        # Text is about to be shown: every queued tag it sits in must be written first.
        self._open_tags()
        text = word.take(addable)
        self.result.append(text)
        self.current += addable
        if self.debug_enabled:
            self.debug(f"flushed {text!r}, {self.current}/{self.length}")
        return True

    def _write_comment(self, body, end):
        remaining = self.length - self.current
        if body and (remaining <= 0 or (not self.opts.break_words and len(body) > remaining)):
            self.debug(f"comment of {len(body)} does not fit in {remaining}")
            return False

        shown = body[:remaining]
        if len(shown) < len(body):
            self.clipped = True
        self._open_tags()
        self.result.append(f"{COMMENT_START}{shown}{COMMENT_END}")
        self.current += len(shown)
        self.pos = end
        return True

    # Open tags

    def _open_tags(self, only_void=False):
        """Write queued tags in document order.

        With ``only_void`` set, stop at the first tag that needs content
        (neither void nor self-closed); it and everything after it stay queued.
        """
        queue = self.open_queue
        while queue:
            tag = queue[0]
            if only_void and not tag.is_standalone:
                break
            queue.popleft()
            self.result.append(tag.as_string())
            if tag.needs_closing:
                self.close_stack.append(tag.closing())
            if self.debug_enabled:
                self.debug(f"wrote {tag!r}")

    # Finalisation

    def _finish(self):
        self._open_tags(only_void=True)
        self._flush_word()
        if self.open_queue:
            self.debug(f"dropped {len(self.open_queue)} tag(s) with no visible content")

        suffix = ""
        if self.opts.suffix is not None and self._is_truncated():
            suffix = self._take_suffix()
        body = "".join(self.result)
        closing = "".join(reversed(self.close_stack))

        if self.opts.enclose_suffix_in_tags:
            return body + suffix + closing
        return body + closing + suffix

    def _is_truncated(self):
        """True when some visible content of the source was not written.

        Whitespace left over in the word buffer or between trailing tags is
        not content.
        """
        return self.clipped or self.word.has_content() or self._has_visible_remainder()

    def _has_visible_remainder(self):
        chars = self.chars
        total = len(chars)
        pos = self.pos
        while pos < total:
            c = chars[pos]
            pos += 1
            if c != "<":
                if is_whitespace(c):
                    continue
                return True
            nxt = chars[pos] if pos < total else None
            if nxt == "!":
                scanned = self._scan_comment(pos)
                if scanned is None or scanned[0]:
                    return True
            elif nxt == "/":
                scanned = self._scan_tag(scan_close_tag, pos + 1)
            else:
                scanned = self._scan_tag(scan_open_tag, pos)
            if scanned is None:
                return True
            pos = scanned[1]
        return False

    # Suffix

    def _take_suffix(self):
        """Return the suffix text the first time it is asked for, then ""."""
        if self.suffix_added or self.opts.suffix is None:
            return ""
        self.suffix_added = True
        suffix = self.opts.resolve_suffix()
        self.debug(f"suffix {suffix!r} added")
        return suffix

    # Errors

    def _raise_mismatch(self, name, offset):
        error = ParseError.at_offset(
            "unexpected-closing-tag",
            self.source,
            offset,
            message=f"Unexpected closing tag '{name}' on offset {offset}",
        )
        raise MarkupMismatchError(name, error)


def truncate(source, length, options=None, *, debug=False, **overrides):
    """Return ``source`` cut to ``length`` visible characters, with balanced markup.

    Args:
        source: HTML text.
        length: Maximum number of visible characters (everything but markup;
            a character reference counts as one).
        options: ``TruncateOptions``, or a bare string used as the suffix.
        debug: Print a trace of the scan to stdout.
        **overrides: ``break_words``, ``suffix`` or ``enclose_suffix_in_tags``,
            applied on top of ``options``.

    Raises:
        MarkupMismatchError: a closing tag matches no open element.
    """
    return Truncator(source, length, options, debug=debug, **overrides).run()


html_substring = truncate
