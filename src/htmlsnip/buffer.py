from collections import deque

from .charclass import is_whitespace


class WordBuffer:
    """Visible text that has been scanned but not yet committed to the result.

    Units are single characters or whole character references (``&amp;``),
    each counting as one visible character. ``has_word`` is set while the
    pending run holds something other than whitespace; the driver uses it to
    decide when a non-letter closes a word and forces a flush.
    """

    __slots__ = ("_units", "has_word")

    def __init__(self):
        self._units = deque()
        self.has_word = False

    def __len__(self):
        return len(self._units)

    def is_empty(self):
        return not self._units

    def has_content(self):
        """True when a pending unit is anything other than whitespace."""
        return any(not is_whitespace(unit) for unit in self._units)

    def push_back(self, unit):
        if unit:
            self._units.append(unit)

    def take(self, count):
        """Remove up to ``count`` leading units and return them joined."""
        units = self._units
        count = min(count, len(units))
        return "".join(units.popleft() for _ in range(count))

    def __repr__(self):
        return f"WordBuffer({''.join(self._units)!r}, has_word={self.has_word})"
