"""Exception types raised by fretboard-theory.

Every error derives from ``TheoryError``, which is itself a ``ValueError``,
so callers that only catch ``ValueError`` keep working.
"""


class TheoryError(ValueError):
    """Base class for all fretboard-theory errors."""


class ParseError(TheoryError):
    """Malformed note, chord, interval, step or numeral text."""


class UnknownChordType(ParseError):
    """A chord quality alias that is not in the alias table."""


class PitchOutOfRange(TheoryError):
    """A pitch outside 0-127, or a fret outside the instrument's range."""


class NoDiatonicMatch(TheoryError):
    """No chord quality matched a scale-degree chord, even after sus retries."""


class CatalogError(TheoryError):
    """A malformed entry in one of the static scale or template catalogs."""
