"""Data models for fretboard positions and chord shape templates.

Strings are numbered from the lowest-pitched string, so in standard tuning
string 0 is low E and string 5 is high E. Fret 0 is the open string.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class FretPosition:
    """A string and fret on the fretboard.

    Parameters
    ----------
    string : int
        String index, 0 = lowest string.
    fret : int
        Fret number, 0 = open string.
    """

    string: int
    fret: int


@dataclass(frozen=True)
class TemplateNote:
    """One fretted note of a chord shape, relative to the shape's root.

    Parameters
    ----------
    string : int
        String index the note is played on.
    fret_offset : int
        Fret distance from the root fret. May be negative.
    interval : str
        Interval label above the chord root (e.g., "P1", "M3").
    label : str
        Short display label (e.g., "R", "3", "b7").
    """

    string: int
    fret_offset: int
    interval: str
    label: str


@dataclass(frozen=True)
class ChordPatternTemplate:
    """A movable (or open) chord shape anchored on a root string.

    Parameters
    ----------
    key : str
        Catalog identifier (e.g., "major_E_string").
    name : str
        Display name.
    chord_type : str
        Chord suffix the shape voices (e.g., "m7", "sus4", "" for major).
    root_string : int
        String that carries the root at ``fret_offset`` 0.
    notes : tuple[TemplateNote, ...]
        Every fretted note of the shape.
    open_voicing_only : bool
        If True the shape is only valid with its root at ``fixed_position``.
    fixed_position : int | None
        Root fret of an open voicing.
    min_fret : int
        Lowest allowed root fret.
    max_fret : int
        Highest allowed root fret.
    """

    key: str
    name: str
    chord_type: str
    root_string: int
    notes: tuple[TemplateNote, ...]
    open_voicing_only: bool = False
    fixed_position: int | None = None
    min_fret: int = 0
    max_fret: int = 18

    @property
    def strings(self) -> tuple[int, ...]:
        return tuple(note.string for note in self.notes)


@dataclass(frozen=True)
class PatternPosition:
    """A template note placed at an absolute fret.

    Parameters
    ----------
    string : int
        String index.
    fret : int
        Absolute fret.
    interval : str
        Interval label from the template.
    label : str
        Display label from the template.
    pitch : int
        MIDI pitch sounding at this position.
    """

    string: int
    fret: int
    interval: str
    label: str
    pitch: int

    @property
    def position(self) -> FretPosition:
        return FretPosition(self.string, self.fret)


@dataclass(frozen=True)
class PatternMatch:
    """A template placed at a root fret whose notes cover a chord exactly.

    Parameters
    ----------
    template : ChordPatternTemplate
        The matched shape.
    root_fret : int
        Fret of the root on the template's root string.
    positions : tuple[PatternPosition, ...]
        Placed notes. Notes that fell off the fretboard are not included.
    """

    template: ChordPatternTemplate
    root_fret: int
    positions: tuple[PatternPosition, ...]

    @property
    def min_fret(self) -> int:
        """Lowest fret used by the shape."""
        return min(position.fret for position in self.positions)

    @property
    def max_fret(self) -> int:
        return max(position.fret for position in self.positions)

    @property
    def fret_span(self) -> int:
        """Distance between the lowest and highest fret used."""
        return self.max_fret - self.min_fret

    @property
    def pitch_classes(self) -> frozenset[int]:
        return frozenset(position.pitch % 12 for position in self.positions)
