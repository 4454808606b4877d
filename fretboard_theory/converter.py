"""Chord notation interop with pychord.

Resolved chords can be written in pychord notation and pychord chords can
be read back into resolved chords, for every quality both libraries share.
"""

from __future__ import annotations

import re

from fretboard_theory.chords import ResolvedChord, resolve_chord_parts
from fretboard_theory.intervals import ChordQuality

# Mapping from chord qualities to pychord quality names
QUALITY_TO_PYCHORD: dict[ChordQuality, str] = {
    ChordQuality.MAJOR_TRIAD: "",
    ChordQuality.MINOR_TRIAD: "m",
    ChordQuality.DIMINISHED_TRIAD: "dim",
    ChordQuality.AUGMENTED_TRIAD: "aug",
    ChordQuality.POWER_CHORD: "5",
    ChordQuality.DOMINANT_SEVENTH: "7",
    ChordQuality.MINOR_SEVENTH: "m7",
    ChordQuality.MINOR_MAJOR_SEVENTH: "mM7",
    ChordQuality.MAJOR_SEVENTH: "M7",
    ChordQuality.AUGMENTED_SEVENTH: "7+5",
    ChordQuality.HALF_DIMINISHED_SEVENTH: "m7b5",
    ChordQuality.DIMINISHED_SEVENTH: "dim7",
    ChordQuality.DIMINISHED_SEVENTH_FLAT_FIVE: "7b5",
    ChordQuality.MAJOR_NINTH: "M9",
    ChordQuality.MINOR_NINTH: "m9",
    ChordQuality.DOMINANT_NINTH: "9",
    ChordQuality.DOMINANT_MINOR_NINTH: "7b9",
    ChordQuality.MINOR_SIXTH: "m6",
    ChordQuality.MAJOR_SIXTH: "6",
}

# Reverse mapping, plus pychord's alternative spellings
PYCHORD_TO_QUALITY: dict[str, ChordQuality] = {
    **{name: quality for quality, name in QUALITY_TO_PYCHORD.items()},
    "maj": ChordQuality.MAJOR_TRIAD,
    "min": ChordQuality.MINOR_TRIAD,
    "maj7": ChordQuality.MAJOR_SEVENTH,
    "mmaj7": ChordQuality.MINOR_MAJOR_SEVENTH,
    "m7-5": ChordQuality.HALF_DIMINISHED_SEVENTH,
    "7#5": ChordQuality.AUGMENTED_SEVENTH,
    "aug7": ChordQuality.AUGMENTED_SEVENTH,
    "7-5": ChordQuality.DIMINISHED_SEVENTH_FLAT_FIVE,
    "maj9": ChordQuality.MAJOR_NINTH,
    "7-9": ChordQuality.DOMINANT_MINOR_NINTH,
}

# pychord reads one sharp or flat after the root letter
_PYCHORD_NOTE_RE = re.compile(r"^[A-G][#b]?$")


def _pychord_note(note: str) -> str:
    if not _PYCHORD_NOTE_RE.match(note):
        msg = f"Note cannot be written in pychord notation: {note}"
        raise ValueError(msg)
    return note


def to_pychord_name(chord: ResolvedChord) -> str:
    """Write a resolved chord in pychord notation.

    Parameters
    ----------
    chord : ResolvedChord
        The chord to convert. Modifiers (sus, add, no, altered tones) are
        not representable and are rejected.

    Returns
    -------
    str
        Chord in pychord notation (e.g., "F#m7b5", "C/E").

    Raises
    ------
    ValueError
        If the quality, a modifier, or a double accidental has no pychord
        equivalent.

    Examples
    --------
    >>> from fretboard_theory.chords import resolve_chord
    >>> to_pychord_name(resolve_chord("F#ø"))
    'F#m7b5'
    >>> to_pychord_name(resolve_chord("Cmaj7/E"))
    'CM7/E'
    """
    if chord.token.has_modifiers:
        msg = f"Chord modifiers have no pychord equivalent: {chord.name}"
        raise ValueError(msg)
    if chord.quality not in QUALITY_TO_PYCHORD:
        msg = f"No pychord quality for {chord.quality.value}"
        raise ValueError(msg)
    name = f"{_pychord_note(chord.root)}{QUALITY_TO_PYCHORD[chord.quality]}"
    if chord.bass:
        name += f"/{_pychord_note(chord.bass)}"
    return name


def from_pychord(chord_str: str) -> ResolvedChord:
    """Parse pychord notation into a resolved chord.

    Examples
    --------
    >>> list(from_pychord("Gm7").note_names)
    ['G', 'A#', 'D', 'F']
    """
    from pychord import Chord as PyChord

    pc = PyChord(chord_str)
    quality_name = str(pc.quality)
    if quality_name not in PYCHORD_TO_QUALITY:
        msg = f"Unknown pychord quality: {quality_name}"
        raise ValueError(msg)
    quality = PYCHORD_TO_QUALITY[quality_name]
    return resolve_chord_parts(pc.root, QUALITY_TO_PYCHORD[quality], bass=pc.on or None)


def pychord_components(chord: ResolvedChord) -> list[str]:
    """Note names pychord gives for the same chord, for cross-checking."""
    from pychord import Chord as PyChord

    return list(PyChord(to_pychord_name(chord)).components())
