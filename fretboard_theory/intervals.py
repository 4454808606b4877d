"""Interval algebra and the closed chord-quality tables.

This module holds the static vocabularies everything else is built on:
interval labels and their semitone values, scale step tokens, the
``ChordQuality`` enum with its interval formulas, and the alias table that
maps the many ways of writing a quality onto a single enum member.

Examples
--------
>>> interval_to_semitones("m7")
10
>>> resolve_quality_alias("m7b5")
<ChordQuality.HALF_DIMINISHED_SEVENTH: 'Half Diminished Seventh'>
>>> quality_intervals(ChordQuality.MAJOR_TRIAD)
['P1', 'M3', 'P5']
"""

from __future__ import annotations

import re
from enum import Enum

from fretboard_theory.errors import CatalogError, ParseError, UnknownChordType

# Interval label to semitones from the root, up to two octaves
INTERVAL_SEMITONES: dict[str, int] = {
    "P1": 0,
    "d2": 0,
    "m2": 1,
    "A1": 1,
    "M2": 2,
    "d3": 2,
    "m3": 3,
    "A2": 3,
    "M3": 4,
    "d4": 4,
    "P4": 5,
    "A3": 5,
    "d5": 6,
    "A4": 6,
    "P5": 7,
    "d6": 7,
    "m6": 8,
    "A5": 8,
    "M6": 9,
    "d7": 9,
    "m7": 10,
    "A6": 10,
    "M7": 11,
    "d8": 11,
    "P8": 12,
    "A7": 12,
    "d9": 12,
    "m9": 13,
    "A8": 13,
    "M9": 14,
    "d10": 14,
    "m10": 15,
    "A9": 15,
    "M10": 16,
    "d11": 16,
    "P11": 17,
    "A10": 17,
    "d12": 18,
    "A11": 18,
    "P12": 19,
    "d13": 19,
    "m13": 20,
    "A12": 20,
    "M13": 21,
    "d14": 21,
    "m14": 22,
    "A13": 22,
    "M14": 23,
    "d15": 23,
    "P15": 24,
    "A14": 24,
}

# Scale step tokens: half, whole, augmented (three semitones), and major third
STEP_SEMITONES: dict[str, int] = {
    "H": 1,
    "W": 2,
    "A": 3,
    "P": 4,
}

_INTERVAL_RE = re.compile(r"^[PMmAd](\d+)$")


def interval_to_semitones(interval: str) -> int:
    """Convert an interval label to its distance in semitones.

    Parameters
    ----------
    interval : str
        An interval label such as "P1", "m3" or "A5".

    Returns
    -------
    int
        Semitones above the root.

    Raises
    ------
    ParseError
        If the label is not in the interval vocabulary.

    Examples
    --------
    >>> interval_to_semitones("P5")
    7
    >>> interval_to_semitones("M13")
    21
    """
    if interval in INTERVAL_SEMITONES:
        return INTERVAL_SEMITONES[interval]
    msg = f"Unknown interval: {interval}"
    raise ParseError(msg)


def interval_degree(interval: str) -> int:
    """Return the scale degree number of an interval label ("m7" -> 7)."""
    match = _INTERVAL_RE.match(interval)
    if match is None:
        msg = f"Unknown interval: {interval}"
        raise ParseError(msg)
    return int(match.group(1))


def step_to_semitones(step: str) -> int:
    """Convert a scale step token (H, W, A, P) to semitones.

    Raises
    ------
    ParseError
        If the token is not a known step.
    """
    if step in STEP_SEMITONES:
        return STEP_SEMITONES[step]
    msg = f"Unknown scale step: {step!r}"
    raise ParseError(msg)


class ChordQuality(Enum):
    """Canonical chord qualities. The value is the display name."""

    MAJOR_TRIAD = "Major Triad"
    MINOR_TRIAD = "Minor Triad"
    DIMINISHED_TRIAD = "Diminished Triad"
    AUGMENTED_TRIAD = "Augmented Triad"
    POWER_CHORD = "Power Chord"
    DOMINANT_SEVENTH = "Dominant Seventh"
    MINOR_SEVENTH = "Minor Seventh"
    MINOR_MAJOR_SEVENTH = "Minor Major Seventh"
    MAJOR_SEVENTH = "Major Seventh"
    AUGMENTED_MAJOR_SEVENTH = "Augmented Major Seventh"
    AUGMENTED_SEVENTH = "Augmented Seventh"
    HALF_DIMINISHED_SEVENTH = "Half Diminished Seventh"
    DIMINISHED_SEVENTH = "Diminished Seventh"
    DIMINISHED_SEVENTH_FLAT_FIVE = "Diminished Seventh Flat Five"
    MAJOR_NINTH = "Major Ninth"
    MINOR_NINTH = "Minor Ninth"
    DOMINANT_NINTH = "Dominant Ninth"
    DOMINANT_MINOR_NINTH = "Dominant Minor Ninth"
    MINOR_MAJOR_NINTH = "Minor Major Ninth"
    AUGMENTED_MAJOR_NINTH = "Augmented Major Ninth"
    AUGMENTED_DOMINANT_NINTH = "Augmented Dominant Ninth"
    HALF_DIMINISHED_NINTH = "Half Diminished Ninth"
    HALF_DIMINISHED_MINOR_NINTH = "Half Diminished Minor Ninth"
    DIMINISHED_NINTH = "Diminished Ninth"
    DIMINISHED_MINOR_NINTH = "Diminished Minor Ninth"
    ELEVENTH = "Eleventh"
    MINOR_ELEVENTH = "Minor Eleventh"
    MAJOR_ELEVENTH = "Major Eleventh"
    MINOR_MAJOR_ELEVENTH = "Minor Major Eleventh"
    AUGMENTED_MAJOR_ELEVENTH = "Augmented Major Eleventh"
    AUGMENTED_ELEVENTH = "Augmented Eleventh"
    HALF_DIMINISHED_ELEVENTH = "Half Diminished Eleventh"
    DIMINISHED_ELEVENTH = "Diminished Eleventh"
    MAJOR_THIRTEENTH = "Major Thirteenth"
    MINOR_THIRTEENTH = "Minor Thirteenth"
    DOMINANT_THIRTEENTH = "Dominant Thirteenth"
    MINOR_MAJOR_THIRTEENTH = "Minor Major Thirteenth"
    AUGMENTED_MAJOR_THIRTEENTH = "Augmented Major Thirteenth"
    AUGMENTED_THIRTEENTH = "Augmented Thirteenth"
    HALF_DIMINISHED_THIRTEENTH = "Half Diminished Thirteenth"
    DIMINISHED_THIRTEENTH = "Diminished Thirteenth"
    DIMINISHED_MINOR_THIRTEENTH = "Diminished Minor Thirteenth"
    MINOR_SIXTH = "Minor Sixth"
    MAJOR_SIXTH = "Major Sixth"


_Q = ChordQuality

# Ordered interval formula for every quality
QUALITY_INTERVALS: dict[ChordQuality, tuple[str, ...]] = {
    # Triads
    _Q.MAJOR_TRIAD: ("P1", "M3", "P5"),
    _Q.MINOR_TRIAD: ("P1", "m3", "P5"),
    _Q.DIMINISHED_TRIAD: ("P1", "m3", "d5"),
    _Q.AUGMENTED_TRIAD: ("P1", "M3", "A5"),
    _Q.POWER_CHORD: ("P1", "P5"),
    # Sevenths
    _Q.DOMINANT_SEVENTH: ("P1", "M3", "P5", "m7"),
    _Q.MINOR_SEVENTH: ("P1", "m3", "P5", "m7"),
    _Q.MINOR_MAJOR_SEVENTH: ("P1", "m3", "P5", "M7"),
    _Q.MAJOR_SEVENTH: ("P1", "M3", "P5", "M7"),
    _Q.AUGMENTED_MAJOR_SEVENTH: ("P1", "M3", "A5", "M7"),
    _Q.AUGMENTED_SEVENTH: ("P1", "M3", "A5", "m7"),
    _Q.HALF_DIMINISHED_SEVENTH: ("P1", "m3", "d5", "m7"),
    _Q.DIMINISHED_SEVENTH: ("P1", "m3", "d5", "d7"),
    _Q.DIMINISHED_SEVENTH_FLAT_FIVE: ("P1", "M3", "d5", "m7"),
    # Ninths
    _Q.MAJOR_NINTH: ("P1", "M3", "P5", "M7", "M9"),
    _Q.MINOR_NINTH: ("P1", "m3", "P5", "m7", "M9"),
    _Q.DOMINANT_NINTH: ("P1", "M3", "P5", "m7", "M9"),
    _Q.DOMINANT_MINOR_NINTH: ("P1", "M3", "P5", "m7", "m9"),
    _Q.MINOR_MAJOR_NINTH: ("P1", "m3", "P5", "M7", "M9"),
    _Q.AUGMENTED_MAJOR_NINTH: ("P1", "M3", "A5", "M7", "M9"),
    _Q.AUGMENTED_DOMINANT_NINTH: ("P1", "M3", "A5", "m7", "M9"),
    _Q.HALF_DIMINISHED_NINTH: ("P1", "m3", "d5", "m7", "M9"),
    _Q.HALF_DIMINISHED_MINOR_NINTH: ("P1", "m3", "d5", "m7", "m9"),
    _Q.DIMINISHED_NINTH: ("P1", "m3", "d5", "d7", "M9"),
    _Q.DIMINISHED_MINOR_NINTH: ("P1", "m3", "d5", "d7", "m9"),
    # Elevenths
    _Q.ELEVENTH: ("P1", "M3", "P5", "m7", "M9", "P11"),
    _Q.MINOR_ELEVENTH: ("P1", "m3", "P5", "m7", "M9", "P11"),
    _Q.MAJOR_ELEVENTH: ("P1", "M3", "P5", "M7", "M9", "P11"),
    _Q.MINOR_MAJOR_ELEVENTH: ("P1", "m3", "P5", "M7", "M9", "P11"),
    _Q.AUGMENTED_MAJOR_ELEVENTH: ("P1", "M3", "A5", "M7", "M9", "P11"),
    _Q.AUGMENTED_ELEVENTH: ("P1", "M3", "A5", "m7", "M9", "P11"),
    _Q.HALF_DIMINISHED_ELEVENTH: ("P1", "m3", "d5", "m7", "M9", "P11"),
    _Q.DIMINISHED_ELEVENTH: ("P1", "m3", "d5", "d7", "M9", "P11"),
    # Thirteenths
    _Q.MAJOR_THIRTEENTH: ("P1", "M3", "P5", "M7", "M9", "P11", "M13"),
    _Q.MINOR_THIRTEENTH: ("P1", "m3", "P5", "m7", "M9", "P11", "M13"),
    _Q.DOMINANT_THIRTEENTH: ("P1", "M3", "P5", "m7", "M9", "P11", "M13"),
    _Q.MINOR_MAJOR_THIRTEENTH: ("P1", "m3", "P5", "M7", "M9", "P11", "M13"),
    _Q.AUGMENTED_MAJOR_THIRTEENTH: ("P1", "M3", "A5", "M7", "M9", "P11", "M13"),
    _Q.AUGMENTED_THIRTEENTH: ("P1", "M3", "A5", "m7", "M9", "P11", "M13"),
    _Q.HALF_DIMINISHED_THIRTEENTH: ("P1", "m3", "d5", "m7", "M9", "P11", "M13"),
    _Q.DIMINISHED_THIRTEENTH: ("P1", "m3", "d5", "d7", "M9", "P11", "M13"),
    _Q.DIMINISHED_MINOR_THIRTEENTH: ("P1", "m3", "d5", "d7", "m9", "P11", "M13"),
    # Sixths
    _Q.MINOR_SIXTH: ("P1", "m3", "P5", "M6"),
    _Q.MAJOR_SIXTH: ("P1", "M3", "P5", "M6"),
}

# Alias surface for each quality. Keys are written after glyph
# normalization (Δ -> D, ° -> o, ♭ -> b, ♯ -> #, U+2212 -> "-").
_QUALITY_ALIAS_LISTS: dict[ChordQuality, tuple[str, ...]] = {
    _Q.MAJOR_TRIAD: ("", "maj", "M", "D"),
    _Q.MINOR_TRIAD: ("min", "m", "-"),
    _Q.DIMINISHED_TRIAD: ("dim", "o", "mb5", "mo5"),
    _Q.AUGMENTED_TRIAD: ("aug", "+", "M#5", "M+5"),
    _Q.POWER_CHORD: ("5",),
    _Q.DOMINANT_SEVENTH: ("7", "Mm7", "majb7", "majm7"),
    _Q.MINOR_SEVENTH: ("m7", "min7", "-7"),
    _Q.MINOR_MAJOR_SEVENTH: ("mM7", "m#7", "-M7", "-D7", "minmaj7"),
    _Q.MAJOR_SEVENTH: ("M7", "Ma7", "maj7", "D7"),
    _Q.AUGMENTED_MAJOR_SEVENTH: ("+M7", "+D", "augmaj7", "M7#5", "M7+5", "D#5", "D+5"),
    _Q.AUGMENTED_SEVENTH: ("+7", "aug7", "7#5", "7+5"),
    _Q.HALF_DIMINISHED_SEVENTH: ("ø", "ø7", "min7dim5", "m7b5", "m7o5", "-7b5", "-7o5"),
    _Q.DIMINISHED_SEVENTH: ("o7", "dim7"),
    _Q.DIMINISHED_SEVENTH_FLAT_FIVE: ("7b5", "7dim5"),
    _Q.MAJOR_NINTH: ("M9", "D9", "maj9"),
    _Q.MINOR_NINTH: ("m9", "min9", "-9"),
    _Q.DOMINANT_NINTH: ("9",),
    _Q.DOMINANT_MINOR_NINTH: ("7b9",),
    _Q.MINOR_MAJOR_NINTH: ("mM9", "-M9", "minmaj9"),
    _Q.AUGMENTED_MAJOR_NINTH: ("+M9", "augmaj9"),
    _Q.AUGMENTED_DOMINANT_NINTH: ("+9", "9#5", "aug9"),
    _Q.HALF_DIMINISHED_NINTH: ("ø9",),
    _Q.HALF_DIMINISHED_MINOR_NINTH: ("øb9",),
    _Q.DIMINISHED_NINTH: ("o9", "dim9"),
    _Q.DIMINISHED_MINOR_NINTH: ("ob9", "dimb9"),
    _Q.ELEVENTH: ("11",),
    _Q.MINOR_ELEVENTH: ("m11", "min11", "-11"),
    _Q.MAJOR_ELEVENTH: ("M11", "maj11", "D11"),
    _Q.MINOR_MAJOR_ELEVENTH: ("mM11", "-M11", "minmaj11"),
    _Q.AUGMENTED_MAJOR_ELEVENTH: ("+M11", "augmaj11"),
    _Q.AUGMENTED_ELEVENTH: ("+11", "11#5", "aug11"),
    _Q.HALF_DIMINISHED_ELEVENTH: ("ø11",),
    _Q.DIMINISHED_ELEVENTH: ("o11", "dim11"),
    _Q.MAJOR_THIRTEENTH: ("M13", "maj13", "D13"),
    _Q.MINOR_THIRTEENTH: ("m13", "min13", "-13"),
    _Q.DOMINANT_THIRTEENTH: ("13",),
    _Q.MINOR_MAJOR_THIRTEENTH: ("mM13", "-M13", "minmaj13"),
    _Q.AUGMENTED_MAJOR_THIRTEENTH: ("+M13", "augmaj13"),
    _Q.AUGMENTED_THIRTEENTH: ("+13", "13#5", "aug13"),
    _Q.HALF_DIMINISHED_THIRTEENTH: ("ø13",),
    _Q.DIMINISHED_THIRTEENTH: ("o13", "dim13"),
    _Q.DIMINISHED_MINOR_THIRTEENTH: ("ob13", "dimb13"),
    _Q.MINOR_SIXTH: ("min6", "m6"),
    _Q.MAJOR_SIXTH: ("M6", "maj6", "6"),
}


def _build_alias_table(
    aliases: dict[ChordQuality, tuple[str, ...]],
    formulas: dict[ChordQuality, tuple[str, ...]],
) -> dict[str, ChordQuality]:
    """Flatten the per-quality alias lists, checking both tables are closed."""
    table: dict[str, ChordQuality] = {}
    for quality in ChordQuality:
        if quality not in formulas:
            msg = f"Chord quality has no interval formula: {quality.value}"
            raise CatalogError(msg)
        for interval in formulas[quality]:
            if interval not in INTERVAL_SEMITONES:
                msg = f"Unknown interval {interval!r} in formula for {quality.value}"
                raise CatalogError(msg)
        for alias in aliases.get(quality, ()):
            if alias in table and table[alias] is not quality:
                msg = f"Alias {alias!r} maps to both {table[alias].value} and {quality.value}"
                raise CatalogError(msg)
            table[alias] = quality
    return table


QUALITY_ALIASES: dict[str, ChordQuality] = _build_alias_table(_QUALITY_ALIAS_LISTS, QUALITY_INTERVALS)


def resolve_quality_alias(alias: str) -> ChordQuality:
    """Map a (glyph-normalized) quality alias to its canonical quality.

    Parameters
    ----------
    alias : str
        The quality text left after the root, bass and modifiers have been
        removed (e.g., "m7", "ø", "").

    Returns
    -------
    ChordQuality
        The canonical quality.

    Raises
    ------
    UnknownChordType
        If the alias is not in the alias table.

    Examples
    --------
    >>> resolve_quality_alias("")
    <ChordQuality.MAJOR_TRIAD: 'Major Triad'>
    >>> resolve_quality_alias("-7b5") is resolve_quality_alias("ø")
    True
    """
    if alias in QUALITY_ALIASES:
        return QUALITY_ALIASES[alias]
    msg = f"Unknown chord type: {alias!r}"
    raise UnknownChordType(msg)


def quality_intervals(quality: ChordQuality) -> list[str]:
    """Return a fresh, mutable copy of a quality's interval formula."""
    return list(QUALITY_INTERVALS[quality])


def aliases_for(quality: ChordQuality) -> tuple[str, ...]:
    """Return every alias that resolves to ``quality``."""
    return tuple(alias for alias, q in QUALITY_ALIASES.items() if q is quality)
