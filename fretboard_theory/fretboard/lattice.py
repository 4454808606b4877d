"""The string/fret pitch lattice.

The lattice is never stored: ``pitch_at`` computes one cell and
``build_lattice`` computes the whole grid as a numpy array on demand.

Examples
--------
>>> pitch_at(STANDARD_TUNING, 0, 5)
45
>>> build_lattice(STANDARD_TUNING, 3)[1].tolist()
[45, 46, 47, 48]
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from fretboard_theory.config import DEFAULT_FRET_COUNT, MAX_PITCH, STANDARD_TUNING
from fretboard_theory.errors import PitchOutOfRange
from fretboard_theory.fretboard.models import FretPosition
from fretboard_theory.notation import chromatic_note_name, parse_note


def pitch_at(tuning: Sequence[int], string: int, fret: int) -> int:
    """Return the MIDI pitch sounding at a string and fret.

    Parameters
    ----------
    tuning : Sequence[int]
        Open-string pitches, lowest string first.
    string : int
        String index.
    fret : int
        Fret number, 0 = open.

    Returns
    -------
    int
        MIDI pitch.

    Raises
    ------
    ValueError
        If the string index is not in the tuning.
    PitchOutOfRange
        If the fret is negative or the pitch exceeds 127.
    """
    if not 0 <= string < len(tuning):
        msg = f"String {string} not in a {len(tuning)}-string tuning"
        raise ValueError(msg)
    if fret < 0:
        msg = f"Fret must not be negative: {fret}"
        raise PitchOutOfRange(msg)
    pitch = tuning[string] + fret
    if pitch > MAX_PITCH:
        msg = f"Pitch at string {string}, fret {fret} exceeds {MAX_PITCH}: {pitch}"
        raise PitchOutOfRange(msg)
    return pitch


def build_lattice(tuning: Sequence[int] = STANDARD_TUNING, fret_count: int = DEFAULT_FRET_COUNT) -> np.ndarray:
    """Compute the pitch grid of a fretboard.

    Parameters
    ----------
    tuning : Sequence[int]
        Open-string pitches, lowest string first.
    fret_count : int
        Highest fret.

    Returns
    -------
    np.ndarray
        Integer array of shape (strings, fret_count + 1).

    Raises
    ------
    PitchOutOfRange
        If any cell exceeds pitch 127.
    """
    open_strings = np.array(tuning, dtype=np.int64)
    lattice = open_strings[:, np.newaxis] + np.arange(fret_count + 1, dtype=np.int64)
    if lattice.size and lattice.max() > MAX_PITCH:
        msg = f"Fretboard exceeds pitch {MAX_PITCH}: highest is {int(lattice.max())}"
        raise PitchOutOfRange(msg)
    return lattice


def find_note_positions(
    note: str,
    tuning: Sequence[int] = STANDARD_TUNING,
    fret_count: int = DEFAULT_FRET_COUNT,
) -> list[FretPosition]:
    """Find every position of a note on the fretboard.

    A note without an octave ("C") matches every octave; a note with one
    ("C/4") matches only that pitch.

    Returns
    -------
    list[FretPosition]
        Positions ordered by string, then fret.

    Examples
    --------
    >>> find_note_positions("C/4", fret_count=12)
    [FretPosition(string=2, fret=10), FretPosition(string=3, fret=5), FretPosition(string=4, fret=1)]
    """
    parsed = parse_note(note)
    lattice = build_lattice(tuning, fret_count)
    if parsed.octave is None:
        mask = lattice % 12 == parsed.pitch_class
    else:
        mask = lattice == parsed.pitch
    strings, frets = np.nonzero(mask)
    return [FretPosition(int(string), int(fret)) for string, fret in zip(strings, frets)]


def unique_note_names(tuning: Sequence[int] = STANDARD_TUNING, fret_count: int = DEFAULT_FRET_COUNT) -> list[str]:
    """Octave-qualified names of every distinct pitch on the fretboard, low to high."""
    return [chromatic_note_name(int(pitch)) for pitch in np.unique(build_lattice(tuning, fret_count))]
