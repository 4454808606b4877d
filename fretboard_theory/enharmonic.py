"""Enharmonic comparison of note names.

Two notes are enharmonically equivalent when they name the same pitch class,
whatever their spelling or octave: "C#" and "Db", "B#/3" and "C/4".
Text that cannot be parsed as a note is never equivalent to anything.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence

from fretboard_theory.errors import TheoryError
from fretboard_theory.notation import parse_note, strip_octave


def pitch_class_of(note: object) -> int | None:
    """Return the pitch class (0-11) of note text, or None if unparseable."""
    if not isinstance(note, str) or not note.strip():
        return None
    try:
        return parse_note(strip_octave(note)).pitch_class
    except TheoryError:
        return None


def are_equivalent(note_a: str, note_b: str) -> bool:
    """Check whether two notes share a pitch class.

    Parameters
    ----------
    note_a, note_b : str
        Note text in any supported spelling, with or without octave.

    Returns
    -------
    bool
        True when both parse and name the same pitch class.

    Examples
    --------
    >>> are_equivalent("C#", "Db")
    True
    >>> are_equivalent("C#", "D")
    False
    >>> are_equivalent("E♯/4", "F/2")
    True
    """
    pc_a = pitch_class_of(note_a)
    if pc_a is None:
        return False
    return pc_a == pitch_class_of(note_b)


def are_arrays_equivalent(notes_a: Sequence[str], notes_b: Sequence[str]) -> bool:
    """Check whether two note lists match one-to-one, ignoring order.

    Every note of one list must pair with a distinct equivalent note of the
    other. Equivalence is equality of pitch class, so a perfect pairing
    exists exactly when both lists hold the same multiset of pitch classes.

    Examples
    --------
    >>> are_arrays_equivalent(["C", "E", "G"], ["G/5", "F♭", "B#"])
    True
    >>> are_arrays_equivalent(["C", "C", "E"], ["C", "E", "E"])
    False
    """
    if len(notes_a) != len(notes_b):
        return False
    classes_a = [pitch_class_of(note) for note in notes_a]
    classes_b = [pitch_class_of(note) for note in notes_b]
    if None in classes_a or None in classes_b:
        return False
    return Counter(classes_a) == Counter(classes_b)


def find_enharmonic_match(note: str, candidates: Iterable[str]) -> str | None:
    """Return the first candidate equivalent to ``note``, or None."""
    for candidate in candidates:
        if are_equivalent(note, candidate):
            return candidate
    return None


def match_enharmonic_spelling(notes: Iterable[str], reference: Sequence[str]) -> list[str]:
    """Respell notes using the spelling found in ``reference`` where possible.

    Examples
    --------
    >>> match_enharmonic_spelling(["C#", "E", "G#"], ["D♭", "F♭", "A♭"])
    ['D♭', 'F♭', 'A♭']
    """
    return [find_enharmonic_match(note, reference) or note for note in notes]


def note_array_contains(notes: Iterable[str], target: str) -> bool:
    return find_enharmonic_match(target, notes) is not None


def filter_enharmonic_matches(notes: Iterable[str], reference: Sequence[str]) -> list[str]:
    """Keep only the notes that have an equivalent in ``reference``."""
    return [note for note in notes if note_array_contains(reference, note)]
