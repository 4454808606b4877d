"""Chord shape templates for standard-tuned guitar.

Each template places its notes relative to a root on ``root_string``, with
strings numbered from low E (0) to high E (5). Templates are checked when
this module is imported. Every interval label must match the real distance
from the root under standard tuning, octaves included, so a root two
octaves up is "P15" and a third an octave up is "M10". Every shape must
voice exactly the chord tones of its chord type, and open voicings need a
fixed root fret.

Examples
--------
>>> get_template("major_A_string").root_string
1
>>> [t.key for t in templates_for_chord_type("min7", CHORD_PATTERN_TEMPLATES)][:1]
['minor7_E_string']
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from fretboard_theory.chords import build_intervals, parse_chord_suffix
from fretboard_theory.config import STANDARD_TUNING
from fretboard_theory.errors import CatalogError, TheoryError
from fretboard_theory.fretboard.models import ChordPatternTemplate, TemplateNote
from fretboard_theory.intervals import interval_to_semitones

# Notes are (string, fret offset, interval, label)
_RAW_TEMPLATES: dict[str, dict[str, object]] = {
    # Major
    "major_E_string": {
        "name": "Major (E String Root)",
        "chord_type": "",
        "root_string": 0,
        "notes": [(0, 0, "P1", "R"), (1, 2, "P5", "5"), (2, 2, "P8", "R"), (3, 1, "M10", "3"), (4, 0, "P12", "5"), (5, 0, "P15", "R")],
    },
    "major_A_string": {
        "name": "Major (A String Root)",
        "chord_type": "",
        "root_string": 1,
        "notes": [(1, 0, "P1", "R"), (2, 2, "P5", "5"), (3, 2, "P8", "R"), (4, 2, "M10", "3"), (5, 0, "P12", "5")],
    },
    "major_D_string": {
        "name": "Major (D String Root)",
        "chord_type": "",
        "root_string": 2,
        "notes": [(2, 0, "P1", "R"), (3, 2, "P5", "5"), (4, 3, "P8", "R"), (5, 2, "M10", "3")],
    },
    "major_G_string": {
        "name": "Major (G String Root)",
        "chord_type": "",
        "root_string": 3,
        "notes": [(3, 0, "P1", "R"), (4, 0, "M3", "3"), (5, -2, "P5", "5")],
        "min_fret": 2,
    },
    "major_open_C": {
        "name": "C Major Open",
        "chord_type": "",
        "root_string": 1,
        "notes": [(1, 0, "P1", "R"), (2, -1, "M3", "3"), (3, -3, "P5", "5"), (4, -2, "P8", "R"), (5, -3, "M10", "3")],
        "open_voicing_only": True,
        "fixed_position": 3,
        "min_fret": 3,
        "max_fret": 3,
    },
    "major_open_G": {
        "name": "G Major Open",
        "chord_type": "",
        "root_string": 0,
        "notes": [
            (0, 0, "P1", "R"),
            (1, -1, "M3", "3"),
            (2, -3, "P5", "5"),
            (3, -3, "P8", "R"),
            (4, -3, "M10", "3"),
            (5, 0, "P15", "R"),
        ],
        "open_voicing_only": True,
        "fixed_position": 3,
        "min_fret": 3,
        "max_fret": 3,
    },
    # Minor
    "minor_E_string": {
        "name": "Minor (E String Root)",
        "chord_type": "m",
        "root_string": 0,
        "notes": [(0, 0, "P1", "R"), (1, 2, "P5", "5"), (2, 2, "P8", "R"), (3, 0, "m10", "b3"), (4, 0, "P12", "5"), (5, 0, "P15", "R")],
    },
    "minor_A_string": {
        "name": "Minor (A String Root)",
        "chord_type": "m",
        "root_string": 1,
        "notes": [(1, 0, "P1", "R"), (2, 2, "P5", "5"), (3, 2, "P8", "R"), (4, 1, "m10", "b3"), (5, 0, "P12", "5")],
    },
    "minor_D_string": {
        "name": "Minor (D String Root)",
        "chord_type": "m",
        "root_string": 2,
        "notes": [(2, 0, "P1", "R"), (3, 2, "P5", "5"), (4, 3, "P8", "R"), (5, 1, "m10", "b3")],
    },
    # Power chords
    "power_E_string": {
        "name": "Power Chord (E String Root)",
        "chord_type": "5",
        "root_string": 0,
        "notes": [(0, 0, "P1", "R"), (1, 2, "P5", "5"), (2, 2, "P8", "R")],
    },
    "power_A_string": {
        "name": "Power Chord (A String Root)",
        "chord_type": "5",
        "root_string": 1,
        "notes": [(1, 0, "P1", "R"), (2, 2, "P5", "5"), (3, 2, "P8", "R")],
    },
    # Diminished and augmented
    "diminished_A_string": {
        "name": "Diminished (A String Root)",
        "chord_type": "dim",
        "root_string": 1,
        "notes": [(1, 0, "P1", "R"), (2, 1, "d5", "b5"), (3, 2, "P8", "R"), (4, 1, "m10", "b3")],
    },
    "augmented_E_string": {
        "name": "Augmented (E String Root)",
        "chord_type": "aug",
        "root_string": 0,
        "notes": [(0, 0, "P1", "R"), (1, 3, "A5", "#5"), (2, 2, "P8", "R"), (3, 1, "M10", "3"), (4, 1, "A12", "#5"), (5, 0, "P15", "R")],
    },
    "augmented_A_string": {
        "name": "Augmented (A String Root)",
        "chord_type": "aug",
        "root_string": 1,
        "notes": [(1, 0, "P1", "R"), (2, 3, "A5", "#5"), (3, 2, "P8", "R"), (4, 2, "M10", "3"), (5, 1, "A12", "#5")],
    },
    # Suspended
    "sus2_A_string": {
        "name": "Sus2 (A String Root)",
        "chord_type": "sus2",
        "root_string": 1,
        "notes": [(1, 0, "P1", "R"), (2, 2, "P5", "5"), (3, 2, "P8", "R"), (4, 0, "M9", "2"), (5, 0, "P12", "5")],
    },
    "sus2_D_string": {
        "name": "Sus2 (D String Root)",
        "chord_type": "sus2",
        "root_string": 2,
        "notes": [(2, 0, "P1", "R"), (3, 2, "P5", "5"), (4, 3, "P8", "R"), (5, 0, "M9", "2")],
    },
    "sus4_E_string": {
        "name": "Sus4 (E String Root)",
        "chord_type": "sus4",
        "root_string": 0,
        "notes": [(0, 0, "P1", "R"), (1, 2, "P5", "5"), (2, 2, "P8", "R"), (3, 2, "P11", "4"), (4, 0, "P12", "5"), (5, 0, "P15", "R")],
    },
    "sus4_A_string": {
        "name": "Sus4 (A String Root)",
        "chord_type": "sus4",
        "root_string": 1,
        "notes": [(1, 0, "P1", "R"), (2, 2, "P5", "5"), (3, 2, "P8", "R"), (4, 3, "P11", "4"), (5, 0, "P12", "5")],
    },
    "sus4_D_string": {
        "name": "Sus4 (D String Root)",
        "chord_type": "sus4",
        "root_string": 2,
        "notes": [(2, 0, "P1", "R"), (3, 2, "P5", "5"), (4, 3, "P8", "R"), (5, 3, "P11", "4")],
    },
    # Sixths
    "major6_A_string": {
        "name": "Major Sixth (A String Root)",
        "chord_type": "6",
        "root_string": 1,
        "notes": [(1, 0, "P1", "R"), (2, 2, "P5", "5"), (3, 2, "P8", "R"), (4, 2, "M10", "3"), (5, 2, "M13", "6")],
    },
    "minor6_A_string": {
        "name": "Minor Sixth (A String Root)",
        "chord_type": "m6",
        "root_string": 1,
        "notes": [(1, 0, "P1", "R"), (2, 2, "P5", "5"), (3, 2, "P8", "R"), (4, 1, "m10", "b3"), (5, 2, "M13", "6")],
    },
    # Dominant sevenths
    "dominant7_E_string": {
        "name": "Dominant Seventh (E String Root)",
        "chord_type": "7",
        "root_string": 0,
        "notes": [(0, 0, "P1", "R"), (1, 2, "P5", "5"), (2, 0, "m7", "b7"), (3, 1, "M10", "3"), (4, 0, "P12", "5"), (5, 0, "P15", "R")],
    },
    "dominant7_A_string": {
        "name": "Dominant Seventh (A String Root)",
        "chord_type": "7",
        "root_string": 1,
        "notes": [(1, 0, "P1", "R"), (2, 2, "P5", "5"), (3, 0, "m7", "b7"), (4, 2, "M10", "3"), (5, 0, "P12", "5")],
    },
    "dominant7_D_string": {
        "name": "Dominant Seventh (D String Root)",
        "chord_type": "7",
        "root_string": 2,
        "notes": [(2, 0, "P1", "R"), (3, 2, "P5", "5"), (4, 1, "m7", "b7"), (5, 2, "M10", "3")],
    },
    # Major sevenths
    "major7_E_string": {
        "name": "Major Seventh (E String Root)",
        "chord_type": "maj7",
        "root_string": 0,
        "notes": [(0, 0, "P1", "R"), (2, 1, "M7", "7"), (3, 1, "M10", "3"), (4, 0, "P12", "5")],
    },
    "major7_A_string": {
        "name": "Major Seventh (A String Root)",
        "chord_type": "maj7",
        "root_string": 1,
        "notes": [(1, 0, "P1", "R"), (2, 2, "P5", "5"), (3, 1, "M7", "7"), (4, 2, "M10", "3"), (5, 0, "P12", "5")],
    },
    "major7_D_string": {
        "name": "Major Seventh (D String Root)",
        "chord_type": "maj7",
        "root_string": 2,
        "notes": [(2, 0, "P1", "R"), (3, 2, "P5", "5"), (4, 2, "M7", "7"), (5, 2, "M10", "3")],
    },
    # Minor sevenths
    "minor7_E_string": {
        "name": "Minor Seventh (E String Root)",
        "chord_type": "m7",
        "root_string": 0,
        "notes": [(0, 0, "P1", "R"), (1, 2, "P5", "5"), (2, 0, "m7", "b7"), (3, 0, "m10", "b3"), (4, 0, "P12", "5"), (5, 0, "P15", "R")],
    },
    "minor7_A_string": {
        "name": "Minor Seventh (A String Root)",
        "chord_type": "m7",
        "root_string": 1,
        "notes": [(1, 0, "P1", "R"), (2, 2, "P5", "5"), (3, 0, "m7", "b7"), (4, 1, "m10", "b3"), (5, 0, "P12", "5")],
    },
    "minor7_D_string": {
        "name": "Minor Seventh (D String Root)",
        "chord_type": "m7",
        "root_string": 2,
        "notes": [(2, 0, "P1", "R"), (3, 2, "P5", "5"), (4, 1, "m7", "b7"), (5, 1, "m10", "b3")],
    },
    "minor_major7_A_string": {
        "name": "Minor Major Seventh (A String Root)",
        "chord_type": "mM7",
        "root_string": 1,
        "notes": [(1, 0, "P1", "R"), (2, 2, "P5", "5"), (3, 1, "M7", "7"), (4, 1, "m10", "b3"), (5, 0, "P12", "5")],
    },
    # Half diminished, diminished and augmented sevenths
    "m7b5_E_string": {
        "name": "Half Diminished (E String Root)",
        "chord_type": "m7b5",
        "root_string": 0,
        "notes": [(0, 0, "P1", "R"), (2, 0, "m7", "b7"), (3, 0, "m10", "b3"), (4, -1, "d12", "b5")],
        "min_fret": 1,
    },
    "m7b5_A_string": {
        "name": "Half Diminished (A String Root)",
        "chord_type": "m7b5",
        "root_string": 1,
        "notes": [(1, 0, "P1", "R"), (2, 1, "d5", "b5"), (3, 0, "m7", "b7"), (4, 1, "m10", "b3")],
    },
    "diminished7_A_string": {
        "name": "Diminished Seventh (A String Root)",
        "chord_type": "dim7",
        "root_string": 1,
        "notes": [(1, 0, "P1", "R"), (2, 1, "d5", "b5"), (3, -1, "d7", "bb7"), (4, 1, "m10", "b3")],
        "min_fret": 1,
    },
    "diminished7_D_string": {
        "name": "Diminished Seventh (D String Root)",
        "chord_type": "dim7",
        "root_string": 2,
        "notes": [(2, 0, "P1", "R"), (3, 1, "d5", "b5"), (4, 0, "d7", "bb7"), (5, 1, "m10", "b3")],
    },
    "augmented7_E_string": {
        "name": "Augmented Seventh (E String Root)",
        "chord_type": "+7",
        "root_string": 0,
        "notes": [(0, 0, "P1", "R"), (2, 0, "m7", "b7"), (3, 1, "M10", "3"), (4, 1, "A12", "#5"), (5, 0, "P15", "R")],
    },
}


def _chord_type_classes(chord_type: str) -> frozenset[int]:
    token = parse_chord_suffix("C", chord_type)
    return frozenset(interval_to_semitones(interval) % 12 for interval in build_intervals(token))


def _check_template(template: ChordPatternTemplate, tuning: Sequence[int]) -> None:
    if not template.notes:
        msg = f"Template {template.key} has no notes"
        raise CatalogError(msg)
    if template.min_fret > template.max_fret:
        msg = f"Template {template.key} has min_fret {template.min_fret} above max_fret {template.max_fret}"
        raise CatalogError(msg)
    if template.open_voicing_only and (
        template.fixed_position is None or not template.min_fret <= template.fixed_position <= template.max_fret
    ):
        msg = f"Open voicing {template.key} needs a fixed position within [{template.min_fret}, {template.max_fret}]"
        raise CatalogError(msg)
    if not any(note.string == template.root_string and note.fret_offset == 0 for note in template.notes):
        msg = f"Template {template.key} has no root on string {template.root_string}"
        raise CatalogError(msg)

    classes = set()
    for note in template.notes:
        if not 0 <= note.string < len(tuning):
            msg = f"Template {template.key} uses string {note.string}, not in a {len(tuning)}-string tuning"
            raise CatalogError(msg)
        actual = tuning[note.string] - tuning[template.root_string] + note.fret_offset
        if actual != interval_to_semitones(note.interval):
            msg = (
                f"Template {template.key}: string {note.string} offset {note.fret_offset} "
                f"sounds {actual} semitones above the root, not {note.interval}"
            )
            raise CatalogError(msg)
        classes.add(actual % 12)
    if classes != _chord_type_classes(template.chord_type):
        msg = f"Template {template.key} does not voice every tone of chord type {template.chord_type!r}"
        raise CatalogError(msg)


def validate_templates(
    raw: Mapping[str, Mapping[str, object]],
    tuning: Sequence[int] = STANDARD_TUNING,
) -> tuple[ChordPatternTemplate, ...]:
    """Build and check templates from raw catalog entries.

    Parameters
    ----------
    raw : Mapping[str, Mapping[str, object]]
        Template key to entry. Each entry needs "name", "chord_type",
        "root_string" and "notes" (``(string, fret_offset, interval, label)``
        tuples), and may set "open_voicing_only", "fixed_position",
        "min_fret" and "max_fret".
    tuning : Sequence[int]
        Tuning the shapes are authored for.

    Returns
    -------
    tuple[ChordPatternTemplate, ...]
        The templates, in catalog order.

    Raises
    ------
    CatalogError
        If an entry is incomplete, an interval label is unknown or does not
        match the fretted distance, a shape misses or adds chord tones, or an
        open voicing lacks a valid fixed position.
    """
    templates = []
    for key, entry in raw.items():
        try:
            template = ChordPatternTemplate(
                key=key,
                name=str(entry["name"]),
                chord_type=str(entry["chord_type"]),
                root_string=int(entry["root_string"]),
                notes=tuple(TemplateNote(*note) for note in entry["notes"]),
                open_voicing_only=bool(entry.get("open_voicing_only", False)),
                fixed_position=entry.get("fixed_position"),
                min_fret=int(entry.get("min_fret", 0)),
                max_fret=int(entry.get("max_fret", 18)),
            )
            _check_template(template, tuning)
        except KeyError as e:
            msg = f"Template {key} is missing {e}"
            raise CatalogError(msg) from e
        except CatalogError:
            raise
        except TheoryError as e:
            msg = f"Template {key} is invalid: {e}"
            raise CatalogError(msg) from e
        templates.append(template)
    return tuple(templates)


CHORD_PATTERN_TEMPLATES: tuple[ChordPatternTemplate, ...] = validate_templates(_RAW_TEMPLATES)

TEMPLATES_BY_KEY: dict[str, ChordPatternTemplate] = {template.key: template for template in CHORD_PATTERN_TEMPLATES}


def get_template(key: str) -> ChordPatternTemplate:
    """Look up a template by key.

    Raises
    ------
    ValueError
        If no template has that key.
    """
    if key in TEMPLATES_BY_KEY:
        return TEMPLATES_BY_KEY[key]
    msg = f"Unknown chord template: {key}"
    raise ValueError(msg)


def templates_for_chord_type(
    chord_type: str,
    templates: Iterable[ChordPatternTemplate] = CHORD_PATTERN_TEMPLATES,
) -> list[ChordPatternTemplate]:
    """Templates voicing the same chord tones as ``chord_type``.

    Any alias of the chord type works: "min7", "m7" and "-7" select the same
    shapes.
    """
    wanted = _chord_type_classes(chord_type)
    return [template for template in templates if _chord_type_classes(template.chord_type) == wanted]


def templates_for_root_string(
    string: int,
    templates: Iterable[ChordPatternTemplate] = CHORD_PATTERN_TEMPLATES,
) -> list[ChordPatternTemplate]:
    return [template for template in templates if template.root_string == string]


def templates_by_voicing(
    open_voicing: bool,
    templates: Iterable[ChordPatternTemplate] = CHORD_PATTERN_TEMPLATES,
) -> list[ChordPatternTemplate]:
    """Split templates into open voicings (True) or movable shapes (False)."""
    return [template for template in templates if template.open_voicing_only == open_voicing]
