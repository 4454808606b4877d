"""Search the fretboard for chord shapes.

``find_pattern_matches`` places every template at every fret where the
chord root falls on the template's root string, and keeps the placements
whose notes cover the chord's pitch classes exactly: no foreign tones and no
missing ones. An empty result means no template fits; it is not an error.

``find_optimal_shape`` is a simpler heuristic that picks one compact
fingering without templates.

Examples
--------
>>> matches = rank_matches(find_pattern_matches(["C", "E", "G"], "C"))
>>> matches[0].template.key, matches[0].root_fret
('major_open_C', 3)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from fretboard_theory.config import DEFAULT_FRET_COUNT, STANDARD_TUNING
from fretboard_theory.fretboard.lattice import find_note_positions, pitch_at
from fretboard_theory.fretboard.models import ChordPatternTemplate, FretPosition, PatternMatch, PatternPosition
from fretboard_theory.fretboard.templates import CHORD_PATTERN_TEMPLATES
from fretboard_theory.notation import parse_note, strip_octave

logger = logging.getLogger(__name__)

# Centre frets tried by the optimal-shape heuristic, and how far a note may sit from one
CENTER_FRETS = range(3, 13)
MAX_STRETCH = 4


def _pitch_class(note: str) -> int:
    return parse_note(strip_octave(note)).pitch_class


def _place_template(
    template: ChordPatternTemplate,
    root_fret: int,
    tuning: Sequence[int],
    fret_count: int,
) -> tuple[PatternPosition, ...]:
    """Absolute positions of a template's notes, dropping any off the fretboard."""
    positions = []
    for note in template.notes:
        fret = root_fret + note.fret_offset
        if note.string >= len(tuning) or not 0 <= fret <= fret_count:
            continue
        positions.append(
            PatternPosition(
                string=note.string,
                fret=fret,
                interval=note.interval,
                label=note.label,
                pitch=pitch_at(tuning, note.string, fret),
            )
        )
    return tuple(positions)


def find_pattern_matches(
    chord_notes: Iterable[str],
    root_note: str,
    templates: Iterable[ChordPatternTemplate] | None = None,
    tuning: Sequence[int] = STANDARD_TUNING,
    fret_count: int = DEFAULT_FRET_COUNT,
) -> list[PatternMatch]:
    """Find every template placement that voices a chord.

    Parameters
    ----------
    chord_notes : Iterable[str]
        Chord tones, with or without octave. Only pitch classes matter.
    root_note : str
        Chord root, with or without octave.
    templates : Iterable[ChordPatternTemplate] | None
        Shapes to try. Defaults to ``CHORD_PATTERN_TEMPLATES``.
    tuning : Sequence[int]
        Open-string pitches, lowest string first.
    fret_count : int
        Highest fret.

    Returns
    -------
    list[PatternMatch]
        Accepted placements in template order, then fret order. Every
        match's pitch classes equal the chord's pitch classes.

    Raises
    ------
    ParseError
        If a chord note or the root cannot be parsed.
    """
    required = frozenset(_pitch_class(note) for note in chord_notes)
    root_class = _pitch_class(root_note)
    if templates is None:
        templates = CHORD_PATTERN_TEMPLATES

    matches = []
    checked = 0
    for template in templates:
        if template.root_string >= len(tuning):
            continue
        for root_fret in range(fret_count + 1):
            if (tuning[template.root_string] + root_fret) % 12 != root_class:
                continue
            if template.open_voicing_only and root_fret != template.fixed_position:
                continue
            if not template.min_fret <= root_fret <= template.max_fret:
                continue
            checked += 1
            positions = _place_template(template, root_fret, tuning, fret_count)
            if positions and frozenset(position.pitch % 12 for position in positions) == required:
                matches.append(PatternMatch(template=template, root_fret=root_fret, positions=positions))

    logger.debug("Checked %d placements for root %s, %d matched", checked, root_note, len(matches))
    return matches


def rank_matches(matches: Iterable[PatternMatch]) -> list[PatternMatch]:
    """Order matches lowest on the neck first, then most compact."""
    return sorted(matches, key=lambda match: (match.min_fret, match.fret_span))


def find_optimal_shape(
    chord_notes: Sequence[str],
    tuning: Sequence[int] = STANDARD_TUNING,
    fret_count: int = DEFAULT_FRET_COUNT,
) -> list[FretPosition]:
    """Pick one compact fingering for a chord without using templates.

    For each centre fret from 3 to 12, every chord tone takes its closest
    position to the centre on a string not used yet, at most 4 frets away.
    The first centre that places at least ``min(3, len(chord_notes))`` tones
    wins. If none does, each tone takes its first position on the fretboard
    when that string is still free.

    Parameters
    ----------
    chord_notes : Sequence[str]
        Chord tones in priority order.
    tuning : Sequence[int]
        Open-string pitches, lowest string first.
    fret_count : int
        Highest fret.

    Returns
    -------
    list[FretPosition]
        Selected positions, sorted by string.

    Examples
    --------
    >>> find_optimal_shape(["C", "E", "G"])
    [FretPosition(string=0, fret=3), FretPosition(string=1, fret=3), FretPosition(string=2, fret=2)]
    """
    candidates = {
        note: find_note_positions(strip_octave(note), tuning, fret_count) for note in dict.fromkeys(chord_notes)
    }

    for center in CENTER_FRETS:
        used: set[int] = set()
        shape = []
        for note in chord_notes:
            nearby = [
                position
                for position in candidates[note]
                if position.string not in used and abs(position.fret - center) <= MAX_STRETCH
            ]
            if nearby:
                best = min(nearby, key=lambda position: abs(position.fret - center))
                shape.append(best)
                used.add(best.string)
        if len(shape) >= min(3, len(chord_notes)):
            logger.debug("Optimal shape for %s centred on fret %d", " ".join(chord_notes), center)
            return sorted(shape)

    used = set()
    shape = []
    for note in chord_notes:
        positions = candidates[note]
        if positions and positions[0].string not in used:
            shape.append(positions[0])
            used.add(positions[0].string)
    return sorted(shape)
