"""Fretboard lattice and chord shape search.

This package maps chord tones onto the strings and frets of a fretted
instrument, either through the catalog of chord shape templates or through
a single compact-fingering heuristic.

Examples
--------
>>> from fretboard_theory.fretboard import find_pattern_matches, rank_matches
>>> best = rank_matches(find_pattern_matches(["A", "C", "E"], "A"))[0]
>>> best.template.key, best.root_fret
('minor_A_string', 0)
"""

from fretboard_theory.fretboard.lattice import build_lattice, find_note_positions, pitch_at, unique_note_names
from fretboard_theory.fretboard.matcher import find_optimal_shape, find_pattern_matches, rank_matches
from fretboard_theory.fretboard.models import (
    ChordPatternTemplate,
    FretPosition,
    PatternMatch,
    PatternPosition,
    TemplateNote,
)
from fretboard_theory.fretboard.templates import (
    CHORD_PATTERN_TEMPLATES,
    get_template,
    templates_by_voicing,
    templates_for_chord_type,
    templates_for_root_string,
    validate_templates,
)

__all__ = [
    "CHORD_PATTERN_TEMPLATES",
    "ChordPatternTemplate",
    "FretPosition",
    "PatternMatch",
    "PatternPosition",
    "TemplateNote",
    "build_lattice",
    "find_note_positions",
    "find_optimal_shape",
    "find_pattern_matches",
    "get_template",
    "pitch_at",
    "rank_matches",
    "templates_by_voicing",
    "templates_for_chord_type",
    "templates_for_root_string",
    "unique_note_names",
    "validate_templates",
]
