"""Music theory engine for fretted instruments.

This library parses chord names into intervals and spelled notes, converts
between MIDI pitches and note names, generates scales from step formulas,
names the chords on every scale degree, and finds chord shapes on a
fretboard.

Examples
--------
>>> from fretboard_theory import resolve_chord, generate_scale, IONIAN

>>> # Resolve a chord name
>>> list(resolve_chord("D#m7b5").intervals)
['P1', 'm3', 'd5', 'm7']

>>> # Generate a scale
>>> list(generate_scale("C", IONIAN).notes)
['C', 'D', 'E', 'F', 'G', 'A', 'B', 'C']

>>> # Compare spellings
>>> from fretboard_theory import are_equivalent
>>> are_equivalent("C#", "Db")
True

>>> # Find chord shapes
>>> from fretboard_theory import find_pattern_matches
>>> len(find_pattern_matches(["C", "E", "G"], "C")) > 0
True
"""

from fretboard_theory.chords import (
    CHORD_SUFFIX_GROUPS,
    ParsedChordToken,
    ResolvedChord,
    build_intervals,
    parse_chord_name,
    parse_chord_suffix,
    resolve_chord,
    resolve_chord_parts,
)
from fretboard_theory.config import (
    DEFAULT_FRET_COUNT,
    MAX_PITCH,
    MIN_PITCH,
    STANDARD_TUNING,
    TUNINGS,
    FretboardConfig,
    get_tuning,
)
from fretboard_theory.converter import from_pychord, pychord_components, to_pychord_name
from fretboard_theory.diatonic import (
    COMMON_PROGRESSIONS,
    DiatonicChord,
    DiatonicChordCache,
    ScaleChords,
    identify_diatonic_chords,
    match_chord,
    precompute_chords_for_scales,
    precompute_scale_chords,
    progression_chords,
    roman_numeral,
    scale_chord_coverage,
    synthetic_chords,
)
from fretboard_theory.enharmonic import (
    are_arrays_equivalent,
    are_equivalent,
    filter_enharmonic_matches,
    find_enharmonic_match,
    match_enharmonic_spelling,
    note_array_contains,
)
from fretboard_theory.errors import (
    CatalogError,
    NoDiatonicMatch,
    ParseError,
    PitchOutOfRange,
    TheoryError,
    UnknownChordType,
)
from fretboard_theory.fretboard import (
    CHORD_PATTERN_TEMPLATES,
    ChordPatternTemplate,
    FretPosition,
    PatternMatch,
    PatternPosition,
    build_lattice,
    find_note_positions,
    find_optimal_shape,
    find_pattern_matches,
    pitch_at,
    rank_matches,
)
from fretboard_theory.intervals import ChordQuality, interval_to_semitones, resolve_quality_alias
from fretboard_theory.notation import (
    Note,
    ScaleContext,
    create_scale_context,
    note_name_to_pitch,
    parse_note,
    pitch_to_note_name,
)
from fretboard_theory.scales import (
    IONIAN,
    SCALE_CATALOG,
    Scale,
    ScaleDefinition,
    find_scale,
    generate_catalog_scale,
    generate_scale,
    get_scale,
)

__all__ = [
    "CHORD_PATTERN_TEMPLATES",
    "CHORD_SUFFIX_GROUPS",
    "COMMON_PROGRESSIONS",
    "DEFAULT_FRET_COUNT",
    "IONIAN",
    "MAX_PITCH",
    "MIN_PITCH",
    "SCALE_CATALOG",
    "STANDARD_TUNING",
    "TUNINGS",
    "CatalogError",
    "ChordPatternTemplate",
    "ChordQuality",
    "DiatonicChord",
    "DiatonicChordCache",
    "FretPosition",
    "FretboardConfig",
    "NoDiatonicMatch",
    "Note",
    "ParseError",
    "ParsedChordToken",
    "PatternMatch",
    "PatternPosition",
    "PitchOutOfRange",
    "ResolvedChord",
    "Scale",
    "ScaleChords",
    "ScaleContext",
    "ScaleDefinition",
    "TheoryError",
    "UnknownChordType",
    "are_arrays_equivalent",
    "are_equivalent",
    "build_intervals",
    "build_lattice",
    "create_scale_context",
    "filter_enharmonic_matches",
    "find_enharmonic_match",
    "find_note_positions",
    "find_optimal_shape",
    "find_pattern_matches",
    "find_scale",
    "from_pychord",
    "generate_catalog_scale",
    "generate_scale",
    "get_scale",
    "get_tuning",
    "identify_diatonic_chords",
    "interval_to_semitones",
    "match_chord",
    "match_enharmonic_spelling",
    "note_array_contains",
    "note_name_to_pitch",
    "parse_chord_name",
    "parse_chord_suffix",
    "parse_note",
    "pitch_at",
    "pitch_to_note_name",
    "precompute_chords_for_scales",
    "precompute_scale_chords",
    "progression_chords",
    "rank_matches",
    "resolve_chord",
    "resolve_chord_parts",
    "resolve_quality_alias",
    "roman_numeral",
    "scale_chord_coverage",
    "synthetic_chords",
    "to_pychord_name",
]
