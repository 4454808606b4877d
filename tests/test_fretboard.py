"""Tests for the fretboard lattice and chord shape search."""

import logging

import numpy as np
import pytest

from fretboard_theory.chords import resolve_chord
from fretboard_theory.config import STANDARD_TUNING, get_tuning
from fretboard_theory.errors import CatalogError, PitchOutOfRange
from fretboard_theory.fretboard import (
    CHORD_PATTERN_TEMPLATES,
    FretPosition,
    build_lattice,
    find_note_positions,
    find_optimal_shape,
    find_pattern_matches,
    get_template,
    pitch_at,
    rank_matches,
    templates_by_voicing,
    templates_for_chord_type,
    templates_for_root_string,
    unique_note_names,
    validate_templates,
)
from fretboard_theory.intervals import interval_to_semitones

POWER_CHORD_ENTRY = {
    "name": "Power (E String Root)",
    "chord_type": "5",
    "root_string": 0,
    "notes": [(0, 0, "P1", "R"), (1, 2, "P5", "5")],
}

CHORDS = ["C", "Am", "G7", "Dm7", "F#m7b5", "Bbmaj7", "Esus4", "A5", "Cdim7", "Eaug", "Asus2", "Ebm6"]


class TestLattice:
    """Test pitch lookup on the string/fret grid."""

    def test_pitch_at(self):
        assert pitch_at(STANDARD_TUNING, 0, 0) == 40
        assert pitch_at(STANDARD_TUNING, 5, 12) == 76

    @pytest.mark.parametrize("string", [-1, 6])
    def test_unknown_string_raises(self, string: int) -> None:
        with pytest.raises(ValueError, match="String"):
            pitch_at(STANDARD_TUNING, string, 0)

    def test_negative_fret_raises(self):
        with pytest.raises(PitchOutOfRange):
            pitch_at(STANDARD_TUNING, 0, -1)

    def test_pitch_above_range_raises(self):
        with pytest.raises(PitchOutOfRange):
            pitch_at((120,), 0, 8)

    def test_build_lattice(self):
        lattice = build_lattice(STANDARD_TUNING, 21)
        assert lattice.shape == (6, 22)
        assert lattice[5, 12] == 76
        assert np.array_equal(lattice[:, 0], STANDARD_TUNING)

    def test_lattice_agrees_with_pitch_at(self):
        lattice = build_lattice()
        for string in range(len(STANDARD_TUNING)):
            for fret in range(lattice.shape[1]):
                assert lattice[string, fret] == pitch_at(STANDARD_TUNING, string, fret)

    def test_lattice_above_range_raises(self):
        with pytest.raises(PitchOutOfRange):
            build_lattice((120,), 10)

    def test_find_note_positions_any_octave(self):
        positions = find_note_positions("E", fret_count=12)
        assert positions == [
            FretPosition(0, 0),
            FretPosition(0, 12),
            FretPosition(1, 7),
            FretPosition(2, 2),
            FretPosition(3, 9),
            FretPosition(4, 5),
            FretPosition(5, 0),
            FretPosition(5, 12),
        ]

    def test_find_note_positions_respelled(self):
        assert find_note_positions("F♭", fret_count=12) == find_note_positions("E", fret_count=12)

    def test_find_note_positions_exact_pitch(self):
        assert find_note_positions("E/2", fret_count=12) == [FretPosition(0, 0)]
        assert find_note_positions("E/1", fret_count=12) == []

    def test_positions_are_plain_ints(self):
        position = find_note_positions("A", fret_count=5)[0]
        assert type(position.string) is int
        assert type(position.fret) is int

    def test_unique_note_names(self):
        assert unique_note_names(fret_count=0) == ["E/2", "A/2", "D/3", "G/3", "B/3", "E/4"]
        names = unique_note_names()
        assert len(names) == 46
        assert names[0] == "E/2"
        assert names[-1] == "C#/6"


class TestFindPatternMatches:
    """Test template placement."""

    @pytest.mark.parametrize("name", CHORDS)
    def test_matches_cover_chord_exactly(self, name: str) -> None:
        chord = resolve_chord(name)
        matches = find_pattern_matches(chord.note_names, chord.root)
        assert matches
        for match in matches:
            assert match.pitch_classes == chord.pitch_classes
            assert (STANDARD_TUNING[match.template.root_string] + match.root_fret) % 12 == chord.root_pitch % 12

    @pytest.mark.parametrize("name", CHORDS)
    def test_interval_labels_match_sounding_pitch(self, name: str) -> None:
        chord = resolve_chord(name)
        for match in find_pattern_matches(chord.note_names, chord.root):
            root_pitch = STANDARD_TUNING[match.template.root_string] + match.root_fret
            for position in match.positions:
                assert position.pitch - root_pitch == interval_to_semitones(position.interval)

    def test_high_root_is_two_octaves_up(self):
        match = find_pattern_matches(["E", "G#", "B"], "E", templates=[get_template("major_E_string")])[0]
        assert [position.interval for position in match.positions] == ["P1", "P5", "P8", "M10", "P12", "P15"]

    def test_c_major_prefers_open_shape(self):
        best = rank_matches(find_pattern_matches(["C", "E", "G"], "C"))[0]
        assert best.template.key == "major_open_C"
        assert best.root_fret == 3

    def test_a_minor_prefers_open_position(self):
        best = rank_matches(find_pattern_matches(["A", "C", "E"], "A"))[0]
        assert (best.template.key, best.root_fret) == ("minor_A_string", 0)

    def test_open_voicings_only_at_fixed_position(self):
        for match in find_pattern_matches(["C", "E", "G"], "C"):
            if match.template.open_voicing_only:
                assert match.root_fret == match.template.fixed_position

    def test_fret_window_is_respected(self):
        for match in find_pattern_matches(["F#", "A", "C", "E"], "F#"):
            assert match.template.min_fret <= match.root_fret <= match.template.max_fret

    def test_no_template_fits(self):
        assert find_pattern_matches(["C", "C#", "D"], "C") == []

    def test_explicit_templates(self):
        templates = templates_for_chord_type("m")
        matches = find_pattern_matches(["A", "C", "E"], "A", templates=templates)
        assert {match.template.chord_type for match in matches} == {"m"}

    def test_notes_with_octaves(self):
        with_octaves = find_pattern_matches(["C/3", "E/5", "G/2"], "C/4")
        assert with_octaves == find_pattern_matches(["C", "E", "G"], "C")

    def test_short_tuning_skips_missing_strings(self):
        for match in find_pattern_matches(["C", "G"], "C", tuning=get_tuning("bass")):
            assert all(position.string < 4 for position in match.positions)

    def test_logs_search(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="fretboard_theory.fretboard.matcher"):
            find_pattern_matches(["C", "E", "G"], "C")
        assert "placements for root C" in caplog.text

    def test_rank_orders_low_and_compact_first(self):
        ranked = rank_matches(find_pattern_matches(["G", "B", "D"], "G"))
        keys = [(match.min_fret, match.fret_span) for match in ranked]
        assert keys == sorted(keys)

    def test_match_geometry(self):
        match = find_pattern_matches(["E", "G#", "B"], "E", templates=[get_template("major_E_string")])[0]
        assert match.root_fret == 0
        assert match.min_fret == 0
        assert match.max_fret == 2
        assert match.fret_span == 2
        assert match.positions[0].position == FretPosition(0, 0)


class TestFindOptimalShape:
    """Test the compact-fingering heuristic."""

    def test_c_major(self):
        assert find_optimal_shape(["C", "E", "G"]) == [FretPosition(0, 3), FretPosition(1, 3), FretPosition(2, 2)]

    def test_two_notes(self):
        assert find_optimal_shape(["A", "E"]) == [FretPosition(2, 2), FretPosition(3, 2)]

    def test_empty_chord(self):
        assert find_optimal_shape([]) == []

    @pytest.mark.parametrize("name", CHORDS)
    def test_one_note_per_string(self, name: str) -> None:
        chord = resolve_chord(name)
        shape = find_optimal_shape(list(chord.note_names))
        strings = [position.string for position in shape]
        assert len(strings) == len(set(strings))
        assert shape == sorted(shape)


class TestTemplates:
    """Test the shape catalog."""

    def test_keys_are_unique(self):
        keys = [template.key for template in CHORD_PATTERN_TEMPLATES]
        assert len(keys) == len(set(keys))

    def test_get_unknown_template_raises(self):
        with pytest.raises(ValueError, match="Unknown chord template"):
            get_template("banjo_roll")

    @pytest.mark.parametrize("alias", ["m7", "min7", "-7"])
    def test_templates_for_chord_type_accepts_aliases(self, alias: str) -> None:
        keys = [template.key for template in templates_for_chord_type(alias)]
        assert keys == ["minor7_E_string", "minor7_A_string", "minor7_D_string"]

    def test_templates_for_root_string(self):
        templates = templates_for_root_string(2)
        assert templates
        assert all(template.root_string == 2 for template in templates)

    def test_templates_by_voicing(self):
        assert [template.key for template in templates_by_voicing(True)] == ["major_open_C", "major_open_G"]
        movable = templates_by_voicing(False)
        assert len(movable) == len(CHORD_PATTERN_TEMPLATES) - 2

    def test_valid_entry(self):
        (template,) = validate_templates({"power_test": POWER_CHORD_ENTRY})
        assert template.strings == (0, 1)
        assert template.max_fret == 18

    @pytest.mark.parametrize(
        ("changes", "message"),
        [
            ({"notes": []}, "has no notes"),
            ({"notes": [(1, 2, "P5", "5")]}, "has no root"),
            ({"notes": [(0, 0, "P1", "R"), (1, 2, "M3", "3")]}, "not M3"),
            ({"notes": [(0, 0, "P1", "R"), (1, 2, "P5", "5"), (2, 2, "P1", "R")]}, "sounds 12 semitones above the root, not P1"),
            ({"notes": [(0, 0, "P1", "R"), (1, 2, "Q5", "5")]}, "is invalid"),
            ({"notes": [(0, 0, "P1", "R"), (1, 2, "P5", "5"), (6, 0, "P1", "R")]}, "uses string 6"),
            ({"chord_type": ""}, "does not voice every tone"),
            ({"chord_type": "xyz"}, "is invalid"),
            ({"open_voicing_only": True}, "needs a fixed position"),
            ({"open_voicing_only": True, "fixed_position": 5, "max_fret": 3}, "needs a fixed position"),
            ({"min_fret": 5, "max_fret": 3}, "above max_fret"),
        ],
    )
    def test_invalid_entries_raise(self, changes: dict, message: str) -> None:
        with pytest.raises(CatalogError, match=message):
            validate_templates({"power_test": {**POWER_CHORD_ENTRY, **changes}})

    def test_missing_field_raises(self):
        entry = {key: value for key, value in POWER_CHORD_ENTRY.items() if key != "notes"}
        with pytest.raises(CatalogError, match="is missing"):
            validate_templates({"power_test": entry})
