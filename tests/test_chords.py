"""Tests for the chord name grammar and resolver."""

import logging

import pytest

from fretboard_theory.chords import (
    _validate_suffix_groups,
    build_intervals,
    parse_chord_name,
    parse_chord_suffix,
    resolve_chord,
    resolve_chord_parts,
)
from fretboard_theory.errors import CatalogError, ParseError, PitchOutOfRange, UnknownChordType
from fretboard_theory.intervals import ChordQuality, aliases_for
from fretboard_theory.notation import create_scale_context
from fretboard_theory.scales import IONIAN

ROOTS = ["C", "C#", "Db", "D", "Eb", "E", "F", "F#", "Gb", "G", "Ab", "A", "Bb", "B"]


class TestScenarios:
    """Test the reference chords."""

    def test_c_major(self):
        chord = resolve_chord("C")
        assert chord.notes == ("C/4", "E/4", "G/4")
        assert chord.root_pitch == 60
        assert chord.quality is ChordQuality.MAJOR_TRIAD

    def test_d_sharp_half_diminished(self):
        chord = resolve_chord("D#m7b5")
        assert chord.intervals == ("P1", "m3", "d5", "m7")
        assert chord.root_pitch == 63
        assert chord.pitches == (63, 66, 69, 73)

    def test_g_sus4(self):
        chord = resolve_chord("Gsus4")
        assert chord.intervals == ("P1", "P4", "P5")
        assert chord.note_names == ("G", "C", "D")
        assert chord.notes == ("G/4", "C/5", "D/5")


class TestParseChordName:
    """Test splitting chord text into its pieces."""

    def test_slash_chord(self):
        token = parse_chord_name("Am7/G")
        assert token.root == "A"
        assert token.quality is ChordQuality.MINOR_SEVENTH
        assert token.bass == "G"

    def test_flat_root_is_not_a_tension(self):
        token = parse_chord_name("Bb7")
        assert token.root == "Bb"
        assert token.quality is ChordQuality.DOMINANT_SEVENTH
        assert token.flat_targets == ()

    def test_flat_root_power_chord(self):
        token = parse_chord_name("Cb5")
        assert token.root == "Cb"
        assert token.quality is ChordQuality.POWER_CHORD

    def test_parenthesized_flat_five(self):
        token = parse_chord_name("C(b5)")
        assert token.root == "C"
        assert token.flat_targets == (5,)
        assert list(resolve_chord("C(b5)").note_names) == ["C", "E", "F#"]

    @pytest.mark.parametrize(
        ("name", "quality"),
        [
            ("CMajor7", ChordQuality.MAJOR_SEVENTH),
            ("C Minor", ChordQuality.MINOR_TRIAD),
            ("F♯ø", ChordQuality.HALF_DIMINISHED_SEVENTH),
            ("C−Δ7", ChordQuality.MINOR_MAJOR_SEVENTH),
            ("C°7", ChordQuality.DIMINISHED_SEVENTH),
            ("E♭maj9", ChordQuality.MAJOR_NINTH),
        ],
    )
    def test_words_and_glyphs(self, name: str, quality: ChordQuality) -> None:
        assert parse_chord_name(name).quality is quality

    def test_glyph_root_is_normalized(self):
        assert parse_chord_name("F♯ø").root == "F#"

    def test_modifiers_collected_in_order(self):
        token = parse_chord_name("C7#9b5sus4add13no5")
        assert token.quality is ChordQuality.DOMINANT_SEVENTH
        assert token.flat_targets == (5,)
        assert token.sharp_targets == (9,)
        assert token.suspensions == (4,)
        assert token.added_tones == (13,)
        assert token.omitted_tones == (5,)
        assert token.has_modifiers

    def test_exact_alias_is_not_stripped(self):
        token = parse_chord_name("C7b9")
        assert token.quality is ChordQuality.DOMINANT_MINOR_NINTH
        assert not token.has_modifiers

    def test_bare_sus_means_sus4(self):
        assert parse_chord_name("Csus").suspensions == (4,)

    @pytest.mark.parametrize("name", ["", "H7", "7", "m7"])
    def test_missing_root_raises(self, name: str) -> None:
        with pytest.raises(ParseError, match="no root note"):
            parse_chord_name(name)

    def test_unsupported_suspension_raises(self):
        with pytest.raises(ParseError, match="Unsupported suspension"):
            parse_chord_name("Csus3")

    def test_unknown_quality_raises(self):
        with pytest.raises(UnknownChordType):
            parse_chord_name("Cxyz")

    def test_invalid_bass_raises(self):
        with pytest.raises(ParseError, match="Invalid bass note"):
            parse_chord_name("Am7/H")

    def test_suffix_with_explicit_root(self):
        token = parse_chord_suffix("E♭", "m7")
        assert token.root == "Eb"
        assert token.quality is ChordQuality.MINOR_SEVENTH


class TestBuildIntervals:
    """Test applying modifiers to quality formulas."""

    @pytest.mark.parametrize(
        ("name", "intervals"),
        [
            ("C7sus4", ["P1", "P4", "P5", "m7"]),
            ("Csus2", ["P1", "M2", "P5"]),
            ("Csus", ["P1", "P4", "P5"]),
            ("Cadd9", ["P1", "M3", "P5", "M9"]),
            ("Cadd4", ["P1", "M3", "P4", "P5"]),
            ("Cmadd11", ["P1", "m3", "P5", "P11"]),
            ("C7#9", ["P1", "M3", "P5", "m7", "A9"]),
            ("C7#11", ["P1", "M3", "P5", "m7", "A11"]),
            ("C9b5", ["P1", "M3", "d5", "m7", "M9"]),
            ("C(#5)", ["P1", "M3", "A5"]),
            ("Cadd9no5", ["P1", "M3", "M9"]),
            ("Cno3", ["P1", "P5"]),
        ],
    )
    def test_modifiers(self, name: str, intervals: list[str]) -> None:
        assert build_intervals(parse_chord_name(name)) == intervals

    @pytest.mark.parametrize(
        ("name", "quality", "intervals"),
        [
            ("Cm#7add9", ChordQuality.MINOR_MAJOR_SEVENTH, ["P1", "m3", "P5", "M7", "M9"]),
            ("Cob9add11", ChordQuality.DIMINISHED_MINOR_NINTH, ["P1", "m3", "d5", "d7", "m9", "P11"]),
            ("CΔ#5no1", ChordQuality.AUGMENTED_MAJOR_SEVENTH, ["M3", "A5", "M7"]),
            ("Cdimb13no5", ChordQuality.DIMINISHED_MINOR_THIRTEENTH, ["P1", "m3", "d7", "m9", "P11", "M13"]),
            ("Cm7b5b9", ChordQuality.HALF_DIMINISHED_SEVENTH, ["P1", "m3", "d5", "m7", "m9"]),
        ],
    )
    def test_altered_alias_survives_other_modifiers(
        self, name: str, quality: ChordQuality, intervals: list[str]
    ) -> None:
        token = parse_chord_name(name)
        assert token.quality is quality
        assert build_intervals(token) == intervals

    @pytest.mark.parametrize("alias", ["m#7", "ob9", "dimb9", "ob13", "dimb13", "D#5", "7b9", "m7b5"])
    def test_omitting_the_root_keeps_the_alias(self, alias: str) -> None:
        full = resolve_chord(f"C{alias}").intervals
        without_root = resolve_chord(f"C{alias}no1").intervals
        assert without_root == tuple(interval for interval in full if "1" not in interval)

    def test_suspensions_overwrite_the_same_slot(self):
        assert build_intervals(parse_chord_name("Csus2sus4")) == ["P1", "P4", "P5"]

    def test_no5_without_a_fifth_is_a_no_op(self):
        once = build_intervals(parse_chord_name("Cno5"))
        assert once == ["P1", "M3"]
        assert build_intervals(parse_chord_name("Cno5no5")) == once

    def test_omitting_a_missing_degree_is_a_no_op(self):
        assert build_intervals(parse_chord_name("Cno9")) == ["P1", "M3", "P5"]

    def test_unknown_added_degree_raises(self):
        with pytest.raises(ParseError, match="Unknown interval"):
            build_intervals(parse_chord_name("Cadd16"))

    def test_formula_table_is_not_mutated(self):
        build_intervals(parse_chord_name("Csus4add9"))
        assert resolve_chord("C").intervals == ("P1", "M3", "P5")


class TestResolveChord:
    """Test rendering resolved chords."""

    def test_bass_is_appended(self):
        chord = resolve_chord("Am7/G")
        assert chord.notes == ("A/4", "C/5", "E/5", "G/5", "G/4")
        assert chord.bass == "G"

    def test_pitch_classes(self):
        assert resolve_chord("C7").pitch_classes == frozenset({0, 4, 7, 10})

    def test_str(self):
        assert str(resolve_chord("C")) == "C: C/4 E/4 G/4"

    def test_scale_context_spelling(self):
        context = create_scale_context("F", IONIAN)
        assert resolve_chord("Bb", context=context).notes == ("B♭/4", "D/5", "F/5")

    def test_resolve_parts(self):
        chord = resolve_chord_parts("C", "b5")
        assert chord.note_names == ("C", "E", "F#")
        assert chord.name == "Cb5"

    def test_pitch_above_range_raises(self):
        with pytest.raises(PitchOutOfRange):
            resolve_chord_parts("G/9", "")

    def test_logs_resolution(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="fretboard_theory.chords"):
            resolve_chord("Am7")
        assert "Resolved 'Am7' as Minor Seventh: P1 m3 P5 m7" in caplog.text

    @pytest.mark.parametrize("quality", list(ChordQuality))
    def test_aliases_converge(self, quality: ChordQuality) -> None:
        aliases = aliases_for(quality)
        for root in ROOTS:
            notes = {resolve_chord(root + alias).notes for alias in aliases}
            assert len(notes) == 1, f"{root} {quality.value}: {notes}"


class TestSuffixGroups:
    """Test validation of the suffix groups."""

    def test_bad_suffix_raises(self):
        with pytest.raises(CatalogError, match="does not resolve"):
            _validate_suffix_groups({"triads": ("M", "xyz")})
