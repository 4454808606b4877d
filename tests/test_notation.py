"""Tests for pitch and note name conversion."""

import numpy as np
import pytest

from fretboard_theory.errors import ParseError, PitchOutOfRange
from fretboard_theory.notation import (
    Note,
    accidental_glyphs,
    accidental_offset,
    add_octave,
    create_scale_context,
    note_name_to_pitch,
    normalize_note,
    parse_note,
    pitch_to_name,
    pitch_to_note_name,
    spell_scale,
    strip_octave,
)
from fretboard_theory.scales import IONIAN

AEOLIAN = ["W", "H", "W", "W", "H", "W", "W"]


class TestParseNote:
    """Test parsing note text into notes."""

    @pytest.mark.parametrize(
        ("text", "letter", "accidental", "octave"),
        [
            ("C", "C", 0, None),
            ("c#/5", "C", 1, 5),
            ("Eb/3", "E", -1, 3),
            ("E♭/3", "E", -1, 3),
            ("F𝄪", "F", 2, None),
            ("B𝄫/2", "B", -2, 2),
            ("G♮", "G", 0, None),
            ("Abbb", "A", -3, None),
            ("C/-1", "C", 0, -1),
        ],
    )
    def test_parse(self, text: str, letter: str, accidental: int, octave: int | None) -> None:
        assert parse_note(text) == Note(letter, accidental, octave)

    @pytest.mark.parametrize("text", ["", "H", "X#", "C#x", "C/four", "/4"])
    def test_invalid_text_raises(self, text: str) -> None:
        with pytest.raises(ParseError):
            parse_note(text)

    def test_str_round_trips(self):
        assert str(parse_note("Db/2")) == "Db/2"
        assert str(parse_note("D♭")) == "Db"

    def test_with_octave(self):
        assert parse_note("G#").with_octave(2).pitch == 44


class TestNoteNameToPitch:
    """Test note text to MIDI pitch conversion."""

    @pytest.mark.parametrize(
        ("text", "pitch"),
        [
            ("C", 60),
            ("C/4", 60),
            ("A/4", 69),
            ("C#/4", 61),
            ("Db/4", 61),
            ("B#/3", 60),
            ("Cb/4", 59),
            ("G/9", 127),
            ("C/-1", 0),
        ],
    )
    def test_known_pitches(self, text: str, pitch: int) -> None:
        assert note_name_to_pitch(text) == pitch

    def test_octave_needs_slash(self):
        with pytest.raises(ParseError):
            note_name_to_pitch("E2")

    def test_above_range_raises(self):
        with pytest.raises(PitchOutOfRange):
            note_name_to_pitch("G#/9")

    def test_below_range_raises(self):
        with pytest.raises(PitchOutOfRange):
            note_name_to_pitch("Cb/-1")


class TestPitchToNoteName:
    """Test MIDI pitch to note text conversion."""

    def test_sharp_spelling_without_context(self):
        assert pitch_to_note_name(61) == "C#/4"
        assert pitch_to_note_name(60) == "C/4"
        assert pitch_to_note_name(0) == "C/-1"
        assert pitch_to_note_name(127) == "G/9"

    @pytest.mark.parametrize("pitch", [-1, 128, 1000])
    def test_out_of_range_raises(self, pitch: int) -> None:
        with pytest.raises(PitchOutOfRange):
            pitch_to_note_name(pitch)

    def test_rejects_bool(self):
        with pytest.raises(PitchOutOfRange):
            pitch_to_note_name(True)

    def test_accepts_numpy_integers(self):
        assert pitch_to_note_name(np.int64(64)) == "E/4"

    def test_pitch_to_name_drops_octave(self):
        assert pitch_to_name(66) == "F#"

    def test_round_trip_every_pitch(self):
        for pitch in range(128):
            assert note_name_to_pitch(pitch_to_note_name(pitch)) == pitch

    @pytest.mark.parametrize("root", ["C", "C#", "Cb", "F", "Bb", "F#", "Gb", "Ab"])
    def test_round_trip_every_pitch_in_scale_context(self, root: str) -> None:
        context = create_scale_context(root, IONIAN)
        for pitch in range(128):
            assert note_name_to_pitch(pitch_to_note_name(pitch, context)) == pitch


class TestScaleContext:
    """Test scale-aware spelling."""

    def test_f_major_spells_b_flat(self):
        context = create_scale_context("F", IONIAN)
        assert context.note_name(70) == "B♭/4"
        assert context.contains(70)
        assert not context.contains(71)

    def test_non_scale_pitch_falls_back_to_sharps(self):
        context = create_scale_context("F", IONIAN)
        assert context.note_name(61) == "C#/4"

    def test_c_sharp_major_keeps_letter_across_octave(self):
        context = create_scale_context("C#", IONIAN)
        assert context.note_name(72) == "B♯/4"
        assert context.note_name(61) == "C♯/4"

    def test_translate_notes(self):
        context = create_scale_context("Eb", IONIAN)
        assert context.translate_notes(["D#/4", 68]) == ["E♭/4", "A♭/4"]

    def test_translate_invalid_note_raises(self):
        context = create_scale_context("Eb", IONIAN)
        with pytest.raises(ParseError):
            context.translate_notes(["Q/4"])

    def test_context_equality_ignores_table(self):
        assert create_scale_context("A", AEOLIAN) == create_scale_context("A", AEOLIAN)


class TestSpellScale:
    """Test one-letter-per-degree scale spelling."""

    def test_c_ionian(self):
        assert spell_scale("C", IONIAN) == ["C", "D", "E", "F", "G", "A", "B", "C"]

    def test_f_sharp_ionian_uses_e_sharp(self):
        assert spell_scale("F#", IONIAN) == ["F♯", "G♯", "A♯", "B", "C♯", "D♯", "E♯", "F♯"]

    def test_g_flat_ionian_uses_c_flat(self):
        assert spell_scale("Gb", IONIAN)[3] == "C♭"

    def test_stacked_accidentals(self):
        # D# harmonic minor raises the seventh to C double sharp
        assert spell_scale("D#", ["W", "H", "W", "W", "H", "A", "H"])[6] == "C𝄪"


class TestTextHelpers:
    """Test small note text helpers."""

    def test_normalize_note(self):
        assert normalize_note(" F𝄪 ") == "F##"
        assert normalize_note("B♭/3") == "Bb/3"

    def test_strip_and_add_octave(self):
        assert strip_octave("C#/4") == "C#"
        assert strip_octave("C#") == "C#"
        assert add_octave("Eb/2", 5) == "Eb/5"

    @pytest.mark.parametrize(("text", "offset"), [("", 0), ("#", 1), ("bb", -2), ("♭𝄫", -3), ("𝄪♯", 3)])
    def test_accidental_offset(self, text: str, offset: int) -> None:
        assert accidental_offset(text) == offset

    def test_accidental_offset_rejects_other_characters(self):
        with pytest.raises(ParseError, match="Invalid accidental"):
            accidental_offset("#x")

    @pytest.mark.parametrize(("offset", "glyphs"), [(0, ""), (1, "♯"), (-2, "𝄫"), (3, "𝄪♯"), (-3, "𝄫♭")])
    def test_accidental_glyphs(self, offset: int, glyphs: str) -> None:
        assert accidental_glyphs(offset) == glyphs
