"""Tests for scale generation and the scale catalog."""

import pytest

from fretboard_theory.errors import CatalogError, ParseError, PitchOutOfRange
from fretboard_theory.notation import LETTERS, parse_note
from fretboard_theory.scales import (
    IONIAN,
    SCALES_BY_ID,
    find_scale,
    generate_catalog_scale,
    generate_scale,
    get_scale,
    heptatonic_scale_ids,
    is_scale_note,
    scales_by_size,
    validate_catalog,
)

ROOTS = ["C", "G", "D", "F", "Bb", "Eb", "F#"]


class TestGenerateScale:
    """Test spelling scales from step formulas."""

    def test_c_ionian(self):
        scale = generate_scale("C", IONIAN)
        assert scale.notes == ("C", "D", "E", "F", "G", "A", "B", "C")
        assert scale.pitches == (60, 62, 64, 65, 67, 69, 71, 72)
        assert scale.degrees == ("C", "D", "E", "F", "G", "A", "B")

    def test_e_harmonic_minor(self):
        scale = generate_scale("E", ["W", "H", "W", "W", "H", "A", "H"])
        assert scale.notes == ("E", "F♯", "G", "A", "B", "C", "D♯", "E")

    def test_root_with_octave(self):
        assert generate_scale("A/2", IONIAN).pitches[0] == 45

    def test_pentatonic_skips_letters_on_wide_steps(self):
        scale = generate_catalog_scale("Pentatonic-1", "C")
        assert scale.notes == ("C", "D", "E", "G", "A", "C")

    def test_japanese(self):
        scale = generate_catalog_scale("Pentatonic-6", "C")
        assert scale.notes == ("C", "D", "E♭", "G", "A♭", "C")
        assert scale.pitches == (60, 62, 63, 67, 68, 72)
        assert scale.name == "Japanese"

    def test_major_hexatonic(self):
        assert generate_catalog_scale("Hexatonic-1", "C").notes == ("C", "D", "E", "F", "G", "A", "C")

    def test_unknown_step_raises(self):
        with pytest.raises(ParseError):
            generate_scale("C", ["W", "X"])

    def test_pitch_above_range_raises(self):
        with pytest.raises(PitchOutOfRange):
            generate_scale("G/9", IONIAN)

    def test_context_matches_scale(self):
        context = generate_scale("F", IONIAN).context()
        assert context.note_name(70) == "B♭/4"

    @pytest.mark.parametrize("scale_id", sorted(SCALES_BY_ID))
    def test_every_catalog_scale_is_spelled_consistently(self, scale_id: str) -> None:
        for root in ROOTS:
            scale = generate_catalog_scale(scale_id, root)
            assert len(scale.notes) == len(scale.formula) + 1
            assert scale.notes[-1] == scale.notes[0]
            assert scale.pitches[-1] - scale.pitches[0] == 12
            letters = [note[0] for note in scale.degrees]
            assert len(set(letters)) == len(letters)
            assert all(letter in LETTERS for letter in letters)
            for note, pitch in zip(scale.notes, scale.pitches):
                assert parse_note(note).pitch_class == pitch % 12

    @pytest.mark.parametrize("scale_id", heptatonic_scale_ids())
    def test_heptatonic_scales_use_every_letter(self, scale_id: str) -> None:
        for root in ROOTS:
            letters = {note[0] for note in generate_catalog_scale(scale_id, root).degrees}
            assert letters == set(LETTERS)


class TestCatalog:
    """Test catalog lookup and validation."""

    def test_catalog_sizes(self):
        assert len(heptatonic_scale_ids()) == 49
        assert len(scales_by_size(6)) == 7
        assert len(scales_by_size(5)) == 6

    def test_get_scale(self):
        definition = get_scale("Major-2")
        assert definition.name == "Dorian"
        assert definition.scale_id == "Major-2"
        assert definition.is_heptatonic

    def test_get_unknown_scale_raises(self):
        with pytest.raises(ValueError, match="Unknown scale"):
            get_scale("Major-9")

    @pytest.mark.parametrize(
        ("name", "scale_id"),
        [("Freygish", "Harmonic Minor-5"), ("jazz minor", "Melodic Minor-1"), ("INSEN", "Pentatonic-6")],
    )
    def test_find_scale(self, name: str, scale_id: str) -> None:
        assert find_scale(name).scale_id == scale_id

    def test_find_unknown_scale_raises(self):
        with pytest.raises(ValueError, match="Unknown scale"):
            find_scale("Nonexistent")

    def test_accepts_step_sequences(self):
        catalog = validate_catalog({"Test": [{"name": "Whole Tone", "formula": ["W"] * 6}]})
        assert catalog["Test"][0].formula == ("W",) * 6

    @pytest.mark.parametrize(
        ("entry", "message"),
        [
            ({"name": "Broken"}, "needs both a name and a formula"),
            ({"formula": "W W H W W W H"}, "needs both a name and a formula"),
            ({"name": "Broken", "formula": "W W Q W W W H"}, "unknown steps"),
            ({"name": "Broken", "formula": "W W W"}, "spans 6 semitones"),
            ({"name": "Broken", "formula": "W W H W W W H", "mode": 1}, "unexpected keys"),
        ],
    )
    def test_invalid_entries_raise(self, entry: dict, message: str) -> None:
        with pytest.raises(CatalogError, match=message):
            validate_catalog({"Test": [entry]})


class TestIsScaleNote:
    """Test scale membership by pitch class."""

    @pytest.mark.parametrize(("note", "expected"), [("E", True), ("Fb", True), ("B#/2", True), ("Bb", False)])
    def test_membership(self, note: str, expected: bool) -> None:
        assert is_scale_note(note, generate_scale("C", IONIAN)) is expected

    def test_unparseable_note(self):
        assert not is_scale_note("zz", generate_scale("C", IONIAN))
