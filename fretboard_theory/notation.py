"""Conversion between MIDI pitches and spelled note names.

Note text has the form ``<letter><accidentals>[/<octave>]`` (e.g., "C#/4",
"Eb", "F𝄪/3"). Accidentals may be written with ASCII (``#``, ``b``) or
unicode glyphs (♯ ♭ 𝄪 𝄫 ♮). A missing octave means octave 4, so "C" is
middle C, pitch 60.

Without a scale context pitches are spelled with sharps. A ``ScaleContext``
spells pitches the way a given scale does, one letter per scale degree.

Examples
--------
>>> note_name_to_pitch("C")
60
>>> pitch_to_note_name(61)
'C#/4'
>>> context = create_scale_context("F", ["W", "W", "H", "W", "W", "W", "H"])
>>> context.note_name(70)
'B♭/4'
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from numbers import Integral

from fretboard_theory.config import DEFAULT_OCTAVE, MAX_PITCH, MIN_PITCH
from fretboard_theory.errors import ParseError, PitchOutOfRange
from fretboard_theory.intervals import step_to_semitones

SHARP = "♯"
FLAT = "♭"
DOUBLE_SHARP = "𝄪"
DOUBLE_FLAT = "𝄫"
NATURAL = "♮"

# Letter order used when walking a scale, one letter per degree
LETTERS = ("C", "D", "E", "F", "G", "A", "B")

NATURAL_SEMITONES: dict[str, int] = {
    "C": 0,
    "D": 2,
    "E": 4,
    "F": 5,
    "G": 7,
    "A": 9,
    "B": 11,
}

CHROMATIC_SHARP: tuple[str, ...] = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")

# Unicode glyph to ASCII spelling; the natural sign is dropped
_GLYPH_TO_ASCII: dict[str, str] = {
    SHARP: "#",
    FLAT: "b",
    DOUBLE_SHARP: "##",
    DOUBLE_FLAT: "bb",
    NATURAL: "",
}

# Octaves walked when building a scale translation table
_TABLE_OCTAVES = range(-1, 10)


@dataclass(frozen=True)
class Note:
    """A spelled note.

    Parameters
    ----------
    letter : str
        Base letter, one of A-G.
    accidental : int
        Semitone offset from the natural letter (-1 for a flat, 2 for a
        double sharp, ...).
    octave : int | None
        Octave number, or None when the note is octave-less.

    Examples
    --------
    >>> note = parse_note("Eb/3")
    >>> note.letter, note.accidental, note.octave
    ('E', -1, 3)
    >>> note.pitch
    51
    >>> str(note)
    'Eb/3'
    """

    letter: str
    accidental: int = 0
    octave: int | None = None

    @property
    def name(self) -> str:
        """Note name in ASCII spelling, without octave."""
        return self.letter + ascii_accidentals(self.accidental)

    @property
    def pitch_class(self) -> int:
        return (NATURAL_SEMITONES[self.letter] + self.accidental) % 12

    @property
    def pitch(self) -> int:
        """MIDI pitch, using the default octave when none is set.

        Raises
        ------
        PitchOutOfRange
            If the note lies outside 0-127.
        """
        octave = DEFAULT_OCTAVE if self.octave is None else self.octave
        pitch = (octave + 1) * 12 + NATURAL_SEMITONES[self.letter] + self.accidental
        if pitch < MIN_PITCH or pitch > MAX_PITCH:
            msg = f"Note out of range: {self} -> {pitch}"
            raise PitchOutOfRange(msg)
        return pitch

    def with_octave(self, octave: int | None) -> Note:
        return Note(self.letter, self.accidental, octave)

    def __str__(self) -> str:
        if self.octave is None:
            return self.name
        return f"{self.name}/{self.octave}"


def normalize_note(note: str) -> str:
    """Replace unicode accidental glyphs with their ASCII spelling.

    Examples
    --------
    >>> normalize_note(" F𝄪 ")
    'F##'
    >>> normalize_note("B♭/3")
    'Bb/3'
    """
    result = note.strip()
    for glyph, replacement in _GLYPH_TO_ASCII.items():
        result = result.replace(glyph, replacement)
    return result


def strip_octave(note: str) -> str:
    """Drop the "/octave" suffix from a note name, if any."""
    return note.split("/", 1)[0]


def add_octave(note: str, octave: int = DEFAULT_OCTAVE) -> str:
    """Attach an octave to a note name, replacing any existing one."""
    return f"{strip_octave(note)}/{octave}"


def accidental_offset(accidentals: str) -> int:
    """Count the semitone offset of an accidental run.

    Parameters
    ----------
    accidentals : str
        Accidental characters following the letter, ASCII or unicode.

    Returns
    -------
    int
        Net offset (sharps positive, flats negative).

    Raises
    ------
    ParseError
        If the run contains anything other than accidentals.

    Examples
    --------
    >>> accidental_offset("##")
    2
    >>> accidental_offset("♭𝄫")
    -3
    """
    offset = 0
    for char in normalize_note(accidentals):
        if char == "#":
            offset += 1
        elif char == "b":
            offset -= 1
        else:
            msg = f"Invalid accidental: {accidentals!r}"
            raise ParseError(msg)
    return offset


def accidental_glyphs(offset: int) -> str:
    """Render a semitone offset with unicode glyphs, stacking doubles.

    Examples
    --------
    >>> accidental_glyphs(-1)
    '♭'
    >>> accidental_glyphs(3)
    '𝄪♯'
    """
    if offset == 0:
        return ""
    single, double = (SHARP, DOUBLE_SHARP) if offset > 0 else (FLAT, DOUBLE_FLAT)
    doubles, singles = divmod(abs(offset), 2)
    return double * doubles + single * singles


def ascii_accidentals(offset: int) -> str:
    """Render a semitone offset with ``#`` or ``b`` characters."""
    if offset >= 0:
        return "#" * offset
    return "b" * -offset


def parse_note(note: str) -> Note:
    """Parse note text into a ``Note``.

    Parameters
    ----------
    note : str
        Note text such as "C", "c#/5", "E♭/3" or "F𝄪".

    Returns
    -------
    Note
        The parsed note. ``octave`` is None when the text carries none.

    Raises
    ------
    ParseError
        If the letter, accidental run or octave cannot be interpreted.
    """
    text = normalize_note(note)
    octave: int | None = None
    if "/" in text:
        text, octave_text = text.split("/", 1)
        try:
            octave = int(octave_text)
        except ValueError:
            msg = f"Invalid octave in note: {note!r}"
            raise ParseError(msg) from None
    if not text:
        msg = f"Empty note name: {note!r}"
        raise ParseError(msg)
    letter = text[0].upper()
    if letter not in NATURAL_SEMITONES:
        msg = f"Invalid base note: {text[0]!r}"
        raise ParseError(msg)
    return Note(letter=letter, accidental=accidental_offset(text[1:]), octave=octave)


def note_name_to_pitch(note: str) -> int:
    """Convert note text to a MIDI pitch (default octave 4).

    Parameters
    ----------
    note : str
        Note text, e.g. "C", "Db/5", "B♯/3".

    Returns
    -------
    int
        MIDI pitch, 0-127.

    Raises
    ------
    ParseError
        If the note text is malformed.
    PitchOutOfRange
        If the resulting pitch is outside 0-127.

    Examples
    --------
    >>> note_name_to_pitch("A/4")
    69
    >>> note_name_to_pitch("Cb")
    59
    """
    return parse_note(note).pitch


def _check_pitch(pitch: int) -> None:
    if isinstance(pitch, bool) or not isinstance(pitch, Integral) or pitch < MIN_PITCH or pitch > MAX_PITCH:
        msg = f"MIDI pitch must be between {MIN_PITCH} and {MAX_PITCH}: {pitch!r}"
        raise PitchOutOfRange(msg)


def chromatic_note_name(pitch: int) -> str:
    """Spell a pitch with sharps, e.g. 61 -> "C#/4"."""
    _check_pitch(pitch)
    octave, pitch_class = divmod(pitch, 12)
    return f"{CHROMATIC_SHARP[pitch_class]}/{octave - 1}"


def pitch_to_note_name(pitch: int, context: ScaleContext | None = None) -> str:
    """Convert a MIDI pitch to octave-qualified note text.

    Parameters
    ----------
    pitch : int
        MIDI pitch, 0-127.
    context : ScaleContext | None
        Scale whose spelling should be used. Pitches outside the scale, or
        any pitch when no context is given, are spelled with sharps.

    Returns
    -------
    str
        Note text such as "C#/4" or "D♭/4".

    Raises
    ------
    PitchOutOfRange
        If the pitch is outside 0-127.

    Examples
    --------
    >>> pitch_to_note_name(60)
    'C/4'
    >>> pitch_to_note_name(70, create_scale_context("F", ["W", "W", "H", "W", "W", "W", "H"]))
    'B♭/4'
    """
    if context is not None:
        return context.note_name(pitch)
    return chromatic_note_name(pitch)


def pitch_to_name(pitch: int, context: ScaleContext | None = None) -> str:
    """Like ``pitch_to_note_name`` but without the octave."""
    return strip_octave(pitch_to_note_name(pitch, context))


def _letter_steps(semitone_steps: Sequence[int]) -> list[int]:
    """Decide how many letters each step advances so a pass covers A-G once.

    Seven-step formulas advance one letter per step. Shorter formulas give
    the spare letters to their widest steps, earliest first. Longer formulas
    hold the letter on their narrowest steps, latest first.
    """
    count = len(semitone_steps)
    steps = [1] * count
    by_width = sorted(range(count), key=lambda i: (-semitone_steps[i], i))
    if count < len(LETTERS):
        for index in by_width[: len(LETTERS) - count]:
            steps[index] += 1
    elif count > len(LETTERS):
        for index in list(reversed(by_width))[: count - len(LETTERS)]:
            steps[index] = 0
    return steps


def spell_scale(root: str, formula: Sequence[str]) -> list[str]:
    """Spell a scale from a root and step tokens, one letter per degree.

    Parameters
    ----------
    root : str
        Root note name (octave is ignored).
    formula : Sequence[str]
        Step tokens, each one of H, W, A or P.

    Returns
    -------
    list[str]
        ``len(formula) + 1`` octave-less names spelled with unicode glyphs.
        The last entry is the root an octave up when the formula spans an
        octave.

    Raises
    ------
    ParseError
        If the root or a step token cannot be parsed.

    Examples
    --------
    >>> spell_scale("C", ["W", "W", "H", "W", "W", "W", "H"])
    ['C', 'D', 'E', 'F', 'G', 'A', 'B', 'C']
    >>> spell_scale("F#", ["W", "W", "H", "W", "W", "W", "H"])[3]
    'B'
    """
    root_note = parse_note(root)
    semitone_steps = [step_to_semitones(step) for step in formula]
    letter_index = LETTERS.index(root_note.letter)
    current = root_note.pitch_class
    names = [root_note.letter + accidental_glyphs(root_note.accidental)]
    for semitones, letter_step in zip(semitone_steps, _letter_steps(semitone_steps)):
        current = (current + semitones) % 12
        letter_index = (letter_index + letter_step) % len(LETTERS)
        letter = LETTERS[letter_index]
        needed = (current - NATURAL_SEMITONES[letter]) % 12
        # Past a tritone, spell with flats instead
        if needed > 6:
            needed -= 12
        names.append(letter + accidental_glyphs(needed))
    return names


@dataclass(frozen=True)
class ScaleContext:
    """Pitch spelling biased toward one scale.

    Build with ``create_scale_context``.

    Parameters
    ----------
    root : str
        Root note name.
    formula : tuple[str, ...]
        Step tokens of the scale.
    spelled_scale : tuple[str, ...]
        The scale's octave-less names, octave root included.
    table : dict[int, str]
        Pitch to octave-qualified name for every pitch in the scale.
    """

    root: str
    formula: tuple[str, ...]
    spelled_scale: tuple[str, ...]
    table: dict[int, str] = field(default_factory=dict, compare=False, hash=False, repr=False)

    def note_name(self, pitch: int) -> str:
        """Spell a pitch, falling back to sharps for non-scale pitches."""
        _check_pitch(pitch)
        if pitch in self.table:
            return self.table[pitch]
        return chromatic_note_name(pitch)

    def contains(self, pitch: int) -> bool:
        return pitch in self.table

    def translate_notes(self, notes: Iterable[int | str]) -> list[str]:
        """Respell pitches or note text in this scale's spelling.

        Raises
        ------
        ParseError
            If a note text entry cannot be parsed.
        PitchOutOfRange
            If a pitch, or the pitch a note text names, is outside 0-127.

        Examples
        --------
        >>> context = create_scale_context("Eb", ["W", "W", "H", "W", "W", "W", "H"])
        >>> context.translate_notes(["D#/4", 68])
        ['E♭/4', 'A♭/4']
        """
        translated = []
        for note in notes:
            pitch = int(note) if isinstance(note, Integral) else note_name_to_pitch(note)
            translated.append(self.note_name(pitch))
        return translated


def create_scale_context(root: str, formula: Sequence[str]) -> ScaleContext:
    """Build a ``ScaleContext`` for a root and step formula.

    Every non-octave scale note is mapped at every octave that stays within
    0-127. Names keep their scale letter even across an octave boundary, so
    in C# major pitch 72 is spelled "B♯/4".

    Parameters
    ----------
    root : str
        Root note name.
    formula : Sequence[str]
        Step tokens (H, W, A, P).

    Returns
    -------
    ScaleContext
        The context with its precomputed pitch table.
    """
    spelled = spell_scale(root, formula)
    table: dict[int, str] = {}
    for name in spelled[:-1]:
        note = parse_note(name)
        base = 60 + NATURAL_SEMITONES[note.letter] + note.accidental
        for octave in _TABLE_OCTAVES:
            pitch = base + (octave - DEFAULT_OCTAVE) * 12
            if MIN_PITCH <= pitch <= MAX_PITCH:
                table[pitch] = f"{name}/{octave}"
    return ScaleContext(
        root=strip_octave(root),
        formula=tuple(formula),
        spelled_scale=tuple(spelled),
        table=table,
    )
