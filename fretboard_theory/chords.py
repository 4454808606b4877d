"""Chord name grammar and resolver.

A chord name is read as ``<root><quality alias><modifiers>[/<bass>]`` and
resolved into the intervals and note names it denotes. The grammar is a
fixed sequence of extraction passes over the text after the root:

1. ``susN`` suspensions (a bare ``sus`` means sus4)
2. ``addN`` added tones
3. ``noN`` omissions
4. glyph normalization (♯ ♭ 𝄪 𝄫 ♮ ° Δ and the unicode minus sign)
5. ``bN`` / ``#N`` alterations, N one of 3, 5, 7, 9, 11, 13

The alterations are read after the longest quality alias that leaves
nothing else behind, so aliases that contain their own alterations
("m7b5", "m#7", "ob9", "9#5") are never broken apart, with or without
other modifiers.

The root keeps at most one accidental token, so "Bb7" is B-flat seven and
"Cb5" is a C-flat power chord. Write "C(b5)" for a C major flat five.

Examples
--------
>>> chord = resolve_chord("C")
>>> list(chord.notes)
['C/4', 'E/4', 'G/4']
>>> list(resolve_chord("Gsus4").note_names)
['G', 'C', 'D']
>>> list(resolve_chord("D#m7b5").intervals)
['P1', 'm3', 'd5', 'm7']
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fretboard_theory.config import MAX_PITCH
from fretboard_theory.errors import CatalogError, ParseError, PitchOutOfRange, TheoryError
from fretboard_theory.intervals import (
    QUALITY_ALIASES,
    ChordQuality,
    interval_degree,
    interval_to_semitones,
    quality_intervals,
    resolve_quality_alias,
)
from fretboard_theory.notation import normalize_note, note_name_to_pitch, pitch_to_note_name, strip_octave

if TYPE_CHECKING:
    from fretboard_theory.notation import ScaleContext

logger = logging.getLogger(__name__)

_ACCIDENTAL = "(?:##|bb|[#b♯♭𝄪𝄫♮])?"
ROOT_RE = re.compile(rf"^([A-G]{_ACCIDENTAL})(.*)$")
BASS_RE = re.compile(rf"^(.*)/([A-G]{_ACCIDENTAL})$")

# Longer tension numbers first so "b13" is not read as "b1" + "3"
TENSION_RE = re.compile(r"([b♭#♯])(13|11|3|5|7|9)")
SUS_RE = re.compile(r"sus(\d*)")
ADD_RE = re.compile(r"add(\d+)")
NO_RE = re.compile(r"no(\d+)")

_WORD_RES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile("major", re.IGNORECASE), "maj"),
    (re.compile("minor", re.IGNORECASE), "min"),
)

CHORD_GLYPHS: dict[str, str] = {
    "♯": "#",
    "♭": "b",
    "𝄪": "##",
    "𝄫": "bb",
    "♮": "",
    "°": "o",
    "Δ": "D",
    "−": "-",
}

# Degree -> interval written into the chord by each modifier kind
SUSPENSIONS: dict[int, str] = {2: "M2", 4: "P4"}
FLAT_TARGETS: dict[int, str] = {3: "m3", 5: "d5", 7: "m7", 9: "m9", 11: "P11", 13: "M13"}
SHARP_TARGETS: dict[int, str] = {3: "A3", 5: "A5", 7: "A7", 9: "A9", 11: "A11", 13: "A13"}

# Added tones are major extensions except on these degrees
_PERFECT_DEGREES = frozenset({1, 4, 5, 8, 11, 12, 15})

# Quality suffixes grouped the way the diatonic identifier and the
# cross-reference table consume them
CHORD_SUFFIX_GROUPS: dict[str, tuple[str, ...]] = {
    "common": ("Major", "Minor", "7", "5", "dim", "dim7", "aug", "sus2", "sus4", "maj7", "m7", "7sus4", "7b9"),
    "triads": ("M", "m", "+", "o", "b5", "sus2", "sus4"),
    "sevenths": ("7", "M7", "mM7", "m7", "+M7", "+7", "ø", "o7", "7b5", "m6", "6"),
    "nines": ("M9", "9", "7b9", "m9", "mM9", "+M9", "+9", "ø9", "o9", "ob9"),
    "elevens": ("11", "m11", "M11", "mM11", "+M11", "+11", "ø11", "o11"),
    "thirteens": ("13", "m13", "M13", "mM13", "+M13", "+13", "ø13"),
}


@dataclass(frozen=True)
class ParsedChordToken:
    """The pieces of a chord name, before any interval arithmetic.

    Parameters
    ----------
    root : str
        Root note name in ASCII spelling (e.g., "D#").
    quality_alias : str
        The alias text the quality was resolved from.
    quality : ChordQuality
        The canonical quality.
    suspensions : tuple[int, ...]
        Requested suspensions (2 or 4), in text order.
    added_tones : tuple[int, ...]
        Degrees from ``addN`` tokens.
    omitted_tones : tuple[int, ...]
        Degrees from ``noN`` tokens.
    flat_targets : tuple[int, ...]
        Degrees from ``bN`` alterations.
    sharp_targets : tuple[int, ...]
        Degrees from ``#N`` alterations.
    bass : str | None
        Explicit bass note for slash chords.
    """

    root: str
    quality_alias: str
    quality: ChordQuality
    suspensions: tuple[int, ...] = ()
    added_tones: tuple[int, ...] = ()
    omitted_tones: tuple[int, ...] = ()
    flat_targets: tuple[int, ...] = ()
    sharp_targets: tuple[int, ...] = ()
    bass: str | None = None

    @property
    def has_modifiers(self) -> bool:
        return bool(
            self.suspensions or self.added_tones or self.omitted_tones or self.flat_targets or self.sharp_targets
        )


@dataclass(frozen=True)
class ResolvedChord:
    """A fully resolved chord.

    Parameters
    ----------
    name : str
        The chord text as given.
    root : str
        Root note name in ASCII spelling.
    quality : ChordQuality
        Canonical quality before modifiers.
    intervals : tuple[str, ...]
        Final interval labels, ordered by degree.
    notes : tuple[str, ...]
        Octave-qualified note names, one per interval, followed by the bass
        note when one was given.
    pitches : tuple[int, ...]
        MIDI pitches aligned with ``notes``.
    root_pitch : int
        MIDI pitch of the root.
    bass : str | None
        Explicit bass note, if any.
    token : ParsedChordToken
        The parse the chord was built from.
    """

    name: str
    root: str
    quality: ChordQuality
    intervals: tuple[str, ...]
    notes: tuple[str, ...]
    pitches: tuple[int, ...]
    root_pitch: int
    bass: str | None
    token: ParsedChordToken

    @property
    def note_names(self) -> tuple[str, ...]:
        """Note names without octave."""
        return tuple(strip_octave(note) for note in self.notes)

    @property
    def pitch_classes(self) -> frozenset[int]:
        return frozenset(pitch % 12 for pitch in self.pitches)

    def __str__(self) -> str:
        return f"{self.name}: {' '.join(self.notes)}"


def normalize_chord_glyphs(text: str) -> str:
    """Rewrite unicode chord glyphs into the ASCII alias alphabet.

    Examples
    --------
    >>> normalize_chord_glyphs("−Δ7")
    '-D7'
    >>> normalize_chord_glyphs("m♭5")
    'mb5'
    """
    for glyph, replacement in CHORD_GLYPHS.items():
        text = text.replace(glyph, replacement)
    return text


def _collapse(text: str) -> str:
    """Remove whitespace and shorten the words Major and Minor."""
    text = re.sub(r"\s+", "", text)
    for pattern, replacement in _WORD_RES:
        text = pattern.sub(replacement, text)
    return text


def _clean(text: str) -> str:
    """Like ``_collapse`` but also drops grouping punctuation."""
    return _collapse(re.sub(r"[(),]", "", text))


def _tension_degrees(text: str) -> tuple[list[int], list[int]]:
    flats: list[int] = []
    sharps: list[int] = []
    for accidental, number in TENSION_RE.findall(text):
        target = flats if accidental in "b♭" else sharps
        target.append(int(number))
    return flats, sharps


def _split_alterations(text: str) -> tuple[str, list[int], list[int]]:
    """Split modifier-free suffix text into a quality alias and its alterations.

    The longest alias prefix followed only by ``bN`` / ``#N`` tokens wins, so
    aliases that spell their own alterations ("m#7", "ob9", "D#5") stay
    whole. Without such a prefix every alteration is extracted and the rest
    is taken as the alias.

    Examples
    --------
    >>> _split_alterations("m#7")
    ('m#7', [], [])
    >>> _split_alterations("7b9#11")
    ('7b9', [], [11])
    """
    for end in range(len(text), -1, -1):
        alias, rest = text[:end], text[end:]
        if alias in QUALITY_ALIASES and not TENSION_RE.sub("", rest):
            flats, sharps = _tension_degrees(rest)
            return alias, flats, sharps
    flats, sharps = _tension_degrees(text)
    return TENSION_RE.sub("", text), flats, sharps


def parse_chord_suffix(root: str, suffix: str, bass: str | None = None) -> ParsedChordToken:
    """Parse the quality-and-modifier text that follows a chord root.

    Parameters
    ----------
    root : str
        Root note name. It is not re-parsed from ``suffix``, so callers that
        already know the root avoid the "Cb5" ambiguity.
    suffix : str
        Quality alias plus modifiers (e.g., "m7", "7sus4", "b5", "add9").
    bass : str | None
        Optional explicit bass note.

    Returns
    -------
    ParsedChordToken
        The parsed chord pieces.

    Raises
    ------
    ParseError
        If a modifier is malformed.
    UnknownChordType
        If the remaining alias is not in the alias table.

    Examples
    --------
    >>> token = parse_chord_suffix("C", "7sus4")
    >>> token.quality.value, token.suspensions
    ('Dominant Seventh', (4,))
    """
    text = _clean(suffix)
    root = normalize_note(root)
    bass = normalize_note(bass) if bass else None

    suspensions: list[int] = []
    for number in SUS_RE.findall(text):
        degree = int(number) if number else 4
        if degree not in SUSPENSIONS:
            msg = f"Unsupported suspension: sus{number}"
            raise ParseError(msg)
        suspensions.append(degree)
    text = SUS_RE.sub("", text)

    added = [int(number) for number in ADD_RE.findall(text)]
    text = ADD_RE.sub("", text)

    omitted = [int(number) for number in NO_RE.findall(text)]
    text = NO_RE.sub("", text)

    alias, flats, sharps = _split_alterations(normalize_chord_glyphs(text))
    if "/" in alias:
        msg = f"Invalid bass note in chord suffix: {suffix!r}"
        raise ParseError(msg)
    quality = resolve_quality_alias(alias)
    return ParsedChordToken(
        root=root,
        quality_alias=alias,
        quality=quality,
        suspensions=tuple(suspensions),
        added_tones=tuple(added),
        omitted_tones=tuple(omitted),
        flat_targets=tuple(flats),
        sharp_targets=tuple(sharps),
        bass=bass,
    )


def parse_chord_name(name: str) -> ParsedChordToken:
    """Parse chord text into its root, quality, modifiers and bass.

    Parameters
    ----------
    name : str
        Chord text such as "C", "Am7/G", "Gsus4add9" or "F♯ø".

    Returns
    -------
    ParsedChordToken
        The parsed chord pieces.

    Raises
    ------
    ParseError
        If no root note can be found or a modifier is malformed.
    UnknownChordType
        If the quality alias is not in the alias table.

    Examples
    --------
    >>> token = parse_chord_name("Am7/G")
    >>> token.root, token.quality.value, token.bass
    ('A', 'Minor Seventh', 'G')
    """
    text = _collapse(name)
    match = ROOT_RE.match(text)
    if match is None:
        msg = f"Invalid chord name, no root note found: {name!r}"
        raise ParseError(msg)
    root, rest = match.groups()
    bass = None
    bass_match = BASS_RE.match(rest)
    if bass_match is not None:
        rest, bass = bass_match.groups()
    return parse_chord_suffix(root, rest, bass)


def _added_interval(degree: int) -> str:
    label = f"P{degree}" if degree in _PERFECT_DEGREES else f"M{degree}"
    # Validates the degree against the interval vocabulary
    interval_to_semitones(label)
    return label


def build_intervals(token: ParsedChordToken) -> list[str]:
    """Apply a token's modifiers to its quality formula.

    The formula is copied into a degree -> interval map, then suspensions,
    flats, sharps, added tones and omissions are applied in that order.
    An omission drops every interval whose label contains the omitted
    number, and is a no-op when nothing matches.

    Examples
    --------
    >>> build_intervals(parse_chord_name("C7sus4"))
    ['P1', 'P4', 'P5', 'm7']
    >>> build_intervals(parse_chord_name("Cadd9no5"))
    ['P1', 'M3', 'M9']
    """
    degrees = {interval_degree(interval): interval for interval in quality_intervals(token.quality)}
    for suspension in token.suspensions:
        degrees[3] = SUSPENSIONS[suspension]
    for degree in token.flat_targets:
        degrees[degree] = FLAT_TARGETS[degree]
    for degree in token.sharp_targets:
        degrees[degree] = SHARP_TARGETS[degree]
    for degree in token.added_tones:
        degrees[degree] = _added_interval(degree)
    for omitted in token.omitted_tones:
        degrees = {degree: interval for degree, interval in degrees.items() if str(omitted) not in interval}
    return [degrees[degree] for degree in sorted(degrees)]


def resolve_token(token: ParsedChordToken, name: str | None = None, context: ScaleContext | None = None) -> ResolvedChord:
    """Render a parsed token into intervals, pitches and note names.

    Raises
    ------
    PitchOutOfRange
        If any chord tone lies above pitch 127.
    """
    intervals = build_intervals(token)
    root_pitch = note_name_to_pitch(token.root)
    pitches = []
    for interval in intervals:
        pitch = root_pitch + interval_to_semitones(interval)
        if pitch > MAX_PITCH:
            msg = f"Chord tone {interval} above {token.root} exceeds pitch {MAX_PITCH}: {pitch}"
            raise PitchOutOfRange(msg)
        pitches.append(pitch)
    if token.bass:
        pitches.append(note_name_to_pitch(token.bass))
    notes = tuple(pitch_to_note_name(pitch, context) for pitch in pitches)
    if name is None:
        name = f"{token.root}{token.quality_alias}" + (f"/{token.bass}" if token.bass else "")
    logger.debug("Resolved %r as %s: %s", name, token.quality.value, " ".join(intervals))
    return ResolvedChord(
        name=name,
        root=token.root,
        quality=token.quality,
        intervals=tuple(intervals),
        notes=notes,
        pitches=tuple(pitches),
        root_pitch=root_pitch,
        bass=token.bass,
        token=token,
    )


def resolve_chord(name: str, context: ScaleContext | None = None) -> ResolvedChord:
    """Resolve chord text into its intervals and note names.

    Parameters
    ----------
    name : str
        Chord text, e.g. "C7", "D#m7b5", "Gsus4add9", "Am7/G".
    context : ScaleContext | None
        Optional scale whose spelling should be used for the note names.

    Returns
    -------
    ResolvedChord
        The resolved chord. Notes start from the root at octave 4. An
        explicit bass note is appended after the chord tones.

    Raises
    ------
    ParseError
        If the chord text is malformed.
    UnknownChordType
        If the quality alias is unknown.
    PitchOutOfRange
        If a chord tone exceeds pitch 127.

    Examples
    --------
    >>> list(resolve_chord("Am7/G").notes)
    ['A/4', 'C/5', 'E/5', 'G/5', 'G/4']
    """
    return resolve_token(parse_chord_name(name), name=name, context=context)


def resolve_chord_parts(
    root: str,
    suffix: str = "",
    bass: str | None = None,
    context: ScaleContext | None = None,
) -> ResolvedChord:
    """Resolve a chord given its root and suffix separately.

    Examples
    --------
    >>> list(resolve_chord_parts("C", "b5").note_names)
    ['C', 'E', 'F#']
    """
    token = parse_chord_suffix(root, suffix, bass)
    name = f"{token.root}{suffix}" + (f"/{token.bass}" if token.bass else "")
    return resolve_token(token, name=name, context=context)


def _validate_suffix_groups(groups: dict[str, tuple[str, ...]]) -> None:
    for group, suffixes in groups.items():
        for suffix in suffixes:
            try:
                parse_chord_suffix("C", suffix)
            except TheoryError as e:
                msg = f"Suffix {suffix!r} in group {group!r} does not resolve: {e}"
                raise CatalogError(msg) from e


_validate_suffix_groups(CHORD_SUFFIX_GROUPS)
