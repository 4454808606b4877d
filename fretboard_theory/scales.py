"""Scale generation and the static scale catalog.

A scale formula is a sequence of step tokens: ``H`` (1 semitone), ``W``
(2), ``A`` (3) and ``P`` (4). ``generate_scale`` spells the scale one
letter per degree and returns both names and pitches.

The catalog is plain data grouped by family. It is validated when this
module is imported: an entry with a missing formula, an unknown step token,
or steps that do not add up to an octave raises ``CatalogError``.

Examples
--------
>>> scale = generate_scale("C", IONIAN)
>>> list(scale.notes)
['C', 'D', 'E', 'F', 'G', 'A', 'B', 'C']
>>> list(scale.pitches)
[60, 62, 64, 65, 67, 69, 71, 72]
>>> get_scale("Harmonic Minor-1").name
'Harmonic Minor'
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from fretboard_theory.config import MAX_PITCH
from fretboard_theory.errors import CatalogError, PitchOutOfRange, TheoryError
from fretboard_theory.intervals import STEP_SEMITONES, step_to_semitones
from fretboard_theory.notation import ScaleContext, create_scale_context, parse_note, spell_scale

IONIAN: tuple[str, ...] = ("W", "W", "H", "W", "W", "W", "H")

OCTAVE_SEMITONES = 12


@dataclass(frozen=True)
class ScaleDefinition:
    """One catalog entry.

    Parameters
    ----------
    family : str
        Family name (e.g., "Major", "Harmonic Minor").
    index : int
        1-based position within the family (the mode number).
    name : str
        Primary name.
    formula : tuple[str, ...]
        Step tokens.
    alternative_names : tuple[str, ...]
        Other names the scale goes by.
    """

    family: str
    index: int
    name: str
    formula: tuple[str, ...]
    alternative_names: tuple[str, ...] = ()

    @property
    def scale_id(self) -> str:
        """Identifier of the form "<family>-<index>", e.g. "Major-1"."""
        return f"{self.family}-{self.index}"

    @property
    def size(self) -> int:
        return len(self.formula)

    @property
    def is_heptatonic(self) -> bool:
        return self.size == 7


@dataclass(frozen=True)
class Scale:
    """A generated scale.

    Parameters
    ----------
    root : str
        Root note name as given.
    formula : tuple[str, ...]
        Step tokens.
    notes : tuple[str, ...]
        Spelled names without octave, ``len(formula) + 1`` long; the last
        entry is the root an octave up.
    pitches : tuple[int, ...]
        MIDI pitches aligned with ``notes``.
    name : str | None
        Catalog name, when generated from a catalog entry.
    """

    root: str
    formula: tuple[str, ...]
    notes: tuple[str, ...]
    pitches: tuple[int, ...]
    name: str | None = None

    @property
    def degrees(self) -> tuple[str, ...]:
        """The scale notes without the closing octave root."""
        return self.notes[:-1]

    def context(self) -> ScaleContext:
        return create_scale_context(self.root, self.formula)


def generate_scale(root: str, formula: Sequence[str], name: str | None = None) -> Scale:
    """Generate a scale from a root and a step formula.

    Parameters
    ----------
    root : str
        Root note, optionally with an octave (default octave 4).
    formula : Sequence[str]
        Step tokens, each one of H, W, A or P.
    name : str | None
        Optional label carried on the result.

    Returns
    -------
    Scale
        Names spelled one letter per degree, plus absolute pitches.

    Raises
    ------
    ParseError
        If the root or a step token is malformed.
    PitchOutOfRange
        If the scale climbs above pitch 127.

    Examples
    --------
    >>> list(generate_scale("E", ["W", "H", "W", "W", "H", "A", "H"]).notes)
    ['E', 'F♯', 'G', 'A', 'B', 'C', 'D♯', 'E']
    """
    formula = tuple(formula)
    notes = spell_scale(root, formula)
    pitch = parse_note(root).pitch
    pitches = [pitch]
    for step in formula:
        pitch += step_to_semitones(step)
        if pitch > MAX_PITCH:
            msg = f"Scale from {root} exceeds pitch {MAX_PITCH}"
            raise PitchOutOfRange(msg)
        pitches.append(pitch)
    return Scale(root=root, formula=formula, notes=tuple(notes), pitches=tuple(pitches), name=name)


def generate_catalog_scale(scale_id: str, root: str) -> Scale:
    """Generate a catalog scale by id, e.g. "Major-2" for Dorian."""
    definition = get_scale(scale_id)
    return generate_scale(root, definition.formula, name=definition.name)


# Raw catalog entries, grouped by family. Entry order is mode order.
_RAW_CATALOG: dict[str, list[dict[str, object]]] = {
    "Major": [
        {"name": "Ionian", "formula": "W W H W W W H", "alternative_names": ["Ionian", "Major"]},
        {"name": "Dorian", "formula": "W H W W W H W", "alternative_names": ["Dorian"]},
        {"name": "Phrygian", "formula": "H W W W H W W", "alternative_names": ["Phrygian"]},
        {"name": "Lydian", "formula": "W W W H W W H", "alternative_names": ["Lydian"]},
        {"name": "Mixolydian", "formula": "W W H W W H W", "alternative_names": ["Mixolydian"]},
        {"name": "Aeolian", "formula": "W H W W H W W", "alternative_names": ["Aeolian", "Natural Minor"]},
        {"name": "Locrian", "formula": "H W W H W W W", "alternative_names": ["Locrian"]},
    ],
    "Harmonic Minor": [
        {"name": "Harmonic Minor", "formula": "W H W W H A H", "alternative_names": ["Harmonic Minor", "Aeolian ♮7"]},
        {"name": "Locrian ♮6", "formula": "H W W H A H W", "alternative_names": ["Locrian ♮6"]},
        {"name": "Ionian ♯5", "formula": "W W H A H W H", "alternative_names": ["Ionian ♯5", "Augmented Major"]},
        {
            "name": "Ukrainian Dorian",
            "formula": "W H A H W H W",
            "alternative_names": [
                "Ukrainian Dorian",
                "Dorian #11",
                "Dorian #4",
                "Romanian Minor",
                "Arabic Nikriz",
                "Mi Sheberakh",
                "Altered Dorian",
            ],
        },
        {
            "name": "Phrygian Dominant",
            "formula": "H A H W H W W",
            "alternative_names": ["Phrygian Dominant", "Hijaz", "Double Harmonic Major ♭7", "Freygish"],
        },
        {"name": "Lydian #9", "formula": "A H W H W W H", "alternative_names": ["Lydian #9"]},
        {
            "name": "Super-Locrian 𝄫7",
            "formula": "H W H W W H A",
            "alternative_names": ["Super-Locrian 𝄫7", "Altered Diminished", "Ultralocrian"],
        },
    ],
    "Harmonic Major": [
        {"name": "Harmonic Major", "formula": "W W H W H A H", "alternative_names": ["Harmonic Major"]},
        {"name": "Locrian ♮2 ♮6", "formula": "W H W H A H W", "alternative_names": ["Locrian ♮2 ♮6", "Dorian ♭5"]},
        {
            "name": "Altered Dominant ♮5",
            "formula": "H W H A H W W",
            "alternative_names": ["Altered Dominant ♮5", "Phrygian ♭4"],
        },
        {"name": "Jazz Minor ♯4", "formula": "W H A H W W H", "alternative_names": ["Jazz Minor ♯4", "Lydian ♭3"]},
        {"name": "Mixolydian ♭2", "formula": "H A H W W H W", "alternative_names": ["Mixolydian ♭2"]},
        {"name": "Lydian Augmented ♯2", "formula": "A H W W H W H", "alternative_names": ["Lydian Augmented ♯2"]},
        {"name": "Locrian 𝄫7", "formula": "H W W H W H A", "alternative_names": ["Locrian 𝄫7"]},
    ],
    "Melodic Minor": [
        {"name": "Melodic Minor", "formula": "W H W W W W H", "alternative_names": ["Melodic Minor", "Jazz Minor"]},
        {"name": "Dorian ♭2", "formula": "H W W W W H W", "alternative_names": ["Dorian ♭2", "Phrygian ♮6"]},
        {"name": "Lydian Augmented", "formula": "W W W W H W H", "alternative_names": ["Lydian Augmented"]},
        {
            "name": "Acoustic",
            "formula": "W W W H W H W",
            "alternative_names": ["Acoustic", "Lydian Dominant", "Mixolydian ♯4", "Overtone"],
        },
        {
            "name": "Aeolian Dominant",
            "formula": "W W H W H W W",
            "alternative_names": ["Mixolydian ♭6", "Aeolian Dominant", "Descending Melodic Minor", "Hindu"],
        },
        {
            "name": "Half Diminished",
            "formula": "W H W H W W W",
            "alternative_names": ["Aeolian ♭5", "Half Diminished", "Locrian ♮2"],
        },
        {
            "name": "Altered",
            "formula": "H W H W W W W",
            "alternative_names": ["Altered", "Super Locrian", "Altered Dominant"],
        },
    ],
    "Double Harmonic Major": [
        {
            "name": "Double Harmonic Major",
            "formula": "H A H W H A H",
            "alternative_names": ["Double Harmonic Major", "Byzantine", "Gypsy Major", "Arabic"],
        },
        {"name": "Lydian ♯2 ♯6", "formula": "A H W H A H H", "alternative_names": ["Lydian ♯2 ♯6"]},
        {"name": "Ultraphrygian", "formula": "H W H A H H A", "alternative_names": ["Ultraphrygian"]},
        {"name": "Hungarian Minor", "formula": "W H A H H A H", "alternative_names": ["Hungarian Minor", "Gypsy Minor"]},
        {"name": "Oriental", "formula": "H A H H A H W", "alternative_names": ["Oriental"]},
        {"name": "Ionian ♯2 ♯5", "formula": "A H H A H W H", "alternative_names": ["Ionian ♯2 ♯5"]},
        {"name": "Locrian 𝄫3 𝄫7", "formula": "H H A H W H A", "alternative_names": ["Locrian 𝄫3 𝄫7"]},
    ],
    "Neapolitan Major": [
        {"name": "Neapolitan Major", "formula": "H W W W W W H", "alternative_names": ["Neapolitan Major"]},
        {
            "name": "Leading Whole Tone",
            "formula": "W W W W W H H",
            "alternative_names": ["Leading Whole Tone", "Lydian Augmented ♯6"],
        },
        {
            "name": "Lydian Augmented Dominant",
            "formula": "W W W W H H W",
            "alternative_names": ["Lydian Augmented Dominant"],
        },
        {
            "name": "Lydian Dominant ♭6",
            "formula": "W W W H H W W",
            "alternative_names": ["Lydian Dominant ♭6", "Melodic Major ♯4"],
        },
        {"name": "Major Locrian", "formula": "W W H H W W W", "alternative_names": ["Major Locrian"]},
        {
            "name": "Half-Diminished ♭4",
            "formula": "W H H W W W W",
            "alternative_names": ["Half-Diminished ♭4", "Altered Dominant #2"],
        },
        {"name": "Altered Dominant 𝄫3", "formula": "H H W W W W W", "alternative_names": ["Altered Dominant 𝄫3"]},
    ],
    "Neapolitan Minor": [
        {"name": "Neapolitan Minor", "formula": "H W W W H A H", "alternative_names": ["Neapolitan Minor"]},
        {"name": "Lydian ♯6", "formula": "W W W H A H H", "alternative_names": ["Lydian ♯6"]},
        {"name": "Mixolydian Augmented", "formula": "W W H A H H W", "alternative_names": ["Mixolydian Augmented"]},
        {
            "name": "Romani Minor",
            "formula": "W H A H H W W",
            "alternative_names": ["Romani Minor", "Aeolian ♯4", "Natural Minor ♯4"],
        },
        {"name": "Locrian Dominant", "formula": "H A H H W W W", "alternative_names": ["Locrian Dominant"]},
        {"name": "Ionian ♯2", "formula": "A H H W W W H", "alternative_names": ["Ionian ♯2", "Major ♯2"]},
        {
            "name": "Ultralocrian 𝄫3",
            "formula": "H H W W W H A",
            "alternative_names": ["Ultralocrian 𝄫3", "Altered Diminished 𝄫3"],
        },
    ],
    "Hexatonic": [
        {"name": "Major Hexatonic", "formula": "W W H W W A", "alternative_names": ["Major Hexatonic"]},
        {"name": "Minor Hexatonic", "formula": "W H W W A W", "alternative_names": ["Minor Hexatonic"]},
        {"name": "Ritsu Onkai", "formula": "H W W A W W", "alternative_names": ["Ritsu Onkai"]},
        {"name": "Raga Kumud", "formula": "W W A W H W", "alternative_names": ["Raga Kumud"]},
        {"name": "Mixolydian Hexatonic", "formula": "W A W W H W", "alternative_names": ["Mixolydian Hexatonic"]},
        {"name": "Phrygian Hexatonic", "formula": "A W W H W W", "alternative_names": ["Phrygian Hexatonic"]},
        {"name": "Blues", "formula": "A W H H A W", "alternative_names": ["Blues"]},
    ],
    "Pentatonic": [
        {
            "name": "Major Pentatonic",
            "formula": "W W A W A",
            "alternative_names": ["Major Pentatonic", "gōng", "Bhoopali", "Mohanam", "Mullaittīmpāṇi"],
        },
        {
            "name": "Egyptian",
            "formula": "W A W A W",
            "alternative_names": ["Egyptian", "Suspended", "shāng", "Megh", "Madhyamavati", "Centurutti"],
        },
        {
            "name": "Blues Minor",
            "formula": "A W A W W",
            "alternative_names": ["Blues Minor", "Man Gong", "jué", "Malkauns", "Hindolam", "Intaḷam"],
        },
        {
            "name": "Blues Major",
            "formula": "W A W W A",
            "alternative_names": ["Blues Major", "ritsusen", "yo", "zhǐ", "Durga", "Shuddha Saveri", "Koṉṟai"],
        },
        {
            "name": "Minor Pentatonic",
            "formula": "A W W A W",
            "alternative_names": ["Minor Pentatonic", "yǔ", "Dhani", "Shuddha Dhanyāsī", "āmpal"],
        },
        {"name": "Japanese", "formula": "W H P H P", "alternative_names": ["Japanese", "Insen", "Ryukyu"]},
    ],
}


def validate_catalog(raw: Mapping[str, Sequence[Mapping[str, object]]]) -> dict[str, tuple[ScaleDefinition, ...]]:
    """Turn raw catalog entries into ``ScaleDefinition`` tuples, checking each.

    Parameters
    ----------
    raw : Mapping[str, Sequence[Mapping[str, object]]]
        Family name to entries. Each entry needs a "name" and a "formula"
        (a whitespace-separated string or a sequence of step tokens), and may
        carry "alternative_names".

    Returns
    -------
    dict[str, tuple[ScaleDefinition, ...]]
        Validated definitions by family.

    Raises
    ------
    CatalogError
        If an entry lacks a name or formula, uses an unknown step token, or
        its steps do not span exactly one octave.
    """
    catalog: dict[str, tuple[ScaleDefinition, ...]] = {}
    for family, entries in raw.items():
        definitions = []
        for position, entry in enumerate(entries, start=1):
            where = f"{family}-{position}"
            unknown_keys = set(entry) - {"name", "formula", "alternative_names"}
            if unknown_keys:
                msg = f"Scale {where} has unexpected keys: {sorted(unknown_keys)}"
                raise CatalogError(msg)
            if "name" not in entry or "formula" not in entry:
                msg = f"Scale {where} needs both a name and a formula"
                raise CatalogError(msg)
            formula = entry["formula"]
            steps = tuple(formula.split()) if isinstance(formula, str) else tuple(formula)
            bad = [step for step in steps if step not in STEP_SEMITONES]
            if bad:
                msg = f"Scale {where} ({entry['name']}) has unknown steps: {bad}"
                raise CatalogError(msg)
            total = sum(STEP_SEMITONES[step] for step in steps)
            if total != OCTAVE_SEMITONES:
                msg = f"Scale {where} ({entry['name']}) spans {total} semitones, not {OCTAVE_SEMITONES}"
                raise CatalogError(msg)
            definitions.append(
                ScaleDefinition(
                    family=family,
                    index=position,
                    name=str(entry["name"]),
                    formula=steps,
                    alternative_names=tuple(entry.get("alternative_names", ())),
                )
            )
        catalog[family] = tuple(definitions)
    return catalog


SCALE_CATALOG: dict[str, tuple[ScaleDefinition, ...]] = validate_catalog(_RAW_CATALOG)

SCALES_BY_ID: dict[str, ScaleDefinition] = {
    definition.scale_id: definition for definitions in SCALE_CATALOG.values() for definition in definitions
}


def get_scale(scale_id: str) -> ScaleDefinition:
    """Look up a catalog scale by id ("Major-1", "Melodic Minor-4", ...).

    Raises
    ------
    ValueError
        If no scale has that id.
    """
    if scale_id in SCALES_BY_ID:
        return SCALES_BY_ID[scale_id]
    msg = f"Unknown scale: {scale_id}"
    raise ValueError(msg)


def find_scale(name: str) -> ScaleDefinition:
    """Find a catalog scale by primary or alternative name, ignoring case.

    Examples
    --------
    >>> find_scale("natural minor").scale_id
    'Major-6'
    """
    wanted = name.casefold()
    for definition in SCALES_BY_ID.values():
        names = (definition.name, *definition.alternative_names)
        if any(candidate.casefold() == wanted for candidate in names):
            return definition
    msg = f"Unknown scale: {name}"
    raise ValueError(msg)


def scales_by_size(size: int) -> list[ScaleDefinition]:
    """Catalog scales with ``size`` notes per octave, in catalog order."""
    return [definition for definition in SCALES_BY_ID.values() if definition.size == size]


def heptatonic_scale_ids() -> list[str]:
    return [definition.scale_id for definition in scales_by_size(7)]


def is_scale_note(note: str, scale: Scale) -> bool:
    """Check whether a note's pitch class belongs to ``scale``."""
    try:
        pitch_class = parse_note(note).pitch_class
    except TheoryError:
        return False
    return pitch_class in {pitch % 12 for pitch in scale.pitches}
