"""Diatonic chord identification for scales.

The chord on each scale degree is built by stacking every other scale note
(degree, degree + 2, degree + 4, ... wrapping around the scale), then named
by comparing its pitch classes with every suffix of the matching chord-size
group. Suffixes are tried as written first, then with a forced ``sus2``,
then with a forced ``sus4``. A degree with no match at any stage raises
``NoDiatonicMatch``.

Per-scale results can be memoized in a caller-owned ``DiatonicChordCache``
and precomputed in bulk, optionally across worker processes.

Examples
--------
>>> from fretboard_theory.scales import IONIAN, generate_scale
>>> [chord.name for chord in identify_diatonic_chords(generate_scale("C", IONIAN), 3)]
['CM', 'Dm', 'Em', 'FM', 'GM', 'Am', 'Bo']
"""

from __future__ import annotations

import logging
import multiprocessing as mp
import re
import threading
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from fretboard_theory.chords import CHORD_SUFFIX_GROUPS, resolve_chord_parts
from fretboard_theory.enharmonic import are_arrays_equivalent, pitch_class_of
from fretboard_theory.errors import NoDiatonicMatch, ParseError
from fretboard_theory.notation import strip_octave
from fretboard_theory.scales import Scale, generate_scale, get_scale

logger = logging.getLogger(__name__)

# Chord size -> suffix group used to name it
GROUP_FOR_LENGTH: dict[int, str] = {
    3: "triads",
    4: "sevenths",
    5: "nines",
    6: "elevens",
    7: "thirteens",
}

# Suffix appended on each matching stage, in order
RETRY_STAGES: tuple[str, ...] = ("", "sus2", "sus4")

ROMAN_NUMERALS: tuple[str, ...] = ("I", "II", "III", "IV", "V", "VI", "VII")

COMMON_PROGRESSIONS: tuple[tuple[int, ...], ...] = (
    (1, 4, 5, 1),
    (1, 5, 6, 4),
    (6, 4, 1, 5),
    (2, 5, 1),
    (1, 6, 4, 5),
)

_ROMAN_RE = re.compile(r"^[IViv]+$")


@dataclass(frozen=True)
class DiatonicChord:
    """The chord built on one scale degree.

    Parameters
    ----------
    degree : int
        1-based scale degree.
    root : str
        Scale note the chord is built on.
    notes : tuple[str, ...]
        Stacked scale notes, octave stripped.
    matches : tuple[str, ...]
        Every suffix that matched at the first successful stage, in group
        order. Retry stages carry their forced suspension (e.g. "osus2").
    """

    degree: int
    root: str
    notes: tuple[str, ...]
    matches: tuple[str, ...]

    @property
    def suffix(self) -> str:
        return self.matches[0]

    @property
    def name(self) -> str:
        """Chord name built from the root and the first matching suffix."""
        return f"{self.root}{self.suffix}"

    @property
    def roman(self) -> str:
        return roman_numeral(self.degree)


@dataclass(frozen=True)
class ScaleChords:
    """Triads and seventh chords of one catalog scale at one root."""

    scale_id: str
    root: str
    scale_name: str
    triads: tuple[DiatonicChord, ...]
    sevenths: tuple[DiatonicChord, ...]

    @property
    def key(self) -> str:
        return cache_key(self.scale_id, self.root)


def roman_numeral(n: int) -> str:
    """Return the Roman numeral for a scale degree 1-7.

    Other numbers are returned as plain digits.

    Examples
    --------
    >>> roman_numeral(4)
    'IV'
    >>> roman_numeral(9)
    '9'
    """
    if 1 <= n <= len(ROMAN_NUMERALS):
        return ROMAN_NUMERALS[n - 1]
    return str(n)


def parse_roman_numeral(numeral: str) -> int:
    """Convert a plain Roman numeral (I..VII, any case) to a scale degree.

    Raises
    ------
    ParseError
        For secondary (slash) numerals, quality marks or numerals outside
        I..VII.
    """
    text = numeral.strip()
    if "/" in text:
        msg = f"Secondary numerals are not supported: {numeral!r}"
        raise ParseError(msg)
    if not _ROMAN_RE.match(text) or text.upper() not in ROMAN_NUMERALS:
        msg = f"Unknown Roman numeral: {numeral!r}"
        raise ParseError(msg)
    return ROMAN_NUMERALS.index(text.upper()) + 1


def synthetic_chords(scale: Scale, length: int) -> list[tuple[str, ...]]:
    """Stack alternate scale notes on every degree.

    Parameters
    ----------
    scale : Scale
        The scale to harmonize.
    length : int
        Notes per chord (3 for triads, 4 for sevenths, ...).

    Returns
    -------
    list[tuple[str, ...]]
        One chord per scale degree, octave stripped.

    Raises
    ------
    ValueError
        If ``length`` is not between 1 and the scale size.

    Examples
    --------
    >>> from fretboard_theory.scales import IONIAN, generate_scale
    >>> synthetic_chords(generate_scale("C", IONIAN), 4)[1]
    ('D', 'F', 'A', 'C')
    """
    degrees = [strip_octave(note) for note in scale.degrees]
    size = len(degrees)
    if not 1 <= length <= size:
        msg = f"Chord length must be between 1 and {size}: {length}"
        raise ValueError(msg)
    return [tuple(degrees[(index + 2 * step) % size] for step in range(length)) for index in range(size)]


def _stage_candidates(suffixes: Sequence[str], stage: str) -> list[str]:
    if not stage:
        return list(suffixes)
    return [suffix + stage for suffix in suffixes if "sus" not in suffix and suffix != "b5"]


def match_chord(notes: Sequence[str], groups: Mapping[str, Sequence[str]] = CHORD_SUFFIX_GROUPS) -> list[str]:
    """Name a stacked chord by comparing it against a suffix group.

    Parameters
    ----------
    notes : Sequence[str]
        Chord notes, root first.
    groups : Mapping[str, Sequence[str]]
        Suffix groups keyed as in ``GROUP_FOR_LENGTH``.

    Returns
    -------
    list[str]
        Matching suffixes from the first stage that produced any, or an
        empty list when no stage matched.

    Raises
    ------
    ValueError
        If no suffix group exists for the chord size.

    Examples
    --------
    >>> match_chord(["B", "D", "F"])
    ['o']
    >>> match_chord(["C", "D", "G"])
    ['sus2']
    """
    group = GROUP_FOR_LENGTH.get(len(notes))
    if group is None or group not in groups:
        msg = f"No chord suffix group for {len(notes)}-note chords"
        raise ValueError(msg)
    root = notes[0]
    for stage in RETRY_STAGES:
        if stage:
            logger.debug("Retrying %s with forced %s", " ".join(notes), stage)
        matches = [
            candidate
            for candidate in _stage_candidates(groups[group], stage)
            if are_arrays_equivalent(notes, resolve_chord_parts(root, candidate).note_names)
        ]
        if matches:
            return matches
    return []


def identify_diatonic_chords(scale: Scale, length: int) -> tuple[DiatonicChord, ...]:
    """Name the chord on every degree of a scale.

    Parameters
    ----------
    scale : Scale
        The scale to harmonize.
    length : int
        Notes per chord (3 for triads, 4 for sevenths, ...).

    Returns
    -------
    tuple[DiatonicChord, ...]
        One chord per scale degree.

    Raises
    ------
    NoDiatonicMatch
        If some degree matches no suffix at any stage.
    """
    label = scale.name or " ".join(scale.formula)
    chords = []
    for index, notes in enumerate(synthetic_chords(scale, length), start=1):
        matches = match_chord(notes)
        if not matches:
            group = GROUP_FOR_LENGTH[length]
            logger.debug(
                "No match for degree %d (%s) of %s %s; tried %s with stages %s",
                index,
                " ".join(notes),
                scale.root,
                label,
                ", ".join(CHORD_SUFFIX_GROUPS[group]),
                RETRY_STAGES,
            )
            msg = f"No {group} match for degree {index} of {scale.root} {label}: {' '.join(notes)}"
            raise NoDiatonicMatch(msg)
        chords.append(DiatonicChord(degree=index, root=notes[0], notes=notes, matches=tuple(matches)))
    return tuple(chords)


def cache_key(scale_id: str, root: str) -> str:
    """Key of a (scale, root) pair, e.g. "Major-1_C"."""
    return f"{scale_id}_{root}"


def precompute_scale_chords(scale_id: str, root: str) -> ScaleChords:
    """Compute the triads and sevenths of a heptatonic catalog scale.

    Raises
    ------
    ValueError
        If the scale id is unknown or the scale does not have seven notes.
    NoDiatonicMatch
        If a degree cannot be named.
    """
    definition = get_scale(scale_id)
    if not definition.is_heptatonic:
        msg = f"Diatonic chords need a seven-note scale: {scale_id} has {definition.size}"
        raise ValueError(msg)
    scale = generate_scale(root, definition.formula, name=definition.name)
    return ScaleChords(
        scale_id=scale_id,
        root=root,
        scale_name=definition.name,
        triads=identify_diatonic_chords(scale, 3),
        sevenths=identify_diatonic_chords(scale, 4),
    )


class DiatonicChordCache:
    """Thread-safe memo of ``ScaleChords`` keyed by scale id and root.

    Entries are only ever inserted when absent. Two callers that miss on the
    same key at once both compute, and the first insert wins; the results
    are equal either way.

    Examples
    --------
    >>> cache = DiatonicChordCache()
    >>> cache.get_or_compute("Major-1", "G").triads[4].name
    'DM'
    >>> "Major-1_G" in cache
    True
    """

    def __init__(self) -> None:
        self._entries: dict[str, ScaleChords] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def get(self, scale_id: str, root: str) -> ScaleChords | None:
        key = cache_key(scale_id, root)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
            else:
                self._hits += 1
            return entry

    def insert_if_absent(self, chords: ScaleChords) -> ScaleChords:
        """Store ``chords`` unless its key is present; return the stored entry."""
        with self._lock:
            return self._entries.setdefault(chords.key, chords)

    def get_or_compute(self, scale_id: str, root: str) -> ScaleChords:
        entry = self.get(scale_id, root)
        if entry is not None:
            return entry
        logger.debug("Cache miss for %s, computing", cache_key(scale_id, root))
        return self.insert_if_absent(precompute_scale_chords(scale_id, root))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {"entries": len(self._entries), "hits": self._hits, "misses": self._misses}


def precompute_chords_for_scales(
    scale_ids: Iterable[str],
    roots: Iterable[str],
    cache: DiatonicChordCache | None = None,
    workers: int = 1,
) -> DiatonicChordCache:
    """Fill a cache with every (scale, root) combination.

    Each combination is independent. With ``workers`` above 1 they are
    computed in a process pool; results are inserted only where absent.

    Parameters
    ----------
    scale_ids : Iterable[str]
        Heptatonic catalog scale ids.
    roots : Iterable[str]
        Root note names.
    cache : DiatonicChordCache | None
        Cache to fill. A new one is created if omitted.
    workers : int
        Number of worker processes. 1 computes in the calling process.

    Returns
    -------
    DiatonicChordCache
        The filled cache.

    Raises
    ------
    ValueError
        If ``workers`` is below 1 or a scale is unknown or not heptatonic.
    NoDiatonicMatch
        If a degree of some scale cannot be named.
    """
    if workers < 1:
        msg = f"workers must be at least 1: {workers}"
        raise ValueError(msg)
    if cache is None:
        cache = DiatonicChordCache()
    roots = list(roots)
    work_items = [
        (scale_id, root) for scale_id in scale_ids for root in roots if cache_key(scale_id, root) not in cache
    ]

    if workers == 1:
        results = [precompute_scale_chords(scale_id, root) for scale_id, root in work_items]
    else:
        with mp.Pool(workers) as pool:
            results = pool.starmap(precompute_scale_chords, work_items)

    for chords in results:
        cache.insert_if_absent(chords)
    logger.info("Precomputed %d scale/root combinations with %d worker(s)", len(results), workers)
    return cache


def scale_chord_coverage(scale: Scale, suffixes: Sequence[str]) -> list[dict[str, int]]:
    """Percentage of each chord's tones that belong to the scale.

    For every scale degree, the chord ``<degree note><suffix>`` is resolved
    and its tones are compared with the scale by pitch class.

    Parameters
    ----------
    scale : Scale
        The scale to compare against.
    suffixes : Sequence[str]
        Chord suffixes to build on every degree.

    Returns
    -------
    list[dict[str, int]]
        One mapping per scale degree from suffix to a rounded percentage.

    Examples
    --------
    >>> from fretboard_theory.scales import IONIAN, generate_scale
    >>> scale_chord_coverage(generate_scale("C", IONIAN), ["", "7"])[4]
    {'': 100, '7': 100}
    >>> scale_chord_coverage(generate_scale("C", IONIAN), ["m"])[0]
    {'m': 67}
    """
    scale_classes = {pitch_class_of(note) for note in scale.degrees}
    table = []
    for root in scale.degrees:
        row = {}
        for suffix in suffixes:
            chord = resolve_chord_parts(root, suffix)
            inside = sum(1 for pitch in chord.pitches if pitch % 12 in scale_classes)
            row[suffix] = round(inside / len(chord.pitches) * 100)
        table.append(row)
    return table


def progression_chords(
    progression: Sequence[int | str],
    scale_chords: ScaleChords,
    kind: str = "triads",
) -> list[DiatonicChord]:
    """Look up the diatonic chords of a progression.

    Parameters
    ----------
    progression : Sequence[int | str]
        Scale degrees as integers (1-7) or plain Roman numerals ("ii", "V").
    scale_chords : ScaleChords
        Chords of the scale the progression is played in.
    kind : str
        "triads" or "sevenths".

    Returns
    -------
    list[DiatonicChord]
        The chord on each step of the progression.

    Raises
    ------
    ParseError
        If a numeral is malformed or a degree is outside the scale.
    ValueError
        If ``kind`` is unknown.

    Examples
    --------
    >>> chords = DiatonicChordCache().get_or_compute("Major-1", "C")
    >>> [chord.name for chord in progression_chords(["ii", "V", "I"], chords)]
    ['Dm', 'GM', 'CM']
    """
    if kind not in ("triads", "sevenths"):
        msg = f"Unknown chord kind: {kind!r}"
        raise ValueError(msg)
    chords: tuple[DiatonicChord, ...] = getattr(scale_chords, kind)
    result = []
    for step in progression:
        degree = parse_roman_numeral(step) if isinstance(step, str) else step
        if not 1 <= degree <= len(chords):
            msg = f"Scale degree out of range: {step!r}"
            raise ParseError(msg)
        result.append(chords[degree - 1])
    return result
