"""Instrument and range configuration.

Module-level constants give the defaults every operation falls back to.
``FretboardConfig`` bundles a tuning with a fret count so callers can pass
one value around instead of two keyword arguments.

Examples
--------
>>> from fretboard_theory.config import FretboardConfig, STANDARD_TUNING
>>> FretboardConfig().tuning == STANDARD_TUNING
True
>>> FretboardConfig.from_names(["D2", "A2", "D3", "G3", "B3", "E4"]).tuning[0]
38
"""

from __future__ import annotations

from dataclasses import dataclass, field

from fretboard_theory.errors import PitchOutOfRange

# MIDI pitch range
MIN_PITCH = 0
MAX_PITCH = 127

# Octave assumed when note text carries none ("C" -> "C/4" -> 60)
DEFAULT_OCTAVE = 4

DEFAULT_FRET_COUNT = 21

# Open-string pitches, lowest string first (E2 A2 D3 G3 B3 E4)
STANDARD_TUNING: tuple[int, ...] = (40, 45, 50, 55, 59, 64)

TUNINGS: dict[str, tuple[int, ...]] = {
    "standard": STANDARD_TUNING,
    "drop_d": (38, 45, 50, 55, 59, 64),
    "dadgad": (38, 45, 50, 55, 57, 62),
    "open_g": (38, 43, 50, 55, 59, 62),
    "bass": (28, 33, 38, 43),
}


def get_tuning(name: str) -> tuple[int, ...]:
    """Look up a named tuning preset.

    Parameters
    ----------
    name : str
        Preset name (e.g., "standard", "drop_d").

    Returns
    -------
    tuple[int, ...]
        Open-string pitches, lowest string first.

    Raises
    ------
    ValueError
        If the preset does not exist.
    """
    if name in TUNINGS:
        return TUNINGS[name]
    msg = f"Unknown tuning: {name}"
    raise ValueError(msg)


@dataclass(frozen=True)
class FretboardConfig:
    """A tuning plus a fret count.

    Parameters
    ----------
    tuning : tuple[int, ...]
        Open-string pitches, lowest string first.
    fret_count : int
        Highest playable fret (fret 0 is the open string).

    Raises
    ------
    PitchOutOfRange
        If an open string, or the highest fret on it, falls outside 0-127.
    ValueError
        If the tuning is empty or the fret count is not positive.
    """

    tuning: tuple[int, ...] = field(default=STANDARD_TUNING)
    fret_count: int = DEFAULT_FRET_COUNT

    def __post_init__(self) -> None:
        if not self.tuning:
            msg = "Tuning must have at least one string"
            raise ValueError(msg)
        if self.fret_count < 1:
            msg = f"Fret count must be positive: {self.fret_count}"
            raise ValueError(msg)
        for pitch in self.tuning:
            if pitch < MIN_PITCH or pitch + self.fret_count > MAX_PITCH:
                msg = f"Open string {pitch} with {self.fret_count} frets exceeds pitch range"
                raise PitchOutOfRange(msg)
        # Accept lists from callers but store an immutable tuple
        object.__setattr__(self, "tuning", tuple(self.tuning))

    @property
    def string_count(self) -> int:
        return len(self.tuning)

    @classmethod
    def from_names(cls, names: list[str], fret_count: int = DEFAULT_FRET_COUNT) -> FretboardConfig:
        """Build a config from octave-qualified note names.

        Parameters
        ----------
        names : list[str]
            Open-string notes, lowest string first (e.g., ["E2", "A2"] or
            ["E/2", "A/2"]).
        fret_count : int
            Highest playable fret.

        Returns
        -------
        FretboardConfig
            The resulting configuration.
        """
        from fretboard_theory.notation import note_name_to_pitch

        tuning = tuple(note_name_to_pitch(_with_slash(name)) for name in names)
        return cls(tuning=tuning, fret_count=fret_count)

    @classmethod
    def preset(cls, name: str, fret_count: int = DEFAULT_FRET_COUNT) -> FretboardConfig:
        return cls(tuning=get_tuning(name), fret_count=fret_count)


def _with_slash(name: str) -> str:
    """Turn "E2" style names into the "E/2" form the parser expects."""
    if "/" in name:
        return name
    stripped = name.rstrip("0123456789")
    if stripped == name:
        return name
    return f"{stripped}/{name[len(stripped):]}"
