import sys

from fretboard_theory import (
    DiatonicChordCache,
    find_pattern_matches,
    progression_chords,
    rank_matches,
    resolve_chord,
)

chord = resolve_chord("Am7/G")
sys.stdout.write(f"{chord}\n")  # "Am7/G: A/4 C/5 E/5 G/5 G/4"

# Chords of a ii-V-I in G major
scale_chords = DiatonicChordCache().get_or_compute("Major-1", "G")
for diatonic in progression_chords(["ii", "V", "I"], scale_chords, kind="sevenths"):
    sys.stdout.write(f"{diatonic.roman}: {diatonic.name}\n")

# Lowest shape for each of them
for diatonic in progression_chords(["ii", "V", "I"], scale_chords, kind="sevenths"):
    matches = rank_matches(find_pattern_matches(diatonic.notes, diatonic.root))
    if matches:
        best = matches[0]
        frets = " ".join(f"{p.string}:{p.fret}" for p in best.positions)
        sys.stdout.write(f"{diatonic.name} -> {best.template.name} at fret {best.root_fret} ({frets})\n")
