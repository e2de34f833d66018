from types import MappingProxyType

from mspell import Speller, Unspeller

from harmonic_algorithm.pitch_utils.types import IntervalClass, Weight

unspeller_pcs = Unspeller(pitches=False)
speller_pcs = Speller(pitches=False)

MAJOR_TRIAD = (0, 4, 7)
MINOR_TRIAD = (0, 3, 7)
DIM_TRIAD = (0, 3, 6)
AUG_TRIAD = (0, 4, 8)

MAJOR_SCALE = (0, 2, 4, 5, 7, 9, 11)

# Dissonance weight for each interval class. The ranking is the classical one:
#   unison < perfect 4th/5th < 3rd/6th < 2nd/7th < tritone < minor 2nd/major 7th
# Major thirds are weighted a little below minor thirds.
IC_DISSONANCE: MappingProxyType[IntervalClass, Weight] = MappingProxyType(
    {
        0: 0.0,
        1: 8.0,
        2: 5.0,
        3: 2.5,
        4: 2.0,
        5: 1.0,
        6: 6.0,
    }
)

# Starting chord structures offered to the user, as intervals above the root.
FUNCTIONALITIES = MappingProxyType(
    {
        "maj": MAJOR_TRIAD,
        "maj 1stInv": (0, 3, 8),
        "maj 2ndInv": (0, 5, 9),
        "min": MINOR_TRIAD,
        "min 1stInv": (0, 4, 9),
        "min 2ndInv": (0, 5, 8),
        "dim": DIM_TRIAD,
        "aug": AUG_TRIAD,
        "sus2": (0, 2, 7),
        "sus4": (0, 5, 7),
        "7sus4no5": (0, 5, 10),
        "min7no5": (0, 3, 10),
        "7no3": (0, 7, 10),
        "7no5": (0, 4, 10),
    }
)

# Number of recommendations shown by default and when the list is expanded
DEFAULT_N_RECOMMENDATIONS = 14
EXPANDED_N_RECOMMENDATIONS = 29

# Candidate window the random sequence generator samples from
SEQUENCE_WINDOW = 30
