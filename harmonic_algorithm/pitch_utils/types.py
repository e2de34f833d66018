import typing as t
from dataclasses import dataclass

PitchClass = int
Interval = int
ChromaticInterval = int
IntervalClass = int
Weight = float

# Number of steps in the octave. Everything in this package assumes 12-tet.
TET = 12


@dataclass
class SettingsBase:
    pass


PitchClassSet = t.FrozenSet[PitchClass]
