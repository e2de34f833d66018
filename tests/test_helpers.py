import itertools
import typing as t

from harmonic_algorithm.markov import SEGMENT_BREAK
from harmonic_algorithm.pitch_utils.chords import Chord

C_MAJOR = Chord((0, 4, 7))
F_MAJOR = Chord((5, 9, 0))
G_MAJOR = Chord((7, 11, 2))
A_MINOR = Chord((9, 0, 4))
D_MINOR = Chord((2, 5, 9))

# Two short "chorales": I-IV-V-I and I-vi-ii-V-I in C, then the same motions
#   in D, so the table sees each motion more than once.
SMALL_CORPUS = [
    (0, [0, 4, 7, 12]),
    (5, [5, 9, 0, 5]),
    (7, [7, 11, 2, 7]),
    (0, [0, 4, 7, 0]),
    SEGMENT_BREAK,
    (0, [0, 4, 7]),
    (9, [9, 0, 4, 9]),
    (2, [2, 5, 9, 2]),
    (7, [7, 11, 2, 5]),
    (0, [0, 4, 7]),
    SEGMENT_BREAK,
    (2, [2, 6, 9]),
    (7, [7, 11, 2]),
    (9, [9, 1, 4]),
    (2, [2, 6, 9]),
]


class FixedSampler:
    """Returns the given draws in a cycle, ignoring the shape."""

    def __init__(self, draws: t.Sequence[float] = (0.0,)):
        self._draws = itertools.cycle(draws)
        self.shapes: list[float] = []

    def draw(self, shape: float) -> float:
        self.shapes.append(shape)
        return next(self._draws)
