from __future__ import annotations

import itertools as it
import typing as t
from dataclasses import dataclass, field

from harmonic_algorithm.constants import FUNCTIONALITIES
from harmonic_algorithm.pitch_utils.consonances import consonance_key, dissonance
from harmonic_algorithm.pitch_utils.intervals import intervals_above_root
from harmonic_algorithm.pitch_utils.pcs import close_position, transpose, unique_pcs
from harmonic_algorithm.pitch_utils.types import (
    TET,
    ChromaticInterval,
    Interval,
    PitchClass,
)

TRIAD_SIZE = 3


class DataInsufficientError(ValueError):
    pass


@dataclass(frozen=True, order=True)
class Chord:
    """
    A set of distinct pitch-classes over a structural root (the bass).

    The root is always the first item; the other pcs are stored in close
    position above it, so two chords compare equal iff they have the same bass
    and the same pc content.

    >>> Chord((7, 2, 11))
    Chord(7, 11, 2)
    >>> Chord((0, 7, 4)) == Chord((0, 4, 7, 12))
    True
    >>> Chord((4, 7, 0)) == Chord((0, 4, 7))
    False
    >>> Chord((0, 4, 4))  # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
    DataInsufficientError: need at least 3 distinct pcs, got (0, 4)
    """

    pcs_in_order: t.Tuple[PitchClass, ...]
    _pcs: t.FrozenSet[PitchClass] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        pcs = tuple(self.pcs_in_order)
        if not pcs:
            raise DataInsufficientError("cannot build a chord from no pcs")
        ordered = close_position(pcs[0], pcs)
        if len(ordered) < TRIAD_SIZE:
            raise DataInsufficientError(
                f"need at least {TRIAD_SIZE} distinct pcs, got {ordered}"
            )
        object.__setattr__(self, "pcs_in_order", ordered)
        object.__setattr__(self, "_pcs", frozenset(ordered))

    @property
    def root(self) -> PitchClass:
        return self.pcs_in_order[0]

    @property
    def pcs(self) -> t.FrozenSet[PitchClass]:
        return self._pcs

    @property
    def intervals(self) -> t.Tuple[ChromaticInterval, ...]:
        """
        >>> Chord((4, 7, 0)).intervals
        (3, 8)
        """
        return intervals_above_root(self.pcs_in_order)

    @property
    def sorted_pcs(self) -> t.Tuple[PitchClass, ...]:
        return tuple(sorted(self.pcs_in_order))

    def transpose(self, interval: Interval) -> Chord:
        """
        >>> Chord((0, 4, 7)).transpose(-3)
        Chord(9, 1, 4)
        """
        return Chord(tuple(transpose(pc, interval) for pc in self.pcs_in_order))

    def is_transposition_of(self, other: Chord) -> bool:
        """
        >>> Chord((0, 4, 7)).is_transposition_of(Chord((9, 1, 4)))
        True
        >>> Chord((0, 4, 7)).is_transposition_of(Chord((9, 0, 4)))
        False
        """
        return self.intervals == other.intervals

    @property
    def dissonance(self) -> float:
        return dissonance(self.pcs_in_order)

    def __iter__(self) -> t.Iterator[PitchClass]:
        return iter(self.pcs_in_order)

    def __len__(self) -> int:
        return len(self.pcs_in_order)

    def __repr__(self) -> str:
        return f"Chord({', '.join(str(pc) for pc in self.pcs_in_order)})"


@dataclass(frozen=True)
class Cadence:
    """
    One harmonic motion, from `previous` to `next`.

    The same motion in another key is a transposition of the cadence; the
    normalized form (previous root on 0) is the same for all of them.

    >>> c_to_g = Cadence(Chord((0, 4, 7)), Chord((7, 11, 2)))
    >>> f_to_c = Cadence(Chord((5, 9, 0)), Chord((0, 4, 7)))
    >>> c_to_g.normalized() == f_to_c.normalized()
    True
    >>> c_to_g.movement
    7
    >>> c_to_g.transpose(2)
    Cadence(Chord(2, 6, 9) -> Chord(9, 1, 4))
    """

    previous: Chord
    next: Chord

    @property
    def movement(self) -> ChromaticInterval:
        return (self.next.root - self.previous.root) % TET

    def transpose(self, interval: Interval) -> Cadence:
        return Cadence(
            self.previous.transpose(interval), self.next.transpose(interval)
        )

    def normalized(self) -> Cadence:
        """
        >>> Cadence(Chord((9, 0, 4)), Chord((2, 5, 9))).normalized()
        Cadence(Chord(0, 3, 7) -> Chord(5, 8, 0))
        """
        if self.previous.root == 0:
            return self
        return self.transpose(-self.previous.root)

    def is_normalized(self) -> bool:
        return self.previous.root == 0

    def __repr__(self) -> str:
        return f"Cadence({self.previous!r} -> {self.next!r})"


def resolve_triad(fundamental: PitchClass, pitches: t.Iterable[int]) -> Chord:
    """
    Finds the most consonant triad over `fundamental` that can be made from
    `pitches`.

    Every 3-pc subset of `pitches` + `fundamental` that contains `fundamental`
    is scored with `dissonance()`; ties are broken by the sorted pcs so that
    the result is deterministic.

    >>> resolve_triad(0, [0, 2, 4, 7, 11])
    Chord(0, 4, 7)
    >>> resolve_triad(7, [11, 2, 5])
    Chord(7, 11, 2)

    The fundamental doesn't have to be among the pitches.
    >>> resolve_triad(9, [60, 64])
    Chord(9, 0, 4)

    >>> resolve_triad(0, [0, 12, 7])  # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
    DataInsufficientError: only 2 distinct pcs available over fundamental 0
    """
    fundamental %= TET
    pool = unique_pcs([fundamental, *pitches])
    if len(pool) < TRIAD_SIZE:
        raise DataInsufficientError(
            f"only {len(pool)} distinct pcs available over fundamental {fundamental}"
        )
    upper = sorted(pool[1:])
    candidates = [(fundamental, a, b) for a, b in it.combinations(upper, 2)]
    best = min(candidates, key=consonance_key)
    return Chord(best)


def chord_from_functionality(root: PitchClass, functionality: str) -> Chord:
    """
    >>> chord_from_functionality(2, "min")
    Chord(2, 5, 9)
    >>> chord_from_functionality(7, "maj 1stInv")
    Chord(7, 10, 3)
    >>> chord_from_functionality(0, "13#11")
    Traceback (most recent call last):
    KeyError: "unknown functionality '13#11'"
    """
    try:
        structure = FUNCTIONALITIES[functionality]
    except KeyError:
        raise KeyError(f"unknown functionality {functionality!r}") from None
    return Chord(tuple(transpose(root, interval) for interval in structure))
