import typing as t

from harmonic_algorithm.constants import IC_DISSONANCE
from harmonic_algorithm.pitch_utils.intervals import interval_classes, interval_vector
from harmonic_algorithm.pitch_utils.types import PitchClass

if t.TYPE_CHECKING:
    from harmonic_algorithm.pitch_utils.chords import Chord


def _as_pcs(chord_or_pcs: t.Union["Chord", t.Iterable[PitchClass]]) -> t.Tuple[int, ...]:
    # Chord iterates over its pcs root first
    return tuple(chord_or_pcs)


def dissonance(chord_or_pcs: t.Union["Chord", t.Iterable[PitchClass]]) -> float:
    """
    Sums the dissonance weight of the interval class between each pair of
    distinct members. Lower is more consonant. The ordering of the pcs (and so
    the inversion of a chord) makes no difference.

    >>> dissonance((0, 4, 7))
    5.5
    >>> dissonance((4, 7, 0)) == dissonance((7, 0, 4)) == dissonance((0, 4, 7))
    True
    >>> dissonance((0, 3, 7))
    5.5
    >>> dissonance((0, 4, 8))
    6.0
    >>> dissonance((0, 1, 2))
    21.0
    >>> dissonance((0, 4, 7)) < dissonance((0, 4, 10)) < dissonance((0, 1, 6))
    True
    """
    return float(sum(IC_DISSONANCE[ic] for ic in interval_classes(_as_pcs(chord_or_pcs))))


def dissonance_level(
    chord_or_pcs: t.Union["Chord", t.Iterable[PitchClass]]
) -> t.Tuple[float, t.Tuple[int, ...]]:
    """
    >>> dissonance_level((0, 4, 7))
    (5.5, (0, 0, 1, 1, 1, 0))
    """
    pcs = _as_pcs(chord_or_pcs)
    return dissonance(pcs), interval_vector(pcs)


def consonance_key(chord_or_pcs: t.Union["Chord", t.Iterable[PitchClass]]):
    """
    Sort key that orders by dissonance and then by the sorted pcs, so that ties
    are always broken the same way.

    >>> sorted([(0, 4, 8), (2, 7, 11), (0, 4, 7)], key=consonance_key)
    [(0, 4, 7), (2, 7, 11), (0, 4, 8)]
    """
    pcs = _as_pcs(chord_or_pcs)
    return dissonance(pcs), tuple(sorted(pcs))


T = t.TypeVar("T")


def most_consonant(chords: t.Iterable[T]) -> T:
    """
    >>> most_consonant([(0, 1, 2), (0, 5, 7), (0, 4, 7)])
    (0, 4, 7)
    """
    return min(chords, key=consonance_key)  # type:ignore
