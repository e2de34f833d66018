import itertools as it
import typing as t

from harmonic_algorithm.pitch_utils.types import (
    TET,
    ChromaticInterval,
    IntervalClass,
    PitchClass,
)


def interval_class(
    pc1: PitchClass, pc2: PitchClass, *, tet: int = TET
) -> IntervalClass:
    """
    The smallest distance between two pitch-classes, in either direction.

    >>> interval_class(0, 7)
    5
    >>> interval_class(7, 0)
    5
    >>> interval_class(0, 6)
    6
    >>> interval_class(11, 0)
    1
    >>> interval_class(3, 15)
    0
    """
    interval = (pc2 - pc1) % tet
    return min(interval, tet - interval)


def intervals_above_root(
    pcs: t.Sequence[PitchClass], *, tet: int = TET
) -> t.Tuple[ChromaticInterval, ...]:
    """
    >>> intervals_above_root((7, 11, 2))
    (4, 7)
    >>> intervals_above_root((4, 7, 0))
    (3, 8)
    """
    root = pcs[0]
    return tuple((pc - root) % tet for pc in pcs[1:])


def interval_classes(
    pcs: t.Iterable[PitchClass], *, tet: int = TET
) -> t.List[IntervalClass]:
    """
    The interval class of every unordered pair of distinct pitch-classes.

    >>> interval_classes((0, 4, 7))
    [4, 5, 3]
    >>> interval_classes((0, 0, 4))
    [4]
    """
    distinct = list(dict.fromkeys(pc % tet for pc in pcs))
    return [interval_class(a, b, tet=tet) for a, b in it.combinations(distinct, 2)]


def interval_vector(pcs: t.Iterable[PitchClass]) -> t.Tuple[int, ...]:
    """
    Counts of interval classes 1 through 6.

    >>> interval_vector((0, 4, 7))
    (0, 0, 1, 1, 1, 0)
    >>> interval_vector((0, 3, 6, 9))
    (0, 0, 4, 0, 0, 2)
    """
    out = [0] * 6
    for ic in interval_classes(pcs):
        out[ic - 1] += 1
    return tuple(out)
