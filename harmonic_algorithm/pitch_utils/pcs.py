import typing as t

from harmonic_algorithm.pitch_utils.types import TET, Interval, PitchClass
from harmonic_algorithm.utils.iterables import unique_items_in_order


def transpose(pc: PitchClass, interval: Interval, *, tet: int = TET) -> PitchClass:
    """
    >>> transpose(11, 1)
    0
    >>> transpose(0, -1)
    11
    >>> transpose(7, 29)
    0
    >>> transpose(transpose(4, 7), 8) == transpose(4, 15)
    True
    """
    return (pc + interval) % tet


def transpose_pcs(
    pcs: t.Iterable[PitchClass], interval: Interval, *, tet: int = TET
) -> t.Tuple[PitchClass, ...]:
    """
    >>> transpose_pcs((0, 4, 7), 5)
    (5, 9, 0)
    """
    return tuple(transpose(pc, interval, tet=tet) for pc in pcs)


def unique_pcs(
    pitches_or_pcs: t.Iterable[int], *, tet: int = TET
) -> t.Tuple[PitchClass, ...]:
    """
    Reduces pitches to pitch-classes and removes duplicates, keeping the order
    in which each pc first occurs.

    >>> unique_pcs([60, 64, 67, 72, 76])
    (0, 4, 7)
    >>> unique_pcs([7, 0, 4, 7, 19])
    (7, 0, 4)
    >>> unique_pcs([])
    ()
    """
    return tuple(unique_items_in_order(p % tet for p in pitches_or_pcs))


def close_position(
    root: PitchClass, pcs: t.Iterable[PitchClass], *, tet: int = TET
) -> t.Tuple[PitchClass, ...]:
    """
    Returns `root` followed by the other pcs in ascending order of their interval
    above `root`. Duplicates (and repetitions of the root) are dropped.

    >>> close_position(7, (0, 4, 7))
    (7, 0, 4)
    >>> close_position(0, (7, 4))
    (0, 4, 7)
    >>> close_position(4, (4, 4, 11, 7, 19))
    (4, 7, 11)
    """
    root %= tet
    others = {pc % tet for pc in pcs} - {root}
    return (root,) + tuple(sorted(others, key=lambda pc: (pc - root) % tet))
