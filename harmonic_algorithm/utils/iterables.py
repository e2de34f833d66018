import itertools
from typing import Hashable, Iterable, Sequence, TypeVar

T = TypeVar("T")
H = TypeVar("H", bound=Hashable)


def unique_items_in_order(items: Iterable[H]) -> list[H]:
    """
    >>> unique_items_in_order([3, 1, 3, 2, 1])
    [3, 1, 2]
    """
    return list(dict.fromkeys(items))


def bigrams(items: Iterable[T]) -> list[tuple[T, T]]:
    """
    >>> bigrams("abc")
    [('a', 'b'), ('b', 'c')]
    >>> bigrams([1])
    []
    """
    return list(itertools.pairwise(items))


def clamp_index(i: int, seq: Sequence, window: int | None = None) -> int:
    """
    Clamps `i` into the valid indices of `seq`, considering only the first
    `window` items if `window` is given. `seq` must not be empty.

    >>> clamp_index(5, "abc")
    2
    >>> clamp_index(-1, "abc")
    0
    >>> clamp_index(29, range(40), window=30)
    29
    >>> clamp_index(35, range(40), window=30)
    29
    """
    n = len(seq) if window is None else min(window, len(seq))
    if n <= 0:
        raise ValueError("can't index an empty sequence")
    return max(0, min(i, n - 1))
