"""
Ranks the chords that may follow the current one.

Two rankings are merged. The "theory" ranking is every chord the filters
allow, most consonant first. The "learned" ranking is whatever the transition
table has seen follow the current cadence, most probable first. Learned
cadences that the filters allow come first, then the rest of the theory
ranking.

>>> from harmonic_algorithm.markov import train
>>> from harmonic_algorithm.pitch_utils.chords import Chord
>>> corpus = [(0, [0, 4, 7]), (5, [5, 9, 0]), (7, [7, 11, 2]), (0, [0, 4, 7])]
>>> table = train(corpus)
>>> previous = Cadence(Chord((0, 4, 7)), Chord((5, 9, 0)))
>>> filters = Filters.from_strings("*", "0#", "*")
>>> [cadence.next for cadence in recommend(previous, filters, 3, table)]
[Chord(7, 11, 2), Chord(0, 4, 7), Chord(4, 7, 0)]
"""
from __future__ import annotations

import logging
import typing as t
from dataclasses import dataclass, replace

from harmonic_algorithm.filters import Filters, candidate_chords
from harmonic_algorithm.markov import TransitionTable
from harmonic_algorithm.pitch_utils.chords import Cadence
from harmonic_algorithm.pitch_utils.consonances import consonance_key

LOGGER = logging.getLogger(__name__)


def theory_stream(previous: Cadence, filters: Filters) -> t.List[Cadence]:
    """
    Every allowed chord as a cadence from `previous.next`, most consonant
    first (ties broken by ascending pcs).

    >>> from harmonic_algorithm.pitch_utils.chords import Chord
    >>> previous = Cadence(Chord((0, 4, 7)), Chord((7, 11, 2)))
    >>> filters = Filters(tuning=frozenset((0, 4, 7, 9)), target_roots=frozenset((9,)))
    >>> [cadence.next for cadence in theory_stream(previous, filters)]
    [Chord(9, 0, 4), Chord(9, 0, 7), Chord(9, 4, 7)]
    """
    chords = sorted(candidate_chords(filters), key=consonance_key)
    return [Cadence(previous.next, chord) for chord in chords]


def learned_stream(previous: Cadence, table: TransitionTable) -> t.List[Cadence]:
    """
    The cadences the table has seen follow `previous`, most probable first,
    transposed to start from `previous.next`. Empty if `previous` was never
    seen.
    """
    successors = table.lookup(previous)
    if successors is None:
        LOGGER.debug(f"no learned successors for {previous.normalized()}")
        return []
    anchor = previous.next.root
    return [successor.transpose(anchor) for successor, _ in successors]


def merge_streams(
    learned: t.Sequence[Cadence], theory: t.Sequence[Cadence], count: int
) -> t.List[Cadence]:
    """
    >>> merge_streams(["A", "B", "D"], ["B", "C", "A"], 3)
    ['A', 'B', 'C']
    >>> merge_streams([], ["B", "C", "A"], 2)
    ['B', 'C']
    >>> merge_streams(["A"], [], 2)
    []
    """
    if count <= 0:
        return []
    allowed = set(theory)
    out = list(dict.fromkeys(c for c in learned if c in allowed))
    included = set(out)
    out.extend(c for c in theory if c not in included)
    return out[:count]


def recommend(
    previous: Cadence, filters: Filters, count: int, table: TransitionTable
) -> t.List[Cadence]:
    """
    Returns at most `count` distinct cadences from `previous.next`, each of
    which the filters allow. An over-constrained filter (or `count <= 0`) gives
    an empty list.
    """
    if count <= 0:
        return []
    theory = theory_stream(previous, filters)
    if not theory:
        LOGGER.debug(f"no recommendations after {previous} under {filters}")
        return []
    learned = learned_stream(previous, table)
    out = merge_streams(learned, theory, count)
    LOGGER.debug(
        f"recommending {len(out)} cadences after {previous} "
        f"({len(learned)} learned, {len(theory)} allowed)"
    )
    return out


@dataclass(frozen=True)
class Recommender:
    """Bundles a trained table with the current filters."""

    table: TransitionTable
    filters: Filters = Filters()

    def __call__(self, previous: Cadence, count: int) -> t.List[Cadence]:
        return recommend(previous, self.filters, count, self.table)

    def with_filters(self, filters: Filters) -> Recommender:
        return replace(self, filters=filters)
