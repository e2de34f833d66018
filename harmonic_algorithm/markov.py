"""
Learns which harmonic motions tend to follow which from a corpus.

The Markov state is a `Cadence` (a pair of consecutive chords) normalized so
that the first chord's root is 0; the transitions are to the next cadence
(which shares its first chord with the state's second chord). Normalizing
means a progression learned in one key is available in all twelve.

>>> records = [(0, [0, 4, 7]), (5, [5, 9, 0]), (7, [7, 11, 2]), (0, [0, 4, 7])]
>>> table = train(records)
>>> len(table)
2
>>> table.lookup(Cadence(Chord((0, 4, 7)), Chord((5, 9, 0))))
((Cadence(Chord(0, 4, 7) -> Chord(2, 6, 9)), 1.0),)
"""
from __future__ import annotations

import logging
import typing as t
from collections import Counter, defaultdict
from types import MappingProxyType

from harmonic_algorithm.pitch_utils.chords import (
    TRIAD_SIZE,
    Cadence,
    Chord,
    DataInsufficientError,
    resolve_triad,
)
from harmonic_algorithm.pitch_utils.pcs import unique_pcs
from harmonic_algorithm.pitch_utils.types import PitchClass
from harmonic_algorithm.utils.iterables import bigrams

LOGGER = logging.getLogger(__name__)

CorpusRecord = t.Tuple[PitchClass, t.Collection[int]]

# Marks the boundary between two pieces in a stream of corpus records.
SEGMENT_BREAK = None

Successors = t.Tuple[t.Tuple[Cadence, float], ...]


class TransitionTable(t.Mapping[Cadence, Successors]):
    """
    Read-only map from a normalized cadence to the cadences observed to follow
    it, with their probabilities, most probable first.

    >>> table = TransitionTable({})
    >>> len(table)
    0
    >>> table.lookup(Cadence(Chord((0, 4, 7)), Chord((7, 11, 2)))) is None
    True
    """

    def __init__(self, transitions: t.Mapping[Cadence, Successors]):
        self._transitions = MappingProxyType(dict(transitions))

    def __getitem__(self, cadence: Cadence) -> Successors:
        return self._transitions[cadence.normalized()]

    def __iter__(self) -> t.Iterator[Cadence]:
        return iter(self._transitions)

    def __len__(self) -> int:
        return len(self._transitions)

    def __contains__(self, cadence: object) -> bool:
        if not isinstance(cadence, Cadence):
            return False
        return cadence.normalized() in self._transitions

    def lookup(self, cadence: Cadence) -> Successors | None:
        """Returns None when the cadence has never been observed."""
        return self._transitions.get(cadence.normalized())

    def states(self) -> t.List[Cadence]:
        return list(self._transitions)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(<{len(self)} states>)"


def split_segments(
    records: t.Iterable[CorpusRecord | None],
) -> t.Iterator[t.List[CorpusRecord]]:
    """
    >>> list(split_segments([(0, [0]), None, (1, [1]), (2, [2]), None, None]))
    [[(0, [0])], [(1, [1]), (2, [2])]]
    """
    segment: t.List[CorpusRecord] = []
    for record in records:
        if record is SEGMENT_BREAK:
            if segment:
                yield segment
            segment = []
        else:
            segment.append(record)
    if segment:
        yield segment


def resolve_segment(segment: t.Iterable[CorpusRecord]) -> t.Tuple[t.List[Chord], int]:
    """
    Resolves each record to a triad, skipping records with fewer than 3
    distinct pitch-classes. Returns the chords and the number of skipped
    records.

    >>> resolve_segment([(0, [0, 4, 7]), (2, [2, 14]), (7, [7, 11, 2, 5])])
    ([Chord(0, 4, 7), Chord(7, 11, 2)], 1)
    """
    chords = []
    n_skipped = 0
    for fundamental, pitches in segment:
        if len(unique_pcs(pitches)) < TRIAD_SIZE:
            n_skipped += 1
            continue
        try:
            chords.append(resolve_triad(fundamental, pitches))
        except DataInsufficientError as exc:
            LOGGER.debug(f"skipping record {(fundamental, pitches)}: {exc}")
            n_skipped += 1
    return chords, n_skipped


def _to_probabilities(counts: Counter[Cadence]) -> Successors:
    total = sum(counts.values())
    # sorted() is stable and Counter preserves insertion order, so ties stay in
    #   the order they were first observed
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return tuple((cadence, count / total) for cadence, count in ranked)


def train(records: t.Iterable[CorpusRecord | None]) -> TransitionTable:
    """
    Builds the transition table from `(fundamental, pitches)` records.
    `SEGMENT_BREAK` items separate pieces; no transition spans a break. An empty
    or entirely degenerate corpus gives an empty table.

    >>> train([]).lookup(Cadence(Chord((0, 4, 7)), Chord((7, 11, 2)))) is None
    True
    """
    counts: t.DefaultDict[Cadence, Counter[Cadence]] = defaultdict(Counter)
    n_records = n_skipped = n_segments = 0
    for segment in split_segments(records):
        n_segments += 1
        n_records += len(segment)
        chords, skipped = resolve_segment(segment)
        n_skipped += skipped
        cadences = [Cadence(prev, nxt) for prev, nxt in bigrams(chords)]
        for state, successor in bigrams(cadences):
            # the successor is normalized on its own first chord
            counts[state.normalized()][successor.normalized()] += 1

    table = TransitionTable(
        {state: _to_probabilities(successors) for state, successors in counts.items()}
    )
    LOGGER.info(
        f"trained on {n_records} records in {n_segments} segments "
        f"({n_skipped} skipped): {len(table)} states"
    )
    if not table:
        LOGGER.warning("transition table is empty; recommendations will use theory only")
    return table
