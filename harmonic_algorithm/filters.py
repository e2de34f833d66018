"""
User constraints on which chords may come next.

A `Filters` value is created once per choice of filters and never modified;
editing the filters means building a new one.
"""
from __future__ import annotations

import itertools as it
import logging
import typing as t
from dataclasses import dataclass
from functools import cached_property

from harmonic_algorithm.pitch_utils.chords import Chord
from harmonic_algorithm.pitch_utils.scale import UNRESTRICTED, parse_key_signature
from harmonic_algorithm.pitch_utils.spelling import note_name_to_pc
from harmonic_algorithm.pitch_utils.types import TET, PitchClassSet

LOGGER = logging.getLogger(__name__)

ALL_PCS: PitchClassSet = frozenset(range(TET))

PitchClassFilter = t.Optional[PitchClassSet]


def _as_filter(pcs: t.Iterable[int] | str | None) -> PitchClassFilter:
    if pcs is None or pcs == UNRESTRICTED:
        return None
    if isinstance(pcs, str):
        raise ValueError(f"expected pitch-classes or {UNRESTRICTED!r}, got {pcs!r}")
    return frozenset(pc % TET for pc in pcs)


def parse_note_names(text: str) -> PitchClassFilter:
    """
    >>> sorted(parse_note_names("E A D G"))
    [2, 4, 7, 9]
    >>> parse_note_names(" * ") is None
    True
    """
    if text.strip() == UNRESTRICTED:
        return None
    names = text.split()
    if not names:
        raise ValueError("expected at least one note name")
    return frozenset(note_name_to_pc(name) for name in names)


def parse_roots(text: str) -> PitchClassFilter:
    """
    Roots may be given either as note names or as a key signature.

    >>> sorted(parse_roots("C F G"))
    [0, 5, 7]
    >>> sorted(parse_roots("#"))
    [0, 2, 4, 6, 7, 9, 11]
    >>> parse_roots("*") is None
    True
    """
    try:
        return parse_key_signature(text)
    except ValueError:
        return parse_note_names(text)


@dataclass(frozen=True)
class Filters:
    """
    `None` in any field means unrestricted.

    >>> filters = Filters(key_signature=frozenset((0, 2, 4, 5, 7, 9, 11)))
    >>> sorted(filters.allowed_pcs)
    [0, 2, 4, 5, 7, 9, 11]
    >>> filters = Filters(
    ...     tuning=frozenset((0, 4, 7, 11)), target_roots=frozenset((7, 9))
    ... )
    >>> sorted(filters.allowed_roots)
    [7]
    """

    tuning: PitchClassFilter = None
    key_signature: PitchClassFilter = None
    target_roots: PitchClassFilter = None

    def __post_init__(self):
        for name in ("tuning", "key_signature", "target_roots"):
            object.__setattr__(self, name, _as_filter(getattr(self, name)))

    @classmethod
    def from_strings(
        cls, tuning: str = UNRESTRICTED, key: str = UNRESTRICTED, roots: str = UNRESTRICTED
    ) -> Filters:
        """
        Builds filters from the text a user would type. Raises ValueError if
        any of the strings can't be parsed.

        >>> filters = Filters.from_strings("C E G Bb", "b", "C F")
        >>> sorted(filters.allowed_pcs), sorted(filters.allowed_roots)
        ([0, 4, 7, 10], [0])
        """
        return cls(
            tuning=parse_note_names(tuning),
            key_signature=parse_key_signature(key),
            target_roots=parse_roots(roots),
        )

    @cached_property
    def allowed_pcs(self) -> PitchClassSet:
        out = ALL_PCS
        if self.tuning is not None:
            out = out & self.tuning
        if self.key_signature is not None:
            out = out & self.key_signature
        return out

    @cached_property
    def allowed_roots(self) -> PitchClassSet:
        if self.target_roots is None:
            return self.allowed_pcs
        return self.allowed_pcs & self.target_roots

    def allows(self, chord: Chord) -> bool:
        """
        >>> Filters(tuning=frozenset((0, 4, 7))).allows(Chord((0, 4, 7)))
        True
        >>> Filters(tuning=frozenset((0, 4, 7))).allows(Chord((0, 3, 7)))
        False
        """
        return chord.root in self.allowed_roots and chord.pcs <= self.allowed_pcs


def candidate_chords(filters: Filters) -> t.List[Chord]:
    """
    Every triad whose root is an allowed root and whose upper pcs are allowed
    pcs. Over-constrained filters give an empty list.

    >>> len(candidate_chords(Filters()))
    660
    >>> candidate_chords(Filters(tuning=frozenset((0, 4, 7)), target_roots=frozenset((0,))))
    [Chord(0, 4, 7)]
    >>> candidate_chords(Filters(tuning=frozenset((0, 4))))
    []
    """
    allowed = sorted(filters.allowed_pcs)
    out = []
    for root in sorted(filters.allowed_roots):
        upper = [pc for pc in allowed if pc != root]
        for a, b in it.combinations(upper, 2):
            out.append(Chord((root, a, b)))
    if not out:
        LOGGER.debug(f"no candidate chords under {filters}")
    return out
