"""
Random chord progressions drawn from the recommendations.

At each step the recommendations for the current cadence are computed and one
of them is chosen by flooring a gamma-distributed draw. With low entropy the
gamma shape is small, so the draw is almost always < 1 and the top
recommendation is chosen; with higher entropy the draws spread further down
the list.
"""
from __future__ import annotations

import logging
import math
import typing as t
from dataclasses import dataclass

import numpy as np

from harmonic_algorithm.constants import SEQUENCE_WINDOW
from harmonic_algorithm.filters import Filters
from harmonic_algorithm.markov import TransitionTable
from harmonic_algorithm.pitch_utils.chords import Cadence
from harmonic_algorithm.pitch_utils.types import SettingsBase
from harmonic_algorithm.recommender import recommend
from harmonic_algorithm.utils.iterables import clamp_index

LOGGER = logging.getLogger(__name__)

# Gamma shape used for entropy >= 1
MAX_SHAPE = 8.0


@dataclass
class SequenceSettings(SettingsBase):
    window: int = SEQUENCE_WINDOW
    default_length: int = 4
    max_length: int = 16
    # Entropy is in [0, 1]; users enter it on a scale from 1 to 10
    default_entropy: float = 0.2
    seed: t.Optional[int] = None

    def __post_init__(self):
        if self.window < 1:
            raise ValueError(f"window must be at least 1, got {self.window}")
        if not 0 < self.default_length <= self.max_length:
            raise ValueError(
                f"need 0 < default_length <= max_length, got "
                f"{self.default_length} and {self.max_length}"
            )


class GammaSampler(t.Protocol):
    def draw(self, shape: float) -> float:
        """Returns one draw from a gamma distribution with scale 1."""
        ...


class NumpyGammaSampler:
    """
    >>> sampler = NumpyGammaSampler(seed=42)
    >>> sampler.draw(0.0)
    0.0
    >>> sampler.draw(2.0) >= 0.0
    True
    """

    def __init__(self, seed: int | None = None):
        self._rng = np.random.default_rng(seed)

    def draw(self, shape: float) -> float:
        if shape <= 0:
            return 0.0
        return float(self._rng.gamma(shape, 1.0))


def entropy_to_shape(entropy: float) -> float:
    """
    Maps entropy in [0, 1] onto the shape of the gamma distribution. The mapping
    is monotonic; values outside [0, 1] are clamped and nan gives 0.

    >>> entropy_to_shape(0.0)
    0.0
    >>> entropy_to_shape(0.5)
    3.75
    >>> entropy_to_shape(1.0)
    8.0
    >>> entropy_to_shape(-3) == 0.0 and entropy_to_shape(3) == 8.0
    True
    >>> entropy_to_shape(float("nan"))
    0.0
    """
    if math.isnan(entropy):
        return 0.0
    if entropy >= 1:
        return MAX_SHAPE
    if entropy <= 0:
        return 0.0
    return (MAX_SHAPE - 1 + entropy) * entropy


def draw_index(sampler: GammaSampler, entropy: float) -> int:
    return math.floor(sampler.draw(entropy_to_shape(entropy)))


def generate_sequence(
    previous: Cadence,
    filters: Filters,
    length: int,
    entropy: float,
    table: TransitionTable,
    sampler: GammaSampler,
    window: int = SEQUENCE_WINDOW,
) -> t.Tuple[t.List[Cadence], Cadence]:
    """
    Returns `length` cadences, each chosen from the first `window`
    recommendations for the one before, together with the final cadence (from
    which a caller can carry on).

    If at some step there are no recommendations, generation stops there and
    the cadences produced so far are returned. `length <= 0` returns no
    cadences and `previous` as the final cadence.
    """
    out: t.List[Cadence] = []
    current = previous
    for step in range(length):
        candidates = recommend(current, filters, window, table)
        if not candidates:
            LOGGER.warning(
                f"no candidates at step {step} of {length} after {current}; "
                "stopping early"
            )
            break
        i = clamp_index(draw_index(sampler, entropy), candidates, window=window)
        current = candidates[i]
        LOGGER.debug(f"step {step}: chose candidate {i} of {len(candidates)}")
        out.append(current)
    return out, current
