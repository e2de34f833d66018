from __future__ import annotations

import re
import typing as t

from harmonic_algorithm.constants import MAJOR_SCALE
from harmonic_algorithm.pitch_utils.pcs import transpose_pcs
from harmonic_algorithm.pitch_utils.types import TET, PitchClass

KEY_SIGNATURE_RE = re.compile(
    r"^\s*(?:(?P<n>\d+)\s*(?P<acc>[#b♯♭])|(?P<accs>[#♯]+|[b♭]+))\s*$"
)

UNRESTRICTED = "*"

# A key signature can't have more than seven sharps or flats
MAX_ACCIDENTALS = 7


def key_signature_pcs(n_sharps: int) -> t.Tuple[PitchClass, ...]:
    """
    Returns the major scale whose key signature has `n_sharps` sharps (negative
    numbers count flats). The tonic comes first.

    >>> key_signature_pcs(0)
    (0, 2, 4, 5, 7, 9, 11)
    >>> key_signature_pcs(2)
    (2, 4, 6, 7, 9, 11, 1)
    >>> key_signature_pcs(-3)
    (3, 5, 7, 8, 10, 0, 2)
    """
    tonic = (7 * n_sharps) % TET
    return transpose_pcs(MAJOR_SCALE, tonic)


def parse_key_signature(text: str) -> frozenset[PitchClass] | None:
    """
    Parses key signatures like "bbb", "##", "2b", or "0#". "*" means no
    restriction and returns None.

    >>> sorted(parse_key_signature("bb"))
    [0, 2, 3, 5, 7, 9, 10]
    >>> parse_key_signature("3#") == parse_key_signature("###")
    True
    >>> parse_key_signature("0b") == parse_key_signature("0#")
    True
    >>> parse_key_signature("*") is None
    True
    >>> parse_key_signature("9#")
    Traceback (most recent call last):
    ValueError: a key signature can have at most 7 accidentals, got '9#'
    >>> parse_key_signature("c major")
    Traceback (most recent call last):
    ValueError: can't parse key signature 'c major'
    """
    if text.strip() == UNRESTRICTED:
        return None
    m = KEY_SIGNATURE_RE.match(text)
    if m is None:
        raise ValueError(f"can't parse key signature {text!r}")
    if m.group("accs") is not None:
        n = len(m.group("accs"))
        sign = 1 if m.group("accs")[0] in "#♯" else -1
    else:
        n = int(m.group("n"))
        sign = 1 if m.group("acc") in "#♯" else -1
    if n > MAX_ACCIDENTALS:
        raise ValueError(
            f"a key signature can have at most {MAX_ACCIDENTALS} accidentals, "
            f"got {text!r}"
        )
    return frozenset(key_signature_pcs(sign * n))
