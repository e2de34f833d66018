import re
import typing as t
from enum import Enum

from harmonic_algorithm.constants import speller_pcs, unspeller_pcs
from harmonic_algorithm.pitch_utils.types import TET, PitchClass

if t.TYPE_CHECKING:
    from harmonic_algorithm.pitch_utils.chords import Chord

NOTE_NAME_RE = re.compile(r"^\s*(?P<letter>[A-Ga-g])(?P<accidentals>[#b♯♭]*)\s*$")


class Enharmonic(Enum):
    """
    How to spell the black keys. The value is the accidental used.

    >>> Enharmonic.FLAT.name_of(10)
    'Bb'
    >>> Enharmonic.SHARP.name_of(10)
    'A#'
    >>> Enharmonic.FLAT.name_of(6), Enharmonic.SHARP.name_of(6)
    ('Gb', 'F#')
    >>> Enharmonic.SHARP.toggled()
    <Enharmonic.FLAT: 'b'>
    """

    FLAT = "b"
    SHARP = "#"

    def name_of(self, pc: PitchClass) -> str:
        name = speller_pcs(pc % TET)
        if len(name) == 1 or name.endswith(self.value):
            return name
        # a black key spelled the other way: respell from the neighbouring
        #   white key
        if self is Enharmonic.FLAT:
            return speller_pcs((pc + 1) % TET) + self.value
        return speller_pcs((pc - 1) % TET) + self.value

    def toggled(self) -> "Enharmonic":
        return Enharmonic.SHARP if self is Enharmonic.FLAT else Enharmonic.FLAT

    @property
    def label(self) -> str:
        return "Flat ♭" if self is Enharmonic.FLAT else "Sharp ♯"


def note_name_to_pc(name: str) -> PitchClass:
    """
    Accepts upper- or lower-case letters and ♯/♭ as well as #/b.

    >>> note_name_to_pc("C")
    0
    >>> note_name_to_pc("bb")
    10
    >>> note_name_to_pc("E#")
    5
    >>> note_name_to_pc("Cb")
    11
    >>> note_name_to_pc("F♯")
    6
    >>> note_name_to_pc("H")
    Traceback (most recent call last):
    ValueError: can't parse note name 'H'
    """
    if not isinstance(name, str):
        raise ValueError(f"can't parse note name {name!r}")
    m = NOTE_NAME_RE.match(name)
    if m is None:
        raise ValueError(f"can't parse note name {name!r}")
    accidentals = m.group("accidentals").replace("♯", "#").replace("♭", "b")
    return unspeller_pcs(m.group("letter").upper() + accidentals) % TET


def chord_name(chord: "Chord", enharmonic: Enharmonic = Enharmonic.FLAT) -> str:
    """
    >>> from harmonic_algorithm.pitch_utils.chords import Chord
    >>> chord_name(Chord((10, 2, 5)))
    'Bb D F'
    >>> chord_name(Chord((4, 8, 11)), Enharmonic.SHARP)
    'E G# B'
    """
    return " ".join(enharmonic.name_of(pc) for pc in chord)
