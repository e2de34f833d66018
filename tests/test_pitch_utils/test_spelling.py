import pytest

from harmonic_algorithm.pitch_utils.chords import Chord
from harmonic_algorithm.pitch_utils.scale import key_signature_pcs, parse_key_signature
from harmonic_algorithm.pitch_utils.spelling import (
    Enharmonic,
    chord_name,
    note_name_to_pc,
)


@pytest.mark.parametrize("enharmonic", list(Enharmonic))
def test_names_round_trip(enharmonic):
    for pc in range(12):
        assert note_name_to_pc(enharmonic.name_of(pc)) == pc


def test_toggled():
    assert Enharmonic.FLAT.toggled() is Enharmonic.SHARP
    assert Enharmonic.SHARP.toggled() is Enharmonic.FLAT


@pytest.mark.parametrize("name", ["", "X", "C#b#x", "1", "Cb#m"])
def test_bad_note_names(name):
    with pytest.raises(ValueError):
        note_name_to_pc(name)


def test_unicode_accidentals():
    assert note_name_to_pc("E♭") == note_name_to_pc("Eb") == 3
    assert note_name_to_pc("F♯") == 6


def test_chord_name_keeps_bass_first():
    assert chord_name(Chord((4, 7, 0)), Enharmonic.SHARP) == "E G C"
    assert chord_name(Chord((6, 10, 1)), Enharmonic.FLAT) == "Gb Bb Db"


@pytest.mark.parametrize("n_sharps", range(-7, 8))
def test_key_signatures_are_major_scales(n_sharps):
    pcs = key_signature_pcs(n_sharps)
    assert len(set(pcs)) == 7
    tonic = pcs[0]
    assert tuple((pc - tonic) % 12 for pc in pcs) == (0, 2, 4, 5, 7, 9, 11)


@pytest.mark.parametrize(
    "text, expected_tonic",
    [("0#", 0), ("0b", 0), ("#", 7), ("##", 2), ("3#", 9), ("b", 5), ("bbb", 3), ("6b", 6)],
)
def test_parse_key_signature(text, expected_tonic):
    assert parse_key_signature(text) == frozenset(
        (expected_tonic + i) % 12 for i in (0, 2, 4, 5, 7, 9, 11)
    )


@pytest.mark.parametrize("text", ["", "#b", "8#", "3", "x", "2 sharps"])
def test_bad_key_signatures(text):
    with pytest.raises(ValueError):
        parse_key_signature(text)


@pytest.mark.parametrize(
    "enharmonic, black_keys",
    [
        (Enharmonic.FLAT, ["Db", "Eb", "Gb", "Ab", "Bb"]),
        (Enharmonic.SHARP, ["C#", "D#", "F#", "G#", "A#"]),
    ],
)
def test_black_keys_follow_notation(enharmonic, black_keys):
    assert [enharmonic.name_of(pc) for pc in (1, 3, 6, 8, 10)] == black_keys
    assert [enharmonic.name_of(pc) for pc in (0, 2, 4, 5, 7, 9, 11)] == list("CDEFGAB")


@pytest.mark.parametrize(
    "name, pc",
    [("c", 0), ("f#", 6), ("bb", 10), ("B", 11), ("Cb", 11), ("E#", 5), ("Fb", 4)],
)
def test_note_names(name, pc):
    assert note_name_to_pc(name) == pc
