import pytest

from harmonic_algorithm.corpus import load_chorale_records
from harmonic_algorithm.markov import SEGMENT_BREAK, train
from harmonic_algorithm.pitch_utils.chords import Cadence, Chord


def _row(seq, event, pcs, fund, label):
    flags = ", ".join("YES" if pc in pcs else "NO" for pc in range(12))
    return f"{seq}, {event}, {flags}, {fund}, 3, {label}"


ROWS = [
    _row("000106b_", 1, {0, 4, 7}, "C", " C_M"),
    _row("000106b_", 2, {5, 9, 0}, "F", " F_M"),
    _row("000106b_", 3, {7, 11, 2, 5}, "G", " G_M7"),
    _row("000106b_", 4, {0, 4, 7}, "C", " C_M"),
    _row("000206b_", 1, {2, 6, 9}, "D", " D_M"),
    _row("000206b_", 2, {7, 11}, "G", " G_M"),
    _row("000206b_", 3, {9, 1, 4}, "A", " A_M"),
    _row("000206b_", 4, {6, 10, 1}, "F#", " F#_M"),
]


@pytest.fixture
def corpus_path(tmp_path):
    path = tmp_path / "chorales.data"
    path.write_text("\n".join(ROWS) + "\n")
    return path


def test_load_chorale_records(corpus_path):
    records = load_chorale_records(corpus_path)
    assert len(records) == 9
    assert records[4] is SEGMENT_BREAK
    assert records[0] == (0, (0, 4, 7))
    assert records[2] == (7, (2, 5, 7, 11))
    assert records[6] == (7, (7, 11))
    assert records[8] == (6, (1, 6, 10))


def test_train_from_file(corpus_path):
    table = train(load_chorale_records(corpus_path))
    # C-F-G-C contributes two transitions; in the second piece the record
    #   with two pcs is skipped, leaving D-A-F# and one transition
    assert len(table) == 3
    d_major = Chord((2, 6, 9))
    a_major = Chord((9, 1, 4))
    f_sharp_major = Chord((6, 10, 1))
    assert table.lookup(Cadence(d_major, a_major)) == (
        (Cadence(a_major, f_sharp_major).normalized(), 1.0),
    )


def test_bad_fundamental(tmp_path):
    path = tmp_path / "bad.data"
    path.write_text(_row("001", 1, {0, 4, 7}, "H", "C_M") + "\n")
    with pytest.raises(ValueError, match="row 0"):
        load_chorale_records(path)
