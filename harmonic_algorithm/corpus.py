"""
Reads the UCI "Bach Chorales Harmony" dataset into corpus records.

Each row of the file is one harmonic event:

    seq, event, <12 YES/NO columns, one per pc>, fund, acc, label

The file has no header. `fund` is the bass note name.
"""
import logging
import typing as t
from pathlib import Path

import pandas as pd

from harmonic_algorithm.markov import SEGMENT_BREAK, CorpusRecord
from harmonic_algorithm.pitch_utils.spelling import note_name_to_pc
from harmonic_algorithm.pitch_utils.types import TET

LOGGER = logging.getLogger(__name__)

PC_COLUMNS = [str(pc) for pc in range(TET)]
COLUMNS = ["seq", "event", *PC_COLUMNS, "fund", "acc", "label"]


def read_chorale_csv(path: str | Path) -> pd.DataFrame:
    df = pd.read_csv(
        path,
        header=None,
        names=COLUMNS,
        dtype=str,
        skipinitialspace=True,
    )
    for col in df.columns:
        df[col] = df[col].str.strip()
    return df


def records_from_dataframe(df: pd.DataFrame) -> t.List[CorpusRecord | None]:
    """
    >>> df = pd.DataFrame(
    ...     [
    ...         ["a", "1", "YES", "NO", "NO", "NO", "YES", "NO", "NO", "YES", "NO", "NO", "NO", "NO", "C", "3", "C_M"],
    ...         ["a", "2", "NO", "NO", "YES", "NO", "NO", "YES", "NO", "NO", "NO", "YES", "NO", "NO", "D", "3", "D_m"],
    ...         ["b", "1", "NO", "NO", "YES", "NO", "NO", "NO", "NO", "YES", "NO", "NO", "NO", "YES", "G", "3", "G_M"],
    ...     ],
    ...     columns=COLUMNS,
    ... )
    >>> records_from_dataframe(df)
    [(0, (0, 4, 7)), (2, (2, 5, 9)), None, (7, (2, 7, 11))]
    """
    missing = set(COLUMNS[:-2]) - set(df.columns)
    if missing:
        raise ValueError(f"corpus is missing columns {sorted(missing)}")

    pitch_flags = df[PC_COLUMNS].apply(lambda col: col.str.upper() == "YES")
    out: t.List[CorpusRecord | None] = []
    prev_seq = None
    for (i, row), (_, flags) in zip(df.iterrows(), pitch_flags.iterrows()):
        if prev_seq is not None and row["seq"] != prev_seq:
            out.append(SEGMENT_BREAK)
        prev_seq = row["seq"]
        try:
            fundamental = note_name_to_pc(row["fund"])
        except ValueError as exc:
            raise ValueError(f"row {i}: {exc}") from exc
        pcs = tuple(int(pc) for pc, on in flags.items() if on)
        out.append((fundamental, pcs))
    return out


def load_chorale_records(path: str | Path) -> t.List[CorpusRecord | None]:
    df = read_chorale_csv(path)
    records = records_from_dataframe(df)
    LOGGER.info(f"read {len(df)} events from {df['seq'].nunique()} chorales in {path}")
    return records
