"""Hand derived tables to external renderers as DataFrame snapshots and CSV files."""
import logging
from dataclasses import asdict, fields
from pathlib import Path
from typing import Iterable, Mapping

import pandas as pd

from .models import PairTally


def to_frame(items: Iterable, columns: list[str] | None = None) -> pd.DataFrame:
    """One row per dataclass record, one column per field (plus `label` for pair tallies).

    columns is used for an empty input, where the field names cannot be read off a record.
    """
    rows = []
    for item in items:
        row = asdict(item)
        if isinstance(item, PairTally):
            row["label"] = item.label
        rows.append(row)
    return pd.DataFrame(rows, columns=columns if not rows else None)


def columns_of(data_class: type) -> list[str]:
    names = [f.name for f in fields(data_class)]
    if data_class is PairTally:
        names.append("label")
    return names


def write_tables(tables: Mapping[str, pd.DataFrame], output_dir: Path) -> dict[str, Path]:
    output_dir.mkdir(parents=True, exist_ok=True)
    written = {}
    for name, frame in tables.items():
        path = output_dir / f"{name}.csv"
        frame.to_csv(path, index=False)
        logging.info(f"Wrote {len(frame)} rows to {path}")
        written[name] = path
    return written
