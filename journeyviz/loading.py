"""Read the journeys table and turn each row into a JourneyRecord.

Column names are normalised, so `start.country`, `start_country` and `Start Country`
all land on the same field. Every malformed row raises DataError with its row number.
"""
import logging
import re
from pathlib import Path
from typing import Any, Optional

import dacite
import pandas as pd
from tqdm import tqdm

from .errors import DataError
from .models import JourneyRecord
from .processing.base import parse_date

REQUIRED_COLUMNS = ["date", "start_country", "end_country", "number_of_letters"]
WHOLE_NUMBER = re.compile(r"([+-]?\d+)(?:\.0*)?")

# normalised source column -> JourneyRecord field
COORDINATE_COLUMNS = {
    "start_latitude": "start_lat",
    "start_longitude": "start_lon",
    "end_latitude": "end_lat",
    "end_longitude": "end_lon",
    "start_lat": "start_lat",
    "start_lon": "start_lon",
    "end_lat": "end_lat",
    "end_lon": "end_lon",
}


def clean_names(df: pd.DataFrame) -> pd.DataFrame:
    """Standardise column names to lowercase snake_case."""
    df = df.copy()
    df.columns = (
        df.columns
        .astype(str)
        .str.strip()
        .str.lower()
        .str.replace(r"[^a-z0-9]+", "_", regex=True)
        .str.strip("_")
    )
    return df


def _text(value: Any) -> Optional[str]:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    text = str(value).strip()
    return text or None


def _parse_float(value: Any, row: int, field: str) -> Optional[float]:
    text = _text(value)
    if text is None:
        return None
    try:
        return float(text)
    except ValueError as exc:
        raise DataError(f"Invalid number {text!r}", row=row, field=field) from exc


def _parse_count(value: Any, row: int) -> int:
    text = _text(value)
    if text is None:
        raise DataError("Missing value", row=row, field="number_of_letters")
    # spreadsheets export whole numbers as "2.0"; exponents and fractions are rejected
    match = WHOLE_NUMBER.fullmatch(text)
    if match is None or (number := int(match.group(1))) < 0:
        raise DataError(f"Count must be a non-negative integer, got {text!r}", row=row, field="number_of_letters")
    return number


def _parse_row(raw: dict[str, Any], row: int) -> JourneyRecord:
    try:
        day = parse_date(_text(raw.get("date")))
    except ValueError as exc:
        raise DataError(str(exc), row=row, field="date") from exc

    data_to_parse: dict[str, Any] = dict(date=day, number_of_letters=_parse_count(raw.get("number_of_letters"), row), row=row)
    for field in ("start_country", "end_country"):
        if (value := _text(raw.get(field))) is None:
            raise DataError("Missing value", row=row, field=field)
        data_to_parse[field] = value
    for column, field in COORDINATE_COLUMNS.items():
        if column in raw and data_to_parse.get(field) is None:
            data_to_parse[field] = _parse_float(raw[column], row, field)

    try:
        return dacite.from_dict(data_class=JourneyRecord, data=data_to_parse)
    except dacite.DaciteError as exc:
        raise DataError(str(exc), row=row) from exc


def records_from_frame(frame: pd.DataFrame) -> list[JourneyRecord]:
    """Parse an in-memory table into records; row numbers start at 1 for the first data row."""
    df = clean_names(frame)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise DataError(f"Missing required columns: {missing}. Available columns: {list(df.columns)}")
    rows = df.astype(object).where(pd.notna(df), None).to_dict(orient="records")
    return [_parse_row(raw, row) for row, raw in enumerate(tqdm(rows, desc="Parsing journeys", leave=False), start=1)]


def load_journeys(path: Path) -> list[JourneyRecord]:
    if not path.exists():
        raise FileNotFoundError(f"Journeys file {path} not found")
    logging.info(f"Loading journeys from {path}")
    # only empty cells are missing; "NA" is a country code, not a null
    frame = pd.read_csv(path, dtype=str, skipinitialspace=True, keep_default_na=False, na_values=[""])
    records = records_from_frame(frame)
    logging.info(f"Loaded {len(records)} journeys")
    return records
