from abc import ABC, abstractmethod
from collections import defaultdict
from datetime import date, datetime
from typing import Any, Iterable, Optional, Sequence

from ..errors import DataError
from ..models import JourneyRecord

DATE_FORMATS = ["%Y-%m-%d", "%Y/%m/%d", "%d.%m.%Y"]


def parse_date(value: Any, formats: list[str] | None = None) -> date:
    """Coerce a date, datetime or date string to a date; raise ValueError otherwise."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Missing or non-text date value {value!r}")
    if formats is None:
        formats = DATE_FORMATS
    for date_format in formats:
        try:
            return datetime.strptime(value.strip(), date_format).date()
        except ValueError:
            continue
    raise ValueError(f"Date string '{value}' not in formats {formats}")


def record_ref(record: JourneyRecord, position: int) -> int:
    """Row number to report for a record: its source row when known, else its 1-based position."""
    return record.row if record.row is not None else position + 1


def filter_by_date_range(
        records: Iterable[JourneyRecord],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
) -> list[JourneyRecord]:
    """Keep records whose date lies within the inclusive [start_date, end_date] range."""
    filtered = []
    for position, record in enumerate(records):
        try:
            day = parse_date(record.date)
        except ValueError as exc:
            raise DataError(str(exc), row=record_ref(record, position), field="date") from exc
        if start_date and day < start_date:
            continue
        if end_date and day > end_date:
            continue
        filtered.append(record)
    return filtered


class BaseAggregator(ABC):
    """Common helpers for the concrete journey aggregators."""

    # ---------------- Validation helpers -----------------
    @staticmethod
    def require_text(record: JourneyRecord, field_name: str, position: int) -> str:
        value = getattr(record, field_name)
        if not isinstance(value, str) or not value.strip():
            raise DataError(f"Missing value for {field_name}", row=record_ref(record, position), field=field_name)
        return value

    @staticmethod
    def require_date(record: JourneyRecord, position: int) -> date:
        try:
            return parse_date(record.date)
        except ValueError as exc:
            raise DataError(str(exc), row=record_ref(record, position), field="date") from exc

    # ---------------- Grouping -----------------
    def group_records_by_key(
            self, records: Sequence[JourneyRecord], keys: Sequence[str]
    ) -> dict[tuple[str, ...], list[JourneyRecord]]:
        """Group records by a tuple of text fields, validating every key field on the way."""
        grouped: dict[tuple[str, ...], list[JourneyRecord]] = defaultdict(list)
        for position, record in enumerate(records):
            key = tuple(self.require_text(record, k, position) for k in keys)
            grouped[key].append(record)
        return dict(grouped)

    @abstractmethod
    def aggregate(self, records: Sequence[JourneyRecord]) -> Any:  # pragma: no cover
        raise NotImplementedError
