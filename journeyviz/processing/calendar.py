import logging
import math
from typing import Sequence

from .base import BaseAggregator
from ..models import CalendarBucket, JourneyRecord

# Fixed English labels so the grid does not depend on the process locale
MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def week_of_month(day_of_month: int) -> int:
    """Horizontal tile position in the calendar grid: ceil(day / 7), 1..5."""
    return math.ceil(day_of_month / 7)


class CalendarBucketer(BaseAggregator):
    """Place every journey on a year/month/week/weekday calendar grid (ISO 8601 weeks, Monday first)."""

    def bucket(self, record: JourneyRecord, position: int = 0) -> CalendarBucket:
        day = self.require_date(record, position)
        iso = day.isocalendar()
        return CalendarBucket(
            date=day,
            year=day.year,
            month=day.month,
            month_label=MONTH_LABELS[day.month - 1],
            week_of_year=iso[1],
            week_of_month=week_of_month(day.day),
            weekday=iso[2],
            weekday_label=WEEKDAY_LABELS[iso[2] - 1],
        )

    def aggregate(self, records: Sequence[JourneyRecord]) -> list[CalendarBucket]:
        buckets = [self.bucket(record, position) for position, record in enumerate(records)]
        logging.debug("Bucketed %d journeys onto the calendar grid", len(buckets))
        return buckets
