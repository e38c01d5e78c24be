from dataclasses import dataclass
from datetime import date
from typing import Literal, Optional

Measure = Literal["total_letters", "total_journeys"]
MEASURES: tuple[Measure, ...] = ("total_letters", "total_journeys")


@dataclass(frozen=True, slots=True)
class JourneyRecord:
    """One journey as read from the input table.

    Coordinates are optional; only the region counter needs them.
    row is the 1-based data row in the source file and is used to point at bad input.
    """
    date: date
    start_country: str
    end_country: str
    number_of_letters: int
    start_lat: Optional[float] = None
    start_lon: Optional[float] = None
    end_lat: Optional[float] = None
    end_lon: Optional[float] = None
    row: Optional[int] = None


@dataclass(frozen=True, slots=True)
class CalendarBucket:
    """Calendar grid position of a single journey.

    ISO 8601 conventions: weeks start on Monday, weekday runs Mon=1..Sun=7 and
    week_of_year is the ISO week. year is the calendar year, so early January may
    sit in ISO week 52/53. week_of_month is ceil(day / 7), range 1..5.
    """
    date: date
    year: int
    month: int
    month_label: str
    week_of_year: int
    week_of_month: int
    weekday: int
    weekday_label: str


@dataclass(frozen=True, slots=True)
class PairTally:
    start: str
    end: str
    count: int

    @property
    def label(self) -> str:
        return f"{self.start} -> {self.end}"


@dataclass(frozen=True, slots=True)
class DestinationTotals:
    """Wide form: both measures of one destination in a single row."""
    end_country: str
    total_letters: int
    total_journeys: int


@dataclass(frozen=True, slots=True)
class DestinationShare:
    """Long form: one measure of one destination, as a share of that measure's grand total."""
    end_country: str
    measure: Measure
    value: float


@dataclass(frozen=True, slots=True)
class RegionCount:
    region: str
    count: int
