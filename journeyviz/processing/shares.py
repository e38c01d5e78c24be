import logging
from collections import defaultdict
from typing import Iterable, Sequence

from .base import BaseAggregator, record_ref
from ..errors import DataError, DivisionByZeroError
from ..models import MEASURES, DestinationShare, DestinationTotals, JourneyRecord


def gather_measures(wide: Iterable[DestinationTotals]) -> list[DestinationShare]:
    """Pivot wide destination totals into long form: one row per (destination, measure).

    Values are left unnormalised, so per-measure sums equal the wide column sums.
    """
    long: list[DestinationShare] = []
    seen: set[str] = set()
    for row in wide:
        if row.end_country in seen:
            raise DataError(f"Duplicate destination '{row.end_country}' in wide totals", field="end_country")
        seen.add(row.end_country)
        for measure in MEASURES:
            long.append(DestinationShare(end_country=row.end_country, measure=measure, value=float(getattr(row, measure))))
    return long


def normalize_shares(long: Sequence[DestinationShare]) -> list[DestinationShare]:
    """Divide every value by the grand total of its own measure."""
    grand_totals: dict[str, float] = defaultdict(float)
    for row in long:
        grand_totals[row.measure] += row.value
    for measure, total in grand_totals.items():
        if total == 0:
            raise DivisionByZeroError(measure)
    return [
        DestinationShare(end_country=row.end_country, measure=row.measure, value=row.value / grand_totals[row.measure])
        for row in long
    ]


class DestinationShareNormalizer(BaseAggregator):
    """Per-destination letter and journey totals, each expressed as a share of its grand total.

    An input where no letters were sent at all raises DivisionByZeroError; empty input gives an empty list.
    """

    @staticmethod
    def _letters(record: JourneyRecord, position: int) -> int:
        value = record.number_of_letters
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise DataError(f"number_of_letters must be a non-negative integer, got {value!r}",
                            row=record_ref(record, position), field="number_of_letters")
        return value

    def totals_by_destination(self, records: Sequence[JourneyRecord]) -> list[DestinationTotals]:
        letters: dict[str, int] = defaultdict(int)
        journeys: dict[str, int] = defaultdict(int)
        for position, record in enumerate(records):
            end = self.require_text(record, "end_country", position)
            letters[end] += self._letters(record, position)
            journeys[end] += 1
        return [DestinationTotals(end_country=end, total_letters=letters[end], total_journeys=journeys[end])
                for end in letters]

    def aggregate(self, records: Sequence[JourneyRecord]) -> list[DestinationShare]:
        wide = self.totals_by_destination(records)
        shares = normalize_shares(gather_measures(wide))
        logging.debug("Normalised %d destinations into %d share rows", len(wide), len(shares))
        return shares
