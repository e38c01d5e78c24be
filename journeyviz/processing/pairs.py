import logging
from typing import Iterable, Sequence

from .base import BaseAggregator
from ..models import JourneyRecord, PairTally


def sort_pair_tallies(tallies: Iterable[PairTally], descending: bool = False) -> list[PairTally]:
    """Ranked view over a tally set; ties fall back to (start, end) so both directions mirror each other."""
    return sorted(tallies, key=lambda t: (t.count, t.start, t.end), reverse=descending)


class PairTallyAggregator(BaseAggregator):
    """Count journeys per directed (start_country, end_country) pair."""

    def aggregate(self, records: Sequence[JourneyRecord]) -> frozenset[PairTally]:
        grouped = self.group_records_by_key(records, ("start_country", "end_country"))
        tallies = frozenset(PairTally(start=start, end=end, count=len(group)) for (start, end), group in grouped.items())
        logging.debug("Tallied %d journeys into %d pairs", len(records), len(tallies))
        return tallies
