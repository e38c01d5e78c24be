"""High-level orchestration: load journeys, aggregate them and write the chart tables.

Usage patterns:

1. Whole dataset with the default paths from .env / environment:
   run_pipeline(settings.journeys_csv, settings.output_dir)

2. A date window, ranked pairs largest first, plus choropleth counts:
   run_pipeline(csv, out, start_date=date(1861, 1, 1), end_date=date(1865, 12, 31),
                descending=True, regions_geojson=Path("states.geojson"))
"""
import argparse
import logging
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

from journeyviz.config import settings
from journeyviz.errors import DivisionByZeroError
from journeyviz.export import columns_of, to_frame, write_tables
from journeyviz.loading import load_journeys
from journeyviz.logging_config import setup_logging
from journeyviz.models import CalendarBucket, DestinationShare, PairTally, RegionCount
from journeyviz.processing.base import filter_by_date_range, parse_date
from journeyviz.processing.calendar import CalendarBucketer
from journeyviz.processing.pairs import PairTallyAggregator, sort_pair_tallies
from journeyviz.processing.shares import DestinationShareNormalizer
from journeyviz.regions import count_points_per_region, load_regions


def run_pipeline(
        csv_path: Path,
        output_dir: Path,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        descending: bool = False,
        regions_geojson: Optional[Path] = None,
        region_name_property: str = "name",
) -> dict[str, Path]:
    records = load_journeys(csv_path)
    if start_date or end_date:
        records = filter_by_date_range(records, start_date, end_date)
        logging.info(f"{len(records)} journeys within {start_date or '...'} -> {end_date or '...'}")

    tables = {
        "calendar": to_frame(CalendarBucketer().aggregate(records), columns_of(CalendarBucket)),
        "pair_tally": to_frame(
            sort_pair_tallies(PairTallyAggregator().aggregate(records), descending=descending),
            columns_of(PairTally),
        ),
    }

    try:
        shares = DestinationShareNormalizer().aggregate(records)
    except DivisionByZeroError as exc:
        logging.warning(f"Skipping destination shares: {exc}")
    else:
        tables["destination_share"] = to_frame(shares, columns_of(DestinationShare))

    if regions_geojson is not None:
        regions = load_regions(regions_geojson, name_property=region_name_property)
        tables["region_count"] = to_frame(count_points_per_region(records, regions), columns_of(RegionCount))

    return write_tables(tables, output_dir)


def _cli_date(value: str) -> date:
    try:
        return parse_date(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Aggregate historical journeys into chart-ready tables")
    p.add_argument("--input", type=Path, default=settings.journeys_csv, help="Journeys CSV file")
    p.add_argument("--output-dir", type=Path, default=settings.output_dir, help="Directory for the derived CSV tables")
    p.add_argument("--start-date", type=_cli_date, help="Inclusive lower bound, dd.mm.YYYY or YYYY-MM-DD")
    p.add_argument("--end-date", type=_cli_date, help="Inclusive upper bound, dd.mm.YYYY or YYYY-MM-DD")
    p.add_argument("--descending", action="store_true", help="Rank journey pairs largest count first")
    p.add_argument("--regions", type=Path, default=settings.regions_geojson,
                   help="GeoJSON boundaries; enables per-region journey counts")
    p.add_argument("--region-name-property", default=settings.region_name_property)
    p.add_argument("--log-level", default=settings.log_level)
    return p


def main_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        written = run_pipeline(
            csv_path=args.input,
            output_dir=args.output_dir,
            start_date=args.start_date,
            end_date=args.end_date,
            descending=args.descending,
            regions_geojson=args.regions,
            region_name_property=args.region_name_property,
        )
    except Exception:  # noqa: BLE001
        logging.exception("Pipeline failed")
        return 1
    logging.info(f"Tables written: {', '.join(sorted(written))}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main_cli())
