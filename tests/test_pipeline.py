import json
from datetime import date

import pandas as pd
import pytest

from journeyviz.pipeline import main_cli, run_pipeline

from conftest import CSV_HEADER


def test_run_pipeline_writes_all_tables(journeys_csv, tmp_path):
    out = tmp_path / "tables"

    written = run_pipeline(journeys_csv, out)

    assert set(written) == {"calendar", "pair_tally", "destination_share"}
    calendar = pd.read_csv(written["calendar"])
    assert len(calendar) == 4
    assert calendar.loc[0, "month_label"] == "Mar"
    assert calendar.loc[0, "week_of_month"] == 3

    pairs = pd.read_csv(written["pair_tally"])
    assert pairs["count"].sum() == 4
    assert list(pairs["count"]) == sorted(pairs["count"])
    assert "USA -> France" in set(pairs["label"])

    shares = pd.read_csv(written["destination_share"])
    assert len(shares) == 4
    assert shares.groupby("measure")["value"].sum().tolist() == pytest.approx([1.0, 1.0], abs=1e-9)


def test_run_pipeline_descending_and_date_window(journeys_csv, tmp_path):
    written = run_pipeline(journeys_csv, tmp_path, start_date=date(1862, 1, 1), end_date=date(1862, 12, 31),
                           descending=True)

    calendar = pd.read_csv(written["calendar"])
    assert set(calendar["year"]) == {1862}
    pairs = pd.read_csv(written["pair_tally"])
    assert list(pairs["label"]) == ["USA -> France", "UK -> France"]


def test_zero_letters_skips_share_table(tmp_path):
    csv = tmp_path / "zero.csv"
    csv.write_text(CSV_HEADER + "1862-03-15,USA,France,1,1,1,1,0\n", encoding="utf-8")

    written = run_pipeline(csv, tmp_path / "out")

    assert "destination_share" not in written
    assert "pair_tally" in written


def test_run_pipeline_with_regions(journeys_csv, tmp_path):
    geojson = tmp_path / "europe.geojson"
    geojson.write_text(json.dumps({
        "type": "FeatureCollection",
        "features": [{"type": "Feature", "properties": {"name": "France"},
                      "geometry": {"type": "Polygon",
                                   "coordinates": [[[-5, 42], [8, 42], [8, 51], [-5, 51], [-5, 42]]]}}],
    }), encoding="utf-8")

    written = run_pipeline(journeys_csv, tmp_path / "out", regions_geojson=geojson)

    regions = pd.read_csv(written["region_count"])
    assert regions.to_dict(orient="records") == [{"region": "France", "count": 3}]


def test_main_cli_exit_codes(journeys_csv, tmp_path):
    assert main_cli(["--input", str(journeys_csv), "--output-dir", str(tmp_path / "out"), "--start-date", "01.01.1862"]) == 0
    assert (tmp_path / "out" / "calendar.csv").exists()
    assert main_cli(["--input", str(tmp_path / "missing.csv"), "--output-dir", str(tmp_path / "out")]) == 1
