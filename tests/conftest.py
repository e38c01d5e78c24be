from datetime import date

import pytest

from journeyviz.models import JourneyRecord

CSV_HEADER = "date,start.country,end.country,start.latitude,start.longitude,end.latitude,end.longitude,number.of.letters\n"


@pytest.fixture
def make_record():
    def _make(start="USA", end="France", letters=1, day=date(1862, 3, 15), **coords):
        return JourneyRecord(date=day, start_country=start, end_country=end, number_of_letters=letters, **coords)

    return _make


@pytest.fixture
def example_records(make_record):
    return [
        make_record("USA", "France", 2),
        make_record("USA", "France", 1),
        make_record("UK", "France", 5),
    ]


@pytest.fixture
def journeys_csv(tmp_path):
    path = tmp_path / "journeys.csv"
    path.write_text(
        CSV_HEADER
        + "1862-03-15,USA,France,38.9,-77.0,48.8,2.3,2\n"
        + "1862-04-02,USA,France,40.7,-74.0,48.8,2.3,1\n"
        + "1862-04-20,UK,France,51.5,-0.1,48.8,2.3,5\n"
        + "1863-01-04,USA,UK,42.3,-71.0,51.5,-0.1,4\n",
        encoding="utf-8",
    )
    return path
