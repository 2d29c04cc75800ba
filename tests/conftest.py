import pandas as pd
import pytest

from brixlogic import ingest


def _rows(spec):
    """[(farm, variety, tag, brix, date), ...] -> raw upload-shaped DataFrame."""
    return pd.DataFrame(
        {
            "FARMLAND": [r[0] for r in spec],
            "MSSR_SN": "SN-001",
            "VARIETY": [r[1] for r in spec],
            "TAG_NO": [r[2] for r in spec],
            "BRIX": [r[3] for r in spec],
            "MEASURE_DATE": [r[4] for r in spec],
        }
    )


@pytest.fixture
def make_store():
    def _make(spec):
        return ingest.from_dataframe(_rows(spec))

    return _make


@pytest.fixture
def store_two_farms(make_store):
    # Farm A on days 1 and 3, Farm B every day
    return make_store(
        [
            ("Farm A", "Hallabong", 1, 10.0, "2024-03-01"),
            ("Farm B", "Hallabong", 2, 12.0, "2024-03-01"),
            ("Farm B", "Hallabong", 2, 11.0, "2024-03-02"),
            ("Farm A", "Hallabong", 1, 14.0, "2024-03-03"),
            ("Farm B", "Satsuma", 0, 9.0, "2024-03-03"),
        ]
    )


@pytest.fixture
def store_multi_year(make_store):
    return make_store(
        [
            ("Farm A", "Satsuma", 3, 9.0, "2023-03-01"),
            ("Farm A", "Satsuma", 3, 11.0, "2023-03-01"),
            ("Farm A", "Satsuma", 4, 10.5, "2023-03-02"),
            ("Farm B", "Satsuma", 0, 8.0, "2024-02-29"),
            ("Farm B", "Satsuma", 5, 12.5, "2024-03-01"),
            ("Farm B", "Hallabong", 5, 13.0, "2024-03-01"),
        ]
    )
