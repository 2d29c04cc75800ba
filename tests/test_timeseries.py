"""Tests for the dense year-to-date cumulative series."""

import numpy as np

from brixlogic import EngineConfig, timeseries, utils


def _by_date(points):
    return {p.label: p.series for p in points}


def test_year_reset(make_store):
    store = make_store(
        [("F", "V", 0, 10.0, "2023-12-31"), ("F", "V", 0, 8.0, "2024-01-01")]
    )
    points = timeseries.cumulative(store, [], "2024-01-01", "2024-01-01")
    assert len(points) == 1
    assert points[0].get("overall") == 8.0


def test_farm_gap_days_are_omitted(store_two_farms):
    points = timeseries.cumulative(store_two_farms, ["Farm A"], "2024-03-01", "2024-03-03")
    got = _by_date(points)
    assert list(got) == ["2024-03-01", "2024-03-02", "2024-03-03"]
    assert got["2024-03-01"] == {"overall": 11.0, "Farm A": 10.0}
    assert got["2024-03-02"] == {"overall": 11.0}
    assert got["2024-03-03"] == {"overall": 11.2, "Farm A": 12.0}


def test_output_is_dense_over_window(store_two_farms):
    points = timeseries.cumulative(store_two_farms, [], "2024-02-28", "2024-03-05")
    assert [p.label for p in points] == [
        "2024-02-28",
        "2024-02-29",
        "2024-03-01",
        "2024-03-02",
        "2024-03-03",
        "2024-03-04",
        "2024-03-05",
    ]
    # no carry-forward by default
    assert points[0].series == {}
    assert points[5].series == {}


def test_carry_forward_threshold_applies_to_overall_only(store_two_farms):
    cfg = EngineConfig(carry_forward_max_gap_days=1)
    points = timeseries.cumulative(
        store_two_farms, ["Farm A"], "2024-03-01", "2024-03-05", config=cfg
    )
    got = _by_date(points)
    assert got["2024-03-04"] == {"overall": 11.2}
    assert got["2024-03-05"] == {}
    # farm keeps its gap even when the overall series is widened
    assert "Farm A" not in got["2024-03-02"]


def test_window_seeded_from_earlier_in_same_year(make_store):
    store = make_store([("F", "V", 0, 9.0, "2024-02-27"), ("F", "V", 0, 11.0, "2024-03-01")])
    cfg = EngineConfig(carry_forward_max_gap_days=1)
    got = _by_date(timeseries.cumulative(store, [], "2024-02-28", "2024-03-01", config=cfg))
    assert got["2024-02-28"] == {"overall": 9.0}
    assert got["2024-02-29"] == {}
    # history before the window still counts towards the running mean
    assert got["2024-03-01"] == {"overall": 10.0}


def test_no_carry_from_previous_year_into_january(make_store):
    store = make_store([("F", "V", 0, 9.0, "2023-12-31")])
    cfg = EngineConfig(carry_forward_max_gap_days=30)
    points = timeseries.cumulative(store, [], "2024-01-01", "2024-01-02", config=cfg)
    assert len(points) == 2
    assert all(p.series == {} for p in points)


def test_inverted_window_is_empty(store_two_farms):
    assert timeseries.cumulative(store_two_farms, [], "2024-03-03", "2024-03-01") == []


def test_empty_input_is_empty(store_two_farms):
    assert timeseries.cumulative(store_two_farms.iloc[0:0], [], "2024-03-01", "2024-03-03") == []


def test_unknown_farm_never_gets_a_key(store_two_farms):
    points = timeseries.cumulative(store_two_farms, ["Nowhere"], "2024-03-01", "2024-03-03")
    assert all("Nowhere" not in p for p in points)


def test_matches_weighted_running_mean(make_store):
    values = [
        ("2024-01-03", 9.2),
        ("2024-01-03", 10.7),
        ("2024-01-05", 11.1),
        ("2024-01-09", 8.4),
        ("2024-01-09", 12.9),
        ("2024-01-09", 10.05),
        ("2024-01-12", 9.95),
    ]
    store = make_store([("F", "V", 0, v, d) for d, v in values])
    got = _by_date(timeseries.cumulative(store, [], "2024-01-01", "2024-01-31"))

    total, count = 0.0, 0
    for d in sorted({d for d, _ in values}):
        day = [v for dd, v in values if dd == d]
        total += sum(day)
        count += len(day)
        assert got[d]["overall"] == utils.mean_half_up(total, count)
    assert sum(1 for s in got.values() if s) == 4


def test_rounding_keeps_full_precision_sums(make_store):
    store = make_store([("F", "V", 0, 9.005, "2024-01-01"), ("F", "V", 0, 9.0, "2024-01-02")])
    got = _by_date(timeseries.cumulative(store, [], "2024-01-01", "2024-01-02"))
    assert got["2024-01-01"]["overall"] == 9.01
    # (9.005 + 9.0) / 2 = 9.0025; summing the rounded 9.01 would give 9.01
    assert got["2024-01-02"]["overall"] == 9.0


def test_half_way_mean_of_several_records_rounds_up(make_store):
    store = make_store(
        [("F", "V", 0, 9.0, "2024-01-01"), ("F", "V", 0, 9.01, "2024-01-01"),
         ("F", "V", 0, 8.99, "2024-01-02"), ("F", "V", 0, 9.02, "2024-01-02")]
    )
    got = _by_date(timeseries.cumulative(store, [], "2024-01-01", "2024-01-02"))
    assert got["2024-01-01"] == {"overall": 9.01}
    assert got["2024-01-02"] == {"overall": 9.01}


def test_non_finite_brix_is_excluded(store_two_farms):
    df = store_two_farms.copy()
    df.loc[df["measure_date"] == np.datetime64("2024-03-02"), "brix"] = np.nan
    got = _by_date(timeseries.cumulative(df, [], "2024-03-01", "2024-03-03"))
    assert got["2024-03-02"] == {}
    assert got["2024-03-03"] == {"overall": 11.25}


def test_idempotent(store_two_farms):
    a = timeseries.cumulative(store_two_farms, ["Farm A", "Farm B"], "2024-02-20", "2024-03-10")
    b = timeseries.cumulative(store_two_farms, ["Farm A", "Farm B"], "2024-02-20", "2024-03-10")
    assert a == b


def test_cumulative_on_data_days_is_sparse(store_two_farms):
    farm_a = store_two_farms.loc[store_two_farms["farmland"] == "Farm A"]
    points = timeseries.cumulative_on_data_days(
        farm_a, "2024-03-02", "2024-03-03", series="Farm A"
    )
    assert [p.to_record() for p in points] == [{"date": "2024-03-03", "Farm A": 12.0}]
