from brixlogic import tags


def test_untagged_records_are_excluded(store_multi_year):
    out = tags.heatmap(store_multi_year)
    assert [t["tag"] for t in out] == [3, 4, 5]
    assert 0 not in [t["tag"] for t in out]
    assert out[0] == {"tag": 3, "average": 10.0, "count": 2}
    assert out[2] == {"tag": 5, "average": 12.75, "count": 2}


def test_detail_by_date(make_store):
    store = make_store(
        [
            ("F", "V", 7, 10.0, "2024-03-02"),
            ("F", "V", 7, 11.0, "2024-03-01"),
            ("F", "V", 7, 12.0, "2024-03-02"),
            ("F", "V", 8, 99.0, "2024-03-02"),
        ]
    )
    assert tags.detail(store, 7) == [
        {"date": "2024-03-01", "average": 11.0, "count": 1},
        {"date": "2024-03-02", "average": 11.0, "count": 2},
    ]


def test_detail_for_untagged_is_empty(store_multi_year):
    assert tags.detail(store_multi_year, 0) == []
    assert tags.heatmap(store_multi_year.iloc[0:0]) == []
