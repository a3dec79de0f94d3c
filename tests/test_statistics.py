from conkit.statistics import Report, Statistics


def test_empty_statistics_have_no_hits():
    assert Statistics().hits == {}


def test_add_report_counts_per_key():
    stats = Statistics()
    for i, key in enumerate(["a", "b", "a", None, "a"]):
        stats.add_report(Report(i, key))
    assert stats.hits == {"a": 3, "b": 1, None: 1}


def test_report_holds_id_and_key():
    report = Report(7, "k")
    assert (report.id, report.key) == (7, "k")
    assert Report(7, "k") == report