"""
Unit tests for the report data aggregator.
"""

from datetime import datetime

from reviewlens.agents.aggregation import build_report_data, format_report_timestamp
from reviewlens.models.review_source import ReviewSource


def test_builds_report_for_index(summary, strategy):
    sources = [ReviewSource("Q3.csv", "a"), ReviewSource("Q4.csv", "b")]
    now = datetime(2026, 10, 18, 9, 5, 7)

    report = build_report_data(sources, [summary, summary], [strategy, strategy], 1, now=now)

    assert report.title == "CUSTOMER INSIGHTS AI - ANALYSIS REPORT for Q4.csv"
    assert report.date == "18/10/2026, 09:05:07"
    assert report.strategic_analysis is strategy
    assert report.sentiment == summary.sentiment
    assert report.pros == summary.pros
    assert report.keywords == summary.keywords
    assert report.insights == summary.insights


def test_copies_lists(summary, strategy):
    report = build_report_data([ReviewSource("a", "x")], [summary], [strategy], 0)
    report.pros.append("extra")

    assert "extra" not in summary.pros


def test_unavailable_before_analysis(strategy):
    sources = [ReviewSource("a", "x")]

    assert build_report_data(sources, None, [strategy], 0) is None
    assert build_report_data(sources, [], None, 0) is None


def test_unavailable_for_out_of_range_index(summary, strategy):
    sources = [ReviewSource("a", "x"), ReviewSource("b", "y")]

    assert build_report_data(sources, [summary], [strategy], 1) is None
    assert build_report_data(sources, [summary], [strategy], 5) is None
    assert build_report_data(sources, [summary], [strategy], -1) is None


def test_unavailable_while_strategies_pending(summary, strategy):
    sources = [ReviewSource("a", "x"), ReviewSource("b", "y")]

    assert build_report_data(sources, [summary, summary], [strategy], 1) is None


def test_timestamp_format():
    assert format_report_timestamp(datetime(2024, 1, 2, 3, 4, 5)) == "02/01/2024, 03:04:05"
