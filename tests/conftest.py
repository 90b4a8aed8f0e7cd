"""
Shared fixtures: a complete summary, strategy and report.
"""

import copy

import pytest

from reviewlens.models.analysis import StrategicAnalysis
from reviewlens.models.report import ReportData
from reviewlens.models.summary import SentimentPoint, Summary


SUMMARY_PAYLOAD = {
    "pros": ["Great noise cancelling", "Comfortable fit"],
    "cons": ["Battery drains fast", "Confusing setup"],
    "themes": ["Audio quality", "Battery life"],
    "sentiment": {"positive": 6, "negative": 3, "neutral": 1},
    "insights": [
        {
            "cause": "Firmware keeps Bluetooth radio awake",
            "suggestion": "Ship a power-saving firmware update",
        }
    ],
    "keywords": [
        {"keyword": "battery", "frequency": 4},
        {"keyword": "comfort", "frequency": 3},
    ],
}

STRATEGY_PAYLOAD = {
    "overview": "Customers love the sound but battery life hurts retention.",
    "keyFocusArea": "Battery life",
    "steps": [
        {"step": "Release power-saving firmware", "rationale": "Most complaints cite battery"},
        {"step": "Simplify pairing guide", "rationale": "New users struggle with setup"},
    ],
}


@pytest.fixture
def summary_payload():
    return copy.deepcopy(SUMMARY_PAYLOAD)


@pytest.fixture
def strategy_payload():
    return copy.deepcopy(STRATEGY_PAYLOAD)


@pytest.fixture
def summary():
    return Summary.from_dict(SUMMARY_PAYLOAD)


@pytest.fixture
def strategy():
    return StrategicAnalysis.from_dict(STRATEGY_PAYLOAD)


@pytest.fixture
def report(summary, strategy):
    return ReportData(
        title="CUSTOMER INSIGHTS AI - ANALYSIS REPORT for Q4.csv",
        date="18/10/2026, 09:30:00",
        strategic_analysis=strategy,
        sentiment=summary.sentiment,
        pros=list(summary.pros),
        cons=list(summary.cons),
        themes=list(summary.themes),
        insights=list(summary.insights),
        keywords=list(summary.keywords),
    )


@pytest.fixture
def empty_report():
    return ReportData(
        title="CUSTOMER INSIGHTS AI - ANALYSIS REPORT for Empty",
        date="18/10/2026, 09:30:00",
        strategic_analysis=StrategicAnalysis(overview="Nothing yet", key_focus_area="None"),
        sentiment=SentimentPoint(),
    )

