"""
Unit tests for trend and persona comparison agents.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from reviewlens.agents.comparison import PERSONA_SCHEMA, PersonaComparisonAgent, TrendAnalysisAgent
from reviewlens.models.analysis import PersonaComparison, TrendAnalysis


@pytest.fixture
def fake_client():
    client = MagicMock()
    client.generate_structured = AsyncMock()
    return client


def test_trend_prompt_and_schema_use_labels(fake_client, summary):
    fake_client.generate_structured.return_value = TrendAnalysis(summary="Battery got worse")
    agent = TrendAnalysisAgent(fake_client)

    result = asyncio.run(agent.compare(summary, summary, "Q3", "Q4", "Auto-detect"))

    assert result.summary == "Battery got worse"
    args, kwargs = fake_client.generate_structured.call_args
    prompt = args[0]
    assert 'labeled "Q3"' in prompt
    assert 'labeled "Q4"' in prompt
    assert "the same language as the provided summaries" in prompt
    assert '("Q4")' in kwargs["schema"]["properties"]["newIssues"]["description"]
    assert kwargs["model_name"] == "gemini-2.5-pro"
    assert kwargs["task"] == "generate trend analysis"


def test_trend_parser_reads_camel_case_keys(fake_client, summary):
    agent = TrendAnalysisAgent(fake_client)
    asyncio.run(agent.compare(summary, summary, "A", "B"))
    parse = fake_client.generate_structured.call_args.kwargs["parse"]

    trend = parse({
        "summary": "Better",
        "newIssues": ["Setup"],
        "resolvedIssues": ["Battery"],
        "persistentThemes": ["Sound"],
    })

    assert trend.new_issues == ["Setup"]
    assert trend.resolved_issues == ["Battery"]
    assert trend.persistent_themes == ["Sound"]


def test_persona_comparison(fake_client, summary):
    fake_client.generate_structured.return_value = PersonaComparison.from_dict({
        "overview": "Power users care about sound",
        "segmentComparisons": [
            {"segment": "Power User", "keyDifferentiators": ["Sound"]},
            {"segment": "New User", "keyDifferentiators": ["Setup"]},
        ],
    })
    agent = PersonaComparisonAgent(fake_client)

    result = asyncio.run(agent.compare([("Power User", summary), ("New User", summary)], "Spanish"))

    assert [c.segment for c in result.segment_comparisons] == ["Power User", "New User"]
    args, kwargs = fake_client.generate_structured.call_args
    assert '"segment": "Power User"' in args[0]
    assert "analysis in Spanish" in args[0]
    assert kwargs["schema"] is PERSONA_SCHEMA
