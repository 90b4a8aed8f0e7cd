"""
Unit tests for the application state reducer.
"""

import pytest

from reviewlens.models.analysis import ChatMessage, TrendAnalysis
from reviewlens.models.review_source import ReviewSource
from reviewlens.state import (
    AnalysisFailed, AnalysisFinished, AnalysisStarted, AppState, ChatMessageAdded,
    ComparisonToggled, ErrorCleared, ErrorRaised, PersonasGrouped, ReportSelected,
    SourceAdded, SourceFieldChanged, SourceRemoved, SourcesReplaced, SummariesCommitted,
    TrendCommitted, TrendFailed, TrendStarted, reduce
)


def _apply(state, *events):
    for event in events:
        state = reduce(state, event)
    return state


def test_add_sources_up_to_limit():
    state = _apply(AppState(), *[SourceAdded()] * 5)
    assert [s.label for s in state.sources] == [f"Pasted Source {i}" for i in range(1, 6)]
    assert state.error is None

    state = reduce(state, SourceAdded())
    assert len(state.sources) == 5
    assert state.error == "You can have a maximum of 5 data sources."


def test_remove_source():
    state = AppState(sources=(ReviewSource("a", "1"), ReviewSource("b", "2"), ReviewSource("c", "3")))
    state = reduce(state, SourceRemoved(1))
    assert [s.label for s in state.sources] == ["a", "c"]


def test_edit_source_field():
    state = AppState(sources=(ReviewSource("a", "1"),))
    state = reduce(state, SourceFieldChanged(0, "product_context", "Headphones"))
    assert state.sources[0].product_context == "Headphones"


def test_overlong_content_truncated():
    state = AppState(sources=(ReviewSource("a", ""),))
    state = reduce(state, SourceFieldChanged(0, "content", "x" * 500001))

    assert len(state.sources[0].content) == 500000
    assert state.error == "Each source cannot exceed 500,000 characters."


def test_unknown_source_field():
    state = AppState(sources=(ReviewSource("a", ""),))
    with pytest.raises(ValueError):
        reduce(state, SourceFieldChanged(0, "colour", "blue"))


def test_analysis_start_resets_results(summary):
    state = AppState(
        sources=(ReviewSource("a", "1"),),
        summaries=(summary,),
        chat_history=(ChatMessage(1, "user", "hi"),),
        selected_index=0,
        comparison_indices=(0,),
        error="old error",
        run_id=3,
    )

    state = reduce(state, AnalysisStarted())

    assert state.run_id == 4
    assert state.is_loading
    assert state.summaries is None
    assert state.chat_history == ()
    assert state.comparison_indices == ()
    assert state.error is None
    assert state.sources == (ReviewSource("a", "1"),)


def test_stale_results_ignored(summary):
    state = _apply(AppState(), AnalysisStarted(), AnalysisStarted())
    assert state.run_id == 2

    state = _apply(
        state,
        PersonasGrouped(1, (ReviewSource("S1", "r1"),)),
        SummariesCommitted(1, (summary,)),
        AnalysisFailed(1, "late failure"),
        AnalysisFinished(1),
    )

    assert state.sources == ()
    assert state.summaries is None
    assert state.error is None
    assert state.is_loading


def test_current_run_results_applied(summary):
    state = _apply(
        AppState(),
        AnalysisStarted(),
        SummariesCommitted(1, (summary,)),
        AnalysisFinished(1),
    )
    assert state.summaries == (summary,)
    assert not state.is_loading


def test_failure_stops_loading():
    state = _apply(AppState(), AnalysisStarted(), AnalysisFailed(1, "Failed to process reviews."))
    assert state.error == "Failed to process reviews."
    assert not state.is_loading


def test_select_report(summary):
    state = AppState(summaries=(summary, summary))
    assert reduce(state, ReportSelected(1)).selected_index == 1

    rejected = reduce(state, ReportSelected(2))
    assert rejected.selected_index == 0
    assert rejected.error == "No report at position 3."


def test_comparison_toggle(summary):
    state = AppState(summaries=(summary, summary, summary))

    state = _apply(state, ComparisonToggled(2), ComparisonToggled(0))
    assert state.comparison_indices == (2, 0)

    # A third selection is ignored
    assert reduce(state, ComparisonToggled(1)).comparison_indices == (2, 0)

    # Toggling a selected index removes it
    assert reduce(state, ComparisonToggled(2)).comparison_indices == (0,)


def test_comparison_requires_existing_report():
    state = reduce(AppState(), ComparisonToggled(0))
    assert state.comparison_indices == ()
    assert state.error == "No report at position 1."


def test_trend_lifecycle():
    trend = TrendAnalysis(summary="Better")
    state = _apply(AppState(error="x"), TrendStarted())
    assert state.is_trend_loading and state.error is None

    done = reduce(state, TrendCommitted(0, trend))
    assert done.trend_analysis == trend
    assert not done.is_trend_loading

    failed = reduce(state, TrendFailed(0, "Failed to generate trend analysis."))
    assert failed.error == "Failed to generate trend analysis."


def test_trend_result_from_old_run_ignored():
    state = _apply(AppState(), TrendStarted(), AnalysisStarted())
    state = reduce(state, TrendCommitted(0, TrendAnalysis(summary="old")))
    assert state.trend_analysis is None


def test_chat_and_errors():
    state = _apply(
        AppState(),
        ChatMessageAdded(ChatMessage(1, "user", "Why?")),
        ChatMessageAdded(ChatMessage(2, "ai", "Because.")),
        ErrorRaised("boom"),
    )
    assert [m.sender for m in state.chat_history] == ["user", "ai"]
    assert state.error == "boom"
    assert reduce(state, ErrorCleared()).error is None


def test_sources_replaced():
    state = reduce(AppState(), SourcesReplaced((ReviewSource("Google Sheet", "csv"),)))
    assert state.sources[0].label == "Google Sheet"


def test_unknown_event():
    with pytest.raises(ValueError, match="Unknown event"):
        reduce(AppState(), object())
