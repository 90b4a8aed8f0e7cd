"""
Application state and transitions.

All mutable application data lives in one immutable AppState. Every change
is an event applied by reduce(state, event), which returns the next state.

Analysis runs are numbered. Result events (analysis stages and trend
analysis) carry the run_id they were produced for; results from a
superseded run are dropped when they arrive.
In-flight calls of a superseded run are not cancelled.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

import config.settings as settings
from reviewlens.models.analysis import ChatMessage, PersonaComparison, StrategicAnalysis, TrendAnalysis
from reviewlens.models.review_source import ReviewSource
from reviewlens.models.summary import Summary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppState:
    sources: Tuple[ReviewSource, ...] = ()
    summaries: Optional[Tuple[Summary, ...]] = None
    strategies: Optional[Tuple[StrategicAnalysis, ...]] = None
    trend_analysis: Optional[TrendAnalysis] = None
    persona_comparison: Optional[PersonaComparison] = None
    chat_history: Tuple[ChatMessage, ...] = ()
    selected_index: int = 0
    comparison_indices: Tuple[int, ...] = ()
    output_language: str = settings.DEFAULT_OUTPUT_LANGUAGE
    segment_column: str = ""
    is_loading: bool = False
    is_trend_loading: bool = False
    error: Optional[str] = None
    run_id: int = 0


# --- Source editing ---------------------------------------------------------

@dataclass(frozen=True)
class SourcesReplaced:
    sources: Tuple[ReviewSource, ...]


@dataclass(frozen=True)
class SourceAdded:
    pass


@dataclass(frozen=True)
class SourceRemoved:
    index: int


@dataclass(frozen=True)
class SourceFieldChanged:
    index: int
    field: str  # "label", "content", "product_context" or "report_date"
    value: str


@dataclass(frozen=True)
class LanguageChanged:
    language: str


@dataclass(frozen=True)
class SegmentColumnChanged:
    segment_column: str


# --- Analysis run -----------------------------------------------------------

@dataclass(frozen=True)
class AnalysisStarted:
    pass


@dataclass(frozen=True)
class PersonasGrouped:
    run_id: int
    sources: Tuple[ReviewSource, ...]


@dataclass(frozen=True)
class SummariesCommitted:
    run_id: int
    summaries: Tuple[Summary, ...]


@dataclass(frozen=True)
class StrategiesCommitted:
    run_id: int
    strategies: Tuple[StrategicAnalysis, ...]


@dataclass(frozen=True)
class PersonaComparisonCommitted:
    run_id: int
    comparison: PersonaComparison


@dataclass(frozen=True)
class AnalysisFailed:
    run_id: int
    message: str


@dataclass(frozen=True)
class AnalysisFinished:
    run_id: int


# --- Selection, trends, chat, errors ---------------------------------------

@dataclass(frozen=True)
class ReportSelected:
    index: int


@dataclass(frozen=True)
class ComparisonToggled:
    index: int


@dataclass(frozen=True)
class TrendStarted:
    pass


@dataclass(frozen=True)
class TrendCommitted:
    run_id: int
    analysis: TrendAnalysis


@dataclass(frozen=True)
class TrendFailed:
    run_id: int
    message: str


@dataclass(frozen=True)
class ChatMessageAdded:
    message: ChatMessage


@dataclass(frozen=True)
class ErrorRaised:
    message: str


@dataclass(frozen=True)
class ErrorCleared:
    pass


SOURCE_FIELDS = ("label", "content", "product_context", "report_date")


def _is_stale(state: AppState, run_id: int) -> bool:
    if run_id != state.run_id:
        logger.info(f"Dropping result of superseded run {run_id} (current run {state.run_id})")
        return True
    return False


def _change_source_field(state: AppState, event: SourceFieldChanged) -> AppState:
    if not 0 <= event.index < len(state.sources):
        return replace(state, error=f"No review source at position {event.index + 1}.")
    if event.field not in SOURCE_FIELDS:
        raise ValueError(f"Invalid source field: {event.field}")

    value = event.value
    error = state.error
    limit = settings.MAX_TEXT_LENGTH_PER_SOURCE
    if event.field == "content" and len(value) > limit:
        error = f"Each source cannot exceed {limit:,} characters."
        value = value[:limit]

    sources = list(state.sources)
    sources[event.index] = replace(sources[event.index], **{event.field: value})
    return replace(state, sources=tuple(sources), error=error)


def _toggle_comparison(state: AppState, index: int) -> AppState:
    indices = state.comparison_indices
    if index in indices:
        return replace(state, comparison_indices=tuple(i for i in indices if i != index))
    if state.summaries is None or not 0 <= index < len(state.summaries):
        return replace(state, error=f"No report at position {index + 1}.")
    if len(indices) < 2:
        return replace(state, comparison_indices=indices + (index,))
    return state


def reduce(state: AppState, event) -> AppState:
    """
    Apply one event and return the next state.

    Raises:
        ValueError: For an unknown event type or source field
    """
    if isinstance(event, SourcesReplaced):
        return replace(state, sources=tuple(event.sources))

    if isinstance(event, SourceAdded):
        if len(state.sources) >= settings.MAX_FILES:
            return replace(state, error=f"You can have a maximum of {settings.MAX_FILES} data sources.")
        new_source = ReviewSource(label=f"Pasted Source {len(state.sources) + 1}", content="")
        return replace(state, sources=state.sources + (new_source,))

    if isinstance(event, SourceRemoved):
        return replace(
            state,
            sources=tuple(s for i, s in enumerate(state.sources) if i != event.index)
        )

    if isinstance(event, SourceFieldChanged):
        return _change_source_field(state, event)

    if isinstance(event, LanguageChanged):
        return replace(state, output_language=event.language)

    if isinstance(event, SegmentColumnChanged):
        return replace(state, segment_column=event.segment_column)

    if isinstance(event, AnalysisStarted):
        return replace(
            state,
            run_id=state.run_id + 1,
            is_loading=True,
            is_trend_loading=False,
            error=None,
            summaries=None,
            strategies=None,
            trend_analysis=None,
            persona_comparison=None,
            chat_history=(),
            selected_index=0,
            comparison_indices=(),
        )

    if isinstance(event, PersonasGrouped):
        if _is_stale(state, event.run_id):
            return state
        return replace(state, sources=tuple(event.sources))

    if isinstance(event, SummariesCommitted):
        if _is_stale(state, event.run_id):
            return state
        return replace(state, summaries=tuple(event.summaries))

    if isinstance(event, StrategiesCommitted):
        if _is_stale(state, event.run_id):
            return state
        return replace(state, strategies=tuple(event.strategies))

    if isinstance(event, PersonaComparisonCommitted):
        if _is_stale(state, event.run_id):
            return state
        return replace(state, persona_comparison=event.comparison)

    if isinstance(event, AnalysisFailed):
        if _is_stale(state, event.run_id):
            return state
        return replace(state, error=event.message, is_loading=False)

    if isinstance(event, AnalysisFinished):
        if _is_stale(state, event.run_id):
            return state
        return replace(state, is_loading=False)

    if isinstance(event, ReportSelected):
        if state.summaries is None or not 0 <= event.index < len(state.summaries):
            return replace(state, error=f"No report at position {event.index + 1}.")
        return replace(state, selected_index=event.index)

    if isinstance(event, ComparisonToggled):
        return _toggle_comparison(state, event.index)

    if isinstance(event, TrendStarted):
        return replace(state, is_trend_loading=True, error=None, trend_analysis=None)

    if isinstance(event, TrendCommitted):
        if _is_stale(state, event.run_id):
            return state
        return replace(state, is_trend_loading=False, trend_analysis=event.analysis)

    if isinstance(event, TrendFailed):
        if _is_stale(state, event.run_id):
            return state
        return replace(state, is_trend_loading=False, error=event.message)

    if isinstance(event, ChatMessageAdded):
        return replace(state, chat_history=state.chat_history + (event.message,))

    if isinstance(event, ErrorRaised):
        return replace(state, error=event.message)

    if isinstance(event, ErrorCleared):
        return replace(state, error=None)

    raise ValueError(f"Unknown event: {type(event).__name__}")
