"""
Report Data Aggregator.

Assembles one denormalized, exportable report from the parallel lists of
review sources, summaries and strategic analyses.
"""

import logging
from datetime import datetime
from typing import Optional, Sequence

import config.settings as settings
from reviewlens.models.analysis import StrategicAnalysis
from reviewlens.models.report import ReportData
from reviewlens.models.review_source import ReviewSource
from reviewlens.models.summary import Summary

logger = logging.getLogger(__name__)


def format_report_timestamp(moment: datetime) -> str:
    return moment.strftime("%d/%m/%Y, %H:%M:%S")


def build_report_data(
    sources: Sequence[ReviewSource],
    summaries: Optional[Sequence[Summary]],
    strategies: Optional[Sequence[StrategicAnalysis]],
    index: int,
    now: Optional[datetime] = None
) -> Optional[ReportData]:
    """
    Build the report view for one source index.

    Args:
        sources: Current review sources
        summaries: Summaries by source index, None before analysis
        strategies: Strategic analyses by source index, None before analysis
        index: Source index to report on
        now: Timestamp to embed, defaults to the current local time

    Returns:
        ReportData, or None when the analysis for this index is not available.
        Never raises.
    """
    if summaries is None or strategies is None:
        return None

    if index < 0 or index >= min(len(sources), len(summaries), len(strategies)):
        logger.debug(f"No analysis available for report index {index}")
        return None

    summary = summaries[index]
    strategy = strategies[index]
    moment = now or datetime.now()

    return ReportData(
        title=f"{settings.REPORT_TITLE_PREFIX} {sources[index].label}",
        date=format_report_timestamp(moment),
        strategic_analysis=strategy,
        sentiment=summary.sentiment,
        pros=list(summary.pros),
        cons=list(summary.cons),
        themes=list(summary.themes),
        insights=list(summary.insights),
        keywords=list(summary.keywords),
    )
