"""
Report data model.

Denormalized view of one analysed source, consumed by every export renderer.
"""

from dataclasses import dataclass, field
from typing import List

from reviewlens.models.analysis import StrategicAnalysis
from reviewlens.models.summary import Insight, Keyword, SentimentPoint


@dataclass(frozen=True)
class ReportData:
    title: str  # Embeds the source label
    date: str  # Human-readable generation timestamp
    strategic_analysis: StrategicAnalysis
    sentiment: SentimentPoint
    pros: List[str] = field(default_factory=list)
    cons: List[str] = field(default_factory=list)
    themes: List[str] = field(default_factory=list)
    insights: List[Insight] = field(default_factory=list)
    keywords: List[Keyword] = field(default_factory=list)
