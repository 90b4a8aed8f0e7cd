"""
Analysis data models.

Strategic, trend, deep-dive and persona-comparison results returned by the
language model, plus the chat message record.
"""

from dataclasses import dataclass, field
from typing import List

from reviewlens.models.summary import SentimentPoint, _require, _string_list


@dataclass(frozen=True)
class StrategicStep:
    step: str
    rationale: str

    @classmethod
    def from_dict(cls, data: dict) -> "StrategicStep":
        return cls(
            step=str(_require(data, "step")),
            rationale=str(_require(data, "rationale")),
        )

    def to_dict(self) -> dict:
        return {"step": self.step, "rationale": self.rationale}


@dataclass(frozen=True)
class StrategicAnalysis:
    """
    High-level strategy derived from one Summary.
    """
    overview: str
    key_focus_area: str
    steps: List[StrategicStep] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "StrategicAnalysis":
        steps = _require(data, "steps")
        if not isinstance(steps, list):
            raise ValueError("Field 'steps' must be a list")
        return cls(
            overview=str(_require(data, "overview")),
            key_focus_area=str(_require(data, "keyFocusArea")),
            steps=[StrategicStep.from_dict(item) for item in steps],
        )

    def to_dict(self) -> dict:
        return {
            "overview": self.overview,
            "keyFocusArea": self.key_focus_area,
            "steps": [step.to_dict() for step in self.steps],
        }


@dataclass(frozen=True)
class TrendAnalysis:
    """
    Comparison between two summaries ("start" and "end").
    """
    summary: str
    new_issues: List[str] = field(default_factory=list)
    resolved_issues: List[str] = field(default_factory=list)
    persistent_themes: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "TrendAnalysis":
        return cls(
            summary=str(_require(data, "summary")),
            new_issues=_string_list(data, "newIssues"),
            resolved_issues=_string_list(data, "resolvedIssues"),
            persistent_themes=_string_list(data, "persistentThemes"),
        )

    def to_dict(self) -> dict:
        return {
            "summary": self.summary,
            "newIssues": list(self.new_issues),
            "resolvedIssues": list(self.resolved_issues),
            "persistentThemes": list(self.persistent_themes),
        }


@dataclass(frozen=True)
class DeepDiveAnalysis:
    """Focused analysis of one keyword or theme."""
    summary: str
    snippets: List[str] = field(default_factory=list)
    sentiment: SentimentPoint = field(default_factory=SentimentPoint)

    @classmethod
    def from_dict(cls, data: dict) -> "DeepDiveAnalysis":
        return cls(
            summary=str(_require(data, "summary")),
            snippets=_string_list(data, "snippets"),
            sentiment=SentimentPoint.from_dict(_require(data, "sentiment")),
        )

    def to_dict(self) -> dict:
        return {
            "summary": self.summary,
            "snippets": list(self.snippets),
            "sentiment": self.sentiment.to_dict(),
        }


@dataclass(frozen=True)
class SegmentComparison:
    segment: str
    key_differentiators: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "SegmentComparison":
        return cls(
            segment=str(_require(data, "segment")),
            key_differentiators=_string_list(data, "keyDifferentiators"),
        )

    def to_dict(self) -> dict:
        return {
            "segment": self.segment,
            "keyDifferentiators": list(self.key_differentiators),
        }


@dataclass(frozen=True)
class PersonaComparison:
    """
    Contrast between customer segments produced by persona analysis.
    """
    overview: str
    segment_comparisons: List[SegmentComparison] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "PersonaComparison":
        comparisons = _require(data, "segmentComparisons")
        if not isinstance(comparisons, list):
            raise ValueError("Field 'segmentComparisons' must be a list")
        return cls(
            overview=str(_require(data, "overview")),
            segment_comparisons=[SegmentComparison.from_dict(item) for item in comparisons],
        )

    def to_dict(self) -> dict:
        return {
            "overview": self.overview,
            "segmentComparisons": [c.to_dict() for c in self.segment_comparisons],
        }


@dataclass(frozen=True)
class ChatMessage:
    id: int
    sender: str  # "user" or "ai"
    text: str

    def __post_init__(self):
        if self.sender not in ("user", "ai"):
            raise ValueError(f"Invalid sender: {self.sender}. Must be 'user' or 'ai'")
