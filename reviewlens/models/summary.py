"""
Summary data model.

Represents the structured review summary returned by the language model
(the per-source Analysis Result).
"""

from dataclasses import dataclass, field
from typing import Any, List


def _require(data: dict, key: str) -> Any:
    if not isinstance(data, dict):
        raise ValueError(f"Expected an object, got {type(data).__name__}")
    if key not in data:
        raise ValueError(f"Missing required field: {key}")
    return data[key]


def _string_list(data: dict, key: str) -> List[str]:
    value = _require(data, key)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"Field '{key}' must be a list of strings")
    return list(value)


def _count(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Field '{name}' must be a number")
    return int(value)


@dataclass(frozen=True)
class SentimentPoint:
    """Review counts per sentiment class."""
    positive: int = 0
    negative: int = 0
    neutral: int = 0

    @property
    def total(self) -> int:
        return self.positive + self.negative + self.neutral

    @classmethod
    def from_dict(cls, data: dict) -> "SentimentPoint":
        # Counts missing from the response are treated as zero
        if not isinstance(data, dict):
            raise ValueError("Field 'sentiment' must be an object")
        return cls(
            positive=_count(data.get("positive", 0), "positive"),
            negative=_count(data.get("negative", 0), "negative"),
            neutral=_count(data.get("neutral", 0), "neutral"),
        )

    def to_dict(self) -> dict:
        return {
            "positive": self.positive,
            "negative": self.negative,
            "neutral": self.neutral,
        }


@dataclass(frozen=True)
class Insight:
    """Inferred root cause paired with a suggested action."""
    cause: str
    suggestion: str

    @classmethod
    def from_dict(cls, data: dict) -> "Insight":
        return cls(
            cause=str(_require(data, "cause")),
            suggestion=str(_require(data, "suggestion")),
        )

    def to_dict(self) -> dict:
        return {"cause": self.cause, "suggestion": self.suggestion}


@dataclass(frozen=True)
class Keyword:
    keyword: str
    frequency: int

    @classmethod
    def from_dict(cls, data: dict) -> "Keyword":
        return cls(
            keyword=str(_require(data, "keyword")),
            frequency=_count(_require(data, "frequency"), "frequency"),
        )

    def to_dict(self) -> dict:
        return {"keyword": self.keyword, "frequency": self.frequency}


@dataclass(frozen=True)
class Summary:
    """
    Structured summary of one review source.
    Produced by the summarization agent, never computed locally.
    """
    pros: List[str] = field(default_factory=list)
    cons: List[str] = field(default_factory=list)
    themes: List[str] = field(default_factory=list)
    sentiment: SentimentPoint = field(default_factory=SentimentPoint)
    insights: List[Insight] = field(default_factory=list)
    keywords: List[Keyword] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Summary":
        """
        Create Summary from the model's JSON payload.

        Raises:
            ValueError: If a required field is missing or has the wrong shape
        """
        insights = _require(data, "insights")
        keywords = _require(data, "keywords")
        if not isinstance(insights, list) or not isinstance(keywords, list):
            raise ValueError("Fields 'insights' and 'keywords' must be lists")

        return cls(
            pros=_string_list(data, "pros"),
            cons=_string_list(data, "cons"),
            themes=_string_list(data, "themes"),
            sentiment=SentimentPoint.from_dict(_require(data, "sentiment")),
            insights=[Insight.from_dict(item) for item in insights],
            keywords=[Keyword.from_dict(item) for item in keywords],
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict (schema field names)."""
        return {
            "pros": list(self.pros),
            "cons": list(self.cons),
            "themes": list(self.themes),
            "sentiment": self.sentiment.to_dict(),
            "insights": [insight.to_dict() for insight in self.insights],
            "keywords": [keyword.to_dict() for keyword in self.keywords],
        }
