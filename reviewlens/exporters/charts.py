"""
Sentiment charts and dashboard metrics.

Builds the sentiment trend table across reports (pandas) and renders it as
an SVG line chart (matplotlib).
"""

import io
import logging
import math
from typing import Dict, List, Sequence

import pandas as pd
from matplotlib.figure import Figure

from reviewlens.models.summary import Summary

logger = logging.getLogger(__name__)

SENTIMENT_COLUMNS = ["Positive", "Negative", "Neutral"]
SENTIMENT_COLOURS = {
    "Positive": "#10b981",  # emerald
    "Negative": "#ef4444",  # red
    "Neutral": "#64748b",  # slate
}


def nice_ceiling(value: float) -> float:
    """
    Round a maximum up to a readable axis ceiling.

    Steps are 1.5, 2, 3, 4, 5, 8 and 10 times a power of ten;
    a maximum of zero gives 5.
    """
    if value <= 0:
        return 5
    power = 10 ** math.floor(math.log10(value))
    relative = value / power
    for step in (1.5, 2, 3, 4, 5, 8):
        if relative < step:
            return step * power
    return 10 * power


def axis_ticks(ceiling: float) -> List[float]:
    """At most five intervals; one per unit for small ceilings."""
    tick_count = ceiling if ceiling <= 5 else 5
    increment = ceiling / tick_count
    return [i * increment for i in range(int(tick_count) + 1)]


def sentiment_trend_frame(labels: Sequence[str], summaries: Sequence[Summary]) -> pd.DataFrame:
    """
    One row per report with its sentiment counts, in report order.
    """
    rows = [
        {
            "Report": label,
            "Positive": summary.sentiment.positive,
            "Negative": summary.sentiment.negative,
            "Neutral": summary.sentiment.neutral,
        }
        for label, summary in zip(labels, summaries)
    ]
    return pd.DataFrame(rows, columns=["Report"] + SENTIMENT_COLUMNS)


def render_sentiment_trend_svg(frame: pd.DataFrame, title: str = "Sentiment Trend Analysis") -> str:
    """
    Render the trend table as an SVG line chart.

    Returns:
        SVG document text
    """
    max_value = frame[SENTIMENT_COLUMNS].to_numpy().max() if not frame.empty else 0
    ceiling = nice_ceiling(float(max_value))

    width_inches = max(5.0, 0.6 + 1.2 * max(0, len(frame) - 1))
    figure = Figure(figsize=(width_inches, 2.5))
    axes = figure.add_subplot(1, 1, 1)

    positions = list(range(len(frame)))
    for column in SENTIMENT_COLUMNS:
        axes.plot(
            positions,
            frame[column].tolist(),
            marker="o",
            color=SENTIMENT_COLOURS[column],
            label=column
        )

    axes.set_title(title)
    axes.set_ylim(0, ceiling)
    axes.set_yticks(axis_ticks(ceiling))
    axes.set_xticks(positions)
    axes.set_xticklabels(frame["Report"].tolist(), rotation=15)
    axes.legend(loc="upper center", ncol=3, frameon=False)
    figure.tight_layout()

    buffer = io.StringIO()
    figure.savefig(buffer, format="svg")
    logger.debug(f"Rendered sentiment trend chart for {len(frame)} reports")
    return buffer.getvalue()


def dashboard_metrics(summary: Summary) -> Dict[str, float]:
    """
    Headline numbers for one report: review total, sentiment split in
    percent (zero when there are no reviews) and list sizes.
    """
    total = summary.sentiment.total

    def percent(count: int) -> float:
        return round(100 * count / total, 1) if total else 0.0

    return {
        "total_reviews": total,
        "positive_pct": percent(summary.sentiment.positive),
        "negative_pct": percent(summary.sentiment.negative),
        "neutral_pct": percent(summary.sentiment.neutral),
        "pros": len(summary.pros),
        "cons": len(summary.cons),
        "themes": len(summary.themes),
    }
