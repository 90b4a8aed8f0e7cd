"""
Shared pieces for report renderers.
"""

from datetime import date
from typing import Optional

import config.settings as settings
from reviewlens.models.report import ReportData
from reviewlens.models.summary import Keyword

NO_ITEMS = "No items found."
NO_KEYWORDS = "No keywords extracted."
NO_INSIGHTS = "No specific insights generated."
NO_STEPS = "No strategic steps provided."


def export_filename(extension: str, today: Optional[date] = None) -> str:
    """Base name with the current date in day-month-year form."""
    today = today or date.today()
    return f"{settings.REPORT_FILE_PREFIX}_{today.strftime('%d-%m-%Y')}.{extension}"


def keyword_label(keyword: Keyword) -> str:
    return f"{keyword.keyword} ({keyword.frequency} mentions)"


def sentiment_line(report: ReportData) -> str:
    sentiment = report.sentiment
    return (
        f"Positive: {sentiment.positive}, Negative: {sentiment.negative}, "
        f"Neutral: {sentiment.neutral}"
    )


class ReportRenderer:
    """
    Turns a ReportData into a downloadable artifact.

    Every renderer emits the same sections in the same order: title/date,
    strategic overview, key focus area, steps with rationale, sentiment,
    pros, cons, common themes, top keywords, actionable insights.
    Empty lists render a placeholder line under their heading.
    """
    extension = ""

    def render(self, report: ReportData) -> bytes:
        raise NotImplementedError

    def filename(self, today: Optional[date] = None) -> str:
        return export_filename(self.extension, today)
