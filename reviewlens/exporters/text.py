"""
Plain-text report renderer and Markdown summary formatter.
"""

from typing import List

from reviewlens.exporters.base import (
    NO_INSIGHTS, NO_ITEMS, NO_KEYWORDS, NO_STEPS, ReportRenderer, keyword_label
)
from reviewlens.models.report import ReportData
from reviewlens.models.summary import Summary


def _section(title: str, items: List[str]) -> str:
    body = "\n".join(f"- {item}" for item in items) if items else NO_ITEMS
    return f"--- {title.upper()} ---\n{body}\n\n"


class TextReportRenderer(ReportRenderer):
    extension = "txt"

    def render_text(self, report: ReportData) -> str:
        strategy = report.strategic_analysis
        content = f"{report.title}\n"
        content += "=========================================\n"
        content += f"Date: {report.date}\n\n"

        content += "--- STRATEGIC ANALYSIS ---\n"
        content += f"Overview: {strategy.overview}\n"
        content += f"Key Focus Area: {strategy.key_focus_area}\n\n"
        if strategy.steps:
            for i, step in enumerate(strategy.steps, 1):
                content += f"Strategic Step {i}: {step.step}\n"
                content += f"Rationale: {step.rationale}\n\n"
        else:
            content += f"{NO_STEPS}\n\n"

        content += "--- SENTIMENT BREAKDOWN ---\n"
        content += f"Positive: {report.sentiment.positive}\n"
        content += f"Negative: {report.sentiment.negative}\n"
        content += f"Neutral: {report.sentiment.neutral}\n\n"

        content += _section("Pros", report.pros)
        content += _section("Cons", report.cons)
        content += _section("Common Themes", report.themes)

        content += "--- TOP KEYWORDS ---\n"
        if report.keywords:
            for keyword in report.keywords:
                content += f"- {keyword_label(keyword)}\n"
            content += "\n"
        else:
            content += f"{NO_KEYWORDS}\n\n"

        content += "--- ACTIONABLE INSIGHTS (ROOT CAUSE ANALYSIS) ---\n"
        if report.insights:
            for insight in report.insights:
                content += f"Cause: {insight.cause}\n"
                content += f"Suggestion: {insight.suggestion}\n\n"
        else:
            content += f"{NO_INSIGHTS}\n"

        return content

    def render(self, report: ReportData) -> bytes:
        return self.render_text(report).encode("utf-8")


def format_summary_markdown(label: str, summary: Summary) -> str:
    """
    Markdown digest used by "copy summary".
    Sections without items are left out.
    """
    def section(title: str, items: List[str]) -> str:
        if not items:
            return ""
        return f"**{title}:**\n" + "\n".join(f"- {item}" for item in items) + "\n\n"

    text = f"**Customer Review Summary for {label}**\n\n"
    text += section("Pros", summary.pros)
    text += section("Cons", summary.cons)
    text += section("Common Themes", summary.themes)
    text += section("Top Keywords", [keyword_label(k) for k in summary.keywords])
    return text.strip()
