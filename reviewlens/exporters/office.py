"""
Office-document (DOCX) report renderer, built with python-docx.
"""

import io
import logging
from typing import Callable, List, Optional

from reviewlens.errors import CapabilityUnavailableError
from reviewlens.exporters.base import (
    NO_INSIGHTS, NO_ITEMS, NO_STEPS, ReportRenderer, keyword_label, sentiment_line
)
from reviewlens.models.report import ReportData

logger = logging.getLogger(__name__)


def load_docx_document() -> Callable:
    """
    Raises:
        CapabilityUnavailableError: If python-docx is not installed
    """
    try:
        from docx import Document
    except ImportError as e:
        raise CapabilityUnavailableError("DOCX generation library (python-docx) not found.") from e
    return Document


class DocxReportRenderer(ReportRenderer):
    """
    Headings per section, bullet lists for pros/cons/themes/keywords.

    Args:
        document_factory: Callable returning a python-docx Document;
                          loaded on first render when omitted
    """
    extension = "docx"

    def __init__(self, document_factory: Optional[Callable] = None):
        self.document_factory = document_factory

    def render(self, report: ReportData) -> bytes:
        factory = self.document_factory or load_docx_document()
        document = factory()

        def labelled(label: str, text: str, italic: bool = False) -> None:
            paragraph = document.add_paragraph()
            run = paragraph.add_run(label)
            if italic:
                run.italic = True
            else:
                run.bold = True
            paragraph.add_run(text)

        def bullet_list(items: List[str]) -> None:
            if not items:
                document.add_paragraph(NO_ITEMS)
                return
            for item in items:
                document.add_paragraph(item, style="List Bullet")

        strategy = report.strategic_analysis

        document.add_heading(report.title, level=1)
        document.add_paragraph(f"Date: {report.date}", style="Intense Quote")

        document.add_heading("STRATEGIC ANALYSIS", level=2)
        labelled("Overview: ", strategy.overview)
        labelled("Key Focus Area: ", strategy.key_focus_area)
        if strategy.steps:
            for i, step in enumerate(strategy.steps, 1):
                labelled(f"Step {i}: ", step.step)
                labelled("Rationale: ", step.rationale, italic=True)
        else:
            document.add_paragraph(NO_STEPS)
        document.add_paragraph("")

        document.add_heading("SENTIMENT BREAKDOWN", level=2)
        document.add_paragraph(sentiment_line(report))
        document.add_paragraph("")

        for title, items in (
            ("PROS", report.pros),
            ("CONS", report.cons),
            ("COMMON THEMES", report.themes),
            ("TOP KEYWORDS", [keyword_label(k) for k in report.keywords]),
        ):
            document.add_heading(title, level=2)
            bullet_list(items)
            document.add_paragraph("")

        document.add_heading("ACTIONABLE INSIGHTS", level=2)
        if report.insights:
            for insight in report.insights:
                labelled("Cause: ", insight.cause)
                labelled("Suggestion: ", insight.suggestion)
        else:
            document.add_paragraph(NO_INSIGHTS)

        buffer = io.BytesIO()
        document.save(buffer)
        data = buffer.getvalue()
        logger.debug(f"Rendered DOCX report ({len(data)} bytes)")
        return data
