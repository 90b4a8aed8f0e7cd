"""
Paginated-document (PDF) report renderer, built with fpdf2.
"""

import logging
from functools import lru_cache
from typing import Callable, Dict, List, Optional, Tuple

from matplotlib import font_manager

from reviewlens.errors import CapabilityUnavailableError
from reviewlens.exporters.base import (
    NO_INSIGHTS, NO_ITEMS, NO_KEYWORDS, NO_STEPS, ReportRenderer, keyword_label, sentiment_line
)
from reviewlens.models.report import ReportData

logger = logging.getLogger(__name__)

MARGIN_MM = 15
FONT_FAMILY = "DejaVu"
FALLBACK_FONT_FAMILY = "CJK"

# Families tried, in order, for scripts DejaVu Sans does not cover
CJK_FONT_CANDIDATES = (
    "Noto Sans CJK JP",
    "Noto Sans JP",
    "Noto Sans SC",
    "Source Han Sans",
    "WenQuanYi Zen Hei",
    "Droid Sans Fallback",
)


def load_fpdf() -> Callable:
    """
    Raises:
        CapabilityUnavailableError: If fpdf2 is not installed
    """
    try:
        from fpdf import FPDF
    except ImportError as e:
        raise CapabilityUnavailableError("PDF generation library (fpdf2) not found.") from e
    return FPDF


@lru_cache(maxsize=None)
def unicode_font_files() -> Dict[str, str]:
    """
    Paths of the DejaVu Sans regular and bold TTF files bundled with matplotlib.

    Returns:
        Mapping from fpdf2 style ("" or "B") to font file path
    """
    return {
        style: font_manager.findfont(
            font_manager.FontProperties(family="DejaVu Sans", weight=weight),
            fallback_to_default=False
        )
        for style, weight in (("", "normal"), ("B", "bold"))
    }


@lru_cache(maxsize=None)
def cjk_font_file(candidates: Tuple[str, ...] = CJK_FONT_CANDIDATES) -> Optional[str]:
    """
    First installed TrueType font from candidates, or None.

    Font collections (.ttc) are skipped since fpdf2 cannot select a face
    from them. Without a match, CJK glyphs are missing from the PDF.
    """
    for family in candidates:
        try:
            path = font_manager.findfont(
                font_manager.FontProperties(family=family), fallback_to_default=False
            )
        except ValueError:
            continue
        if path.lower().endswith((".ttf", ".otf")):
            return path
    logger.debug("No CJK font found; CJK text will not render in PDF exports")
    return None


def register_fonts(pdf) -> None:
    for style, path in unicode_font_files().items():
        pdf.add_font(FONT_FAMILY, style, path)

    fallback = cjk_font_file()
    if fallback:
        pdf.add_font(FALLBACK_FONT_FAMILY, "", fallback)
        pdf.add_font(FALLBACK_FONT_FAMILY, "B", fallback)
        pdf.set_fallback_fonts([FALLBACK_FONT_FAMILY])


class PdfReportRenderer(ReportRenderer):
    """
    Lays the report out top to bottom with automatic page breaks.

    Args:
        document_factory: Callable returning an FPDF-compatible document;
                          defaults to fpdf2's FPDF, loaded on first render
    """
    extension = "pdf"

    def __init__(self, document_factory: Optional[Callable] = None):
        self.document_factory = document_factory

    def render(self, report: ReportData) -> bytes:
        factory = self.document_factory or load_fpdf()

        pdf = factory()
        register_fonts(pdf)
        pdf.set_margins(MARGIN_MM, MARGIN_MM, MARGIN_MM)
        pdf.set_auto_page_break(auto=True, margin=MARGIN_MM)
        pdf.add_page()

        def add_text(text: str, size: int, bold: bool = False, spacing: float = 7) -> None:
            pdf.set_font(FONT_FAMILY, "B" if bold else "", size)
            pdf.multi_cell(0, size / 2, text, new_x="LMARGIN", new_y="NEXT")
            pdf.ln(spacing)

        def add_list(items: List[str]) -> None:
            if not items:
                add_text(NO_ITEMS, 10)
                return
            for item in items:
                add_text(f"- {item}", 10, spacing=3)
            pdf.ln(5)

        strategy = report.strategic_analysis

        add_text(report.title, 18, bold=True, spacing=5)
        add_text(f"Date: {report.date}", 8, spacing=10)

        add_text("STRATEGIC ANALYSIS", 14, bold=True, spacing=4)
        add_text(f"Overview: {strategy.overview}", 10)
        add_text(f"Key Focus Area: {strategy.key_focus_area}", 10)
        if strategy.steps:
            for i, step in enumerate(strategy.steps, 1):
                add_text(f"Step {i}: {step.step}", 10, bold=True, spacing=2)
                add_text(f"Rationale: {step.rationale}", 10)
        else:
            add_text(NO_STEPS, 10)

        add_text("SENTIMENT BREAKDOWN", 14, bold=True, spacing=4)
        add_text(sentiment_line(report), 10)

        for title, items in (("PROS", report.pros), ("CONS", report.cons), ("COMMON THEMES", report.themes)):
            add_text(title, 14, bold=True, spacing=4)
            add_list(items)

        add_text("TOP KEYWORDS", 14, bold=True, spacing=4)
        if report.keywords:
            add_list([keyword_label(k) for k in report.keywords])
        else:
            add_text(NO_KEYWORDS, 10)

        add_text("ACTIONABLE INSIGHTS", 14, bold=True, spacing=4)
        if report.insights:
            for insight in report.insights:
                add_text(f"Cause: {insight.cause}", 10, bold=True, spacing=2)
                add_text(f"Suggestion: {insight.suggestion}", 10)
        else:
            add_text(NO_INSIGHTS, 10)

        data = bytes(pdf.output())
        logger.debug(f"Rendered PDF report ({pdf.page_no()} pages, {len(data)} bytes)")
        return data
