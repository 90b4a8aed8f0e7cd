"""
Unit tests for the TXT, PDF and DOCX report renderers.

Every renderer is checked by extracting the text back out of its artifact.
"""

import io
from dataclasses import replace
from datetime import date
from unittest.mock import patch

import docx
import fpdf
import pytest
from pypdf import PdfReader

from reviewlens.errors import CapabilityUnavailableError
from reviewlens.exporters import get_renderer
from reviewlens.exporters.base import export_filename, keyword_label
from reviewlens.exporters.office import DocxReportRenderer
from reviewlens.exporters.pdf import PdfReportRenderer, cjk_font_file, unicode_font_files
from reviewlens.exporters.text import TextReportRenderer, format_summary_markdown
from reviewlens.models.summary import Summary


def _pdf_text(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    return "\n".join(page.extract_text() for page in reader.pages)


def _docx_text(data: bytes) -> str:
    document = docx.Document(io.BytesIO(data))
    return "\n".join(p.text for p in document.paragraphs)


EXTRACTORS = {
    "txt": lambda data: data.decode("utf-8"),
    "pdf": _pdf_text,
    "docx": _docx_text,
}


def _squash(text: str) -> str:
    # PDF extraction does not preserve spacing reliably
    return "".join(text.split())


def _assert_in_order(text: str, items, after: str = ""):
    """Each item must appear after the previous one, starting at the heading `after`."""
    squashed = _squash(text)
    cursor = squashed.find(_squash(after))
    assert cursor >= 0, f"heading {after!r} missing"
    for item in items:
        found = squashed.find(_squash(item), cursor)
        assert found >= 0, f"{item!r} missing or out of order"
        cursor = found + len(_squash(item))


@pytest.mark.parametrize("export_format", ["txt", "pdf", "docx"])
def test_report_round_trip(report, export_format):
    data = get_renderer(export_format).render(report)
    text = EXTRACTORS[export_format](data)

    _assert_in_order(text, report.pros, after="PROS")
    _assert_in_order(text, report.cons, after="CONS")
    _assert_in_order(text, report.themes, after="COMMON THEMES")
    _assert_in_order(text, [keyword_label(k) for k in report.keywords], after="TOP KEYWORDS")

    # Sections appear in the same order in every format
    _assert_in_order(text, [
        report.title,
        report.strategic_analysis.overview,
        report.strategic_analysis.key_focus_area,
        report.strategic_analysis.steps[0].step,
        report.strategic_analysis.steps[0].rationale,
        report.strategic_analysis.steps[1].step,
        "Positive: 6",
        report.pros[0],
        report.cons[0],
        report.themes[0],
        "battery (4 mentions)",
        report.insights[0].cause,
        report.insights[0].suggestion,
    ])


@pytest.mark.parametrize("export_format", ["txt", "pdf", "docx"])
def test_empty_lists_render_placeholders(empty_report, export_format):
    data = get_renderer(export_format).render(empty_report)
    text = _squash(EXTRACTORS[export_format](data))

    assert _squash("No items found.") in text
    assert _squash("No strategic steps provided.") in text
    assert _squash("No specific insights generated.") in text
    assert _squash("PROS") in text.upper()
    assert _squash("TOP KEYWORDS") in text.upper()


def test_text_layout(report):
    text = TextReportRenderer().render_text(report)

    assert text.startswith("CUSTOMER INSIGHTS AI - ANALYSIS REPORT for Q4.csv\n")
    assert "Date: 18/10/2026, 09:30:00" in text
    assert "Strategic Step 1: Release power-saving firmware\nRationale: Most complaints cite battery" in text
    assert "--- PROS ---\n- Great noise cancelling\n- Comfortable fit\n" in text
    assert "--- ACTIONABLE INSIGHTS (ROOT CAUSE ANALYSIS) ---\nCause: Firmware keeps Bluetooth radio awake" in text


def test_text_keywords_placeholder(empty_report):
    text = TextReportRenderer().render_text(empty_report)
    assert "--- TOP KEYWORDS ---\nNo keywords extracted." in text
    assert "--- CONS ---\nNo items found." in text


@pytest.mark.parametrize("export_format", ["txt", "pdf", "docx"])
def test_typographic_characters_survive(report, export_format):
    pros = ["Customer’s favourite — long battery", "Lasts a week… mostly", "Sound ★★★★★"]

    data = get_renderer(export_format).render(replace(report, pros=pros))

    _assert_in_order(EXTRACTORS[export_format](data), pros, after="PROS")


def test_docx_uses_bullets(report):
    document = docx.Document(io.BytesIO(DocxReportRenderer().render(report)))
    bullets = [p.text for p in document.paragraphs if p.style.name == "List Bullet"]

    assert bullets[:2] == report.pros
    assert "battery (4 mentions)" in bullets


def test_pdf_fonts_come_from_matplotlib():
    fonts = unicode_font_files()

    assert set(fonts) == {"", "B"}
    assert all(path.endswith(".ttf") for path in fonts.values())
    assert "Bold" in fonts["B"]


def test_no_cjk_font_installed():
    assert cjk_font_file(("No Such Font Family",)) is None


def test_missing_pdf_library(report):
    with patch("reviewlens.exporters.pdf.load_fpdf", side_effect=CapabilityUnavailableError(
        "PDF generation library (fpdf2) not found."
    )):
        with pytest.raises(CapabilityUnavailableError, match="fpdf2"):
            PdfReportRenderer().render(report)


def test_injected_document_factory(report):
    calls = []

    def factory():
        calls.append(1)
        return fpdf.FPDF()

    PdfReportRenderer(document_factory=factory).render(report)
    assert calls == [1]


def test_filename_embeds_day_month_year():
    assert export_filename("pdf", today=date(2026, 3, 7)) == "Customer_Insights_Report_07-03-2026.pdf"
    assert DocxReportRenderer().filename(today=date(2026, 3, 7)) == "Customer_Insights_Report_07-03-2026.docx"


def test_unknown_format():
    with pytest.raises(ValueError, match="Unsupported export format: html"):
        get_renderer("html")


def test_summary_markdown(summary):
    text = format_summary_markdown("Q4.csv", summary)

    assert text.startswith("**Customer Review Summary for Q4.csv**")
    assert "**Pros:**\n- Great noise cancelling\n- Comfortable fit" in text
    assert "- battery (4 mentions)" in text


def test_summary_markdown_skips_empty_sections():
    text = format_summary_markdown("Empty", Summary(pros=["Only pro"]))

    assert "**Pros:**" in text
    assert "**Cons:**" not in text
    assert "**Top Keywords:**" not in text
