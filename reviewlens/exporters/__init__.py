"""
Report exporters for ReviewLens.

- Text, PDF and DOCX renderers sharing one section order
- Sentiment charts and dashboard metrics
"""

from reviewlens.exporters.base import ReportRenderer, export_filename
from reviewlens.exporters.office import DocxReportRenderer
from reviewlens.exporters.pdf import PdfReportRenderer
from reviewlens.exporters.text import TextReportRenderer


def get_renderer(export_format: str) -> ReportRenderer:
    """
    Raises:
        ValueError: If the format is not txt, pdf or docx
    """
    renderers = {
        "txt": TextReportRenderer,
        "pdf": PdfReportRenderer,
        "docx": DocxReportRenderer,
    }
    try:
        return renderers[export_format.lower()]()
    except KeyError:
        raise ValueError(f"Unsupported export format: {export_format}") from None
