"""
Review source data model.

One named block of raw review text, the unit of independent analysis.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ReviewSource:
    """
    A block of review text plus optional context.
    Identity is the position in the ordered source list.
    """
    label: str  # Tab / report label (file name, segment value, ...)
    content: str  # Raw text blob (CSV, plain text, ...)
    product_context: str = ""  # Optional background on the product/service
    report_date: str = ""  # Optional free-form period, e.g. "Q4 2024"

    def has_content(self) -> bool:
        return bool(self.content.strip())
