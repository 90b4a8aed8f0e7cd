"""
Persona Grouping.

Splits one CSV review source into one review source per customer segment.
"""

import logging
from typing import Dict, List

import config.settings as settings
from reviewlens.errors import PersonaGroupingError
from reviewlens.models.review_source import ReviewSource
from reviewlens.utils.csv_parser import parse_csv_line

logger = logging.getLogger(__name__)


def group_reviews_by_segment(
    content: str,
    segment_column: str,
    review_column: str = settings.REVIEW_COLUMN_NAME
) -> Dict[str, List[str]]:
    """
    Bucket review texts by segment value.

    Column lookup is an exact, case-sensitive match after trimming.
    Rows whose segment or review value is empty are skipped.

    Args:
        content: Raw CSV text (header line + data lines)
        segment_column: Header name of the segment column, e.g. "Customer Type"
        review_column: Header name of the review text column

    Returns:
        Segment value -> review texts, both in first-seen order

    Raises:
        PersonaGroupingError: Empty content, missing column, or no usable rows
    """
    lines = content.strip().split("\n")
    header_line = lines[0]
    if not header_line.strip():
        raise PersonaGroupingError("CSV data is empty or missing a header.")

    headers = parse_csv_line(header_line)
    segment_name = segment_column.strip()

    try:
        segment_index = headers.index(segment_name)
    except ValueError:
        raise PersonaGroupingError(
            f'Segment column "{segment_column}" not found in the data header.'
        ) from None

    try:
        review_index = headers.index(review_column)
    except ValueError:
        raise PersonaGroupingError(
            f'Review column "{review_column}" not found in the data header.'
        ) from None

    buckets: Dict[str, List[str]] = {}
    skipped = 0

    for line in lines[1:]:
        values = parse_csv_line(line)
        segment = values[segment_index].strip() if segment_index < len(values) else ""
        review = values[review_index].strip() if review_index < len(values) else ""

        if not segment or not review:
            skipped += 1
            continue

        buckets.setdefault(segment, []).append(review)

    if not buckets:
        raise PersonaGroupingError(
            "No personas or reviews could be extracted. Check your column name and data format."
        )

    logger.info(
        f"Grouped reviews into {len(buckets)} segments by '{segment_name}' "
        f"({skipped} rows skipped)"
    )
    return buckets


def build_persona_sources(
    source: ReviewSource,
    segment_column: str,
    review_column: str = settings.REVIEW_COLUMN_NAME
) -> List[ReviewSource]:
    """
    Convert one CSV source into one review source per segment.

    Each generated source is labelled with its segment value, holds the
    segment's reviews joined by newlines, and inherits the original
    source's product context and report date.
    """
    buckets = group_reviews_by_segment(source.content, segment_column, review_column)

    return [
        ReviewSource(
            label=segment,
            content="\n".join(reviews),
            product_context=source.product_context,
            report_date=source.report_date
        )
        for segment, reviews in buckets.items()
    ]
