"""
Unit tests for persona grouping.
"""

import pytest

from reviewlens.agents.persona import build_persona_sources, group_reviews_by_segment
from reviewlens.errors import InputValidationError, PersonaGroupingError
from reviewlens.models.review_source import ReviewSource


CSV_CONTENT = "Name,Type,Comment\nX,S1,r1\nY,S1,r2\nZ,S2,r3\n"


def test_groups_in_first_seen_order():
    source = ReviewSource(label="upload.csv", content=CSV_CONTENT, product_context="Headphones", report_date="Q4")

    personas = build_persona_sources(source, "Type")

    assert [p.label for p in personas] == ["S1", "S2"]
    assert personas[0].content == "r1\nr2"
    assert personas[1].content == "r3"
    assert all(p.product_context == "Headphones" for p in personas)
    assert all(p.report_date == "Q4" for p in personas)


def test_segment_column_name_trimmed():
    buckets = group_reviews_by_segment(CSV_CONTENT, "  Type ")
    assert list(buckets) == ["S1", "S2"]


def test_segment_column_is_case_sensitive():
    with pytest.raises(PersonaGroupingError, match='Segment column "type" not found'):
        group_reviews_by_segment(CSV_CONTENT, "type")


def test_missing_review_column():
    content = "Name,Type,Feedback\nX,S1,r1\n"
    with pytest.raises(PersonaGroupingError, match='Review column "Comment" not found'):
        group_reviews_by_segment(content, "Type")


def test_missing_review_column_even_with_valid_segment():
    content = "Type\nS1\n"
    with pytest.raises(PersonaGroupingError, match="Comment"):
        group_reviews_by_segment(content, "Type")


def test_empty_values_skipped():
    content = "Name,Type,Comment\nA,,no segment\nB,S1,   \nC,S1,kept\nD\n"

    buckets = group_reviews_by_segment(content, "Type")

    assert buckets == {"S1": ["kept"]}
    assert "" not in buckets


def test_quoted_review_with_commas():
    content = 'Reviewer Name,Rating (1-5),Customer Type,Comment\nJohn,5,Power User,"Loud, clear, great"\n'

    buckets = group_reviews_by_segment(content, "Customer Type")

    assert buckets == {"Power User": ["Loud, clear, great"]}


def test_empty_content():
    with pytest.raises(PersonaGroupingError, match="empty or missing a header"):
        group_reviews_by_segment("   \n  ", "Type")


def test_no_usable_rows():
    with pytest.raises(PersonaGroupingError, match="No personas or reviews could be extracted"):
        group_reviews_by_segment("Name,Type,Comment\nX,,\n", "Type")


def test_grouping_errors_are_input_errors():
    assert issubclass(PersonaGroupingError, InputValidationError)
