"""
Error types for ReviewLens.

Every error carries a message that is safe to show to the user as-is.
"""


class ReviewLensError(Exception):
    """Base class for errors surfaced to the user."""


class InputValidationError(ReviewLensError):
    """
    User input was rejected before any external call was made.

    Covers file batch limits, unsupported or empty files, missing columns,
    over-long text, malformed spreadsheet URLs and a missing API key.
    """


class PersonaGroupingError(InputValidationError):
    """CSV content could not be split into persona segments."""


class ExternalServiceError(ReviewLensError):
    """
    An external call failed: network error, non-success status,
    or an empty / non-conforming model response.
    """


class CapabilityUnavailableError(ReviewLensError):
    """An optional document or spreadsheet library is not installed."""
