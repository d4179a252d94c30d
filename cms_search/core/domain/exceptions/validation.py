"""Validation exceptions."""

from .base import CMSSearchError


class ValidationError(CMSSearchError):
    """Input validation failed."""

    error_code = "CMS_VAL_001"


class EmptyQueryError(ValidationError):
    """Query cannot be empty or whitespace only."""

    error_code = "CMS_VAL_002"


class MissingFieldError(ValidationError):
    """A required request field is missing."""

    error_code = "CMS_VAL_003"
