"""CMS delivery API exceptions."""

from .base import CMSSearchError


class CMSError(CMSSearchError):
    """Base error for CMS delivery API calls."""

    error_code = "CMS_CMS_001"


class CMSConnectionError(CMSError):
    """CMS delivery API is unreachable or rejected the credentials."""

    error_code = "CMS_CMS_002"


class CMSTimeoutError(CMSError):
    """CMS call did not complete within its timeout."""

    error_code = "CMS_CMS_003"


class EntryNotFoundError(CMSError):
    """Entry does not exist in the requested content type."""

    error_code = "CMS_CMS_004"


class ContentTypeNotFoundError(CMSError):
    """Content type does not exist or has no entries."""

    error_code = "CMS_CMS_005"
