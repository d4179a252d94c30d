"""Webhook and reindex exceptions."""

from .base import CMSSearchError


class WebhookError(CMSSearchError):
    """Base error for webhook handling."""

    error_code = "CMS_WHK_001"


class WebhookAuthenticationError(WebhookError):
    """Basic-Auth credentials missing or invalid."""

    error_code = "CMS_WHK_002"


class PayloadShapeError(WebhookError):
    """Payload does not match any recognized webhook shape."""

    error_code = "CMS_WHK_003"


class WebhookProcessingError(WebhookError):
    """A downstream provider failed while handling a webhook."""

    error_code = "CMS_WHK_004"


class ReindexError(CMSSearchError):
    """A manual reindex failed in a downstream provider."""

    error_code = "CMS_IDX_001"
