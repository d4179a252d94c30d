"""Configuration-related exceptions."""

from .base import CMSSearchError


class ConfigurationError(CMSSearchError):
    """Configuration or environment variable errors.

    Raised when required configuration is missing or invalid.
    """

    error_code = "CMS_CFG_001"


class MissingAPIKeyError(ConfigurationError):
    """Required API key is not configured."""

    error_code = "CMS_CFG_002"
