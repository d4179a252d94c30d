"""FastAPI dependency injection.

The container is built once per application and stored on ``app.state``;
dependencies only read it from there.
"""

import logging
import secrets

from fastapi import Depends, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from ....composition.container import Container
from ....core.domain.exceptions import ConfigurationError, WebhookAuthenticationError
from ....core.services.image_analyzer import ImageAnalyzer
from ....core.services.search_service import SearchService
from ....core.services.sync_service import ContentSyncService
from ....core.services.webhook_dispatcher import WebhookDispatcher

logger = logging.getLogger(__name__)

basic_auth = HTTPBasic(auto_error=False)


def get_container(request: Request) -> Container:
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise ConfigurationError("Application container is not initialized")
    return container


def get_search_service(container: Container = Depends(get_container)) -> SearchService:
    return container.search_service


def get_image_analyzer(container: Container = Depends(get_container)) -> ImageAnalyzer:
    return container.image_analyzer


def get_webhook_dispatcher(container: Container = Depends(get_container)) -> WebhookDispatcher:
    return container.webhook_dispatcher


def get_sync_service(container: Container = Depends(get_container)) -> ContentSyncService:
    return container.sync_service


def require_webhook_auth(
    credentials: HTTPBasicCredentials | None = Depends(basic_auth),
    container: Container = Depends(get_container),
) -> str:
    """Check Basic-Auth credentials against the configured webhook account.

    An unset webhook password rejects every request. Credentials are never
    logged.

    Raises:
        WebhookAuthenticationError: If credentials are missing or wrong.
    """
    if credentials is None:
        logger.warning("Webhook authentication failed: no basic auth header")
        raise WebhookAuthenticationError("Authentication required")

    expected_username = container.settings.webhook_username
    expected_password = container.settings.webhook_password
    if not expected_password:
        logger.error("Webhook password is not configured; rejecting request")
        raise WebhookAuthenticationError("Invalid credentials")

    username_ok = secrets.compare_digest(
        credentials.username.encode("utf-8"), expected_username.encode("utf-8")
    )
    password_ok = secrets.compare_digest(
        credentials.password.encode("utf-8"), expected_password.encode("utf-8")
    )
    if not (username_ok and password_ok):
        logger.warning("Webhook authentication failed: invalid credentials")
        raise WebhookAuthenticationError("Invalid credentials")
    return credentials.username
