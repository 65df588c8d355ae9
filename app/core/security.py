"""API key authentication for write endpoints."""

import secrets

from fastapi import Depends, Security
from fastapi.security import APIKeyHeader

from app.core.config import Settings, get_settings
from app.core.exceptions import UnauthorizedError
from app.core.logging import get_logger

logger = get_logger(__name__)

API_KEY_HEADER = "x-api-key"

api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


async def require_api_key(
    api_key: str | None = Security(api_key_header),
    settings: Settings = Depends(get_settings),
) -> None:
    """Reject the request unless the x-api-key header matches the configured key.

    An unset server-side key rejects every request.

    Args:
        api_key: Value of the x-api-key header, if sent.
        settings: Application settings.

    Raises:
        UnauthorizedError: If the key is not configured, missing or wrong.
    """
    if not settings.api_key:
        logger.warning("auth.api_key_not_configured")
        raise UnauthorizedError()

    if not api_key or not secrets.compare_digest(api_key, settings.api_key):
        logger.warning("auth.api_key_rejected", header_present=bool(api_key))
        raise UnauthorizedError()
