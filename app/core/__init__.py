"""Core infrastructure: config, Firestore client, logging, middleware, security."""

from app.core.config import Settings, get_settings
from app.core.firestore import create_firestore_client, get_firestore_client
from app.core.logging import get_logger, request_id_ctx
from app.core.security import require_api_key

__all__ = [
    "Settings",
    "create_firestore_client",
    "get_firestore_client",
    "get_logger",
    "get_settings",
    "request_id_ctx",
    "require_api_key",
]
