"""Firestore client setup and service-account credential loading."""

import os
from pathlib import Path

from fastapi import Request
from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import firestore
from google.oauth2 import service_account

from app.core.config import Settings, get_settings
from app.core.exceptions import CredentialError
from app.core.logging import get_logger

logger = get_logger(__name__)

# Project id used against the emulator when none is configured
EMULATOR_PROJECT_ID = "demo-tally-gateway"


def load_credentials(settings: Settings) -> service_account.Credentials:
    """Load service-account credentials from the configured key file.

    Args:
        settings: Application settings.

    Returns:
        Service-account credentials.

    Raises:
        CredentialError: If the key file is missing or unreadable.
    """
    key_path = Path(settings.google_application_credentials)
    if not key_path.is_file():
        raise CredentialError(
            message=f"Service account key file not found: {key_path}",
            details={"path": str(key_path)},
        )

    try:
        credentials: service_account.Credentials = (
            service_account.Credentials.from_service_account_file(str(key_path))
        )
    except (ValueError, OSError, GoogleAuthError) as e:
        raise CredentialError(
            message=f"Service account key file is invalid: {key_path}",
            details={"path": str(key_path), "error": str(e)},
        ) from e

    return credentials


def create_firestore_client(settings: Settings | None = None) -> firestore.AsyncClient:
    """Create the process-wide Firestore client.

    Against the emulator no key file is read. The client library only switches
    to emulator credentials when FIRESTORE_EMULATOR_HOST is in the process
    environment, so the configured host is exported there. Every Firestore
    client created later in the process also talks to the emulator.

    Args:
        settings: Application settings (defaults to cached settings).

    Returns:
        Firestore async client.

    Raises:
        CredentialError: If credentials cannot be loaded.
    """
    settings = settings or get_settings()

    emulator_host = settings.firestore_emulator_host
    if emulator_host:
        if os.environ.get("FIRESTORE_EMULATOR_HOST") != emulator_host:
            logger.info("firestore.emulator_host_exported", emulator_host=emulator_host)
            os.environ["FIRESTORE_EMULATOR_HOST"] = emulator_host
        project = settings.firestore_project_id or EMULATOR_PROJECT_ID
        client = firestore.AsyncClient(project=project, database=settings.firestore_database)
        logger.info(
            "firestore.client_created",
            mode="emulator",
            emulator_host=emulator_host,
            project=project,
            database=settings.firestore_database,
        )
        return client

    credentials = load_credentials(settings)
    project = settings.firestore_project_id or credentials.project_id
    client = firestore.AsyncClient(
        project=project,
        credentials=credentials,
        database=settings.firestore_database,
    )
    logger.info(
        "firestore.client_created",
        mode="service_account",
        project=project,
        database=settings.firestore_database,
        service_account=credentials.service_account_email,
    )
    return client


def get_firestore_client(request: Request) -> firestore.AsyncClient:
    """Dependency returning the Firestore client created at startup.

    Args:
        request: Incoming request (carries the application state).

    Returns:
        Shared Firestore async client.
    """
    client: firestore.AsyncClient = request.app.state.firestore_client
    return client


async def ping_firestore(client: firestore.AsyncClient, collection: str) -> bool:
    """Check Firestore reachability with a single-document read.

    Args:
        client: Firestore async client.
        collection: Collection to probe.

    Returns:
        True if the read succeeded, False otherwise.
    """
    try:
        await client.collection(collection).limit(1).get()
    except GoogleAPIError as e:
        logger.error(
            "firestore.ping_failed",
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        return False
    return True
