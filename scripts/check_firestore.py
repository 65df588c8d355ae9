#!/usr/bin/env python
"""Check Firestore credentials and connectivity.

Usage:
    uv run python scripts/check_firestore.py
"""

import asyncio
import sys

from app.core.config import get_settings
from app.core.exceptions import CredentialError
from app.core.firestore import create_firestore_client, ping_firestore


async def check_firestore() -> int:
    """Verify credentials load and the sales collection is readable."""
    settings = get_settings()

    print("Tally Sales Gateway - Firestore Connectivity Check")
    print("=" * 50)
    if settings.uses_emulator:
        print(f"Emulator:    {settings.firestore_emulator_host}")
    else:
        print(f"Key file:    {settings.google_application_credentials}")
    print(f"Database:    {settings.firestore_database}")
    print(f"Collection:  {settings.sales_collection}")
    print()

    try:
        client = create_firestore_client(settings)
    except CredentialError as e:
        print(f"[FAIL] {e.message}")
        print()
        print("Troubleshooting:")
        print("  1. Download a service account key from the Firebase console")
        print("  2. Point GOOGLE_APPLICATION_CREDENTIALS in .env at the key file")
        print("  3. Or set FIRESTORE_EMULATOR_HOST to use the local emulator")
        return 1
    print(f"[OK] Credentials loaded (project: {client.project})")

    if not await ping_firestore(client, settings.sales_collection):
        print("[FAIL] Could not read from Firestore")
        print("       Check that the service account has the Cloud Datastore User role")
        return 1
    print("[OK] Sales collection readable")

    if not settings.api_key:
        print("[WARN] API_KEY is not set; every ingest request will be rejected")

    print()
    print("Firestore check completed successfully!")
    return 0


def main() -> None:
    sys.exit(asyncio.run(check_firestore()))


if __name__ == "__main__":
    main()
