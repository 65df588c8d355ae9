"""Firestore persistence for sales vouchers.

Layout::

    sales/{VoucherNumber}                      parent fields
    sales/{VoucherNumber}/itemDetails/{auto}   one document per item line
    sales/{VoucherNumber}/ledgerDetails/{auto} one document per ledger line

Handlers reach Firestore only through the SalesStore protocol so tests can
swap in an in-memory store.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from fastapi import Depends
from google.api_core.exceptions import AlreadyExists, GoogleAPIError
from google.cloud import firestore

from app.core.config import Settings, get_settings
from app.core.firestore import get_firestore_client
from app.core.logging import get_logger

logger = get_logger(__name__)


class StoreError(Exception):
    """Base exception for sales store operations."""

    pass


class VoucherExistsError(StoreError):
    """A sale with this voucher number is already stored."""

    def __init__(self, voucher_number: str) -> None:
        super().__init__(f'VoucherNumber "{voucher_number}" already exists.')
        self.voucher_number = voucher_number


@dataclass
class StoredSale:
    """A parent document together with its two sub-collections."""

    voucher_number: str
    fields: dict[str, Any]
    item_details: list[dict[str, Any]] = field(default_factory=list)
    ledger_details: list[dict[str, Any]] = field(default_factory=list)


@runtime_checkable
class SalesStore(Protocol):
    """Protocol for sales persistence backends."""

    async def sale_exists(self, voucher_number: str) -> bool:
        """Check whether a parent document exists."""
        ...

    async def create_sale(
        self,
        voucher_number: str,
        sale: dict[str, Any],
        item_details: list[dict[str, Any]],
        ledger_details: list[dict[str, Any]],
    ) -> None:
        """Atomically create a parent document and its detail documents."""
        ...

    async def list_sales(self) -> list[StoredSale]:
        """Read every parent document with both sub-collections."""
        ...


class FirestoreSalesStore:
    """SalesStore backed by a Firestore AsyncClient."""

    def __init__(
        self,
        client: firestore.AsyncClient,
        sales_collection: str = "sales",
        item_details_collection: str = "itemDetails",
        ledger_details_collection: str = "ledgerDetails",
    ) -> None:
        self._client = client
        self._sales_collection = sales_collection
        self._item_details_collection = item_details_collection
        self._ledger_details_collection = ledger_details_collection

    def _sale_ref(self, voucher_number: str) -> Any:
        return self._client.collection(self._sales_collection).document(voucher_number)

    async def sale_exists(self, voucher_number: str) -> bool:
        """Check whether a parent document exists.

        Args:
            voucher_number: Document id to look up.

        Returns:
            True if the document exists.

        Raises:
            StoreError: If the read fails.
        """
        try:
            snapshot = await self._sale_ref(voucher_number).get()
        except GoogleAPIError as e:
            raise StoreError(str(e)) from e
        return bool(snapshot.exists)

    async def create_sale(
        self,
        voucher_number: str,
        sale: dict[str, Any],
        item_details: list[dict[str, Any]],
        ledger_details: list[dict[str, Any]],
    ) -> None:
        """Write a sale and its details in a single batched write.

        The parent is written with ``create``, so the whole batch is rejected
        if the document already exists and nothing of the sale is persisted.

        Args:
            voucher_number: Parent document id.
            sale: Parent document fields.
            item_details: Documents for the item sub-collection.
            ledger_details: Documents for the ledger sub-collection.

        Raises:
            VoucherExistsError: If the parent document already exists.
            StoreError: If the write fails for any other reason.
        """
        sale_ref = self._sale_ref(voucher_number)
        items_ref = sale_ref.collection(self._item_details_collection)
        ledgers_ref = sale_ref.collection(self._ledger_details_collection)

        batch = self._client.batch()
        batch.create(sale_ref, sale)
        for item in item_details:
            batch.set(items_ref.document(), item)
        for ledger in ledger_details:
            batch.set(ledgers_ref.document(), ledger)

        try:
            await batch.commit()
        except AlreadyExists as e:
            raise VoucherExistsError(voucher_number) from e
        except (GoogleAPIError, ValueError, TypeError) as e:
            raise StoreError(str(e)) from e

        logger.debug(
            "sales.store.sale_created",
            voucher_number=voucher_number,
            item_count=len(item_details),
            ledger_count=len(ledger_details),
        )

    async def list_sales(self) -> list[StoredSale]:
        """Read every parent document with both sub-collections.

        Returns:
            Stored sales in collection order.

        Raises:
            StoreError: If any read fails.
        """
        sales: list[StoredSale] = []
        try:
            async for snapshot in self._client.collection(self._sales_collection).stream():
                sale_ref = snapshot.reference
                item_details = [
                    doc.to_dict() or {}
                    async for doc in sale_ref.collection(self._item_details_collection).stream()
                ]
                ledger_details = [
                    doc.to_dict() or {}
                    async for doc in sale_ref.collection(self._ledger_details_collection).stream()
                ]
                sales.append(
                    StoredSale(
                        voucher_number=snapshot.id,
                        fields=snapshot.to_dict() or {},
                        item_details=item_details,
                        ledger_details=ledger_details,
                    )
                )
        except GoogleAPIError as e:
            raise StoreError(str(e)) from e

        return sales


def get_sales_store(
    client: firestore.AsyncClient = Depends(get_firestore_client),
    settings: Settings = Depends(get_settings),
) -> SalesStore:
    """Dependency wrapping the shared Firestore client in a SalesStore.

    Args:
        client: Firestore client created at startup.
        settings: Application settings (collection names).

    Returns:
        Firestore-backed sales store.
    """
    return FirestoreSalesStore(
        client,
        sales_collection=settings.sales_collection,
        item_details_collection=settings.item_details_collection,
        ledger_details_collection=settings.ledger_details_collection,
    )
