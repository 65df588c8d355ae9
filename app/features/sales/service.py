"""Sales service: split vouchers into documents on ingest, reassemble on read."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from app.core.logging import get_logger
from app.features.sales.schemas import IngestSaleError, SaleRecord
from app.features.sales.store import SalesStore, StoredSale, StoreError, VoucherExistsError

logger = get_logger(__name__)

# Per-voucher error codes
INVALID_SALE = "INVALID_SALE"
MISSING_VOUCHER_NUMBER = "MISSING_VOUCHER_NUMBER"
INVALID_VOUCHER_NUMBER = "INVALID_VOUCHER_NUMBER"
DUPLICATE_VOUCHER = "DUPLICATE_VOUCHER"
STORE_ERROR = "STORE_ERROR"

DETAIL_FIELDS = frozenset({"ItemDetails", "LedgerDetails"})

# Firestore document ids are limited to 1500 bytes
MAX_DOCUMENT_ID_BYTES = 1500


@dataclass
class IngestResult:
    """Outcome of ingesting one batch of vouchers."""

    total_received: int = 0
    processed_vouchers: list[str] = field(default_factory=list)
    errors: list[IngestSaleError] = field(  # pyright: ignore[reportUnknownVariableType]
        default_factory=list
    )

    @property
    def processed_count(self) -> int:
        return len(self.processed_vouchers)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def message(self) -> str:
        if self.errors:
            return f"Processed {self.processed_count} sales with {self.error_count} errors."
        return f"Processed {self.processed_count} sales."


def is_valid_document_id(voucher_number: str) -> bool:
    """Check that a voucher number can be used as a Firestore document id."""
    if "/" in voucher_number or voucher_number in (".", ".."):
        return False
    # Ids matching __.*__ are reserved
    if (
        len(voucher_number) >= 4
        and voucher_number.startswith("__")
        and voucher_number.endswith("__")
    ):
        return False
    return len(voucher_number.encode("utf-8")) <= MAX_DOCUMENT_ID_BYTES


def _amount_or_zero(value: Any) -> Any:
    if not value or (isinstance(value, float) and math.isnan(value)):
        return 0
    return value


def normalize_ledger(ledger: dict[str, Any]) -> dict[str, Any]:
    """Map a ledger line to its stored shape.

    Only LedgerName, LedgerAmount and LedgerValue are kept. Missing or falsy
    amounts (None, 0, False, "", NaN) become 0; anything else is kept as sent.
    """
    return {
        "LedgerName": ledger.get("LedgerName"),
        "LedgerAmount": _amount_or_zero(ledger.get("LedgerAmount")),
        "LedgerValue": _amount_or_zero(ledger.get("LedgerValue")),
    }


def parse_sale(raw: Any) -> SaleRecord:
    """Validate one element of the ingest batch as a voucher.

    Raises:
        ValidationError: If the element is not an object, its VoucherNumber is
            not a string or number, or a detail list is not a list of objects.
    """
    return SaleRecord.model_validate(raw)


def _describe_invalid_sale(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "sale"
    return f"Invalid sale record ({location}: {first['msg']}). Skipped."


def split_sale(
    record: SaleRecord,
) -> tuple[dict[str, Any], list[dict[str, Any]], list[dict[str, Any]]]:
    """Split a voucher into parent fields, item documents and ledger documents.

    Args:
        record: Voucher from the ingest request.

    Returns:
        Tuple of (parent fields, item details, normalized ledger details).
    """
    sale = record.model_dump(exclude=set(DETAIL_FIELDS))
    item_details = [dict(item) for item in record.ItemDetails or []]
    ledger_details = [normalize_ledger(ledger) for ledger in record.LedgerDetails or []]
    return sale, item_details, ledger_details


def assemble_sale(stored: StoredSale) -> dict[str, Any]:
    """Rebuild the nested voucher shape from stored documents.

    The document id always wins over any VoucherNumber field on the parent.
    """
    sale = dict(stored.fields)
    sale["VoucherNumber"] = stored.voucher_number
    sale["ItemDetails"] = stored.item_details
    sale["LedgerDetails"] = stored.ledger_details
    return sale


async def ingest_sales_batch(store: SalesStore, records: Sequence[Any]) -> IngestResult:
    """Ingest vouchers one at a time, collecting per-voucher failures.

    A voucher is skipped when it is not shaped like a SaleRecord, when its
    number is missing or unusable as a document id, or when it is already
    stored. Otherwise the parent and its detail documents are created in one
    atomic write. One voucher failing never stops the rest of the batch.

    Args:
        store: Sales store.
        records: Vouchers from the request, in order, as raw JSON objects or
            SaleRecord instances.

    Returns:
        IngestResult with processed voucher numbers and error details.
    """
    result = IngestResult(total_received=len(records))
    logger.info("sales.ingest.batch_started", batch_size=len(records))

    def reject(idx: int, voucher_number: str | None, code: str, message: str) -> None:
        logger.warning(
            "sales.ingest.sale_rejected",
            row_index=idx,
            voucher_number=voucher_number,
            error_code=code,
            error=message,
        )
        result.errors.append(
            IngestSaleError(
                row_index=idx,
                voucher_number=voucher_number,
                error_code=code,
                error_message=message,
            )
        )

    for idx, raw in enumerate(records):
        try:
            record = parse_sale(raw)
        except ValidationError as e:
            raw_number = raw.get("VoucherNumber") if isinstance(raw, dict) else None
            reject(
                idx,
                raw_number if isinstance(raw_number, str) else None,
                INVALID_SALE,
                _describe_invalid_sale(e),
            )
            continue

        voucher_number = record.VoucherNumber
        if not voucher_number:
            reject(idx, None, MISSING_VOUCHER_NUMBER, "Missing VoucherNumber. Skipped.")
            continue

        if not is_valid_document_id(voucher_number):
            reject(
                idx,
                voucher_number,
                INVALID_VOUCHER_NUMBER,
                f'VoucherNumber "{voucher_number}" cannot be used as a document id.',
            )
            continue

        try:
            if await store.sale_exists(voucher_number):
                raise VoucherExistsError(voucher_number)

            sale, item_details, ledger_details = split_sale(record)
            await store.create_sale(voucher_number, sale, item_details, ledger_details)
        except VoucherExistsError as e:
            reject(idx, voucher_number, DUPLICATE_VOUCHER, str(e))
            continue
        except StoreError as e:
            reject(idx, voucher_number, STORE_ERROR, f'Voucher "{voucher_number}": {e}')
            continue

        result.processed_vouchers.append(voucher_number)

    logger.info(
        "sales.ingest.batch_completed",
        processed=result.processed_count,
        rejected=result.error_count,
        total=result.total_received,
    )
    return result


async def list_sales(store: SalesStore) -> list[dict[str, Any]]:
    """Read every stored voucher in its nested ingest shape.

    Args:
        store: Sales store.

    Returns:
        Vouchers with ItemDetails and LedgerDetails attached.

    Raises:
        StoreError: If any read fails; no partial list is returned.
    """
    stored_sales = await store.list_sales()
    sales = [assemble_sale(stored) for stored in stored_sales]
    logger.info("sales.list.completed", sale_count=len(sales))
    return sales
