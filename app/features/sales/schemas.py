"""Pydantic schemas for the Tally sales API.

Field names follow the Tally export (PascalCase) so that the ingest body and
the retrieve body have the same shape.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SaleRecord(BaseModel):
    """One sales voucher as exported from Tally.

    Only the voucher number and the two detail lists are modelled; every
    other top-level field (date, party, amount, ...) is kept as an extra and
    stored on the parent document unchanged.
    """

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    VoucherNumber: str | None = Field(  # noqa: N815
        None, description="Voucher number, used as the Firestore document id"
    )
    ItemDetails: list[dict[str, Any]] | None = Field(  # noqa: N815
        None, description="Stock item lines, stored verbatim"
    )
    LedgerDetails: list[dict[str, Any]] | None = Field(  # noqa: N815
        None, description="Ledger lines (LedgerName, LedgerAmount, LedgerValue)"
    )


class SaleIngestRequest(BaseModel):
    """Request body for POST /api/ingest_tally_sales.

    Only the batch itself is checked here. Each element is validated against
    SaleRecord while the batch is ingested, so one badly shaped voucher is
    reported on its own instead of failing the request.
    """

    Sale: list[Any] = Field(  # noqa: N815
        ...,
        min_length=1,
        description="Sales vouchers to ingest (each shaped like SaleRecord)",
    )


class IngestSaleError(BaseModel):
    """Error detail for a single rejected voucher."""

    row_index: int = Field(..., description="0-based index of the voucher in the batch")
    voucher_number: str | None = Field(None, description="VoucherNumber from the voucher")
    error_code: str = Field(..., description="Machine-readable error code")
    error_message: str = Field(..., description="Human-readable error message")


class SaleIngestResponse(BaseModel):
    """Response body for POST /api/ingest_tally_sales (200 and 207)."""

    message: str = Field(..., description="Summary, e.g. 'Processed 3 sales with 1 errors.'")
    processed_vouchers: list[str] = Field(
        default_factory=list, description="Voucher numbers written in this request"
    )
    processed_count: int = Field(..., ge=0, description="Number of vouchers written")
    error_count: int = Field(..., ge=0, description="Number of vouchers rejected")
    total_received: int = Field(..., ge=0, description="Number of vouchers in the request")
    errors: list[IngestSaleError] = Field(
        default_factory=list, description="Details of rejected vouchers"
    )
    duration_ms: float = Field(..., ge=0, description="Processing duration in milliseconds")


class SaleListResponse(BaseModel):
    """Response body for GET /api/get_sales."""

    Sale: list[dict[str, Any]] = Field(  # noqa: N815
        default_factory=list,
        description="Stored vouchers with ItemDetails and LedgerDetails attached",
    )
