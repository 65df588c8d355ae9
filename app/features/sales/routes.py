"""Sales API routes: Tally ingest and website read-back."""

import time

from fastapi import APIRouter, Depends, Response, status

from app.core.exceptions import DatabaseError
from app.core.logging import get_logger
from app.core.problem_details import ProblemDetail
from app.core.security import require_api_key
from app.features.sales.schemas import SaleIngestRequest, SaleIngestResponse, SaleListResponse
from app.features.sales.service import ingest_sales_batch, list_sales
from app.features.sales.store import SalesStore, StoreError, get_sales_store

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["sales"])


@router.post(
    "/ingest_tally_sales",
    response_model=SaleIngestResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_api_key)],
    summary="Ingest sales vouchers exported from Tally",
    description="""
Stores each voucher as a document keyed by its VoucherNumber, with item and
ledger lines in the `itemDetails` and `ledgerDetails` sub-collections.

**Write-once:** a voucher that is already stored is reported as a
`DUPLICATE_VOUCHER` error and left unchanged.

**Partial Success:** vouchers are processed independently. A voucher that is
not shaped like a sale is reported as `INVALID_SALE` without affecting the
others. If any voucher is rejected the response status is 207 and `errors`
lists every rejection.

Requires the `x-api-key` header.
""",
    responses={
        207: {"model": SaleIngestResponse, "description": "Some vouchers were rejected"},
        400: {"model": ProblemDetail, "description": "Malformed request body"},
        401: {"model": ProblemDetail, "description": "Missing or invalid API key"},
    },
)
async def ingest_tally_sales(
    request: SaleIngestRequest,
    response: Response,
    store: SalesStore = Depends(get_sales_store),
) -> SaleIngestResponse:
    """Ingest a batch of Tally sales vouchers.

    Args:
        request: Ingest request with the list of vouchers.
        response: Outgoing response, used to switch to 207.
        store: Sales store from dependency.

    Returns:
        Processed voucher numbers, counts and per-voucher errors.
    """
    start_time = time.perf_counter()

    logger.info("sales.ingest.request_received", sale_count=len(request.Sale))

    result = await ingest_sales_batch(store, request.Sale)

    duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
    if result.errors:
        response.status_code = status.HTTP_207_MULTI_STATUS

    logger.info(
        "sales.ingest.request_completed",
        processed=result.processed_count,
        rejected=result.error_count,
        status_code=response.status_code or status.HTTP_200_OK,
        duration_ms=duration_ms,
    )

    return SaleIngestResponse(
        message=result.message,
        processed_vouchers=result.processed_vouchers,
        processed_count=result.processed_count,
        error_count=result.error_count,
        total_received=result.total_received,
        errors=result.errors,
        duration_ms=duration_ms,
    )


@router.get(
    "/get_sales",
    response_model=SaleListResponse,
    summary="List all stored sales vouchers",
    responses={500: {"model": ProblemDetail, "description": "Firestore read failed"}},
)
async def get_sales(
    store: SalesStore = Depends(get_sales_store),
) -> SaleListResponse:
    """Return every stored voucher with its item and ledger lines.

    Args:
        store: Sales store from dependency.

    Returns:
        All vouchers under the "Sale" key, the same shape the ingest accepts.

    Raises:
        DatabaseError: If any Firestore read fails.
    """
    try:
        sales = await list_sales(store)
    except StoreError as e:
        logger.error(
            "sales.list.request_failed",
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        raise DatabaseError(
            message="Failed to retrieve sales data.",
            details={"error": str(e)},
        ) from e

    return SaleListResponse(Sale=sales)
