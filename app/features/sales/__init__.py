"""Sales feature: Tally voucher ingest and read-back over Firestore."""

from app.features.sales.routes import router
from app.features.sales.schemas import (
    IngestSaleError,
    SaleIngestRequest,
    SaleIngestResponse,
    SaleListResponse,
    SaleRecord,
)
from app.features.sales.service import ingest_sales_batch, list_sales
from app.features.sales.store import FirestoreSalesStore, SalesStore, get_sales_store

__all__ = [
    "FirestoreSalesStore",
    "IngestSaleError",
    "SaleIngestRequest",
    "SaleIngestResponse",
    "SaleListResponse",
    "SaleRecord",
    "SalesStore",
    "get_sales_store",
    "ingest_sales_batch",
    "list_sales",
    "router",
]
