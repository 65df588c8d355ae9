"""Feature-specific test fixtures for the sales module."""

import copy
from collections.abc import AsyncGenerator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.config import Settings, get_settings
from app.features.sales.schemas import SaleRecord
from app.features.sales.store import StoredSale, StoreError, VoucherExistsError, get_sales_store
from app.main import app

TEST_API_KEY = "test-api-key"


class InMemorySalesStore:
    """In-memory SalesStore with switchable failures."""

    def __init__(self) -> None:
        self.sales: dict[str, StoredSale] = {}
        self.create_calls: list[str] = []
        self.fail_create_for: set[str] = set()
        self.race_create_for: set[str] = set()
        self.fail_exists = False
        self.fail_list = False

    async def sale_exists(self, voucher_number: str) -> bool:
        if self.fail_exists:
            raise StoreError("deadline exceeded")
        return voucher_number in self.sales

    async def create_sale(
        self,
        voucher_number: str,
        sale: dict[str, Any],
        item_details: list[dict[str, Any]],
        ledger_details: list[dict[str, Any]],
    ) -> None:
        self.create_calls.append(voucher_number)
        if voucher_number in self.race_create_for or voucher_number in self.sales:
            raise VoucherExistsError(voucher_number)
        if voucher_number in self.fail_create_for:
            raise StoreError("503 Service Unavailable")
        self.sales[voucher_number] = StoredSale(
            voucher_number=voucher_number,
            fields=copy.deepcopy(sale),
            item_details=copy.deepcopy(item_details),
            ledger_details=copy.deepcopy(ledger_details),
        )

    async def list_sales(self) -> list[StoredSale]:
        if self.fail_list:
            raise StoreError("permission denied")
        return [copy.deepcopy(sale) for sale in self.sales.values()]


@pytest.fixture
def fake_store() -> InMemorySalesStore:
    """Create an empty in-memory sales store."""
    return InMemorySalesStore()


@pytest.fixture
def test_settings() -> Settings:
    """Settings with a known API key."""
    return Settings(app_env="testing", api_key=TEST_API_KEY)


@pytest.fixture
def api_headers() -> dict[str, str]:
    """Headers carrying the valid API key."""
    return {"x-api-key": TEST_API_KEY}


@pytest.fixture
async def client(
    fake_store: InMemorySalesStore, test_settings: Settings
) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with the store and settings overridden."""
    app.dependency_overrides[get_sales_store] = lambda: fake_store
    app.dependency_overrides[get_settings] = lambda: test_settings

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def sample_sale_payload() -> dict[str, Any]:
    """A single voucher as Tally exports it."""
    return {
        "VoucherNumber": "V1",
        "Date": "2024-04-01",
        "PartyName": "Acme Traders",
        "Amount": 1180.0,
        "ItemDetails": [
            {"StockItemName": "Widget", "Quantity": 10, "Rate": 100.0},
            {"StockItemName": "Gadget", "Quantity": 1, "Rate": 0},
        ],
        "LedgerDetails": [
            {"LedgerName": "Sales", "LedgerAmount": 1000.0, "LedgerValue": 1000.0},
            {"LedgerName": "CGST", "LedgerAmount": 90.0},
            {"LedgerName": "Round Off", "LedgerAmount": None, "LedgerValue": ""},
        ],
    }


@pytest.fixture
def sample_sale_record(sample_sale_payload: dict[str, Any]) -> SaleRecord:
    """The sample voucher parsed into a SaleRecord."""
    return SaleRecord.model_validate(sample_sale_payload)
