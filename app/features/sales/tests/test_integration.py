"""Integration tests against the Firestore emulator.

Run with the emulator up:
    gcloud emulators firestore start --host-port=localhost:8081
    FIRESTORE_EMULATOR_HOST=localhost:8081 pytest -m integration
"""

import os
import uuid

import pytest

from app.core.config import Settings
from app.core.firestore import create_firestore_client
from app.features.sales.schemas import SaleRecord
from app.features.sales.service import DUPLICATE_VOUCHER, ingest_sales_batch, list_sales
from app.features.sales.store import FirestoreSalesStore, VoucherExistsError

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        not os.environ.get("FIRESTORE_EMULATOR_HOST"),
        reason="FIRESTORE_EMULATOR_HOST is not set",
    ),
]


@pytest.fixture
def emulator_store() -> FirestoreSalesStore:
    """Store writing to a collection unique to this test."""
    settings = Settings(firestore_emulator_host=os.environ["FIRESTORE_EMULATOR_HOST"])
    client = create_firestore_client(settings)
    return FirestoreSalesStore(client, sales_collection=f"sales_{uuid.uuid4().hex[:12]}")


async def test_ingest_then_list(emulator_store, sample_sale_record):
    result = await ingest_sales_batch(emulator_store, [sample_sale_record])

    assert result.processed_vouchers == ["V1"]

    sales = await list_sales(emulator_store)
    assert len(sales) == 1
    assert sales[0]["VoucherNumber"] == "V1"
    assert len(sales[0]["ItemDetails"]) == 2
    assert {"LedgerName": "Round Off", "LedgerAmount": 0, "LedgerValue": 0} in sales[0][
        "LedgerDetails"
    ]


async def test_second_ingest_is_duplicate(emulator_store):
    first = SaleRecord.model_validate({"VoucherNumber": "V1", "Amount": 100})
    second = SaleRecord.model_validate({"VoucherNumber": "V1", "Amount": 999})

    await ingest_sales_batch(emulator_store, [first])
    result = await ingest_sales_batch(emulator_store, [second])

    assert result.errors[0].error_code == DUPLICATE_VOUCHER
    sales = await list_sales(emulator_store)
    assert sales[0]["Amount"] == 100


async def test_create_is_atomic_create_if_absent(emulator_store):
    """Creating over an existing parent fails without adding detail documents."""
    await emulator_store.create_sale("V1", {"VoucherNumber": "V1"}, [{"Item": "A"}], [])

    with pytest.raises(VoucherExistsError):
        await emulator_store.create_sale("V1", {"VoucherNumber": "V1"}, [{"Item": "B"}], [])

    sales = await emulator_store.list_sales()
    assert sales[0].item_details == [{"Item": "A"}]
