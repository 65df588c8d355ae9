"""Unit tests for sales schemas."""

import pytest
from pydantic import ValidationError

from app.features.sales.schemas import (
    IngestSaleError,
    SaleIngestRequest,
    SaleIngestResponse,
    SaleRecord,
)


class TestSaleRecord:
    """Tests for SaleRecord schema."""

    def test_extra_fields_kept(self, sample_sale_record):
        """Top-level Tally fields survive as extras."""
        dumped = sample_sale_record.model_dump()

        assert dumped["VoucherNumber"] == "V1"
        assert dumped["PartyName"] == "Acme Traders"
        assert dumped["Amount"] == 1180.0
        assert dumped["Date"] == "2024-04-01"

    def test_numeric_voucher_number_coerced(self):
        """A numeric VoucherNumber becomes a string document id."""
        record = SaleRecord.model_validate({"VoucherNumber": 1042})
        assert record.VoucherNumber == "1042"

    def test_missing_voucher_number_allowed(self):
        """Missing VoucherNumber is a per-voucher error, not a schema error."""
        record = SaleRecord.model_validate({"PartyName": "Walk-in"})
        assert record.VoucherNumber is None

    def test_null_detail_lists_allowed(self):
        """Null detail lists are accepted and treated as empty downstream."""
        record = SaleRecord.model_validate(
            {"VoucherNumber": "V1", "ItemDetails": None, "LedgerDetails": None}
        )
        assert record.ItemDetails is None
        assert record.LedgerDetails is None

    def test_non_object_item_rejected(self):
        """Item lines must be objects."""
        with pytest.raises(ValidationError) as exc_info:
            SaleRecord.model_validate({"VoucherNumber": "V1", "ItemDetails": ["Widget"]})
        assert "ItemDetails" in str(exc_info.value)


class TestSaleIngestRequest:
    """Tests for SaleIngestRequest schema."""

    def test_valid_request(self, sample_sale_payload):
        """Test valid request creation."""
        request = SaleIngestRequest.model_validate({"Sale": [sample_sale_payload]})
        assert request.Sale == [sample_sale_payload]

    def test_missing_sale_key_rejected(self):
        """Body without the Sale key is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            SaleIngestRequest.model_validate({"Sales": []})
        assert "Sale" in str(exc_info.value)

    def test_empty_sale_list_rejected(self):
        """An empty batch is rejected."""
        with pytest.raises(ValidationError):
            SaleIngestRequest.model_validate({"Sale": []})

    def test_non_list_sale_rejected(self):
        """Sale must be a list."""
        with pytest.raises(ValidationError):
            SaleIngestRequest.model_validate({"Sale": {"VoucherNumber": "V1"}})

    def test_elements_not_validated_at_request_level(self):
        """Badly shaped vouchers pass here and are rejected one by one on ingest."""
        request = SaleIngestRequest.model_validate(
            {"Sale": ["V1", {"VoucherNumber": "V2", "ItemDetails": "not-a-list"}]}
        )
        assert len(request.Sale) == 2


class TestSaleIngestResponse:
    """Tests for SaleIngestResponse schema."""

    def test_errors_default_empty(self):
        """A clean response carries an empty error list."""
        response = SaleIngestResponse(
            message="Processed 1 sales.",
            processed_vouchers=["V1"],
            processed_count=1,
            error_count=0,
            total_received=1,
            duration_ms=1.5,
        )
        assert response.errors == []

    def test_error_detail_serialized(self):
        """Error details serialize with their codes."""
        response = SaleIngestResponse(
            message="Processed 0 sales with 1 errors.",
            processed_count=0,
            error_count=1,
            total_received=1,
            errors=[
                IngestSaleError(
                    row_index=0,
                    error_code="MISSING_VOUCHER_NUMBER",
                    error_message="Missing VoucherNumber. Skipped.",
                )
            ],
            duration_ms=0.1,
        )
        data = response.model_dump()
        assert data["errors"][0]["voucher_number"] is None
        assert data["errors"][0]["error_code"] == "MISSING_VOUCHER_NUMBER"
