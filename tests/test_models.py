"""Tests for API models."""

from __future__ import annotations

import pydantic
import pytest

from sns_client.api.models import (
    AvailabilityRecord,
    BatchItem,
    BatchResult,
    ResolutionRecord,
    RPCRequest,
)


class TestAvailabilityRecord:
    def test_defaults(self):
        record = AvailabilityRecord(label="bob", available=True)
        assert record.reason is None
        assert record.owner is None
        assert record.anomaly is False

    def test_reason_is_restricted(self):
        with pytest.raises(pydantic.ValidationError):
            AvailabilityRecord(label="bob", available=False, reason="stolen")

    def test_frozen(self):
        record = AvailabilityRecord(label="bob", available=True)
        with pytest.raises(pydantic.ValidationError):
            record.available = False


class TestBatchResult:
    def test_starts_empty(self):
        batch = BatchResult()
        assert batch.successful == []
        assert batch.failed == []

    def test_typed_items(self):
        record = ResolutionRecord(name="alice.s", token_id="7", address="0x1", expiry_time=1)
        item = BatchItem[ResolutionRecord](input="alice", result=record)
        batch = BatchResult[ResolutionRecord](successful=[item])
        assert batch.successful[0].result.address == "0x1"

    def test_failed_item_has_no_result(self):
        item = BatchItem(input="-bad", error="Invalid domain name")
        assert item.result is None


class TestRPCRequest:
    def test_sender_serializes_as_from(self):
        request = RPCRequest(contract="0xRAR", method="register", args=["alice", 1], value="5", sender="0xme")
        dumped = request.model_dump(by_alias=True, exclude_none=True)
        assert dumped["from"] == "0xme"
        assert "sender" not in dumped

    def test_call_omits_value_and_sender(self):
        request = RPCRequest(contract="0xREG", method="available", args=["bob"])
        assert request.model_dump(by_alias=True, exclude_none=True) == {
            "contract": "0xREG",
            "method": "available",
            "args": ["bob"],
        }
