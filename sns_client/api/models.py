"""Pydantic models for name service results."""

from __future__ import annotations

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ValidationResult(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)


class PriceQuote(BaseModel):
    """Price breakdown in wei. final_price = total_base_price - discount_amount."""

    model_config = ConfigDict(frozen=True)

    label: str
    years: int
    base_price: int  # per year
    total_base_price: int
    discount_bps: int
    discount_amount: int
    final_price: int
    price_in_ether: str = ""


class AvailabilityRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    available: bool
    reason: Literal["taken", "expired"] | None = None
    owner: str | None = None
    expiry_time: int | None = None
    anomaly: bool = False  # chain said taken but reported no token


class ResolutionRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    token_id: str
    address: str
    expired: bool = False
    expiry_time: int


class ReverseResolutionRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: str
    name: str
    token_id: str
    expired: bool
    expiry_time: int


class DomainRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    token_id: str
    owner: str
    resolver: str
    address: str | None = None
    content: str | None = None
    expiry_time: int
    expired: bool


class BulkPriceQuote(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_price: int
    price_in_ether: str
    breakdown: list[PriceQuote]


class TransactionReceipt(BaseModel):
    transaction_id: str
    method: str
    labels: list[str] = Field(default_factory=list)

    @property
    def label(self) -> str:
        return self.labels[0] if self.labels else ""


class BatchItem(BaseModel, Generic[T]):
    input: str
    result: T | None = None
    error: str | None = None


class BatchResult(BaseModel, Generic[T]):
    successful: list[BatchItem[T]] = Field(default_factory=list)
    failed: list[BatchItem[T]] = Field(default_factory=list)


class RPCRequest(BaseModel):
    """Gateway request body for a contract call or transaction."""

    contract: str
    method: str
    args: list[Any] = Field(default_factory=list)
    value: str | None = None
    sender: str | None = Field(default=None, serialization_alias="from")
