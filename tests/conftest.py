"""Shared test fixtures."""

from __future__ import annotations

import asyncio
from collections import Counter
from typing import Any
from unittest.mock import AsyncMock

import pytest

from sns_client.api.client import ContractCallError
from sns_client.config import Settings
from sns_client.services import pricing
from sns_client.services.cache import TTLCache
from sns_client.services.domain_service import DomainService

OWNER = "0x" + "ab" * 20
OTHER = "0x" + "cd" * 20
TARGET = "0x" + "12" * 20
EXPIRY = 1_900_000_000


class FakeChain:
    """In-memory stand-in for the contract gateway that counts every call."""

    def __init__(self, account: str = OWNER) -> None:
        self.account = account
        self.calls: list[tuple[str, str, list]] = []
        self.sent: list[dict[str, Any]] = []
        self.fail_next: list[Exception] = []
        self.send_error: Exception | None = None
        self.price_override: int | None = None
        self.unavailable: set[str] = set()
        self.constants = pricing.DEFAULT_CONSTANTS

        self.tokens: dict[str, int] = {}
        self.owners: dict[int, str] = {}
        self.expiry: dict[int, int] = {}
        self.expired: set[int] = set()
        self.resolvers: dict[int, str] = {}
        self.addresses: dict[int, str] = {}
        self.contents: dict[int, str] = {}
        self.texts: dict[tuple[int, str], str] = {}
        self.reverse: dict[str, int] = {}
        self.primary: dict[str, str] = {}
        self.contenthashes: dict[int, str] = {}
        self.images: dict[int, str] = {}
        # method -> event a call waits on before returning its answer
        self.gates: dict[str, asyncio.Event] = {}

        self._handlers = {
            "available": self._available,
            "nameToTokenId": lambda label: str(self.tokens.get(label, 0)),
            "tokenIdToName": self._token_id_to_name,
            "ownerOf": lambda tid: self.owners[int(tid)],
            "getExpiryTime": lambda tid: str(self.expiry[int(tid)]),
            "isExpired": lambda tid: int(tid) in self.expired,
            "getResolver": lambda tid: self.resolvers.get(int(tid), ""),
            "resolveAddress": self._resolve_address,
            "resolveContent": lambda tid: self.contents.get(int(tid), ""),
            "resolveText": lambda tid, key: self.texts.get((int(tid), key), ""),
            "reverseRecords": lambda addr: str(self.reverse.get(addr, 0)),
            "getPrimaryName": lambda addr: self.primary.get(addr, ""),
            "contenthash": lambda tid: self.contenthashes.get(int(tid), ""),
            "customImages": lambda tid: self.images.get(int(tid), ""),
            "calculatePrice": self._price,
            "getRenewalPrice": self._price,
            "THREECHAR": lambda: str(self.constants.three_char),
            "FOURCHAR": lambda: str(self.constants.four_char),
            "FIVECHAR": lambda: str(self.constants.five_char),
            "SIXPLUSCHAR": lambda: str(self.constants.six_plus_char),
            "MAX_REGISTRATION_YEARS": lambda: str(self.constants.max_registration_years),
        }

    def add_domain(
        self,
        label: str,
        token_id: int,
        owner: str = OWNER,
        address: str | None = TARGET,
        expired: bool = False,
    ) -> None:
        self.tokens[label] = token_id
        self.owners[token_id] = owner
        self.expiry[token_id] = EXPIRY
        if expired:
            self.expired.add(token_id)
        if address:
            self.resolvers[token_id] = "0x" + "99" * 20
            self.addresses[token_id] = address

    def count(self, method: str) -> int:
        return Counter(m for _, m, _ in self.calls)[method]

    async def call(self, contract: str, method: str, args: list) -> Any:
        self.calls.append((contract, method, list(args)))
        if self.fail_next:
            raise self.fail_next.pop(0)
        # Answer from current state, then hold it until the gate opens.
        result = self._handlers[method](*args)
        if method in self.gates:
            await self.gates[method].wait()
        if isinstance(result, Exception):
            raise result
        return result

    async def send_transaction(
        self, contract: str, method: str, args: list, *, value: int = 0
    ) -> str:
        self.sent.append({"contract": contract, "method": method, "args": list(args), "value": value})
        if self.send_error is not None:
            raise self.send_error
        return f"0x{len(self.sent):064x}"

    def _available(self, label: str) -> bool:
        return label not in self.tokens and label not in self.unavailable

    def _token_id_to_name(self, tid: str) -> str:
        for label, token_id in self.tokens.items():
            if token_id == int(tid):
                return label
        return ""

    def _resolve_address(self, tid: str) -> str:
        if int(tid) not in self.addresses:
            raise ContractCallError("execution reverted: no address")
        return self.addresses[int(tid)]

    def _price(self, label: str, years: int) -> str:
        if self.price_override is not None:
            return str(self.price_override)
        return str(pricing.quote(label, years, self.constants).final_price)


@pytest.fixture
def settings() -> Settings:
    return Settings(rpc_url="http://gateway.test", account=OWNER, retry_delay=1.0)


@pytest.fixture
def chain() -> FakeChain:
    chain = FakeChain()
    chain.add_domain("alice", 7)
    return chain


@pytest.fixture
def sleep() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(settings, chain, sleep) -> DomainService:
    cache = TTLCache(default_ttl=settings.cache_ttl, max_entries=settings.cache_max_entries)
    return DomainService(settings=settings, client=chain, cache=cache, sleep=sleep)
