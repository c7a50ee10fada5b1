"""Async httpx wrapper around the contract gateway's JSON-RPC endpoint."""

from __future__ import annotations

import itertools
from typing import Any, Protocol

import httpx

from sns_client.api.models import RPCRequest
from sns_client.errors import ErrorKind, SNSError

CALL_METHOD = "sns_call"
SEND_METHOD = "sns_sendTransaction"


class ContractCallError(Exception):
    """The gateway answered with a JSON-RPC error (usually a revert)."""

    def __init__(self, message: str, code: int | None = None, data: Any = None):
        super().__init__(message)
        self.code = code
        self.data = data


class ContractTransport(Protocol):
    """What the domain service needs from a chain connection."""

    account: str

    async def call(self, contract: str, method: str, args: list[Any]) -> Any: ...

    async def send_transaction(
        self, contract: str, method: str, args: list[Any], *, value: int = 0
    ) -> str: ...


class ContractClient:
    """Async JSON-RPC client for read calls and signed transactions.

    Contracts are addressed by role (registry, registrar, resolver); the
    gateway maps roles to deployed addresses and handles ABI encoding and
    signing for ``account``.
    """

    def __init__(
        self,
        rpc_url: str,
        contracts: dict[str, str],
        account: str = "",
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not rpc_url:
            raise SNSError(ErrorKind.CONFIGURATION, "RPC endpoint is required")
        self.rpc_url = rpc_url
        self.contracts = dict(contracts)
        self.account = account
        kwargs: dict[str, Any] = {"timeout": timeout}
        if transport is not None:
            kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**kwargs)
        self._ids = itertools.count(1)

    async def close(self) -> None:
        await self._client.aclose()

    def _address(self, contract: str) -> str:
        try:
            return self.contracts[contract]
        except KeyError:
            raise SNSError(
                ErrorKind.CONFIGURATION,
                f"No address configured for contract '{contract}'",
                {"contract": contract},
            ) from None

    async def _rpc(self, method: str, request: RPCRequest) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": [request.model_dump(by_alias=True, exclude_none=True)],
        }
        response = await self._client.post(self.rpc_url, json=payload)
        response.raise_for_status()
        body = response.json()
        error = body.get("error")
        if error:
            raise ContractCallError(
                error.get("message", "execution reverted"),
                code=error.get("code"),
                data=error.get("data"),
            )
        return body.get("result")

    async def call(self, contract: str, method: str, args: list[Any]) -> Any:
        """Read-only contract call. Safe to retry."""
        request = RPCRequest(contract=self._address(contract), method=method, args=args)
        return await self._rpc(CALL_METHOD, request)

    async def send_transaction(
        self, contract: str, method: str, args: list[Any], *, value: int = 0
    ) -> str:
        """Submit a state-changing call and return its transaction hash."""
        if not self.account:
            raise SNSError(ErrorKind.CONFIGURATION, "An account is required to send transactions")
        request = RPCRequest(
            contract=self._address(contract),
            method=method,
            args=args,
            value=str(value),
            sender=self.account,
        )
        result = await self._rpc(SEND_METHOD, request)
        if isinstance(result, dict):
            return result["transactionHash"]
        return result
