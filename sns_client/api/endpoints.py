"""Typed contract calls for the registry, registrar and resolver."""

from __future__ import annotations

import asyncio
from typing import Any

from sns_client.api.client import ContractTransport

REGISTRY = "registry"
REGISTRAR = "registrar"
RESOLVER = "resolver"

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def _int(value: Any) -> int:
    # uint256 values arrive as decimal or hex strings.
    if isinstance(value, str):
        return int(value, 0)
    return int(value)


def _str(value: Any) -> str:
    return value or ""


# ── Registry ──


async def available(client: ContractTransport, label: str) -> bool:
    return bool(await client.call(REGISTRY, "available", [label]))


async def name_to_token_id(client: ContractTransport, label: str) -> int:
    """Token id for a label; 0 means not registered."""
    return _int(await client.call(REGISTRY, "nameToTokenId", [label]))


async def token_id_to_name(client: ContractTransport, token_id: int) -> str:
    return _str(await client.call(REGISTRY, "tokenIdToName", [str(token_id)]))


async def owner_of(client: ContractTransport, token_id: int) -> str:
    return _str(await client.call(REGISTRY, "ownerOf", [str(token_id)]))


async def get_expiry_time(client: ContractTransport, token_id: int) -> int:
    return _int(await client.call(REGISTRY, "getExpiryTime", [str(token_id)]))


async def is_expired(client: ContractTransport, token_id: int) -> bool:
    return bool(await client.call(REGISTRY, "isExpired", [str(token_id)]))


async def get_resolver(client: ContractTransport, token_id: int) -> str:
    return _str(await client.call(REGISTRY, "getResolver", [str(token_id)]))


async def custom_image(client: ContractTransport, token_id: int) -> str:
    return _str(await client.call(REGISTRY, "customImages", [str(token_id)]))


async def set_custom_image(client: ContractTransport, token_id: int, uri: str) -> str:
    return await client.send_transaction(REGISTRY, "setCustomImage", [str(token_id), uri])


async def clear_custom_image(client: ContractTransport, token_id: int) -> str:
    return await client.send_transaction(REGISTRY, "clearCustomImage", [str(token_id)])


async def get_ownership(client: ContractTransport, token_id: int) -> tuple[str, int, bool]:
    """Owner, expiry time and expired flag fetched concurrently."""
    owner, expiry, expired = await asyncio.gather(
        owner_of(client, token_id),
        get_expiry_time(client, token_id),
        is_expired(client, token_id),
    )
    return owner, expiry, expired


# ── Registrar ──


async def calculate_price(client: ContractTransport, label: str, years: int) -> int:
    return _int(await client.call(REGISTRAR, "calculatePrice", [label, years]))


async def get_renewal_price(client: ContractTransport, label: str, years: int) -> int:
    return _int(await client.call(REGISTRAR, "getRenewalPrice", [label, years]))


async def get_pricing_constants(client: ContractTransport) -> dict[str, int]:
    names = ["THREECHAR", "FOURCHAR", "FIVECHAR", "SIXPLUSCHAR", "MAX_REGISTRATION_YEARS"]
    values = await asyncio.gather(*[client.call(REGISTRAR, n, []) for n in names])
    return {n: _int(v) for n, v in zip(names, values)}


async def register(client: ContractTransport, label: str, years: int, value: int) -> str:
    return await client.send_transaction(REGISTRAR, "register", [label, years], value=value)


async def renew(client: ContractTransport, label: str, years: int, value: int) -> str:
    return await client.send_transaction(REGISTRAR, "renew", [label, years], value=value)


async def register_bulk(
    client: ContractTransport, labels: list[str], years: list[int], value: int
) -> str:
    """One transaction for many names; ``years`` is parallel to ``labels``."""
    return await client.send_transaction(REGISTRAR, "registerBulk", [labels, years], value=value)


async def renew_bulk(
    client: ContractTransport, labels: list[str], years: list[int], value: int
) -> str:
    return await client.send_transaction(REGISTRAR, "renewBulk", [labels, years], value=value)


# ── Resolver ──


async def resolve_address(client: ContractTransport, token_id: int) -> str:
    return _str(await client.call(RESOLVER, "resolveAddress", [str(token_id)]))


async def resolve_content(client: ContractTransport, token_id: int) -> str:
    return _str(await client.call(RESOLVER, "resolveContent", [str(token_id)]))


async def resolve_text(client: ContractTransport, token_id: int, key: str) -> str:
    return _str(await client.call(RESOLVER, "resolveText", [str(token_id), key]))


async def resolve_contenthash(client: ContractTransport, token_id: int) -> str:
    return _str(await client.call(RESOLVER, "contenthash", [str(token_id)]))


async def primary_name(client: ContractTransport, address: str) -> str:
    return _str(await client.call(RESOLVER, "getPrimaryName", [address]))


async def reverse_record(client: ContractTransport, address: str) -> int:
    return _int(await client.call(RESOLVER, "reverseRecords", [address]))


async def set_address(client: ContractTransport, token_id: int, address: str) -> str:
    return await client.send_transaction(RESOLVER, "setAddress", [str(token_id), address])


async def set_content(client: ContractTransport, token_id: int, content: str) -> str:
    return await client.send_transaction(RESOLVER, "setContent", [str(token_id), content])


async def set_text(client: ContractTransport, token_id: int, key: str, value: str) -> str:
    return await client.send_transaction(RESOLVER, "setText", [str(token_id), key, value])


async def set_reverse(client: ContractTransport, token_id: int) -> str:
    return await client.send_transaction(RESOLVER, "setReverse", [str(token_id)])


async def set_text_batch(
    client: ContractTransport, token_id: int, keys: list[str], values: list[str]
) -> str:
    return await client.send_transaction(RESOLVER, "setTextBatch", [str(token_id), keys, values])


async def set_contenthash(client: ContractTransport, token_id: int, contenthash: str) -> str:
    return await client.send_transaction(RESOLVER, "setContenthash", [str(token_id), contenthash])


async def set_primary_name(client: ContractTransport, token_id: int) -> str:
    return await client.send_transaction(RESOLVER, "setPrimaryName", [str(token_id)])


async def clear_primary_name(client: ContractTransport) -> str:
    return await client.send_transaction(RESOLVER, "clearPrimaryName", [])
