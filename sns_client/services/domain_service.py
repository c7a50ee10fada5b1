"""Orchestrator: validate input, read through the cache, submit writes, invalidate."""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, Awaitable, Callable, Mapping, Sequence, TypeVar

from sns_client.api import endpoints
from sns_client.api.client import ContractCallError, ContractClient, ContractTransport
from sns_client.api.endpoints import ZERO_ADDRESS
from sns_client.api.models import (
    AvailabilityRecord,
    BatchItem,
    BatchResult,
    BulkPriceQuote,
    DomainRecord,
    PriceQuote,
    ResolutionRecord,
    ReverseResolutionRecord,
    TransactionReceipt,
)
from sns_client.config import Settings
from sns_client.errors import (
    ErrorKind,
    SNSError,
    expired,
    not_found,
    translate_remote_error,
    validation_error,
)
from sns_client.services import pricing
from sns_client.services.cache import TTLCache
from sns_client.services.retry import invoke
from sns_client.services.validation import (
    add_suffix,
    ensure_valid,
    is_valid_hex,
    normalize,
    require_label,
    validate_address,
    validate_text_key,
    validate_years,
)

log = logging.getLogger(__name__)

T = TypeVar("T")

# Cache kinds keyed by address rather than by label.
ADDRESS_KINDS = ("reverse", "primary")
QUOTE_KINDS = ("pricing", "renewal")
SOCIAL_KEYS = ("twitter", "github", "discord", "telegram")


def cache_key(kind: str, label: str, *extra: Any) -> str:
    return ":".join([kind, label, *(str(e) for e in extra)])


def _kind(key: str) -> str:
    return key.split(":", 1)[0]


def _label(key: str) -> str:
    parts = key.split(":", 2)
    return parts[1] if len(parts) > 1 else ""


class DomainService:
    """Domain-level API over the registry, registrar and resolver contracts."""

    def __init__(
        self,
        settings: Settings,
        client: ContractTransport | None = None,
        cache: TTLCache | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.settings = settings
        if client is None:
            client = ContractClient(
                settings.rpc_url,
                settings.contracts,
                account=settings.account,
                timeout=settings.request_timeout,
            )
        if cache is None:
            cache = TTLCache(
                default_ttl=settings.cache_ttl,
                max_entries=settings.cache_max_entries,
            )
        self.client = client
        self.cache = cache
        self.constants = pricing.DEFAULT_CONSTANTS
        self.anomaly_count = 0
        self._sleep = sleep
        self._pending: dict[str, asyncio.Task] = {}

    async def __aenter__(self) -> DomainService:
        self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def start(self) -> None:
        """Start the background cache sweep. Needs a running event loop."""
        if self.settings.cache_enabled:
            self.cache.start_sweeper(self.settings.cache_sweep_interval)

    async def close(self) -> None:
        await self.cache.close()
        close = getattr(self.client, "close", None)
        if close is not None:
            await close()

    # ── Plumbing ──

    async def _remote(self, label: str, action: str, operation: Callable[[], Awaitable[T]]) -> T:
        """Retry a read and translate whatever finally escapes. Reverts are not retried."""
        try:
            return await invoke(
                operation,
                self.settings.retry_attempts,
                self.settings.retry_delay,
                abort_on=(SNSError, ContractCallError),
                sleep=self._sleep,
            )
        except SNSError:
            raise
        except Exception as exc:
            raise translate_remote_error(exc, label, action) from exc

    async def _read(self, key: str, ttl: float, fetch: Callable[[], Awaitable[T]]) -> T:
        """Read-through lookup. Concurrent misses on one key share a fetch."""
        if self.settings.cache_enabled:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch_and_store(key, ttl, fetch))
            self._pending[key] = task
            task.add_done_callback(functools.partial(self._forget, key))
        return await asyncio.shield(task)

    async def _fetch_and_store(self, key: str, ttl: float, fetch: Callable[[], Awaitable[T]]) -> T:
        value = await fetch()
        # A write during the fetch detaches this task; its result is pre-write.
        if self.settings.cache_enabled and self._pending.get(key) is asyncio.current_task():
            self.cache.set(key, value, ttl)
        return value

    def _forget(self, key: str, task: asyncio.Task) -> None:
        if self._pending.get(key) is task:
            del self._pending[key]

    def _detach(self, matches: Callable[[str], bool]) -> None:
        """Forget in-flight fetches so later reads start fresh ones."""
        for key in [k for k in self._pending if matches(k)]:
            del self._pending[key]

    def _check_years(self, years: int) -> None:
        ensure_valid(validate_years(years, self.constants.max_registration_years), "years")

    async def _token_id(self, label: str) -> int:
        token_id = await endpoints.name_to_token_id(self.client, label)
        if token_id == 0:
            raise not_found(label)
        return token_id

    # ── Availability & pricing ──

    async def get_availability(self, name: str) -> AvailabilityRecord:
        label = require_label(name)
        return await self._read(
            cache_key("availability", label),
            self.settings.availability_ttl,
            lambda: self._remote(label, "check availability for", lambda: self._fetch_availability(label)),
        )

    async def is_available(self, name: str) -> bool:
        return (await self.get_availability(name)).available

    async def _fetch_availability(self, label: str) -> AvailabilityRecord:
        if await endpoints.available(self.client, label):
            return AvailabilityRecord(label=label, available=True)

        token_id = await endpoints.name_to_token_id(self.client, label)
        if token_id == 0:
            # Inconsistent chain answer: keep treating it as free, but flag it.
            self.anomaly_count += 1
            log.warning(
                "Registry reports '%s' unavailable but has no token for it; treating as available",
                label,
            )
            return AvailabilityRecord(label=label, available=True, anomaly=True)

        owner, expiry_time, is_expired = await endpoints.get_ownership(self.client, token_id)
        return AvailabilityRecord(
            label=label,
            available=False,
            reason="expired" if is_expired else "taken",
            owner=owner,
            expiry_time=expiry_time,
        )

    async def get_price(self, name: str, years: int = 1) -> PriceQuote:
        label = require_label(name)
        self._check_years(years)
        return await self._read(
            cache_key("pricing", label, years),
            self.settings.pricing_ttl,
            lambda: self._remote(
                label, "get price for",
                lambda: self._fetch_quote(label, years, endpoints.calculate_price),
            ),
        )

    async def get_renewal_price(self, name: str, years: int) -> PriceQuote:
        label = require_label(name)
        self._check_years(years)
        return await self._read(
            cache_key("renewal", label, years),
            self.settings.pricing_ttl,
            lambda: self._remote(
                label, "get renewal price for",
                lambda: self._fetch_quote(label, years, endpoints.get_renewal_price),
            ),
        )

    async def _fetch_quote(
        self,
        label: str,
        years: int,
        price_call: Callable[[ContractTransport, str, int], Awaitable[int]],
    ) -> PriceQuote:
        on_chain = await price_call(self.client, label, years)
        quote = pricing.quote(label, years, self.constants)
        if on_chain != quote.final_price:
            # The chain decides what a transaction must carry.
            log.warning(
                "Price drift for '%s' (%d years): chain %d wei, local %d wei",
                label, years, on_chain, quote.final_price,
            )
            return quote.model_copy(update={
                "final_price": on_chain,
                "price_in_ether": pricing.wei_to_ether(on_chain),
            })
        return quote

    async def get_pricing_constants(self) -> pricing.PricingConstants:
        """Tier prices as deployed; later quotes use them."""

        async def fetch() -> pricing.PricingConstants:
            raw = await endpoints.get_pricing_constants(self.client)
            return pricing.PricingConstants(
                three_char=raw["THREECHAR"],
                four_char=raw["FOURCHAR"],
                five_char=raw["FIVECHAR"],
                six_plus_char=raw["SIXPLUSCHAR"],
                max_registration_years=raw["MAX_REGISTRATION_YEARS"],
            )

        constants = await self._read(
            "constants:registrar",
            self.settings.pricing_ttl,
            lambda: self._remote("registrar", "get pricing constants from", fetch),
        )
        if constants != self.constants:
            self.constants = constants
            dropped = self._drop_quotes()
            log.info("Pricing constants changed, dropped %d cached quotes", dropped)
        return self.constants

    # ── Resolution ──

    async def resolve(self, name: str) -> str:
        return (await self.resolve_with_details(name)).address

    async def resolve_with_details(self, name: str) -> ResolutionRecord:
        label = require_label(name)
        return await self._read(
            cache_key("resolution", label),
            self.settings.cache_ttl,
            lambda: self._remote(label, "resolve domain", lambda: self._fetch_resolution(label)),
        )

    async def _fetch_resolution(self, label: str) -> ResolutionRecord:
        token_id = await self._token_id(label)
        expiry_time = await endpoints.get_expiry_time(self.client, token_id)
        if await endpoints.is_expired(self.client, token_id):
            raise expired(label, expiry_time)

        try:
            address = await endpoints.resolve_address(self.client, token_id)
        except ContractCallError:
            address = ""
        if not address or address == ZERO_ADDRESS:
            raise not_found(label, "no address record")

        return ResolutionRecord(
            name=add_suffix(label),
            token_id=str(token_id),
            address=address,
            expired=False,
            expiry_time=expiry_time,
        )

    async def reverse_resolve(self, address: str) -> str:
        return (await self.reverse_resolve_with_details(address)).name

    async def reverse_resolve_with_details(self, address: str) -> ReverseResolutionRecord:
        ensure_valid(validate_address(address), "address")
        addr = address.lower()
        return await self._read(
            cache_key("reverse", addr),
            self.settings.cache_ttl,
            lambda: self._remote(addr, "reverse resolve address", lambda: self._fetch_reverse(addr)),
        )

    async def _fetch_reverse(self, addr: str) -> ReverseResolutionRecord:
        missing = SNSError(
            ErrorKind.NOT_FOUND,
            f"No reverse record found for address {addr}",
            {"address": addr},
        )
        try:
            token_id = await endpoints.reverse_record(self.client, addr)
        except ContractCallError:
            raise missing from None
        if token_id == 0:
            raise missing

        name = await endpoints.token_id_to_name(self.client, token_id)
        if not name:
            raise missing
        expiry_time = await endpoints.get_expiry_time(self.client, token_id)
        is_expired = await endpoints.is_expired(self.client, token_id)
        return ReverseResolutionRecord(
            address=addr,
            name=add_suffix(name),
            token_id=str(token_id),
            expired=is_expired,
            expiry_time=expiry_time,
        )

    async def resolve_batch(self, names: list[str], chunk_size: int = 10) -> BatchResult[ResolutionRecord]:
        return await self._batch(names, self.resolve_with_details, chunk_size)

    async def reverse_resolve_batch(
        self, addresses: list[str], chunk_size: int = 10
    ) -> BatchResult[ReverseResolutionRecord]:
        return await self._batch(addresses, self.reverse_resolve_with_details, chunk_size)

    @staticmethod
    async def _batch(
        inputs: list[str],
        lookup: Callable[[str], Awaitable[Any]],
        chunk_size: int,
    ) -> BatchResult:
        if chunk_size < 1:
            raise ValueError("chunk_size must be at least 1")
        batch = BatchResult()
        for start in range(0, len(inputs), chunk_size):
            chunk = inputs[start:start + chunk_size]
            results = await asyncio.gather(*[lookup(i) for i in chunk], return_exceptions=True)
            for item, result in zip(chunk, results):
                if isinstance(result, Exception):
                    batch.failed.append(BatchItem(input=item, error=str(result)))
                elif isinstance(result, BaseException):
                    raise result
                else:
                    batch.successful.append(BatchItem(input=item, result=result))
        return batch

    # ── Ownership & records ──

    async def get_token_id(self, name: str) -> int:
        label = require_label(name)
        return await self._read(
            cache_key("token", label),
            self.settings.cache_ttl,
            lambda: self._remote(label, "get token ID for", lambda: self._token_id(label)),
        )

    async def exists(self, name: str) -> bool:
        label = require_label(name)

        async def fetch() -> bool:
            return await endpoints.name_to_token_id(self.client, label) != 0

        return await self._remote(label, "check existence of", fetch)

    async def get_owner(self, name: str) -> str:
        label = require_label(name)

        async def fetch() -> str:
            return await endpoints.owner_of(self.client, await self._token_id(label))

        return await self._read(
            cache_key("owner", label),
            self.settings.cache_ttl,
            lambda: self._remote(label, "get owner for", fetch),
        )

    async def get_expiry_time(self, name: str) -> int:
        label = require_label(name)

        async def fetch() -> int:
            return await endpoints.get_expiry_time(self.client, await self._token_id(label))

        return await self._remote(label, "get expiry time for", fetch)

    async def is_expired(self, name: str) -> bool:
        label = require_label(name)

        async def fetch() -> bool:
            return await endpoints.is_expired(self.client, await self._token_id(label))

        return await self._remote(label, "check expiry for", fetch)

    async def get_domain_info(self, name: str) -> DomainRecord:
        label = require_label(name)
        return await self._read(
            cache_key("record", label),
            self.settings.cache_ttl,
            lambda: self._remote(label, "get domain record for", lambda: self._fetch_record(label)),
        )

    async def _fetch_record(self, label: str) -> DomainRecord:
        token_id = await self._token_id(label)
        owner, expiry_time, is_expired = await endpoints.get_ownership(self.client, token_id)
        resolver = await endpoints.get_resolver(self.client, token_id)

        address = content = ""
        if resolver and resolver != ZERO_ADDRESS:
            results = await asyncio.gather(
                endpoints.resolve_address(self.client, token_id),
                endpoints.resolve_content(self.client, token_id),
                return_exceptions=True,
            )
            for result in results:
                # Unset records revert; anything else is a real failure.
                if isinstance(result, BaseException) and not isinstance(result, ContractCallError):
                    raise result
            address, content = (r if isinstance(r, str) else "" for r in results)

        return DomainRecord(
            name=add_suffix(label),
            token_id=str(token_id),
            owner=owner,
            resolver=resolver,
            address=address or None,
            content=content or None,
            expiry_time=expiry_time,
            expired=is_expired,
        )

    async def _fetch_live_record(self, label: str, fetch: Callable[[int], Awaitable[str]]) -> str:
        token_id = await self._token_id(label)
        if await endpoints.is_expired(self.client, token_id):
            raise expired(label, await endpoints.get_expiry_time(self.client, token_id))
        return await fetch(token_id)

    async def get_text(self, name: str, key: str) -> str:
        label = require_label(name)
        ensure_valid(validate_text_key(key), "text record key")
        return await self._read(
            cache_key("text", label, key),
            self.settings.cache_ttl,
            lambda: self._remote(
                label, f"resolve text record {key} for",
                lambda: self._fetch_live_record(
                    label, lambda tid: endpoints.resolve_text(self.client, tid, key)
                ),
            ),
        )

    async def get_content(self, name: str) -> str:
        label = require_label(name)
        return await self._read(
            cache_key("content", label),
            self.settings.cache_ttl,
            lambda: self._remote(
                label, "resolve content for",
                lambda: self._fetch_live_record(
                    label, lambda tid: endpoints.resolve_content(self.client, tid)
                ),
            ),
        )

    async def get_texts(self, name: str, keys: Sequence[str]) -> dict[str, str]:
        """Several text records at once; each key is cached on its own."""
        label = require_label(name)
        for key in keys:
            ensure_valid(validate_text_key(key), "text record key")
        values = await asyncio.gather(*[self.get_text(label, key) for key in keys])
        return dict(zip(keys, values))

    async def get_socials(self, name: str) -> dict[str, str]:
        return await self.get_texts(name, SOCIAL_KEYS)

    async def get_contenthash(self, name: str) -> str:
        label = require_label(name)
        return await self._read(
            cache_key("contenthash", label),
            self.settings.cache_ttl,
            lambda: self._remote(
                label, "resolve contenthash for",
                lambda: self._fetch_live_record(
                    label, lambda tid: endpoints.resolve_contenthash(self.client, tid)
                ),
            ),
        )

    async def get_custom_image(self, name: str) -> str:
        label = require_label(name)

        async def fetch() -> str:
            return await endpoints.custom_image(self.client, await self._token_id(label))

        return await self._read(
            cache_key("image", label),
            self.settings.cache_ttl,
            lambda: self._remote(label, "get custom image for", fetch),
        )

    async def get_primary_name(self, address: str) -> str:
        ensure_valid(validate_address(address), "address")
        addr = address.lower()

        async def fetch() -> str:
            name = await endpoints.primary_name(self.client, addr)
            if not name:
                raise SNSError(
                    ErrorKind.NOT_FOUND,
                    f"No primary name set for address {addr}",
                    {"address": addr},
                )
            return add_suffix(name)

        return await self._read(
            cache_key("primary", addr),
            self.settings.cache_ttl,
            lambda: self._remote(addr, "get primary name for", fetch),
        )

    # ── Bulk pricing ──

    def _bulk_entries(self, entries: Sequence[tuple[str, int]]) -> list[tuple[str, int]]:
        if not entries:
            raise validation_error("bulk request", ["At least one domain is required"])
        parsed = []
        for name, years in entries:
            label = require_label(name)
            self._check_years(years)
            parsed.append((label, years))
        labels = [label for label, _ in parsed]
        duplicates = sorted({label for label in labels if labels.count(label) > 1})
        if duplicates:
            raise validation_error(
                "bulk request", [f"Duplicate domain: {add_suffix(d)}" for d in duplicates]
            )
        return parsed

    async def _bulk_quote(
        self,
        parsed: list[tuple[str, int]],
        price: Callable[[str, int], Awaitable[PriceQuote]],
    ) -> BulkPriceQuote:
        quotes = await asyncio.gather(*[price(label, years) for label, years in parsed])
        total = sum(q.final_price for q in quotes)
        return BulkPriceQuote(
            total_price=total,
            price_in_ether=pricing.wei_to_ether(total),
            breakdown=list(quotes),
        )

    async def get_bulk_price(self, entries: Sequence[tuple[str, int]]) -> BulkPriceQuote:
        """Summed registration price for ``(name, years)`` pairs."""
        return await self._bulk_quote(self._bulk_entries(entries), self.get_price)

    # ── Writes ──

    async def _submit(
        self, labels: Sequence[str], action: str, operation: Callable[[], Awaitable[str]]
    ) -> TransactionReceipt:
        """Send one transaction (at most once) and drop the touched domains' cache."""
        subject = ", ".join(labels) or getattr(self.client, "account", "")
        try:
            tx_hash = await invoke(operation, idempotent=False)
        except SNSError:
            raise
        except Exception as exc:
            raise translate_remote_error(exc, subject, action) from exc
        removed = sum(self.invalidate_domain(label) for label in labels)
        log.info("%s '%s' submitted as %s (%d cache entries dropped)", action, subject, tx_hash, removed)
        return TransactionReceipt(transaction_id=tx_hash, method=action, labels=list(labels))

    def _require_account(self) -> str:
        account = getattr(self.client, "account", "")
        if not account:
            raise SNSError(ErrorKind.CONFIGURATION, "An account is required to send transactions")
        return account

    async def _require_owner(self, label: str, action: str) -> int:
        """Token id of ``label`` once the configured account is confirmed as owner."""
        account = self._require_account()

        async def fetch() -> tuple[int, str]:
            token_id = await self._token_id(label)
            return token_id, await endpoints.owner_of(self.client, token_id)

        # Always ask the chain; a cached owner may predate a transfer.
        token_id, owner = await self._remote(label, f"{action} for", fetch)
        if owner.lower() != account.lower():
            raise SNSError(
                ErrorKind.PERMISSION,
                f"Only the domain owner can {action}. Owner: {owner}, caller: {account}",
                {"domain": label, "owner": owner, "account": account},
            )
        return token_id

    def _drop_caller_entries(self, *kinds: str) -> None:
        """Forget what the configured account's address resolved to."""
        keys = {cache_key(kind, self.client.account.lower()) for kind in kinds}
        self._detach(keys.__contains__)
        for key in keys:
            self.cache.delete(key)

    async def register(self, name: str, years: int) -> TransactionReceipt:
        label = require_label(name)
        self._check_years(years)
        quote = await self.get_price(label, years)
        return await self._submit(
            [label], "register",
            lambda: endpoints.register(self.client, label, years, quote.final_price),
        )

    async def renew(self, name: str, years: int) -> TransactionReceipt:
        label = require_label(name)
        self._check_years(years)
        quote = await self.get_renewal_price(label, years)
        return await self._submit(
            [label], "renew",
            lambda: endpoints.renew(self.client, label, years, quote.final_price),
        )

    async def register_bulk(self, entries: Sequence[tuple[str, int]]) -> TransactionReceipt:
        parsed = self._bulk_entries(entries)
        quote = await self._bulk_quote(parsed, self.get_price)
        labels = [label for label, _ in parsed]
        years = [y for _, y in parsed]
        return await self._submit(
            labels, "register bulk",
            lambda: endpoints.register_bulk(self.client, labels, years, quote.total_price),
        )

    async def renew_bulk(self, entries: Sequence[tuple[str, int]]) -> TransactionReceipt:
        parsed = self._bulk_entries(entries)
        quote = await self._bulk_quote(parsed, self.get_renewal_price)
        labels = [label for label, _ in parsed]
        years = [y for _, y in parsed]
        return await self._submit(
            labels, "renew bulk",
            lambda: endpoints.renew_bulk(self.client, labels, years, quote.total_price),
        )

    async def set_address(self, name: str, address: str) -> TransactionReceipt:
        label = require_label(name)
        ensure_valid(validate_address(address), "address")
        token_id = await self._require_owner(label, "set address")
        return await self._submit(
            [label], "set address",
            lambda: endpoints.set_address(self.client, token_id, address),
        )

    async def set_text(self, name: str, key: str, value: str) -> TransactionReceipt:
        label = require_label(name)
        ensure_valid(validate_text_key(key), "text record key")
        token_id = await self._require_owner(label, "set text records")
        return await self._submit(
            [label], "set text",
            lambda: endpoints.set_text(self.client, token_id, key, value),
        )

    async def set_text_batch(self, name: str, records: Mapping[str, str]) -> TransactionReceipt:
        label = require_label(name)
        if not records:
            raise validation_error("text records", ["At least one text record is required"])
        for key in records:
            ensure_valid(validate_text_key(key), "text record key")
        keys = list(records)
        values = [records[k] for k in keys]
        token_id = await self._require_owner(label, "set text records")
        return await self._submit(
            [label], "set text batch",
            lambda: endpoints.set_text_batch(self.client, token_id, keys, values),
        )

    async def set_content(self, name: str, content: str) -> TransactionReceipt:
        label = require_label(name)
        token_id = await self._require_owner(label, "set content")
        return await self._submit(
            [label], "set content",
            lambda: endpoints.set_content(self.client, token_id, content),
        )

    async def set_contenthash(self, name: str, contenthash: str) -> TransactionReceipt:
        label = require_label(name)
        if not isinstance(contenthash, str) or not is_valid_hex(contenthash):
            raise validation_error("contenthash", ["Contenthash must be a 0x-prefixed hex string"])
        token_id = await self._require_owner(label, "set contenthash")
        return await self._submit(
            [label], "set contenthash",
            lambda: endpoints.set_contenthash(self.client, token_id, contenthash),
        )

    async def set_custom_image(self, name: str, uri: str) -> TransactionReceipt:
        label = require_label(name)
        if not isinstance(uri, str) or not uri.strip():
            raise validation_error("image URI", ["Image URI must be a non-empty string"])
        token_id = await self._require_owner(label, "set custom image")
        return await self._submit(
            [label], "set custom image",
            lambda: endpoints.set_custom_image(self.client, token_id, uri),
        )

    async def clear_custom_image(self, name: str) -> TransactionReceipt:
        label = require_label(name)
        token_id = await self._require_owner(label, "clear custom image")
        return await self._submit(
            [label], "clear custom image",
            lambda: endpoints.clear_custom_image(self.client, token_id),
        )

    async def set_reverse(self, name: str) -> TransactionReceipt:
        label = require_label(name)
        token_id = await self._require_owner(label, "set reverse record")
        receipt = await self._submit(
            [label], "set reverse",
            lambda: endpoints.set_reverse(self.client, token_id),
        )
        self._drop_caller_entries("reverse")
        return receipt

    async def set_primary_name(self, name: str) -> TransactionReceipt:
        label = require_label(name)
        token_id = await self._require_owner(label, "set as primary name")
        receipt = await self._submit(
            [label], "set primary name",
            lambda: endpoints.set_primary_name(self.client, token_id),
        )
        self._drop_caller_entries(*ADDRESS_KINDS)
        return receipt

    async def clear_primary_name(self) -> TransactionReceipt:
        self._require_account()
        receipt = await self._submit(
            [], "clear primary name",
            lambda: endpoints.clear_primary_name(self.client),
        )
        self._drop_caller_entries(*ADDRESS_KINDS)
        return receipt

    # ── Cache management ──

    def invalidate_domain(self, name: str) -> int:
        """Drop every cached entry for a domain, across all read kinds.

        In-flight reads for the domain are detached too, as are all
        address-keyed reads, since those cannot tell yet which name they
        will return.
        """
        label = normalize(name)
        self._detach(lambda key: _kind(key) in ADDRESS_KINDS or _label(key) == label)
        removed = 0
        for key in self.cache.keys():
            if _kind(key) in ADDRESS_KINDS:
                value = self.cache.get(key)
                stale = normalize(getattr(value, "name", value)) == label
            else:
                stale = _label(key) == label
            if stale:
                self.cache.delete(key)
                removed += 1
        return removed

    def _drop_quotes(self) -> int:
        self._detach(lambda key: _kind(key) in QUOTE_KINDS)
        stale = [key for key in self.cache.keys() if _kind(key) in QUOTE_KINDS]
        for key in stale:
            self.cache.delete(key)
        return len(stale)

    def clear_cache(self) -> None:
        self.cache.clear()

    def cache_stats(self) -> dict[str, Any]:
        return self.cache.stats()
