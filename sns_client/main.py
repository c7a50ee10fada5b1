"""Entry point: look up a name's availability and registration price."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from rich.console import Console
from rich.table import Table

from sns_client.api.models import AvailabilityRecord, PriceQuote
from sns_client.config import Settings, load_settings
from sns_client.errors import SNSError
from sns_client.services.domain_service import DomainService
from sns_client.services.validation import add_suffix, format_duration, time_until_expiry


def render(availability: AvailabilityRecord, quote: PriceQuote) -> Table:
    table = Table(title=add_suffix(availability.label), show_header=False)
    table.add_column("field", style="bold")
    table.add_column("value")

    if availability.available:
        table.add_row("Status", "[green]available[/green]")
    else:
        table.add_row("Status", f"[red]{availability.reason}[/red]")
        table.add_row("Owner", availability.owner or "-")
        if availability.expiry_time is not None:
            remaining = time_until_expiry(availability.expiry_time)
            table.add_row("Expires in", format_duration(remaining))

    table.add_row("Years", str(quote.years))
    table.add_row("Base price / year", f"{quote.base_price} wei")
    table.add_row("Discount", f"{quote.discount_bps / 100:g}% ({quote.discount_amount} wei)")
    table.add_row("Total", f"{quote.final_price} wei ({quote.price_in_ether} S)")
    return table


async def lookup(settings: Settings, name: str, years: int) -> Table:
    async with DomainService(settings) as service:
        availability = await service.get_availability(name)
        quote = await service.get_price(name, years)
    return render(availability, quote)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="sns-lookup", description=__doc__)
    parser.add_argument("name")
    parser.add_argument("--years", type=int, default=1)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    console = Console()
    try:
        table = asyncio.run(lookup(load_settings(), args.name, args.years))
    except SNSError as exc:
        console.print(f"[red]{exc.kind.value}:[/red] {exc.message}")
        return 1
    console.print(table)
    return 0


if __name__ == "__main__":
    sys.exit(main())
