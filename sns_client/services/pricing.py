"""Registration pricing: length tiers, multi-year discounts, integer wei math.

Integer arithmetic only, matching the registrar contract: discounts floor.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from sns_client.api.models import PriceQuote

WEI_PER_ETHER = 10**18
BPS_DENOMINATOR = 10_000

DISCOUNT_BPS: dict[int, int] = {
    2: 500,   # 5%
    3: 1000,  # 10%
    4: 1500,  # 15%
    5: 2000,  # 20%
}


class PricingConstants(BaseModel):
    """Per-year base price tiers in wei, keyed by label length."""

    model_config = ConfigDict(frozen=True)

    three_char: int = 15 * WEI_PER_ETHER
    four_char: int = 10 * WEI_PER_ETHER
    five_char: int = 7_500_000_000_000_000_000
    six_plus_char: int = 5 * WEI_PER_ETHER
    max_registration_years: int = 5


DEFAULT_CONSTANTS = PricingConstants()


def base_price(label_length: int, constants: PricingConstants = DEFAULT_CONSTANTS) -> int:
    """Per-year price for a label of the given length."""
    if label_length == 3:
        return constants.three_char
    if label_length == 4:
        return constants.four_char
    if label_length == 5:
        return constants.five_char
    return constants.six_plus_char


def discount_bps(years: int) -> int:
    return DISCOUNT_BPS.get(years, 0)


def quote(
    label: str,
    years: int,
    constants: PricingConstants = DEFAULT_CONSTANTS,
) -> PriceQuote:
    """Full price breakdown for registering ``label`` for ``years``."""
    per_year = base_price(len(label), constants)
    total = per_year * years
    bps = discount_bps(years)
    discount_amount = total * bps // BPS_DENOMINATOR
    final = total - discount_amount
    return PriceQuote(
        label=label,
        years=years,
        base_price=per_year,
        total_base_price=total,
        discount_bps=bps,
        discount_amount=discount_amount,
        final_price=final,
        price_in_ether=wei_to_ether(final),
    )


def wei_to_ether(wei: int) -> str:
    """Exact decimal rendering, e.g. 13500000000000000000 -> '13.5'."""
    value = Decimal(wei) / Decimal(WEI_PER_ETHER)
    text = format(value.normalize(), "f")
    if "." not in text:
        text += ".0"
    return text


def ether_to_wei(ether: str) -> int:
    value = Decimal(ether) * WEI_PER_ETHER
    if value != value.to_integral_value():
        raise ValueError(f"{ether} has more than 18 decimal places")
    return int(value)
