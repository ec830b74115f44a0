from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

from payoutcalc import get_logger
from payoutcalc.config import CAP_TOLERANCE, MAX_PRICE
from payoutcalc.fees import compute_from_price, compute_required_price
from payoutcalc.models import (
    FeeBreakdown,
    InvalidInput,
    PackageMetrics,
    RateConfig,
    UnsolvableTarget,
    Zone,
    as_real,
)
from payoutcalc.shipping import shipping_fee_for_package

LOGGER = get_logger("calculator")


@dataclass(slots=True)
class Quote:
    chargeable_weight_kg: float
    shipping_fee: float
    breakdown: Optional[FeeBreakdown] = None
    required_price: Optional[float] = None
    error: Optional[str] = None

    @property
    def payout(self) -> Optional[float]:
        return self.breakdown.payout if self.breakdown else None

    @property
    def is_empty(self) -> bool:
        return self.breakdown is None and self.error is None


def parse_number(raw: Any, field: str) -> Optional[float]:
    """Turn form/CLI/CSV input into a float; blank means "not supplied"."""
    if raw is None:
        return None
    if isinstance(raw, str):
        text = raw.strip().replace(",", "")
        if not text:
            return None
        try:
            raw = float(text)
        except ValueError as exc:
            raise InvalidInput(field, f"expected a number, got {raw!r}") from exc
    value = as_real(raw, field, allow_none=True)
    if value is not None and math.isinf(value):
        raise InvalidInput(field, "must be finite")
    return value


def quote(
    package: PackageMetrics,
    zone: Zone | str,
    rates: RateConfig,
    *,
    price: Optional[float] = None,
    desired_payout: Optional[float] = None,
    cap_tolerance: float = CAP_TOLERANCE,
    max_price: float = MAX_PRICE,
) -> Quote:
    chargeable_kg = package.chargeable_weight_kg
    shipping = shipping_fee_for_package(package, zone)
    result = Quote(chargeable_weight_kg=chargeable_kg, shipping_fee=shipping)

    if price is not None:
        if desired_payout is not None:
            LOGGER.debug("Both price and desired payout given; using price %.2f", price)
        breakdown = compute_from_price(price, shipping, rates)
        result.breakdown = breakdown
        solved = compute_required_price(
            breakdown.payout, shipping, rates, cap_tolerance=cap_tolerance, max_price=max_price
        )
        if not isinstance(solved, UnsolvableTarget):
            result.required_price = solved.price
        return result

    if desired_payout is not None:
        solved = compute_required_price(
            desired_payout, shipping, rates, cap_tolerance=cap_tolerance, max_price=max_price
        )
        if isinstance(solved, UnsolvableTarget):
            result.error = solved.message
            return result
        result.required_price = solved.price
        result.breakdown = compute_from_price(solved.price, shipping, rates)
        return result

    return result
