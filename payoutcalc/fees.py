from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

from payoutcalc import get_logger
from payoutcalc.config import CAP_TOLERANCE, COLLECTION_CAP, MAX_PRICE
from payoutcalc.models import (
    ClosingFeeSlab,
    FeeBreakdown,
    InvalidInput,
    RateConfig,
    RequiredPrice,
    UnsolvableTarget,
    as_real,
)

LOGGER = get_logger("fees")

CLOSING_FEE_SLABS: tuple[ClosingFeeSlab, ...] = (
    ClosingFeeSlab(lower=0.0, upper=250.0, fee=5.0),
    ClosingFeeSlab(lower=250.0, upper=500.0, fee=10.0),
    ClosingFeeSlab(lower=500.0, upper=1000.0, fee=15.0),
    ClosingFeeSlab(lower=1000.0, upper=math.inf, fee=20.0),
)

UNCAPPED = "uncapped"
CAPPED = "capped"


def closing_fee(price: Any) -> float:
    try:
        value = as_real(price, "price", allow_none=True)
    except InvalidInput:
        return 0.0
    if value is None or value <= 0:
        return 0.0
    for slab in CLOSING_FEE_SLABS:
        if slab.contains(value):
            return slab.fee
    return 0.0


def collection_fee_raw(price: float, shipping_fee: float, rates: RateConfig) -> float:
    base = price + shipping_fee if rates.include_shipping_in_collection else price
    return base * rates.collection_rate


def compute_from_price(price: float, shipping_fee: float, rates: RateConfig) -> FeeBreakdown:
    """Deductions and net payout for a sale at ``price``.

    The collection fee is capped before GST is applied; a negative payout is
    returned as-is.
    """
    price = as_real(price, "price")
    shipping_fee = as_real(shipping_fee, "shipping_fee")

    commission = price * rates.commission_rate
    collection_raw = collection_fee_raw(price, shipping_fee, rates)
    collection_capped = min(collection_raw, COLLECTION_CAP)
    closing = closing_fee(price)
    fees_before_gst = commission + collection_capped + closing + shipping_fee
    gst = fees_before_gst * rates.gst_rate
    total_deductions = fees_before_gst + gst

    return FeeBreakdown(
        price=price,
        shipping_fee=shipping_fee,
        commission=commission,
        collection_raw=collection_raw,
        collection_capped=collection_capped,
        closing_fee=closing,
        fees_before_gst=fees_before_gst,
        gst=gst,
        total_deductions=total_deductions,
        payout=price - total_deductions,
    )


@dataclass(frozen=True, slots=True)
class SolveBranch:
    """One linear piece of the price -> payout map: a closing-fee slab and a collection regime."""

    slab: ClosingFeeSlab
    regime: str

    def coefficients(self, shipping_fee: float, rates: RateConfig) -> tuple[float, float]:
        """Return ``(constant, rate)`` with ``fees_before_gst = rate * price + constant``."""
        if self.regime == CAPPED:
            return COLLECTION_CAP + self.slab.fee + shipping_fee, rates.commission_rate
        constant = self.slab.fee + shipping_fee
        if rates.include_shipping_in_collection:
            constant += rates.collection_rate * shipping_fee
        return constant, rates.commission_rate + rates.collection_rate

    def solve(self, desired_payout: float, shipping_fee: float, rates: RateConfig) -> Optional[float]:
        constant, rate = self.coefficients(shipping_fee, rates)
        denominator = 1.0 - rates.gst_multiplier * rate
        if denominator <= 0:
            return None
        return (desired_payout + rates.gst_multiplier * constant) / denominator

    def in_range(self, price: float, max_price: float = MAX_PRICE) -> bool:
        return self.slab.lower < price <= min(self.slab.upper, max_price)

    def regime_holds(self, collection_raw: float, cap_tolerance: float = CAP_TOLERANCE) -> bool:
        if self.regime == CAPPED:
            return collection_raw >= COLLECTION_CAP - cap_tolerance
        return collection_raw <= COLLECTION_CAP


# Search order: slabs ascending, uncapped before capped within a slab.
SOLVE_BRANCHES: tuple[SolveBranch, ...] = tuple(
    SolveBranch(slab=slab, regime=regime)
    for slab in CLOSING_FEE_SLABS
    for regime in (UNCAPPED, CAPPED)
)


def compute_required_price(
    desired_payout: float,
    shipping_fee: float,
    rates: RateConfig,
    *,
    cap_tolerance: float = CAP_TOLERANCE,
    max_price: float = MAX_PRICE,
    branches: tuple[SolveBranch, ...] = SOLVE_BRANCHES,
) -> RequiredPrice | UnsolvableTarget:
    desired = as_real(desired_payout, "desired_payout")
    shipping_fee = as_real(shipping_fee, "shipping_fee")

    if rates.commission_rate + rates.collection_rate >= 1:
        LOGGER.info(
            "Commission and collection take %.1f%% of the price; no price can reach a payout.",
            (rates.commission_rate + rates.collection_rate) * 100,
        )
        return UnsolvableTarget(
            "Commission and collection fees take 100% or more of the selling price. "
            "Lower the rates to solve for a price."
        )

    for branch in branches:
        candidate = branch.solve(desired, shipping_fee, rates)
        if candidate is None:
            LOGGER.debug("%s/%s: fees exceed the price, skipped", branch.slab.fee, branch.regime)
            continue
        if not branch.in_range(candidate, max_price):
            LOGGER.debug(
                "%s/%s: candidate %.4f outside (%s, %s]",
                branch.slab.fee,
                branch.regime,
                candidate,
                branch.slab.lower,
                branch.slab.upper,
            )
            continue
        collection_raw = collection_fee_raw(candidate, shipping_fee, rates)
        if not branch.regime_holds(collection_raw, cap_tolerance):
            LOGGER.debug(
                "%s/%s: collection %.4f inconsistent with regime",
                branch.slab.fee,
                branch.regime,
                collection_raw,
            )
            continue
        return RequiredPrice(price=candidate, regime=branch.regime, slab=branch.slab)

    mode = " (shipping included in collection)" if rates.include_shipping_in_collection else ""
    LOGGER.info("No consistent price for desired payout %.2f%s", desired, mode)
    return UnsolvableTarget(
        f"Could not find a consistent price for the desired payout{mode}. "
        "Check rates/desired payout."
    )
