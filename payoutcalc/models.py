from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

VOLUMETRIC_DIVISOR = 5000.0


class InvalidInput(ValueError):
    """A required numeric input is missing its number or is out of range."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


def as_real(value: Any, field: str, *, allow_none: bool = False) -> Optional[float]:
    if value is None:
        if allow_none:
            return None
        raise InvalidInput(field, "a number is required")
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidInput(field, f"expected a number, got {value!r}")
    number = float(value)
    if math.isnan(number):
        if allow_none:
            return None
        raise InvalidInput(field, "a number is required")
    return number


class Zone(str, Enum):
    LOCAL = "local"
    ZONAL = "zonal"
    NATIONAL = "national"

    @classmethod
    def parse(cls, value: "Zone | str") -> "Zone":
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower()
        for zone in cls:
            if zone.value == key:
                return zone
        allowed = ", ".join(zone.value for zone in cls)
        raise InvalidInput("zone", f"unknown zone {value!r} (expected one of {allowed})")


@dataclass(frozen=True, slots=True)
class RateConfig:
    commission_rate: float = 0.0
    collection_rate: float = 0.0
    gst_rate: float = 0.0
    include_shipping_in_collection: bool = False

    def __post_init__(self) -> None:
        for name in ("commission_rate", "collection_rate", "gst_rate"):
            rate = as_real(getattr(self, name), name)
            if rate < 0 or rate > 1:
                raise InvalidInput(name, f"must be a fraction between 0 and 1, got {rate}")
            object.__setattr__(self, name, rate)
        object.__setattr__(
            self, "include_shipping_in_collection", bool(self.include_shipping_in_collection)
        )

    @classmethod
    def from_percentages(
        cls,
        commission_pct: Optional[float] = None,
        collection_pct: Optional[float] = None,
        gst_pct: Optional[float] = None,
        include_shipping_in_collection: bool = False,
    ) -> "RateConfig":
        # Blank percentage fields count as 0%.
        def _fraction(value: Optional[float], field: str) -> float:
            pct = as_real(value, field, allow_none=True)
            return 0.0 if pct is None else pct / 100.0

        return cls(
            commission_rate=_fraction(commission_pct, "commission_pct"),
            collection_rate=_fraction(collection_pct, "collection_pct"),
            gst_rate=_fraction(gst_pct, "gst_pct"),
            include_shipping_in_collection=include_shipping_in_collection,
        )

    @property
    def gst_multiplier(self) -> float:
        return 1.0 + self.gst_rate

    @property
    def effective_variable_rate(self) -> float:
        """Share of the price taken by commission and uncapped collection, after GST."""
        return self.gst_multiplier * (self.commission_rate + self.collection_rate)


@dataclass(frozen=True, slots=True)
class PackageMetrics:
    actual_weight_kg: Optional[float] = None
    length_cm: Optional[float] = None
    width_cm: Optional[float] = None
    height_cm: Optional[float] = None

    def __post_init__(self) -> None:
        for name in ("actual_weight_kg", "length_cm", "width_cm", "height_cm"):
            value = as_real(getattr(self, name), name, allow_none=True)
            if value is not None and value < 0:
                raise InvalidInput(name, f"must not be negative, got {value}")
            object.__setattr__(self, name, value)

    @classmethod
    def from_grams(
        cls,
        actual_weight_g: Optional[float],
        length_cm: Optional[float] = None,
        width_cm: Optional[float] = None,
        height_cm: Optional[float] = None,
    ) -> "PackageMetrics":
        grams = as_real(actual_weight_g, "actual_weight_g", allow_none=True)
        return cls(
            actual_weight_kg=None if grams is None else grams / 1000.0,
            length_cm=length_cm,
            width_cm=width_cm,
            height_cm=height_cm,
        )

    @property
    def volumetric_weight_kg(self) -> Optional[float]:
        if self.length_cm is None or self.width_cm is None or self.height_cm is None:
            return None
        return (self.length_cm * self.width_cm * self.height_cm) / VOLUMETRIC_DIVISOR

    @property
    def chargeable_weight_kg(self) -> float:
        actual = self.actual_weight_kg or 0.0
        volumetric = self.volumetric_weight_kg or 0.0
        return max(actual, volumetric)


@dataclass(frozen=True, slots=True)
class ClosingFeeSlab:
    lower: float
    upper: float
    fee: float

    def contains(self, price: float) -> bool:
        return self.lower < price <= self.upper


@dataclass(slots=True)
class FeeBreakdown:
    price: float
    shipping_fee: float
    commission: float
    collection_raw: float
    collection_capped: float
    closing_fee: float
    fees_before_gst: float
    gst: float
    total_deductions: float
    payout: float

    def as_dict(self) -> dict[str, float]:
        return {
            "price": self.price,
            "shipping_fee": self.shipping_fee,
            "commission": self.commission,
            "collection_raw": self.collection_raw,
            "collection_capped": self.collection_capped,
            "closing_fee": self.closing_fee,
            "fees_before_gst": self.fees_before_gst,
            "gst": self.gst,
            "total_deductions": self.total_deductions,
            "payout": self.payout,
        }


@dataclass(frozen=True, slots=True)
class RequiredPrice:
    price: float
    regime: str
    slab: ClosingFeeSlab
    ok: bool = True


@dataclass(frozen=True, slots=True)
class UnsolvableTarget:
    message: str
    ok: bool = False
