from __future__ import annotations

import os
from dataclasses import dataclass

from payoutcalc.models import RateConfig, Zone

COLLECTION_CAP = 30.0
CAP_TOLERANCE = 1e-6
MAX_PRICE = 1e7

COMMISSION_PCT_DEFAULT = 12.0
COLLECTION_PCT_DEFAULT = 2.0
GST_PCT_DEFAULT = 18.0
DEFAULT_ZONE = Zone.ZONAL
DEFAULT_ITEM = "Jar"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return float(value)


@dataclass(slots=True)
class CalcSettings:
    commission_pct: float = COMMISSION_PCT_DEFAULT
    collection_pct: float = COLLECTION_PCT_DEFAULT
    gst_pct: float = GST_PCT_DEFAULT
    include_shipping_in_collection: bool = False
    zone: Zone = DEFAULT_ZONE
    item: str = DEFAULT_ITEM
    cap_tolerance: float = CAP_TOLERANCE
    max_price: float = MAX_PRICE

    @classmethod
    def from_env(cls, **overrides: object) -> "CalcSettings":
        kwargs: dict[str, object] = {
            "commission_pct": _env_float("COMMISSION_PCT", COMMISSION_PCT_DEFAULT),
            "collection_pct": _env_float("COLLECTION_PCT", COLLECTION_PCT_DEFAULT),
            "gst_pct": _env_float("GST_PCT", GST_PCT_DEFAULT),
            "include_shipping_in_collection": _env_bool("INCLUDE_SHIPPING_IN_COLLECTION", False),
            "zone": Zone.parse(os.getenv("DEFAULT_ZONE", DEFAULT_ZONE.value)),
            "item": os.getenv("DEFAULT_ITEM", DEFAULT_ITEM).strip() or DEFAULT_ITEM,
            "cap_tolerance": max(0.0, _env_float("CAP_TOLERANCE", CAP_TOLERANCE)),
            "max_price": _env_float("MAX_PRICE", MAX_PRICE),
        }
        kwargs.update(overrides)
        if "zone" in overrides:
            kwargs["zone"] = Zone.parse(kwargs["zone"])  # type: ignore[arg-type]
        return cls(**kwargs)  # type: ignore[arg-type]

    def rates(self) -> RateConfig:
        return RateConfig.from_percentages(
            self.commission_pct,
            self.collection_pct,
            self.gst_pct,
            include_shipping_in_collection=self.include_shipping_in_collection,
        )
