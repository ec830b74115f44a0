from __future__ import annotations

import math

from payoutcalc.models import PackageMetrics, Zone, as_real

# (max chargeable kg, fee per zone)
WEIGHT_BANDS: tuple[tuple[float, dict[Zone, float]], ...] = (
    (0.5, {Zone.LOCAL: 30.0, Zone.ZONAL: 40.0, Zone.NATIONAL: 45.0}),
    (1.0, {Zone.LOCAL: 35.0, Zone.ZONAL: 50.0, Zone.NATIONAL: 60.0}),
    (2.0, {Zone.LOCAL: 45.0, Zone.ZONAL: 70.0, Zone.NATIONAL: 85.0}),
    (3.0, {Zone.LOCAL: 70.0, Zone.ZONAL: 110.0, Zone.NATIONAL: 150.0}),
)
OVERFLOW_FROM_KG = 3.0
OVERFLOW_PER_KG: dict[Zone, float] = {Zone.LOCAL: 20.0, Zone.ZONAL: 30.0, Zone.NATIONAL: 40.0}


def shipping_fee(chargeable_kg: float, zone: Zone | str) -> float:
    """Courier fee for a parcel of ``chargeable_kg`` shipped to ``zone``.

    Above 3 kg the excess is billed per started kilogram on top of the 3 kg fee.
    """
    kg = as_real(chargeable_kg, "chargeable_kg")
    zone = Zone.parse(zone)
    for max_kg, fees in WEIGHT_BANDS:
        if kg <= max_kg:
            return fees[zone]
    base = WEIGHT_BANDS[-1][1][zone]
    extra_kg = math.ceil(kg - OVERFLOW_FROM_KG)
    return base + extra_kg * OVERFLOW_PER_KG[zone]


def shipping_fee_for_package(package: PackageMetrics, zone: Zone | str) -> float:
    return shipping_fee(package.chargeable_weight_kg, zone)
