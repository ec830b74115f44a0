from __future__ import annotations

import pytest

from payoutcalc.items import preset_package
from payoutcalc.models import InvalidInput, PackageMetrics, Zone
from payoutcalc.shipping import shipping_fee, shipping_fee_for_package


def test_overflow_weight_rounds_excess_up_to_whole_kg() -> None:
    assert shipping_fee(3.2, "zonal") == 140
    assert shipping_fee(4.0, Zone.ZONAL) == 140
    assert shipping_fee(4.32, "zonal") == 170
    assert shipping_fee(5.5, "local") == 130
    assert shipping_fee(3.01, "national") == 190


@pytest.mark.parametrize(
    ("kg", "zone", "expected"),
    [
        (0.0, "zonal", 40),
        (0.5, "local", 30),
        (0.51, "local", 35),
        (1.0, "national", 60),
        (1.5, "zonal", 70),
        (2.0, "local", 45),
        (3.0, "national", 150),
    ],
)
def test_weight_bands_are_inclusive_on_upper_bound(kg: float, zone: str, expected: float) -> None:
    assert shipping_fee(kg, zone) == expected


def test_zone_parse_is_case_insensitive_and_rejects_unknown() -> None:
    assert Zone.parse(" ZONAL ") is Zone.ZONAL
    with pytest.raises(InvalidInput):
        Zone.parse("mars")
    with pytest.raises(InvalidInput):
        shipping_fee(1.0, "overseas")


def test_chargeable_weight_takes_larger_of_actual_and_volumetric() -> None:
    jar = preset_package("Jar")
    assert jar is not None
    assert jar.volumetric_weight_kg == pytest.approx(0.432)
    assert jar.chargeable_weight_kg == pytest.approx(0.432)
    assert shipping_fee_for_package(jar, "zonal") == 40

    heavy = PackageMetrics.from_grams(2500, 10, 10, 10)
    assert heavy.volumetric_weight_kg == pytest.approx(0.2)
    assert heavy.chargeable_weight_kg == pytest.approx(2.5)
    assert shipping_fee_for_package(heavy, "national") == 150


def test_missing_measurements_count_as_zero() -> None:
    no_dims = PackageMetrics.from_grams(800)
    assert no_dims.volumetric_weight_kg is None
    assert no_dims.chargeable_weight_kg == pytest.approx(0.8)

    no_weight = PackageMetrics.from_grams(None, 30, 20, 10)
    assert no_weight.chargeable_weight_kg == pytest.approx(1.2)

    assert PackageMetrics().chargeable_weight_kg == 0.0


def test_negative_or_non_numeric_measurements_are_rejected() -> None:
    with pytest.raises(InvalidInput):
        PackageMetrics.from_grams(-10)
    with pytest.raises(InvalidInput):
        PackageMetrics(length_cm="12")  # type: ignore[arg-type]
