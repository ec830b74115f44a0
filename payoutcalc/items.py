from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from payoutcalc.models import PackageMetrics


@dataclass(frozen=True, slots=True)
class ItemPreset:
    name: str
    actual_weight_g: float
    length_cm: float
    width_cm: float
    height_cm: float

    def package(self) -> PackageMetrics:
        return PackageMetrics.from_grams(
            self.actual_weight_g, self.length_cm, self.width_cm, self.height_cm
        )


ITEM_PRESETS: dict[str, ItemPreset] = {
    "Jar": ItemPreset(name="Jar", actual_weight_g=350.0, length_cm=12.0, width_cm=12.0, height_cm=15.0),
}


def get_preset(name: Optional[str]) -> Optional[ItemPreset]:
    if not name:
        return None
    preset = ITEM_PRESETS.get(name)
    if preset is not None:
        return preset
    lowered = name.strip().lower()
    for key, candidate in ITEM_PRESETS.items():
        if key.lower() == lowered:
            return candidate
    return None


def preset_package(name: Optional[str]) -> Optional[PackageMetrics]:
    preset = get_preset(name)
    return preset.package() if preset else None
