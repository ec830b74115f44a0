from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import pandas as pd

from payoutcalc import get_logger
from payoutcalc.calculator import parse_number, quote
from payoutcalc.config import CalcSettings
from payoutcalc.items import preset_package
from payoutcalc.models import InvalidInput, PackageMetrics, RateConfig, Zone

LOGGER = get_logger("batch")

RATE_COLS = ["commission_pct", "collection_pct", "gst_pct"]
RESULT_COLS = [
    "chargeable_weight_kg",
    "shipping_fee",
    "commission",
    "collection_fee",
    "closing_fee",
    "fees_before_gst",
    "gst",
    "total_deductions",
    "payout",
    "required_price",
    "error",
]
DIMENSION_COLS = ["actual_weight_g", "length_cm", "width_cm", "height_cm"]


def _cell(row: dict[str, Any], name: str) -> Any:
    value = row.get(name)
    if value is None:
        return None
    if not isinstance(value, str) and pd.isna(value):
        return None
    return value


def _row_package(row: dict[str, Any], settings: CalcSettings) -> PackageMetrics:
    dims = [parse_number(_cell(row, col), col) for col in DIMENSION_COLS]
    if all(value is None for value in dims):
        item = _cell(row, "item") or settings.item
        package = preset_package(str(item))
        if package is None:
            raise InvalidInput("item", f"no dimensions given and no preset named {item!r}")
        return package
    return PackageMetrics.from_grams(*dims)


def _row_rates(row: dict[str, Any], settings: CalcSettings) -> RateConfig:
    overrides = {col: parse_number(_cell(row, col), col) for col in RATE_COLS}
    if all(value is None for value in overrides.values()):
        return settings.rates()
    return RateConfig.from_percentages(
        settings.commission_pct if overrides["commission_pct"] is None else overrides["commission_pct"],
        settings.collection_pct if overrides["collection_pct"] is None else overrides["collection_pct"],
        settings.gst_pct if overrides["gst_pct"] is None else overrides["gst_pct"],
        include_shipping_in_collection=settings.include_shipping_in_collection,
    )


def price_row(row: dict[str, Any], settings: CalcSettings) -> dict[str, Any]:
    out: dict[str, Any] = {col: None for col in RESULT_COLS}
    try:
        package = _row_package(row, settings)
        zone = Zone.parse(_cell(row, "zone") or settings.zone)
        rates = _row_rates(row, settings)
        result = quote(
            package,
            zone,
            rates,
            price=parse_number(_cell(row, "price"), "price"),
            desired_payout=parse_number(_cell(row, "desired_payout"), "desired_payout"),
            cap_tolerance=settings.cap_tolerance,
            max_price=settings.max_price,
        )
    except InvalidInput as exc:
        out["error"] = str(exc)
        return out

    out["chargeable_weight_kg"] = result.chargeable_weight_kg
    out["shipping_fee"] = result.shipping_fee
    out["required_price"] = result.required_price
    out["error"] = result.error
    if result.breakdown is not None:
        b = result.breakdown
        out.update(
            commission=b.commission,
            collection_fee=b.collection_capped,
            closing_fee=b.closing_fee,
            fees_before_gst=b.fees_before_gst,
            gst=b.gst,
            total_deductions=b.total_deductions,
            payout=b.payout,
        )
    return out


def price_frame(df: pd.DataFrame, settings: Optional[CalcSettings] = None) -> pd.DataFrame:
    settings = settings or CalcSettings.from_env()
    records = [price_row(row, settings) for row in df.to_dict(orient="records")]
    results = pd.DataFrame(records, columns=RESULT_COLS)
    failed = int(results["error"].notna().sum()) if len(results) else 0
    if failed:
        LOGGER.warning("%d of %d rows could not be priced", failed, len(results))
    return pd.concat([df.reset_index(drop=True), results], axis=1)


def price_csv(in_csv: Path, out_csv: Path, settings: Optional[CalcSettings] = None) -> pd.DataFrame:
    df = pd.read_csv(in_csv)
    missing = [col for col in ("price", "desired_payout") if col not in df.columns]
    if len(missing) == 2:
        raise InvalidInput("columns", f"{Path(in_csv).name} needs a 'price' or 'desired_payout' column")
    priced = price_frame(df, settings)
    priced.to_csv(out_csv, index=False)
    LOGGER.info("Wrote %d priced rows to %s", len(priced), out_csv)
    return priced
