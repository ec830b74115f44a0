from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from payoutcalc.calculator import Quote

CURRENCY_SYMBOL = "₹"
MISSING = "-"

BREAKDOWN_LABELS: tuple[tuple[str, str], ...] = (
    ("Shipping fee", "shipping_fee"),
    ("Commission", "commission"),
    ("Collection fee", "collection_capped"),
    ("Closing fee", "closing_fee"),
    ("Fees before GST", "fees_before_gst"),
    ("GST", "gst"),
    ("Total deductions", "total_deductions"),
    ("Final payout", "payout"),
)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return math.isnan(float(value))
    except (TypeError, ValueError):
        return True


def _group_indian(digits: str) -> str:
    # Last three digits, then groups of two: 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_inr(value: Optional[float]) -> str:
    if _is_missing(value):
        return MISSING
    amount = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    whole, fraction = f"{abs(amount):.2f}".split(".")
    return f"{sign}{CURRENCY_SYMBOL}{_group_indian(whole)}.{fraction}"


def format_kg(value: Optional[float]) -> str:
    if _is_missing(value):
        return MISSING
    text = f"{float(value):.3f}".rstrip("0").rstrip(".")
    return f"{text} kg"


def summary_text(result: Quote) -> str:
    return (
        f"Final payout: {format_inr(result.payout)} | "
        f"Required price: {format_inr(result.required_price)}"
    )


def breakdown_rows(result: Quote) -> list[dict[str, str]]:
    rows = [
        {"Item": "Chargeable weight", "Amount": format_kg(result.chargeable_weight_kg)},
    ]
    values = result.breakdown.as_dict() if result.breakdown else {}
    for label, key in BREAKDOWN_LABELS:
        if key == "shipping_fee":
            amount = format_inr(result.shipping_fee)
        else:
            amount = format_inr(values.get(key))
        rows.append({"Item": label, "Amount": amount})
    rows.append({"Item": "Required price", "Amount": format_inr(result.required_price)})
    return rows
