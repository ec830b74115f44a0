from __future__ import annotations

from pathlib import Path
from typing import Optional

import pandas as pd
import streamlit as st

from payoutcalc.batch import price_frame
from payoutcalc.calculator import Quote, quote
from payoutcalc.config import CalcSettings
from payoutcalc.env import load_env_file
from payoutcalc.formatting import breakdown_rows, format_inr, format_kg, summary_text
from payoutcalc.items import ITEM_PRESETS, get_preset
from payoutcalc.models import InvalidInput, PackageMetrics, RateConfig, Zone

# ============================================================
# Paths / settings
# ============================================================
ROOT_DIR = Path(__file__).parent.resolve()
load_env_file(ROOT_DIR / ".env")
SETTINGS = CalcSettings.from_env()

ZONES = [z.value for z in Zone]


# ============================================================
# Minimal helpers
# ============================================================
def default_state() -> dict[str, object]:
    preset = get_preset(SETTINGS.item) or next(iter(ITEM_PRESETS.values()))
    return {
        "item": preset.name,
        "actual_weight_g": preset.actual_weight_g,
        "length_cm": preset.length_cm,
        "width_cm": preset.width_cm,
        "height_cm": preset.height_cm,
        "zone": SETTINGS.zone.value,
        "include_shipping": SETTINGS.include_shipping_in_collection,
        "commission_pct": SETTINGS.commission_pct,
        "collection_pct": SETTINGS.collection_pct,
        "gst_pct": SETTINGS.gst_pct,
    }


def reset_inputs() -> None:
    for key, value in default_state().items():
        st.session_state[key] = value
    for key in ("price", "desired"):
        st.session_state.pop(key, None)


def apply_item_preset() -> None:
    preset = get_preset(st.session_state.get("item"))
    if preset is None:
        return
    st.session_state.actual_weight_g = preset.actual_weight_g
    st.session_state.length_cm = preset.length_cm
    st.session_state.width_cm = preset.width_cm
    st.session_state.height_cm = preset.height_cm


def current_quote() -> Optional[Quote]:
    s = st.session_state
    try:
        package = PackageMetrics.from_grams(s.actual_weight_g, s.length_cm, s.width_cm, s.height_cm)
        rates = RateConfig.from_percentages(
            s.commission_pct,
            s.collection_pct,
            s.gst_pct,
            include_shipping_in_collection=s.include_shipping,
        )
        return quote(
            package,
            s.zone,
            rates,
            price=s.get("price"),
            desired_payout=s.get("desired"),
            cap_tolerance=SETTINGS.cap_tolerance,
            max_price=SETTINGS.max_price,
        )
    except InvalidInput as e:
        st.error(f"Invalid input: {e}")
        return None


# ============================================================
# Streamlit UI
# ============================================================
st.set_page_config(page_title="Payout Calculator", layout="wide")

if "initialized" not in st.session_state:
    reset_inputs()
    st.session_state.initialized = True

st.markdown("## Payout Calculator")
st.caption("Enter a selling price to see your payout, or a desired payout to get the price you need.")

# ---------- Sidebar (rates) ----------
with st.sidebar:
    st.markdown("### Fee rates")
    st.number_input("Commission (%)", min_value=0.0, max_value=100.0, step=0.5, key="commission_pct")
    st.number_input("Collection fee (%)", min_value=0.0, max_value=100.0, step=0.1, key="collection_pct")
    st.number_input("GST on fees (%)", min_value=0.0, max_value=100.0, step=1.0, key="gst_pct")
    st.toggle("Charge collection fee on shipping too", key="include_shipping")
    st.button("Reset to defaults", on_click=reset_inputs, use_container_width=True)

# ---------- Inputs ----------
left, right = st.columns([1.2, 1])
with left:
    st.markdown("#### Item")
    st.selectbox("Item type", list(ITEM_PRESETS), key="item", on_change=apply_item_preset)
    w1, w2, w3, w4 = st.columns(4)
    w1.number_input("Weight (g)", min_value=0.0, step=10.0, key="actual_weight_g")
    w2.number_input("Length (cm)", min_value=0.0, step=1.0, key="length_cm")
    w3.number_input("Width (cm)", min_value=0.0, step=1.0, key="width_cm")
    w4.number_input("Height (cm)", min_value=0.0, step=1.0, key="height_cm")
    st.selectbox("Shipping zone", ZONES, key="zone")

with right:
    st.markdown("#### Price or payout")
    st.number_input("Selling price (₹)", min_value=0.0, step=10.0, value=None, key="price")
    st.number_input("Desired payout (₹)", step=10.0, value=None, key="desired")
    if st.session_state.get("price") is not None and st.session_state.get("desired") is not None:
        st.caption("Both filled: the selling price is used.")

st.divider()

# ---------- Results ----------
result = current_quote()
if result is not None:
    if result.error:
        st.error(result.error)

    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Final payout", format_inr(result.payout))
    m2.metric("Required price", format_inr(result.required_price))
    m3.metric("Shipping fee", format_inr(result.shipping_fee))
    m4.metric("Chargeable weight", format_kg(result.chargeable_weight_kg))

    st.dataframe(pd.DataFrame(breakdown_rows(result)), use_container_width=True, hide_index=True)

    st.markdown("#### Copy summary")
    st.code(summary_text(result), language=None)

# ---------- Batch ----------
st.divider()
with st.expander("Batch pricing (CSV)"):
    st.caption(
        "Columns: item, price, desired_payout, actual_weight_g, length_cm, width_cm, height_cm, zone "
        "(optional: commission_pct, collection_pct, gst_pct)."
    )
    upload = st.file_uploader("Items CSV", type=["csv"])
    if upload is not None:
        try:
            priced = price_frame(pd.read_csv(upload), SETTINGS)
        except ValueError as e:
            st.error(f"Failed to price `{upload.name}`: {type(e).__name__}: {e}")
        else:
            st.dataframe(priced, use_container_width=True, hide_index=True)
            st.download_button(
                "Download priced CSV",
                data=priced.to_csv(index=False).encode("utf-8"),
                file_name="priced.csv",
                mime="text/csv",
            )
