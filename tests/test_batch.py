from __future__ import annotations

import pandas as pd
import pytest

from payoutcalc.batch import RESULT_COLS, price_csv, price_frame
from payoutcalc.config import CalcSettings
from payoutcalc.models import InvalidInput


def _frame() -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"item": "Jar", "price": 400, "desired_payout": None, "zone": "zonal"},
            {
                "item": None,
                "price": None,
                "desired_payout": 274.92,
                "actual_weight_g": 350,
                "length_cm": 12,
                "width_cm": 12,
                "height_cm": 15,
                "zone": None,
            },
            {"item": "Jar", "price": "abc", "desired_payout": None, "zone": "zonal"},
            {"item": "Jar", "price": 400, "desired_payout": None, "zone": "mars"},
            {
                "item": "Jar",
                "price": None,
                "desired_payout": 100,
                "zone": "zonal",
                "commission_pct": 60,
                "collection_pct": 50,
            },
        ]
    )


def test_price_frame_prices_each_row_and_keeps_inputs() -> None:
    priced = price_frame(_frame(), CalcSettings())
    assert len(priced) == 5
    for col in RESULT_COLS:
        assert col in priced.columns
    assert list(priced["item"].iloc[[0, 2]]) == ["Jar", "Jar"]

    first = priced.iloc[0]
    assert first["shipping_fee"] == 40
    assert first["payout"] == pytest.approx(274.92)
    assert first["required_price"] == pytest.approx(400, abs=1e-4)
    assert pd.isna(first["error"])

    second = priced.iloc[1]
    assert second["required_price"] == pytest.approx(400, abs=1e-3)
    assert second["payout"] == pytest.approx(274.92)


def test_price_frame_captures_row_errors() -> None:
    priced = price_frame(_frame(), CalcSettings())
    assert "price" in priced.iloc[2]["error"]
    assert "zone" in priced.iloc[3]["error"]
    assert "100%" in priced.iloc[4]["error"]
    assert pd.isna(priced.iloc[4]["payout"])


def test_unknown_item_without_dimensions_is_an_error() -> None:
    df = pd.DataFrame([{"item": "Anvil", "price": 400}])
    priced = price_frame(df, CalcSettings())
    assert "Anvil" in priced.iloc[0]["error"]


def test_price_csv_writes_output(tmp_path) -> None:
    in_csv = tmp_path / "items.csv"
    out_csv = tmp_path / "priced.csv"
    pd.DataFrame(
        [
            {"item": "Jar", "price": 5000, "zone": "local"},
            {"item": "Jar", "price": 750, "zone": "national"},
        ]
    ).to_csv(in_csv, index=False)

    priced = price_csv(in_csv, out_csv, CalcSettings())
    assert out_csv.exists()
    written = pd.read_csv(out_csv)
    assert len(written) == len(priced) == 2
    assert written.loc[0, "collection_fee"] == pytest.approx(30)
    assert written.loc[0, "shipping_fee"] == 30
    assert written.loc[1, "closing_fee"] == 15
    assert written.loc[1, "required_price"] == pytest.approx(750, abs=1e-4)


def test_price_csv_requires_price_or_payout_column(tmp_path) -> None:
    in_csv = tmp_path / "items.csv"
    pd.DataFrame([{"item": "Jar", "zone": "local"}]).to_csv(in_csv, index=False)
    with pytest.raises(InvalidInput):
        price_csv(in_csv, tmp_path / "out.csv", CalcSettings())
