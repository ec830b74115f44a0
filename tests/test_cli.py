from __future__ import annotations

import logging

import pandas as pd
import pytest

from payoutcalc import get_logger
from payoutcalc.main import EXIT_INVALID, EXIT_OK, EXIT_UNSOLVABLE, main


@pytest.fixture()
def no_env(clean_env, tmp_path):
    return ["--env-file", str(tmp_path / "absent.env")]


def test_price_prints_breakdown(no_env, capsys) -> None:
    assert main(["--price", "400", *no_env]) == EXIT_OK
    out = capsys.readouterr().out
    assert "Final payout: ₹274.92 | Required price: ₹400.00" in out
    assert "Shipping fee" in out


def test_desired_payout_with_explicit_package(no_env, capsys) -> None:
    code = main(
        [
            "--desired", "274.92",
            "--weight-g", "350",
            "--length", "12",
            "--width", "12",
            "--height", "15",
            "--zone", "zonal",
            *no_env,
        ]
    )
    assert code == EXIT_OK
    assert "Required price: ₹400.00" in capsys.readouterr().out


def test_unsolvable_rates_exit_code(no_env) -> None:
    code = main(["--desired", "100", "--commission", "60", "--collection", "50", *no_env])
    assert code == EXIT_UNSOLVABLE


def test_invalid_measurement_exit_code(no_env) -> None:
    assert main(["--price", "400", "--weight-g", "-5", *no_env]) == EXIT_INVALID
    assert main(["--price", "400", "--item", "Anvil", *no_env]) == EXIT_INVALID


def test_batch_writes_default_output(no_env, tmp_path) -> None:
    in_csv = tmp_path / "items.csv"
    pd.DataFrame([{"item": "Jar", "price": 400}]).to_csv(in_csv, index=False)
    assert main(["--batch", str(in_csv), *no_env]) == EXIT_OK
    out_csv = tmp_path / "items_priced.csv"
    assert out_csv.exists()
    assert pd.read_csv(out_csv).loc[0, "payout"] == pytest.approx(274.92)


def test_missing_batch_file_exit_code(no_env, tmp_path) -> None:
    assert main(["--batch", str(tmp_path / "missing.csv"), *no_env]) == EXIT_INVALID
    assert not (tmp_path / "missing_priced.csv").exists()


def test_debug_flag_sets_log_level(no_env) -> None:
    try:
        assert main(["--price", "400", "--debug", *no_env]) == EXIT_OK
        assert get_logger().level == logging.DEBUG
        assert logging.getLogger().level == logging.DEBUG
    finally:
        main(["--price", "400", *no_env])
    assert get_logger().level == logging.INFO
