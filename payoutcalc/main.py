from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from . import get_logger
from .batch import price_csv
from .calculator import quote
from .config import CalcSettings
from .env import load_env_file
from .formatting import breakdown_rows, summary_text
from .items import ITEM_PRESETS, get_preset
from .models import InvalidInput, PackageMetrics, Zone

log = get_logger("cli")

EXIT_OK = 0
EXIT_UNSOLVABLE = 1
EXIT_INVALID = 2


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Marketplace payout calculator (price <-> payout)")

    mode = p.add_mutually_exclusive_group(required=False)
    mode.add_argument("--price", type=float, default=None, help="Selling price; computes the payout")
    mode.add_argument("--desired", type=float, default=None, help="Desired payout; solves for the price")

    # --- Package ---
    p.add_argument("--item", default=None, help=f"Item preset ({', '.join(ITEM_PRESETS)})")
    p.add_argument("--weight-g", type=float, default=None, help="Actual weight in grams")
    p.add_argument("--length", type=float, default=None, help="Length in cm")
    p.add_argument("--width", type=float, default=None, help="Width in cm")
    p.add_argument("--height", type=float, default=None, help="Height in cm")
    p.add_argument("--zone", choices=[z.value for z in Zone], default=None, help="Shipping zone")

    # --- Rates (percent) ---
    p.add_argument("--commission", type=float, default=None, help="Commission %%")
    p.add_argument("--collection", type=float, default=None, help="Collection fee %%")
    p.add_argument("--gst", type=float, default=None, help="GST %% charged on fees")
    p.add_argument(
        "--include-shipping",
        action="store_true",
        help="Charge the collection fee on price + shipping",
    )

    # --- Batch ---
    p.add_argument("--batch", type=Path, default=None, help="CSV of items to price")
    p.add_argument("--out", type=Path, default=None, help="Output CSV for --batch (default: <batch>_priced.csv)")

    p.add_argument("--env-file", type=Path, default=Path(".env"), help="Optional KEY=VALUE settings file")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p


def _settings_from_args(args: argparse.Namespace) -> CalcSettings:
    overrides: dict[str, object] = {}
    if args.commission is not None:
        overrides["commission_pct"] = args.commission
    if args.collection is not None:
        overrides["collection_pct"] = args.collection
    if args.gst is not None:
        overrides["gst_pct"] = args.gst
    if args.include_shipping:
        overrides["include_shipping_in_collection"] = True
    if args.zone:
        overrides["zone"] = args.zone
    if args.item:
        overrides["item"] = args.item
    return CalcSettings.from_env(**overrides)


def _package_from_args(args: argparse.Namespace, settings: CalcSettings) -> PackageMetrics:
    dims = (args.weight_g, args.length, args.width, args.height)
    preset = get_preset(settings.item)
    if all(value is None for value in dims):
        if preset is None:
            raise InvalidInput("item", f"unknown item preset {settings.item!r}")
        return preset.package()
    # Explicit measurements override the preset one field at a time.
    if preset is not None:
        defaults = (preset.actual_weight_g, preset.length_cm, preset.width_cm, preset.height_cm)
        dims = tuple(d if value is None else value for value, d in zip(dims, defaults))
    return PackageMetrics.from_grams(*dims)


def _default_out(batch: Path) -> Path:
    return batch.with_name(f"{batch.stem}_priced.csv")


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    level = logging.DEBUG if args.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )
    get_logger().setLevel(level)

    applied = load_env_file(args.env_file)
    if applied:
        log.debug("Loaded %d setting(s) from %s", len(applied), args.env_file)

    try:
        settings = _settings_from_args(args)

        if args.batch is not None:
            out = args.out or _default_out(args.batch)
            priced = price_csv(args.batch, out, settings)
            failed = int(priced["error"].notna().sum()) if len(priced) else 0
            log.info("Priced %d row(s) from %s (%d with errors)", len(priced), args.batch, failed)
            return EXIT_OK

        package = _package_from_args(args, settings)
        result = quote(
            package,
            settings.zone,
            settings.rates(),
            price=args.price,
            desired_payout=args.desired,
            cap_tolerance=settings.cap_tolerance,
            max_price=settings.max_price,
        )
    except ValueError as e:
        log.error("Invalid input: %s", e)
        return EXIT_INVALID
    except OSError as e:
        log.error("Cannot read or write batch file: %s", e)
        return EXIT_INVALID

    if result.error:
        log.error(result.error)
        return EXIT_UNSOLVABLE

    if result.is_empty:
        log.info("No --price or --desired given; showing shipping only.")

    for row in breakdown_rows(result):
        print(f"{row['Item']:<20} {row['Amount']}")
    print(summary_text(result))
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
