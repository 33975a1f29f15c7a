# src/easypost_shipping/cli.py
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict

from .config.logging_config import get_logger
from .errors import EasyPostError, InvalidArgument
from .io.paths import derive_run_paths
from .models import Address, CustomsInfo, CustomsItem, Parcel, Shipment


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="easypost-shipping",
        description="Create a shipment from a JSON request, buy a rate and report the label.",
    )
    p.add_argument("request", type=Path,
                   help="JSON file with from_address, to_address, parcel and optional customs_info/options.")
    selector = p.add_mutually_exclusive_group()
    selector.add_argument(
        "--rate",
        choices=("lowest",),
        default=None,
        help="Buy the cheapest offered rate.",
    )
    selector.add_argument(
        "--service",
        default=None,
        help="Buy the first rate for this service name (exact match).",
    )
    p.add_argument(
        "--replay",
        type=Path,
        default=None,
        help="JSON file of canned responses keyed by '<METHOD> <path>'; no network calls are made.",
    )
    p.add_argument(
        "--save-dir",
        type=Path,
        default=None,
        help="Download the purchased label into this directory.",
    )
    p.add_argument(
        "--no-console",
        action="store_true",
        help="Disable console logging (file logging remains).",
    )
    p.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR). Default: INFO",
    )
    p.add_argument(
        "--strict-env",
        action="store_true",
        help="Require EASYPOST_API_KEY even in replay mode; otherwise exit 2.",
    )
    return p


def create_shipment_from_request(requester, request: Dict[str, Any], logger=None) -> Shipment:
    """Create every resource the request describes, then the shipment itself."""
    for key in ("from_address", "to_address", "parcel"):
        if not isinstance(request.get(key), dict):
            raise InvalidArgument(f"request is missing the '{key}' object")

    from_address = Address.create(requester, **request["from_address"])
    to_address = Address.create(requester, **request["to_address"])
    parcel = Parcel.create(requester, **request["parcel"])

    customs_info = None
    if request.get("customs_info"):
        info = dict(request["customs_info"])
        items = [CustomsItem.create(requester, **item)
                 for item in info.pop("customs_items", None) or []]
        customs_info = CustomsInfo.create(
            requester, customs_items=items or None, **info)

    return Shipment.create(
        requester,
        from_address=from_address,
        to_address=to_address,
        parcel=parcel,
        customs_info=customs_info,
        options=request.get("options"),
        logger=logger,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        label_dir, log_path = derive_run_paths(args.request, args.save_dir)
    except FileNotFoundError:
        print(f"error: request file not found: {args.request}", file=sys.stderr)
        return 2

    logger = get_logger(
        "easypost_shipping",
        level=args.log_level,
        console=not args.no_console,
        log_file=log_path,
    )
    logger.debug("Logger initialized.")
    logger.info("Request: %s", args.request)
    logger.info("Log file: %s", log_path)

    try:
        request = json.loads(args.request.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        # ValueError covers both JSONDecodeError and UnicodeDecodeError
        logger.error("Request is not readable JSON: %s", e)
        return 2
    if not isinstance(request, dict):
        logger.error("Request must be a JSON object.")
        return 2

    # Replay mode only needs the API key when --strict-env is set
    from .config.env import get_app_env

    try:
        env_cfg = get_app_env(strict=args.strict_env or not args.replay)
    except RuntimeError as e:
        logger.error("Environment error: %s", e)
        return 2

    if args.replay:
        from .api.client import ReplayRequester

        try:
            requester = ReplayRequester(args.replay)
        except ValueError as e:
            logger.error("Replay error: %s", e)
            return 2
        logger.info("Replay mode enabled: %s", args.replay)
    else:
        from .api.requester import Requester

        requester = Requester.from_env(env_cfg, logger=logger.getChild("requester"))
        logger.info("Live API enabled (base=%s)", env_cfg.EASYPOST_BASE_URL)

    try:
        shipment = create_shipment_from_request(requester, request, logger=logger)
        for rate in shipment.rates:
            logger.info("Offered: %s %s %s", rate.carrier, rate.service, rate.rate)

        if args.rate is None and args.service is None:
            print(f"shipment {shipment.id}: {len(shipment.rates)} rate(s); no selector given, nothing bought")
            return 0

        label = shipment.buy(rate=args.rate, service_type=args.service)
        print(f"tracking_code={label.tracking_code} label_url={label.url}")

        if args.save_dir is not None:
            saved = label.save(requester, label_dir)
            print(f"saved={saved}")
    except InvalidArgument as e:
        logger.error("Invalid request: %s", e)
        return 2
    except EasyPostError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1

    logger.info("Done.")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
