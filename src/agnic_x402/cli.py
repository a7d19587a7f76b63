"""
Command-line interface for making payment-aware HTTP requests.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterable, List, Sequence, Tuple

import requests

from .api import ConfigError, create_client, load_client_config, perform_batch
from .core.errors import X402RequestError
from .core.models import SUPPORTED_METHODS, RequestSpec


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )


def _key_value(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Values must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Key must not be empty")
    return key, val


def _collect_pairs(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    collected: dict[str, str] = {}
    for key, value in pairs:
        collected[key] = value
    return collected


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agnic-x402",
        description="Call an x402-enabled API, paying through AgnicWallet when required",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing AGNIC_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_key_value,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument(
        "--method",
        default="GET",
        type=str.upper,
        choices=SUPPORTED_METHODS,
        help="HTTP method to use (default: GET)",
    )
    parser.add_argument("--url", help="URL of the x402-enabled API")
    parser.add_argument(
        "--header",
        action="append",
        type=_key_value,
        metavar="NAME=VALUE",
        default=None,
        help="Additional header to send; may be repeated",
    )
    parser.add_argument(
        "--body",
        default=None,
        help="JSON body for POST and PUT requests (default: {})",
    )
    parser.add_argument(
        "--batch",
        metavar="FILE",
        help="JSON file holding a list of {method, url, headers, body} requests",
    )
    parser.add_argument(
        "--continue-on-fail",
        action="store_true",
        help="In batch mode, record failed requests as errors and keep going",
    )
    parser.add_argument(
        "--item-output",
        action="store_true",
        help="Print the flattened workflow item instead of {body, payment}",
    )
    return parser


def _load_batch(path: str) -> List[RequestSpec]:
    entries: Any = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(entries, list):
        raise ValueError(f"Batch file {path} must contain a JSON list")
    specs: List[RequestSpec] = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValueError("Every batch entry must be a JSON object")
        specs.append(
            RequestSpec.create(
                entry.get("method", "GET"),
                entry.get("url", ""),
                entry.get("headers"),
                entry.get("body"),
            )
        )
    return specs


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.url and not args.batch:
        parser.error("one of --url or --batch is required")

    _configure_logging(args.log_level)
    overrides = _collect_pairs(args.set or ())

    try:
        config = load_client_config(env_file=args.env_file, overrides=overrides)
    except (ConfigError, ValueError) as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    try:
        if args.batch:
            specs = _load_batch(args.batch)
        else:
            specs = [
                RequestSpec.create(
                    args.method, args.url, _collect_pairs(args.header or ()), args.body
                )
            ]
    except (OSError, ValueError) as exc:
        logging.error("Invalid request: %s", exc)
        return 1

    client = create_client(config=config, session=requests.Session())

    try:
        if args.batch:
            output: Any = perform_batch(
                client, specs, continue_on_fail=args.continue_on_fail
            )
        else:
            result = client.request(specs[0])
            output = result.to_item() if args.item_output else result.to_dict()
    except X402RequestError as exc:
        logging.error("%s during %s: %s", type(exc).__name__, exc.phase, exc.message)
        return 1

    print(json.dumps(output, indent=2))
    return 0


def main() -> None:
    sys.exit(run_cli())
