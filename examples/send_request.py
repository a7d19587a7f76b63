"""
Minimal script that uses the public API to call an x402-protected endpoint.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from agnic_x402 import ConfigError, X402RequestError, create_client, load_client_config


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Call an x402 API using the SDK")
    parser.add_argument("url", help="URL of the x402-enabled API")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing AGNIC_* settings",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument(
        "--api-token",
        help="Authenticate with an API token instead of the configured credential",
    )
    parser.add_argument(
        "--wallet-url",
        help="Override the signing service base URL (default: https://api.agnicpay.xyz)",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    parameter_kwargs = {"wallet_url": args.wallet_url}
    if args.api_token:
        parameter_kwargs.update(auth_scheme="apiKey", api_token=args.api_token)

    try:
        config = load_client_config(env_file=args.env_file, **parameter_kwargs)
    except (ConfigError, ValueError) as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    client = create_client(config=config)

    try:
        result = client.get(args.url)
    except X402RequestError as exc:
        logging.error("Request failed: %s", exc)
        return 1

    if result.paid:
        logging.info(
            "Paid %s at %s", result.payment.amount_paid, result.payment.timestamp.isoformat()
        )
    else:
        logging.info("No payment was required")

    print(json.dumps(result.body, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
