"""
Command-line interface for exercising the Unitpay API helpers.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, Iterable, Sequence, Tuple

import requests

from .core.client import UnitpayClient
from .core.config import UnitpayConfig, load_trusted_ips, load_unitpay_config
from .core.errors import ConfigError, InvalidInputError, TransportError
from .core.payloads import build_form_url
from .core.signing import sign_payment

# verify-ip reserves 0 and 1 for trusted and untrusted.
EXIT_CONFIG_ERROR = 2


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _key_value(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Arguments must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Key must not be empty")
    return key, val


def _collect_pairs(pairs: Iterable[Tuple[str, str]]) -> Dict[str, str]:
    collected: Dict[str, str] = {}
    for key, value in pairs:
        collected[key] = value
    return collected


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="unitpay",
        description="Sign requests, build payment links and call the Unitpay API",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing UNITPAY_* settings (default: .env)",
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

    commands = parser.add_subparsers(dest="command", required=True)

    sign = commands.add_parser("sign", help="Print the payment signature for the given fields")
    sign.add_argument("params", nargs="*", type=_key_value, metavar="KEY=VALUE")

    form = commands.add_parser("form-url", help="Print a hosted payment page link")
    form.add_argument(
        "--public-key",
        help="Project public key (default: UNITPAY_PUBLIC_KEY)",
    )
    form.add_argument("params", nargs="*", type=_key_value, metavar="KEY=VALUE")

    verify = commands.add_parser(
        "verify-ip",
        help="Exit 0 when the address belongs to Unitpay, 1 when it does not, 2 on bad config",
    )
    verify.add_argument("ip")

    call = commands.add_parser("call", help="Send a raw API call and print the JSON body")
    call.add_argument("method", help="API method name, e.g. getPayment")
    call.add_argument("params", nargs="*", type=_key_value, metavar="KEY=VALUE")

    return parser


def _run_call(config: UnitpayConfig, method: str, params: Dict[str, Any]) -> int:
    client = UnitpayClient(config, session=requests.Session())
    try:
        body = client.send(method, params)
    except (TransportError, InvalidInputError, requests.RequestException) as exc:
        logging.error("Request to %s failed: %s", method, exc)
        return 1

    print(json.dumps(body, ensure_ascii=False, indent=2))
    if "error" in body:
        return 1
    return 0


def _run_verify_ip(env_file: str, overrides: Dict[str, str], ip: str) -> int:
    try:
        trusted_ips = load_trusted_ips(env_file=env_file, overrides=overrides)
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return EXIT_CONFIG_ERROR

    trusted = ip in trusted_ips
    logging.info("%s is %s", ip, "trusted" if trusted else "not trusted")
    return 0 if trusted else 1


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect_pairs(args.set or ())

    if args.command == "verify-ip":
        return _run_verify_ip(args.env_file, overrides, args.ip)

    try:
        config = load_unitpay_config(env_file=args.env_file, overrides=overrides)
    except (ConfigError, ValueError) as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    params = _collect_pairs(args.params)

    if args.command == "call":
        return _run_call(config, args.method, params)

    try:
        if args.command == "sign":
            print(sign_payment(params, config.secret_key))
        else:
            public_key = args.public_key or config.public_key
            print(build_form_url(config.domain, public_key, params, config.secret_key))
    except InvalidInputError as exc:
        logging.error("Invalid input: %s", exc)
        return 1
    return 0


def main() -> None:
    sys.exit(run_cli())
