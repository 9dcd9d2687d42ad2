"""
Minimal script that uses the public API to start a Unitpay payment.
"""

from __future__ import annotations

import argparse
import logging
import sys
from decimal import Decimal

from unitpay_payments import (
    CashItem,
    ConfigError,
    FormParams,
    InitPaymentRequest,
    InvalidInputError,
    TransportError,
    create_client,
    load_unitpay_config,
)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Start a Unitpay payment using the SDK API")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing UNITPAY_* settings",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument("--account", required=True, help="Order identifier in your system")
    parser.add_argument("--sum", required=True, type=Decimal, help="Order amount")
    parser.add_argument("--desc", default="Order payment", help="Payment description")
    parser.add_argument("--payment-type", default="card", help="Unitpay payment code")
    parser.add_argument("--currency", default="RUB")
    parser.add_argument(
        "--form-only",
        action="store_true",
        help="Print a hosted payment page link instead of calling initPayment",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        config = load_unitpay_config(env_file=args.env_file)
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    client = create_client(config)
    items = [CashItem(name=args.desc, count=1, price=args.sum, nds="vat20")]

    try:
        if args.form_only:
            params = FormParams(
                sum=args.sum,
                desc=args.desc,
                account=args.account,
                currency=args.currency,
                cash_items=items,
            )
            print(client.form(None, params))
            return 0

        if config.project_id is None:
            logging.error("UNITPAY_PROJECT_ID is required for initPayment")
            return 1

        request = InitPaymentRequest(
            sum=args.sum,
            desc=args.desc,
            account=args.account,
            project_id=config.project_id,
            payment_type=args.payment_type,
            currency=args.currency,
            cash_items=items,
        )
        response = client.init_payment(request)
    except InvalidInputError as exc:
        logging.error("Invalid input: %s", exc)
        return 1
    except TransportError as exc:
        logging.error("initPayment failed: %s", exc)
        return 1

    if not response.ok:
        logging.error("Unitpay rejected the payment: %s", response.error.message)
        return 1

    logging.info(
        "Payment %s created, redirect the payer to %s",
        response.result.payment_id,
        response.result.redirect_url,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
