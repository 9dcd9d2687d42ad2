"""
Request signatures for the Unitpay API.

Unitpay recomputes the signature on its side, so the canonical form has to be
reproduced exactly: values ordered by parameter name, joined with ``{up}``,
followed by the secret key, then hashed with SHA-256.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, Mapping

from .errors import InvalidInputError

__all__ = [
    "DELIMITER",
    "PAYMENT_SIGNATURE_FIELDS",
    "SignatureOutcome",
    "canonical_value",
    "ensure_signature",
    "generate_signature",
    "sign_payment",
]

DELIMITER = "{up}"

PAYMENT_SIGNATURE_FIELDS = ("account", "currency", "desc", "sum")
_REQUIRED_PAYMENT_FIELDS = ("account", "desc", "sum")

_SIGNATURE_KEYS = frozenset({"signature", "sign"})


def canonical_value(key: str, value: Any) -> str:
    """
    Render ``value`` the way it travels on the wire.

    ``bool`` is checked before ``int`` since it is a subclass of it.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    raise InvalidInputError(
        f"Parameter '{key}' has unsupported type {type(value).__name__}"
    )


def generate_signature(
    params: Mapping[str, Any],
    secret_key: str,
    *,
    required: Iterable[str] = (),
) -> str:
    """
    Compute the SHA-256 signature for ``params``.

    ``signature`` / ``sign`` keys and ``None`` values are left out of the
    digest. Keys named in ``required`` must be present with a non-``None``
    value.
    """
    if not secret_key:
        raise InvalidInputError("secret_key must not be empty")

    missing = [key for key in required if params.get(key) is None]
    if missing:
        raise InvalidInputError(
            f"Missing required parameter(s) for signature: {', '.join(missing)}"
        )

    parts = [
        canonical_value(key, value)
        for key, value in sorted(params.items())
        if key not in _SIGNATURE_KEYS and value is not None
    ]
    parts.append(secret_key)
    payload = DELIMITER.join(parts)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def sign_payment(params: Mapping[str, Any], secret_key: str) -> str:
    """
    Sign the payment fields Unitpay checks on ``initPayment`` and the hosted form.
    """
    signable = {
        key: params[key] for key in PAYMENT_SIGNATURE_FIELDS if params.get(key) is not None
    }
    return generate_signature(
        signable, secret_key, required=_REQUIRED_PAYMENT_FIELDS
    )


@dataclass(frozen=True)
class SignatureOutcome:
    """Result of :func:`ensure_signature`."""

    params: Dict[str, Any]
    signature: str
    generated: bool


def ensure_signature(params: Mapping[str, Any], secret_key: str) -> SignatureOutcome:
    """
    Return ``params`` carrying a signature, computing one only when absent.

    A caller-supplied ``signature`` is passed through untouched. The input
    mapping is never modified.
    """
    existing = params.get("signature")
    if existing:
        logging.debug("Keeping caller-supplied signature")
        return SignatureOutcome(params=dict(params), signature=existing, generated=False)

    signature = sign_payment(params, secret_key)
    signed = dict(params)
    signed["signature"] = signature
    return SignatureOutcome(params=signed, signature=signature, generated=True)
