"""
Helpers for constructing the parameters sent to the Unitpay API.
"""

from __future__ import annotations

import base64
import json
import math
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Sequence, Union
from urllib.parse import urlencode

from .errors import InvalidInputError
from .models import CashItem
from .signing import canonical_value, sign_payment

__all__ = [
    "build_api_query",
    "build_form_url",
    "encode_cash_items",
    "prepare_params",
]


def _js_number(value: Any) -> Any:
    """
    Normalize numbers so ``json.dumps`` prints them like ``JSON.stringify``.

    Integral floats and Decimals become ``int`` (``150.0`` -> ``150``); other
    Decimals become ``float``. Containers are walked recursively.
    """
    if isinstance(value, bool) or value is None or isinstance(value, str):
        return value
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise InvalidInputError(f"Cash item value {value} is not a finite number")
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidInputError(f"Cash item value {value} is not a finite number")
        return int(value) if value.is_integer() else value
    if isinstance(value, Mapping):
        return {key: _js_number(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_js_number(item) for item in value]
    return value


def encode_cash_items(
    items: Optional[Union[str, Sequence[Union[CashItem, Mapping[str, Any]]]]],
) -> Optional[str]:
    """
    Encode receipt items as base64 JSON.

    The JSON is compact (no whitespace) so the result matches what
    ``btoa(JSON.stringify(items))`` produces. Strings are assumed to be
    encoded already and are returned as is.
    """
    if items is None:
        return None
    if isinstance(items, str):
        return items
    rendered = []
    for item in items:
        if isinstance(item, CashItem):
            rendered.append(_js_number(item.to_dict()))
        elif isinstance(item, Mapping):
            rendered.append(_js_number(dict(item)))
        else:
            raise InvalidInputError(
                f"Cash items must be CashItem records or mappings, got {type(item).__name__}"
            )
    if not rendered:
        return None
    try:
        document = json.dumps(
            rendered, separators=(",", ":"), ensure_ascii=False, allow_nan=False
        )
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Cash items cannot be serialized: {exc}") from exc
    return base64.b64encode(document.encode("utf-8")).decode("ascii")


def prepare_params(params: Mapping[str, Any]) -> Dict[str, Any]:
    """Drop ``None`` values and encode ``cashItems`` when present."""
    prepared = {key: value for key, value in params.items() if value is not None}
    if "cashItems" in prepared:
        encoded = encode_cash_items(prepared["cashItems"])
        if encoded is None:
            del prepared["cashItems"]
        else:
            prepared["cashItems"] = encoded
    return prepared


def build_api_query(
    method: str,
    params: Mapping[str, Any],
    secret_key: str,
) -> Dict[str, str]:
    """
    Flatten ``params`` into the ``method=...&params[key]=...`` query the API reads.
    """
    if not method:
        raise InvalidInputError("API method name must not be empty")
    query: Dict[str, str] = {"method": method}
    for key, value in params.items():
        if value is None:
            continue
        query[f"params[{key}]"] = canonical_value(key, value)
    query["params[secretKey]"] = secret_key
    return query


def build_form_url(
    domain: str,
    public_key: Optional[str],
    params: Mapping[str, Any],
    secret_key: str,
) -> str:
    """
    Build the hosted payment page link.

    Parameters are sorted by name, signed, and the signature is appended
    before the whole set is URL-encoded.
    """
    if not public_key:
        raise InvalidInputError("publicKey mismatch")

    prepared = prepare_params(params)
    prepared.pop("signature", None)
    ordered = dict(sorted(prepared.items()))
    ordered["signature"] = sign_payment(ordered, secret_key)

    query = urlencode(
        [(key, canonical_value(key, value)) for key, value in ordered.items()]
    )
    return f"https://{domain}/pay/{public_key}?{query}"
