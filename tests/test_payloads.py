"""
Tests for cash item encoding, API query building and hosted payment links.
"""

import base64
import json
from decimal import Decimal
from urllib.parse import parse_qsl, urlsplit

import pytest

from unitpay_payments import CashItem, InvalidInputError, build_form_url, encode_cash_items, sign_payment
from unitpay_payments.core.payloads import build_api_query, prepare_params

from .conftest import SECRET_KEY


def _manual_encode(items):
    return base64.b64encode(json.dumps(items, separators=(",", ":")).encode("utf-8")).decode("ascii")


def _decode(encoded):
    return base64.b64decode(encoded).decode("utf-8")


class TestEncodeCashItems:
    """Tests for encode_cash_items."""

    def test_matches_manual_base64_json(self):
        items = [
            {"name": "Coffee", "count": 2, "price": 150, "nds": "vat20", "type": "commodity"},
            {"name": "Delivery", "count": 1, "price": 99.5, "type": "service"},
        ]

        encoded = encode_cash_items(items)

        assert encoded == _manual_encode(items)
        assert _decode(encoded) == (
            '[{"name":"Coffee","count":2,"price":150,"nds":"vat20","type":"commodity"},'
            '{"name":"Delivery","count":1,"price":99.5,"type":"service"}]'
        )

    def test_cash_item_records(self):
        items = [CashItem(name="Coffee", count=2, price=150, nds="vat20", payment_method="full_payment")]

        encoded = encode_cash_items(items)

        assert encoded == _manual_encode(
            [{"name": "Coffee", "count": 2, "price": 150, "nds": "vat20", "paymentMethod": "full_payment"}]
        )

    def test_string_passes_through(self):
        assert encode_cash_items("already-encoded") == "already-encoded"

    def test_empty_and_none(self):
        assert encode_cash_items([]) is None
        assert encode_cash_items(None) is None

    def test_unicode_kept_as_is(self):
        items = [{"name": "Кофе", "count": 1, "price": 10}]

        decoded = base64.b64decode(encode_cash_items(items)).decode("utf-8")

        assert decoded == '[{"name":"Кофе","count":1,"price":10}]'

    def test_rejects_unknown_item_type(self):
        with pytest.raises(InvalidInputError):
            encode_cash_items([42])

    @pytest.mark.parametrize(
        "price, printed",
        [
            (150.0, "150"),
            (Decimal("150.00"), "150"),
            (Decimal("10.50"), "10.5"),
            (99.5, "99.5"),
            (7, "7"),
        ],
    )
    def test_numbers_printed_like_json_stringify(self, price, printed):
        encoded = encode_cash_items([CashItem(name="A", count=1, price=price)])

        assert _decode(encoded) == '[{"name":"A","count":1,"price":' + printed + "}]"

    def test_decimal_in_plain_mapping(self):
        items = [{"name": "A", "count": Decimal("2"), "price": Decimal("10.5")}]

        assert _decode(encode_cash_items(items)) == '[{"name":"A","count":2,"price":10.5}]'

    def test_unserializable_value_rejected(self):
        with pytest.raises(InvalidInputError):
            encode_cash_items([{"name": "A", "count": 1, "price": object()}])

    @pytest.mark.parametrize("price", [float("nan"), float("inf"), Decimal("NaN")])
    def test_non_finite_number_rejected(self, price):
        with pytest.raises(InvalidInputError):
            encode_cash_items([{"name": "A", "count": 1, "price": price}])


class TestPrepareParams:
    """Tests for prepare_params."""

    def test_drops_none_and_encodes_items(self):
        items = [{"name": "Coffee", "count": 1, "price": 10}]

        prepared = prepare_params({"sum": 10, "backUrl": None, "cashItems": items})

        assert prepared == {"sum": 10, "cashItems": _manual_encode(items)}

    def test_empty_items_removed(self):
        assert prepare_params({"sum": 10, "cashItems": []}) == {"sum": 10}


class TestBuildApiQuery:
    """Tests for build_api_query."""

    def test_flattens_params(self):
        query = build_api_query("getPayment", {"paymentId": 42, "preauth": True}, SECRET_KEY)

        assert query == {
            "method": "getPayment",
            "params[paymentId]": "42",
            "params[preauth]": "true",
            "params[secretKey]": SECRET_KEY,
        }

    def test_empty_method_rejected(self):
        with pytest.raises(InvalidInputError):
            build_api_query("", {}, SECRET_KEY)


class TestBuildFormUrl:
    """Tests for build_form_url."""

    def test_url_shape_and_signature(self):
        params = {"sum": 100, "desc": "Order 1", "account": "order-1", "currency": "RUB"}

        url = build_form_url("unitpay.money", "12345-abcde", params, SECRET_KEY)

        parts = urlsplit(url)
        assert parts.scheme == "https"
        assert parts.netloc == "unitpay.money"
        assert parts.path == "/pay/12345-abcde"
        query = parse_qsl(parts.query)
        assert [key for key, _ in query] == ["account", "currency", "desc", "sum", "signature"]
        assert dict(query)["signature"] == sign_payment(params, SECRET_KEY)
        assert dict(query)["desc"] == "Order 1"

    @pytest.mark.parametrize("public_key", [None, ""])
    def test_missing_public_key_fails_first(self, public_key):
        # Invalid params too: the key check has to come before anything else.
        with pytest.raises(InvalidInputError, match="publicKey mismatch"):
            build_form_url("unitpay.money", public_key, {"cashItems": [42]}, SECRET_KEY)

    def test_cash_items_encoded_in_url(self):
        items = [{"name": "Coffee", "count": 1, "price": 10}]
        params = {"sum": 10, "desc": "d", "account": "a", "cashItems": items}

        url = build_form_url("unitpay.money", "pk", params, SECRET_KEY)

        assert dict(parse_qsl(urlsplit(url).query))["cashItems"] == _manual_encode(items)

    def test_caller_signature_is_recomputed(self):
        params = {"sum": 10, "desc": "d", "account": "a", "signature": "stale"}

        url = build_form_url("unitpay.money", "pk", params, SECRET_KEY)

        query = dict(parse_qsl(urlsplit(url).query))
        assert query["signature"] == sign_payment(params, SECRET_KEY)
