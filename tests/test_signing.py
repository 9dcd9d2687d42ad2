"""
Tests for request signatures.
"""

import hashlib
from decimal import Decimal

import pytest

from unitpay_payments import InvalidInputError, ensure_signature, generate_signature, sign_payment

from .conftest import SECRET_KEY


def _expected(*parts: str) -> str:
    return hashlib.sha256("{up}".join(parts).encode("utf-8")).hexdigest()


class TestGenerateSignature:
    """Tests for generate_signature."""

    def test_sorted_by_key_and_secret_appended(self):
        params = {"sum": 10, "account": "order-1", "desc": "Test"}

        signature = generate_signature(params, SECRET_KEY)

        assert signature == _expected("order-1", "Test", "10", SECRET_KEY)
        assert len(signature) == 64

    def test_deterministic(self):
        params = {"sum": 10.5, "account": "order-1", "desc": "Test", "preauth": True}

        assert generate_signature(params, SECRET_KEY) == generate_signature(dict(params), SECRET_KEY)

    def test_insertion_order_does_not_matter(self):
        first = {"a": "1", "b": "2", "c": "3"}
        second = {"c": "3", "a": "1", "b": "2"}

        assert generate_signature(first, SECRET_KEY) == generate_signature(second, SECRET_KEY)

    @pytest.mark.parametrize(
        "key, value",
        [("sum", 11), ("account", "order-2"), ("desc", "Other"), ("currency", "USD")],
    )
    def test_single_value_change_changes_digest(self, key, value):
        params = {"sum": 10, "account": "order-1", "desc": "Test", "currency": "RUB"}
        changed = dict(params, **{key: value})

        assert generate_signature(params, SECRET_KEY) != generate_signature(changed, SECRET_KEY)

    def test_secret_changes_digest(self):
        params = {"sum": 10, "account": "order-1", "desc": "Test"}

        assert generate_signature(params, "secret-1") != generate_signature(params, "secret-2")

    def test_value_canonicalization(self):
        params = {"a": True, "b": False, "c": Decimal("10.50"), "d": 1.5, "e": 7}

        assert generate_signature(params, SECRET_KEY) == _expected(
            "true", "false", "10.50", "1.5", "7", SECRET_KEY
        )

    def test_signature_keys_and_none_values_skipped(self):
        params = {"account": "order-1", "signature": "abc", "sign": "def", "currency": None}

        assert generate_signature(params, SECRET_KEY) == _expected("order-1", SECRET_KEY)

    def test_non_primitive_value_rejected(self):
        with pytest.raises(InvalidInputError):
            generate_signature({"items": [1, 2]}, SECRET_KEY)

    def test_missing_required_field_rejected(self):
        with pytest.raises(InvalidInputError, match="desc"):
            generate_signature({"account": "a"}, SECRET_KEY, required=("account", "desc"))

    def test_empty_secret_rejected(self):
        with pytest.raises(InvalidInputError):
            generate_signature({"account": "a"}, "")


class TestSignPayment:
    """Tests for the Unitpay payment field subset."""

    def test_uses_payment_fields_only(self):
        params = {
            "account": "order-1",
            "currency": "RUB",
            "desc": "Test",
            "sum": 100,
            "paymentType": "card",
            "projectId": 1,
        }

        assert sign_payment(params, SECRET_KEY) == _expected(
            "order-1", "RUB", "Test", "100", SECRET_KEY
        )

    def test_currency_is_optional(self):
        params = {"account": "order-1", "desc": "Test", "sum": 100}

        assert sign_payment(params, SECRET_KEY) == _expected("order-1", "Test", "100", SECRET_KEY)

    def test_missing_sum_rejected(self):
        with pytest.raises(InvalidInputError, match="sum"):
            sign_payment({"account": "order-1", "desc": "Test"}, SECRET_KEY)


class TestEnsureSignature:
    """Tests for the sign-only-if-absent check."""

    def test_generates_when_absent(self):
        params = {"account": "order-1", "desc": "Test", "sum": 100}

        outcome = ensure_signature(params, SECRET_KEY)

        assert outcome.generated is True
        assert outcome.signature == sign_payment(params, SECRET_KEY)
        assert outcome.params["signature"] == outcome.signature
        assert "signature" not in params

    def test_keeps_caller_signature(self):
        params = {"account": "order-1", "desc": "Test", "sum": 100, "signature": "caller-made"}

        outcome = ensure_signature(params, SECRET_KEY)

        assert outcome.generated is False
        assert outcome.signature == "caller-made"
        assert outcome.params["signature"] == "caller-made"

    def test_empty_signature_is_replaced(self):
        params = {"account": "order-1", "desc": "Test", "sum": 100, "signature": ""}

        outcome = ensure_signature(params, SECRET_KEY)

        assert outcome.generated is True
        assert outcome.signature != ""
