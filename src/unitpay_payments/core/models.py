"""
Typed request and response records for the Unitpay API.

Request records render themselves to wire parameters via :meth:`to_params`.
Records that serve a single API method carry it as ``method``; records
shared by several methods (``GetPaymentRequest`` and friends) do not.
Response records are built from the ``result`` object of the JSON body with
``from_response``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from decimal import Decimal
from typing import (
    Any,
    Callable,
    ClassVar,
    Dict,
    FrozenSet,
    Generic,
    List,
    Mapping,
    Optional,
    Sequence,
    TypeVar,
    Union,
)

from .errors import InvalidInputError

__all__ = [
    "ApiError",
    "ApiRequest",
    "ApiResponse",
    "BinInfo",
    "CASH_ITEM_TYPES",
    "CashItem",
    "CommonResponse",
    "Commissions",
    "CurrencyCourses",
    "FormParams",
    "GetBinInfoRequest",
    "GetCommissionsRequest",
    "GetPaymentRequest",
    "GetPaymentResponse",
    "GetSubscriptionRequest",
    "InitPaymentRequest",
    "InitPaymentResponse",
    "ListSubscriptionsRequest",
    "MassPaymentRequest",
    "MassPaymentResponse",
    "MassPaymentStatusRequest",
    "OPERATOR_CODES",
    "OffsetAdvanceRequest",
    "PAYMENT_CODES",
    "PAYMENT_STATUSES",
    "PartnerInfo",
    "PartnerRequest",
    "REFUND_PAYMENT_METHODS",
    "RefundPaymentRequest",
    "Subscription",
    "UnitWallet",
    "VAT_CODES",
    "to_wire_name",
]

Number = Union[int, float, Decimal]

PAYMENT_STATUSES: FrozenSet[str] = frozenset(
    {"success", "wait", "error", "error_pay", "error_check", "refund", "secure"}
)
PAYMENT_CODES: FrozenSet[str] = frozenset(
    {
        "mc",
        "card",
        "webmoney",
        "webmoneyWmr",
        "yandex",
        "qiwi",
        "paypal",
        "applepay",
        "samsungpay",
        "googlepay",
        "yandexpay",
    }
)
OPERATOR_CODES: FrozenSet[str] = frozenset({"mts", "mf", "beeline", "tele2"})
REFUND_PAYMENT_METHODS: FrozenSet[str] = frozenset(
    {"full_prepayment", "prepayment", "advance", "full_payment"}
)
# "node" is the literal the API uses for "no VAT".
VAT_CODES: FrozenSet[str] = frozenset({"node", "vat0", "vat10", "vat20"})
CASH_ITEM_TYPES: FrozenSet[str] = frozenset(
    {
        "commodity",
        "excise",
        "job",
        "service",
        "lottery_prize",
        "intellectual_activity",
        "agent_commission",
        "another",
        "property_right",
        "non-operating_gain",
        "insurance_premium",
        "sales_tax",
        "resort_fee",
    }
)


def to_wire_name(name: str) -> str:
    """``payment_id`` -> ``paymentId``."""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _require(record: Any, *names: str) -> None:
    for name in names:
        value = getattr(record, name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise InvalidInputError(
                f"{type(record).__name__}.{name} ({to_wire_name(name)}) is required"
            )


def _check_choice(record: Any, name: str, allowed: FrozenSet[str]) -> None:
    value = getattr(record, name)
    if value is not None and value not in allowed:
        raise InvalidInputError(
            f"{type(record).__name__}.{name} must be one of "
            f"{', '.join(sorted(allowed))}; got '{value}'"
        )


def _check_positive(record: Any, name: str) -> None:
    value = getattr(record, name)
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)) or value <= 0:
        raise InvalidInputError(
            f"{type(record).__name__}.{name} must be a positive number"
        )


@dataclass(frozen=True)
class CashItem:
    """A receipt line item."""

    name: str
    count: Number
    price: Number
    nds: Optional[str] = None
    type: Optional[str] = None
    currency: Optional[str] = None
    payment_method: Optional[str] = None
    nomenclature_code: Optional[str] = None

    def __post_init__(self) -> None:
        _require(self, "name", "count", "price")
        _check_choice(self, "nds", VAT_CODES)
        _check_choice(self, "type", CASH_ITEM_TYPES)
        _check_choice(self, "payment_method", REFUND_PAYMENT_METHODS)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if value is None:
                continue
            payload[to_wire_name(item.name)] = value
        return payload


CashItems = Union[str, Sequence[Union[CashItem, Mapping[str, Any]]]]


class _Params:
    """Renders a record to wire parameters."""

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if value is None:
                continue
            params[to_wire_name(item.name)] = value
        return params


class ApiRequest(_Params):
    """A record that belongs to exactly one API method."""

    method: ClassVar[str]


@dataclass(frozen=True)
class GetPaymentRequest(_Params):
    """Used by ``getPayment``, ``confirmPayment`` and ``cancelPayment``."""

    payment_id: int

    def __post_init__(self) -> None:
        _require(self, "payment_id")


@dataclass(frozen=True)
class InitPaymentRequest(ApiRequest):
    method: ClassVar[str] = "initPayment"

    sum: Number
    desc: str
    account: str
    project_id: int
    payment_type: str
    ip: Optional[str] = None
    local: Optional[str] = None
    phone: Optional[int] = None
    back_url: Optional[str] = None
    currency: Optional[str] = None
    preauth: Optional[bool] = None
    operator: Optional[str] = None
    result_url: Optional[str] = None
    cash_items: Optional[CashItems] = None
    signature: Optional[str] = None
    subscription: Optional[bool] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[int] = None
    subscription_id: Optional[int] = None
    preauth_expire_logic: Optional[int] = None

    def __post_init__(self) -> None:
        _require(self, "sum", "desc", "account", "project_id", "payment_type")
        _check_positive(self, "sum")
        _check_choice(self, "payment_type", PAYMENT_CODES)
        _check_choice(self, "operator", OPERATOR_CODES)


@dataclass(frozen=True)
class RefundPaymentRequest(ApiRequest):
    method: ClassVar[str] = "refundPayment"

    payment_id: int
    sum: Optional[Number] = None
    cash_items: Optional[CashItems] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[int] = None
    payment_method: Optional[str] = None

    def __post_init__(self) -> None:
        _require(self, "payment_id")
        _check_positive(self, "sum")
        _check_choice(self, "payment_method", REFUND_PAYMENT_METHODS)


@dataclass(frozen=True)
class ListSubscriptionsRequest(ApiRequest):
    method: ClassVar[str] = "listSubscriptions"

    project_id: int

    def __post_init__(self) -> None:
        _require(self, "project_id")


@dataclass(frozen=True)
class GetSubscriptionRequest(_Params):
    """Used by ``getSubscription`` and ``closeSubscription``."""

    subscription_id: int

    def __post_init__(self) -> None:
        _require(self, "subscription_id")


@dataclass(frozen=True)
class OffsetAdvanceRequest(ApiRequest):
    method: ClassVar[str] = "offsetAdvance"

    login: str
    payment_id: str
    cash_items: Optional[CashItems] = None

    def __post_init__(self) -> None:
        _require(self, "login", "payment_id")


@dataclass(frozen=True)
class PartnerRequest(_Params):
    """Used by ``getPartner`` and ``getCurrencyCourses``."""

    login: str

    def __post_init__(self) -> None:
        _require(self, "login")


@dataclass(frozen=True)
class GetCommissionsRequest(ApiRequest):
    method: ClassVar[str] = "getCommissions"

    login: str
    project_id: int

    def __post_init__(self) -> None:
        _require(self, "login", "project_id")


@dataclass(frozen=True)
class GetBinInfoRequest(ApiRequest):
    method: ClassVar[str] = "getBinInfo"

    login: str
    bin: str

    def __post_init__(self) -> None:
        _require(self, "login", "bin")


@dataclass(frozen=True)
class MassPaymentRequest(ApiRequest):
    """Payout to an individual (``unitpay.money`` accounts only)."""

    method: ClassVar[str] = "massPayment"

    sum: Number
    login: str
    purse: str
    payment_type: str
    transaction_id: str
    comment: Optional[str] = None
    project_id: Optional[int] = None

    def __post_init__(self) -> None:
        _require(self, "sum", "login", "purse", "payment_type", "transaction_id")
        _check_positive(self, "sum")
        _check_choice(self, "payment_type", PAYMENT_CODES)


@dataclass(frozen=True)
class MassPaymentStatusRequest(ApiRequest):
    method: ClassVar[str] = "massPaymentStatus"

    login: str
    transaction_id: str

    def __post_init__(self) -> None:
        _require(self, "login", "transaction_id")


@dataclass(frozen=True)
class FormParams(_Params):
    """Parameters for the hosted payment page."""

    sum: Number
    desc: str
    account: str
    locale: Optional[str] = None
    back_url: Optional[str] = None
    cash_items: Optional[CashItems] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    test: Optional[int] = None
    currency: Optional[str] = None
    signature: Optional[str] = None

    def __post_init__(self) -> None:
        _require(self, "sum", "desc", "account")
        _check_positive(self, "sum")
        if self.test is not None and str(self.test) != "1":
            raise InvalidInputError("FormParams.test must be 1 when set")


# Responses


@dataclass(frozen=True)
class ApiError:
    message: str
    code: Optional[int] = None

    @classmethod
    def from_response(cls, payload: Any) -> "ApiError":
        if not isinstance(payload, Mapping):
            return cls(message=str(payload))
        code = payload.get("code")
        try:
            code = int(code) if code is not None else None
        except (TypeError, ValueError):
            code = None
        return cls(message=str(payload.get("message", "")), code=code)


@dataclass(frozen=True)
class CommonResponse:
    message: str

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "CommonResponse":
        return cls(message=str(payload.get("message", "")))


@dataclass(frozen=True)
class GetPaymentResponse:
    payment_id: int
    project_id: int
    status: str
    date: Optional[str] = None
    purse: Optional[str] = None
    profit: Optional[float] = None
    account: Optional[str] = None
    payer_sum: Optional[float] = None
    order_sum: Optional[float] = None
    receipt_url: Optional[str] = None
    payment_type: Optional[str] = None
    error_message: Optional[str] = None
    order_currency: Optional[str] = None
    payer_currency: Optional[str] = None

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "GetPaymentResponse":
        return cls(
            payment_id=payload.get("paymentId"),
            project_id=payload.get("projectId"),
            status=payload.get("status"),
            date=payload.get("date"),
            purse=payload.get("purse"),
            profit=payload.get("profit"),
            account=payload.get("account"),
            payer_sum=payload.get("payerSum"),
            order_sum=payload.get("orderSum"),
            receipt_url=payload.get("receiptUrl"),
            payment_type=payload.get("paymentType"),
            error_message=payload.get("errorMessage"),
            order_currency=payload.get("orderCurrency"),
            payer_currency=payload.get("payerCurrency"),
        )


@dataclass(frozen=True)
class InitPaymentResponse:
    type: str
    payment_id: int
    message: Optional[str] = None
    receipt_url: Optional[str] = None
    response: Optional[str] = None
    invoice_id: Optional[str] = None
    redirect_url: Optional[str] = None

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "InitPaymentResponse":
        return cls(
            type=payload.get("type"),
            payment_id=payload.get("paymentId"),
            message=payload.get("message"),
            receipt_url=payload.get("receiptUrl"),
            response=payload.get("response"),
            invoice_id=payload.get("invoiceId"),
            redirect_url=payload.get("redirectUrl"),
        )


@dataclass(frozen=True)
class Subscription:
    subscription_id: int
    status: str
    total_sum: Optional[float] = None
    start_date: Optional[str] = None
    description: Optional[str] = None
    fail_payments: Optional[int] = None
    last_payment_id: Optional[int] = None
    last_update_date: Optional[str] = None
    success_payments: Optional[int] = None
    parent_payment_id: Optional[int] = None
    close_type: Optional[str] = None

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "Subscription":
        return cls(
            subscription_id=payload.get("subscriptionId"),
            status=payload.get("status"),
            total_sum=payload.get("totalSum"),
            start_date=payload.get("startDate"),
            description=payload.get("description"),
            fail_payments=payload.get("failPayments"),
            last_payment_id=payload.get("lastPaymentId"),
            last_update_date=payload.get("lastUpdateDate"),
            success_payments=payload.get("successPayments"),
            parent_payment_id=payload.get("parentPaymentId"),
            close_type=payload.get("closeType"),
        )

    @classmethod
    def list_from_response(cls, payload: Any) -> List["Subscription"]:
        # The API answers with either a list or an object keyed by id.
        if isinstance(payload, Mapping):
            items = list(payload.values())
        else:
            items = list(payload or [])
        return [cls.from_response(item) for item in items]


@dataclass(frozen=True)
class UnitWallet:
    rest_balance: float
    rest_payouts: float
    rest_ecommerce_payouts_today: float
    rest_ecommerce_payouts_month: float

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "UnitWallet":
        return cls(
            rest_balance=payload.get("rest_balance"),
            rest_payouts=payload.get("rest_payouts"),
            rest_ecommerce_payouts_today=payload.get("rest_ecommerce_payouts_today"),
            rest_ecommerce_payouts_month=payload.get("rest_ecommerce_payouts_month"),
        )


@dataclass(frozen=True)
class PartnerInfo:
    email: str
    balance: float
    balance_payout: float
    unitwallet: Optional[UnitWallet] = None

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "PartnerInfo":
        wallet = payload.get("unitwallet")
        return cls(
            email=payload.get("email"),
            balance=payload.get("balance"),
            balance_payout=payload.get("balance_payout"),
            unitwallet=UnitWallet.from_response(wallet) if wallet else None,
        )


@dataclass(frozen=True)
class Commissions:
    """Commission percent per payment code."""

    rates: Dict[str, float] = field(default_factory=dict)

    def __getitem__(self, payment_code: str) -> float:
        return self.rates[payment_code]

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "Commissions":
        return cls(rates={str(key): value for key, value in payload.items()})


@dataclass(frozen=True)
class CurrencyCourses:
    incoming: Dict[str, float] = field(default_factory=dict)
    outgoing: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "CurrencyCourses":
        return cls(
            incoming=dict(payload.get("in") or {}),
            outgoing=dict(payload.get("out") or {}),
        )


@dataclass(frozen=True)
class BinInfo:
    bin: str
    bank: Optional[str] = None
    type: Optional[str] = None
    brand: Optional[str] = None
    bank_url: Optional[str] = None
    category: Optional[str] = None
    bank_phone: Optional[str] = None
    country_code: Optional[str] = None

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "BinInfo":
        return cls(
            bin=payload.get("bin"),
            bank=payload.get("bank"),
            type=payload.get("type"),
            brand=payload.get("brand"),
            bank_url=payload.get("bankUrl"),
            category=payload.get("category"),
            bank_phone=payload.get("bankPhone"),
            country_code=payload.get("countryCode"),
        )


@dataclass(frozen=True)
class MassPaymentResponse:
    status: str
    payout_id: int
    sum: Optional[float] = None
    message: Optional[str] = None
    create_date: Optional[str] = None
    complete_date: Optional[str] = None
    partner_balance: Optional[float] = None
    payout_commission: Optional[float] = None
    partner_commission: Optional[float] = None

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "MassPaymentResponse":
        return cls(
            status=payload.get("status"),
            payout_id=payload.get("payoutId"),
            sum=payload.get("sum"),
            message=payload.get("message"),
            create_date=payload.get("createDate"),
            complete_date=payload.get("completeDate"),
            partner_balance=payload.get("partnerBalance"),
            payout_commission=payload.get("payoutCommission"),
            partner_commission=payload.get("partnerCommission"),
        )


T = TypeVar("T")


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    """
    Envelope around a decoded API body.

    Unitpay answers ``{"result": {...}}`` on success and
    ``{"error": {"message": ..., "code": ...}}`` otherwise. Errors are carried
    as data; nothing is raised for them.
    """

    result: Optional[T]
    error: Optional[ApiError]
    raw: Dict[str, Any]

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def from_body(
        cls,
        body: Mapping[str, Any],
        parse: Callable[[Any], T],
    ) -> "ApiResponse[T]":
        if "error" in body:
            return cls(result=None, error=ApiError.from_response(body["error"]), raw=dict(body))
        result = body.get("result")
        return cls(
            result=parse(result) if result is not None else None,
            error=None,
            raw=dict(body),
        )
