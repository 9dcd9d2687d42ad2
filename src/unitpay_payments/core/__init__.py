"""
Core primitives that implement the Unitpay API client.
"""

from .client import UnitpayClient, send_request
from .config import (
    UNITPAY_IPS,
    UnitpayConfig,
    UnitpayParameters,
    load_trusted_ips,
    load_unitpay_config,
)
from .environment import UnitpayEnvironment, build_environment, load_env_file, read_env_file
from .errors import ConfigError, InvalidInputError, TransportError, UnitpayError
from .models import (
    ApiError,
    ApiRequest,
    ApiResponse,
    BinInfo,
    CashItem,
    CommonResponse,
    Commissions,
    CurrencyCourses,
    FormParams,
    GetBinInfoRequest,
    GetCommissionsRequest,
    GetPaymentRequest,
    GetPaymentResponse,
    GetSubscriptionRequest,
    InitPaymentRequest,
    InitPaymentResponse,
    ListSubscriptionsRequest,
    MassPaymentRequest,
    MassPaymentResponse,
    MassPaymentStatusRequest,
    OffsetAdvanceRequest,
    PartnerInfo,
    PartnerRequest,
    RefundPaymentRequest,
    Subscription,
    UnitWallet,
)
from .payloads import build_api_query, build_form_url, encode_cash_items
from .signing import (
    SignatureOutcome,
    ensure_signature,
    generate_signature,
    sign_payment,
)

__all__ = [
    "ApiError",
    "ApiRequest",
    "ApiResponse",
    "BinInfo",
    "CashItem",
    "CommonResponse",
    "Commissions",
    "ConfigError",
    "CurrencyCourses",
    "FormParams",
    "GetBinInfoRequest",
    "GetCommissionsRequest",
    "GetPaymentRequest",
    "GetPaymentResponse",
    "GetSubscriptionRequest",
    "InitPaymentRequest",
    "InitPaymentResponse",
    "InvalidInputError",
    "ListSubscriptionsRequest",
    "MassPaymentRequest",
    "MassPaymentResponse",
    "MassPaymentStatusRequest",
    "OffsetAdvanceRequest",
    "PartnerInfo",
    "PartnerRequest",
    "RefundPaymentRequest",
    "SignatureOutcome",
    "Subscription",
    "TransportError",
    "UNITPAY_IPS",
    "UnitWallet",
    "UnitpayClient",
    "UnitpayConfig",
    "UnitpayEnvironment",
    "UnitpayError",
    "UnitpayParameters",
    "build_api_query",
    "build_environment",
    "build_form_url",
    "encode_cash_items",
    "ensure_signature",
    "generate_signature",
    "load_env_file",
    "load_trusted_ips",
    "load_unitpay_config",
    "read_env_file",
    "send_request",
    "sign_payment",
]
