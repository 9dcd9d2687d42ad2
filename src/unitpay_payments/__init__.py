"""
Public facade for the Unitpay client package.

The module intentionally re-exports the most useful pieces for integrators so
they can ``from unitpay_payments import ...`` without navigating the package.
"""

from .api import create_client, verify_ip
from .core import (
    UNITPAY_IPS,
    ApiError,
    ApiRequest,
    ApiResponse,
    CashItem,
    ConfigError,
    FormParams,
    GetBinInfoRequest,
    GetCommissionsRequest,
    GetPaymentRequest,
    GetSubscriptionRequest,
    InitPaymentRequest,
    InvalidInputError,
    ListSubscriptionsRequest,
    MassPaymentRequest,
    MassPaymentStatusRequest,
    OffsetAdvanceRequest,
    PartnerRequest,
    RefundPaymentRequest,
    SignatureOutcome,
    TransportError,
    UnitpayClient,
    UnitpayConfig,
    UnitpayError,
    UnitpayParameters,
    build_form_url,
    encode_cash_items,
    ensure_signature,
    generate_signature,
    load_env_file,
    load_trusted_ips,
    load_unitpay_config,
    sign_payment,
)

__all__ = (
    "UNITPAY_IPS",
    "ApiError",
    "ApiRequest",
    "ApiResponse",
    "CashItem",
    "ConfigError",
    "FormParams",
    "GetBinInfoRequest",
    "GetCommissionsRequest",
    "GetPaymentRequest",
    "GetSubscriptionRequest",
    "InitPaymentRequest",
    "InvalidInputError",
    "ListSubscriptionsRequest",
    "MassPaymentRequest",
    "MassPaymentStatusRequest",
    "OffsetAdvanceRequest",
    "PartnerRequest",
    "RefundPaymentRequest",
    "SignatureOutcome",
    "TransportError",
    "UnitpayClient",
    "UnitpayConfig",
    "UnitpayError",
    "UnitpayParameters",
    "build_form_url",
    "create_client",
    "encode_cash_items",
    "ensure_signature",
    "generate_signature",
    "load_env_file",
    "load_trusted_ips",
    "load_unitpay_config",
    "sign_payment",
    "verify_ip",
)
