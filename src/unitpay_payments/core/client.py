"""
HTTP client for the Unitpay API.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

import requests

from .config import UnitpayConfig
from .errors import TransportError
from .models import (
    ApiRequest,
    ApiResponse,
    BinInfo,
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
)
from .payloads import build_api_query, build_form_url, prepare_params
from .signing import ensure_signature

__all__ = [
    "UnitpayClient",
    "send_request",
]

T = TypeVar("T")


def _get_json(
    session: requests.Session,
    url: str,
    query: Mapping[str, str],
    timeout: int,
) -> Dict[str, Any]:
    response = session.get(url, params=query, timeout=timeout)
    try:
        body = response.json()
    except ValueError as exc:
        raise TransportError(
            f"Failed to parse JSON from Unitpay at {url} "
            f"(status {response.status_code}): {response.text[:200]}",
            status_code=response.status_code,
        ) from exc
    if not isinstance(body, dict):
        raise TransportError(
            f"Unexpected response shape from Unitpay at {url}: {body!r}",
            status_code=response.status_code,
        )
    return body


def send_request(
    session: requests.Session,
    config: UnitpayConfig,
    method: str,
    params: Mapping[str, Any],
) -> Dict[str, Any]:
    """
    Issue a single API call and return the decoded JSON body untouched.
    """
    query = build_api_query(method, params, config.secret_key)
    logging.info("Calling Unitpay method %s at %s", method, config.api_url)
    body = _get_json(session, config.api_url, query, config.timeout_seconds)
    if "error" in body:
        logging.warning("Unitpay method %s returned an error: %s", method, body["error"])
    return body


class UnitpayClient:
    """
    Thin convenience wrapper around the Unitpay API methods.
    """

    def __init__(
        self,
        config: UnitpayConfig,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()

    def send(self, method: str, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        return send_request(self.session, self.config, method, params or {})

    def _call(
        self,
        method: str,
        params: Mapping[str, Any],
        parse: Callable[[Any], T],
    ) -> ApiResponse[T]:
        return ApiResponse.from_body(self.send(method, params), parse)

    def _dispatch(
        self,
        request: ApiRequest,
        parse: Callable[[Any], T],
        params: Optional[Mapping[str, Any]] = None,
    ) -> ApiResponse[T]:
        if params is None:
            params = request.to_params()
        return self._call(request.method, params, parse)

    def verify_ip(self, ip: str) -> bool:
        """
        Return ``True`` when ``ip`` is one of the configured Unitpay addresses.

        The check is an exact string match; callers pass the address as read
        from the request.
        """
        return ip in self.config.trusted_ips

    def form(self, public_key: Optional[str], params: FormParams) -> str:
        """
        Build a hosted payment page URL. Falls back to ``config.public_key``.
        """
        key = public_key or self.config.public_key
        return build_form_url(self.config.domain, key, params.to_params(), self.config.secret_key)

    def init_payment(self, request: InitPaymentRequest) -> ApiResponse[InitPaymentResponse]:
        outcome = ensure_signature(request.to_params(), self.config.secret_key)
        if outcome.generated:
            logging.debug("Generated signature for initPayment on account %s", request.account)
        params = prepare_params(outcome.params)
        return self._dispatch(request, InitPaymentResponse.from_response, params)

    def confirm_payment(self, request: GetPaymentRequest) -> ApiResponse[CommonResponse]:
        return self._call("confirmPayment", request.to_params(), CommonResponse.from_response)

    def cancel_payment(self, request: GetPaymentRequest) -> ApiResponse[CommonResponse]:
        return self._call("cancelPayment", request.to_params(), CommonResponse.from_response)

    def get_payment(self, request: GetPaymentRequest) -> ApiResponse[GetPaymentResponse]:
        return self._call("getPayment", request.to_params(), GetPaymentResponse.from_response)

    def refund_payment(self, request: RefundPaymentRequest) -> ApiResponse[CommonResponse]:
        params = prepare_params(request.to_params())
        return self._dispatch(request, CommonResponse.from_response, params)

    def list_subscriptions(
        self, request: ListSubscriptionsRequest
    ) -> ApiResponse[List[Subscription]]:
        return self._dispatch(request, Subscription.list_from_response)

    def get_subscription(self, request: GetSubscriptionRequest) -> ApiResponse[Subscription]:
        return self._call("getSubscription", request.to_params(), Subscription.from_response)

    def close_subscription(self, request: GetSubscriptionRequest) -> ApiResponse[CommonResponse]:
        return self._call("closeSubscription", request.to_params(), CommonResponse.from_response)

    def offset_advance(self, request: OffsetAdvanceRequest) -> ApiResponse[CommonResponse]:
        params = prepare_params(request.to_params())
        return self._dispatch(request, CommonResponse.from_response, params)

    def get_partner(self, request: PartnerRequest) -> ApiResponse[PartnerInfo]:
        return self._call("getPartner", request.to_params(), PartnerInfo.from_response)

    def get_commissions(self, request: GetCommissionsRequest) -> ApiResponse[Commissions]:
        return self._dispatch(request, Commissions.from_response)

    def get_currency_courses(self, request: PartnerRequest) -> ApiResponse[CurrencyCourses]:
        return self._call(
            "getCurrencyCourses", request.to_params(), CurrencyCourses.from_response
        )

    def get_bin_info(self, request: GetBinInfoRequest) -> ApiResponse[BinInfo]:
        return self._dispatch(request, BinInfo.from_response)

    # Payouts to individuals, unitpay.money only.
    def mass_payment(self, request: MassPaymentRequest) -> ApiResponse[MassPaymentResponse]:
        return self._dispatch(request, MassPaymentResponse.from_response)

    def mass_payment_status(
        self, request: MassPaymentStatusRequest
    ) -> ApiResponse[MassPaymentResponse]:
        return self._dispatch(request, MassPaymentResponse.from_response)
