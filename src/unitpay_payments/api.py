"""
Public, high-level helpers for interacting with the Unitpay API.
"""

from __future__ import annotations

from typing import AbstractSet, Iterable, Mapping, Optional

import requests

from .core.client import UnitpayClient
from .core.config import UNITPAY_IPS, UnitpayConfig, UnitpayParameters, load_unitpay_config

__all__ = [
    "create_client",
    "verify_ip",
]


def create_client(
    config: Optional[UnitpayConfig] = None,
    *,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[UnitpayParameters] = None,
    secret_key: Optional[str] = None,
    domain: Optional[str] = None,
    public_key: Optional[str] = None,
    project_id: Optional[int | str] = None,
    timeout_seconds: Optional[int | str] = None,
    trusted_ips: Optional[Iterable[str]] = None,
) -> UnitpayClient:
    """
    Construct a :class:`UnitpayClient`.

    Callers can either supply a ready-made :class:`UnitpayConfig` or let the
    helper assemble one from environment data.
    """
    if config is not None:
        extras = (
            overrides,
            base,
            parameters,
            secret_key,
            domain,
            public_key,
            project_id,
            timeout_seconds,
            trusted_ips,
        )
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built UnitpayConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_unitpay_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            parameters=parameters,
            secret_key=secret_key,
            domain=domain,
            public_key=public_key,
            project_id=project_id,
            timeout_seconds=timeout_seconds,
            trusted_ips=trusted_ips,
        )
    return UnitpayClient(cfg, session=session)


def verify_ip(ip: str, trusted_ips: AbstractSet[str] = UNITPAY_IPS) -> bool:
    """
    Check whether a webhook request came from one of ``trusted_ips``.

    The address is compared as given, without normalization.
    """
    return ip in trusted_ips
