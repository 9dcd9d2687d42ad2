"""
Configuration objects and helpers for the Unitpay client.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional

from .environment import build_environment
from .errors import ConfigError

__all__ = [
    "ConfigError",
    "DEFAULT_DOMAIN",
    "UNITPAY_IPS",
    "UnitpayConfig",
    "UnitpayParameters",
    "load_trusted_ips",
    "load_unitpay_config",
]

DEFAULT_DOMAIN = "unitpay.money"
DEFAULT_TIMEOUT_SECONDS = 30

# Addresses Unitpay sends webhook notifications from.
UNITPAY_IPS: FrozenSet[str] = frozenset(
    {
        "31.186.100.49",
        "178.132.203.105",
        "52.29.152.23",
        "52.19.56.234",
    }
)

_PARAMETER_TO_ENV_KEY = {
    "secret_key": "UNITPAY_SECRET_KEY",
    "domain": "UNITPAY_DOMAIN",
    "public_key": "UNITPAY_PUBLIC_KEY",
    "project_id": "UNITPAY_PROJECT_ID",
    "timeout_seconds": "UNITPAY_TIMEOUT_SECONDS",
    "trusted_ips": "UNITPAY_TRUSTED_IPS",
}


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (set, frozenset, list, tuple)):
        return ",".join(sorted(str(item) for item in value))
    return str(value)


@dataclass(frozen=True)
class UnitpayParameters:
    """
    Explicit parameter bundle for constructing :class:`UnitpayConfig`.

    Callers can either instantiate this helper or pass the individual keyword
    arguments directly to :func:`load_unitpay_config`.
    """

    secret_key: Optional[str] = None
    domain: Optional[str] = None
    public_key: Optional[str] = None
    project_id: Optional[int | str] = None
    timeout_seconds: Optional[int | str] = None
    trusted_ips: Optional[Iterable[str]] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = _stringify(value)
        return overrides


def _collect_parameter_overrides(
    parameters: Optional[UnitpayParameters],
    explicit: Mapping[str, Any],
) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    if parameters is not None:
        overrides.update(parameters.as_overrides())

    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:
            raise TypeError(f"Unknown Unitpay parameter '{key}'") from exc
        overrides[env_key] = _stringify(value)
    return overrides


def _normalize_domain(raw_domain: str) -> str:
    domain = raw_domain.strip()
    for scheme in ("https://", "http://"):
        if domain.startswith(scheme):
            domain = domain[len(scheme):]
    domain = domain.rstrip("/")
    if not domain:
        raise ConfigError("UNITPAY_DOMAIN must not be empty")
    return domain


def _parse_int(raw: Optional[str], field_name: str) -> Optional[int]:
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"{field_name} must be an integer, got '{raw}'") from exc


def _parse_trusted_ips(raw: Optional[str]) -> FrozenSet[str]:
    # Only an absent key means "use the provider list"; an empty value is an
    # explicitly empty trust set.
    if raw is None:
        return UNITPAY_IPS
    addresses = set()
    for item in raw.split(","):
        candidate = item.strip()
        if not candidate:
            continue
        try:
            ipaddress.ip_address(candidate)
        except ValueError as exc:
            raise ConfigError(
                f"UNITPAY_TRUSTED_IPS contains an invalid address: '{candidate}'"
            ) from exc
        addresses.add(candidate)
    return frozenset(addresses)


@dataclass(frozen=True)
class UnitpayConfig:
    secret_key: str
    domain: str = DEFAULT_DOMAIN
    public_key: Optional[str] = None
    project_id: Optional[int] = None
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    trusted_ips: FrozenSet[str] = field(default=UNITPAY_IPS)

    def __post_init__(self) -> None:
        if not self.secret_key or not self.secret_key.strip():
            raise ConfigError("UNITPAY_SECRET_KEY must not be empty")
        if self.timeout_seconds <= 0:
            raise ConfigError("UNITPAY_TIMEOUT_SECONDS must be greater than zero")
        # Accept any iterable but always store an immutable set.
        if not isinstance(self.trusted_ips, frozenset):
            object.__setattr__(self, "trusted_ips", frozenset(self.trusted_ips))

    @property
    def api_url(self) -> str:
        return f"https://{self.domain}/api"

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "UnitpayConfig":
        secret_key = values.get("UNITPAY_SECRET_KEY")
        if secret_key is None:
            raise ConfigError("UNITPAY_SECRET_KEY must be provided")

        domain = _normalize_domain(values.get("UNITPAY_DOMAIN", DEFAULT_DOMAIN))
        public_key = (values.get("UNITPAY_PUBLIC_KEY") or "").strip() or None
        project_id = _parse_int(values.get("UNITPAY_PROJECT_ID"), "UNITPAY_PROJECT_ID")
        timeout_seconds = _parse_int(
            values.get("UNITPAY_TIMEOUT_SECONDS"), "UNITPAY_TIMEOUT_SECONDS"
        )
        trusted_ips = _parse_trusted_ips(values.get("UNITPAY_TRUSTED_IPS"))

        return cls(
            secret_key=secret_key.strip(),
            domain=domain,
            public_key=public_key,
            project_id=project_id,
            timeout_seconds=(
                DEFAULT_TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds
            ),
            trusted_ips=trusted_ips,
        )

    @classmethod
    def from_env(
        cls,
        *,
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
    ) -> "UnitpayConfig":
        parameter_overrides = _collect_parameter_overrides(
            parameters,
            {
                "secret_key": secret_key,
                "domain": domain,
                "public_key": public_key,
                "project_id": project_id,
                "timeout_seconds": timeout_seconds,
                "trusted_ips": trusted_ips,
            },
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment.variables)


def load_unitpay_config(
    *,
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
) -> UnitpayConfig:
    """
    Convenience wrapper that mirrors :meth:`UnitpayConfig.from_env`.

    The configuration can be provided entirely through environment variables,
    a ``.env`` file, direct keyword arguments, or any combination of the three.
    """
    return UnitpayConfig.from_env(
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


def load_trusted_ips(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
) -> FrozenSet[str]:
    """
    Resolve only the webhook trust set, without requiring a secret key.
    """
    environment = build_environment(env_file=env_file, base=base, overrides=overrides)
    return _parse_trusted_ips(environment.get("UNITPAY_TRUSTED_IPS"))
