"""
Shared fixtures: a configured client backed by a fake HTTP session.
"""

from typing import Any, Dict, List, Optional

import pytest

from unitpay_payments import UnitpayClient, UnitpayConfig


SECRET_KEY = "test-secret-key"


class FakeResponse:
    """Stands in for :class:`requests.Response`."""

    def __init__(self, body: Any = None, status_code: int = 200, text: Optional[str] = None):
        self._body = body
        self.status_code = status_code
        self.text = text if text is not None else repr(body)

    def json(self) -> Any:
        if self._body is None:
            raise ValueError("No JSON object could be decoded")
        return self._body


class FakeSession:
    """Records every GET and answers with queued responses."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.responses: List[FakeResponse] = []

    def queue(self, body: Any = None, status_code: int = 200, text: Optional[str] = None) -> None:
        self.responses.append(FakeResponse(body, status_code, text))

    def get(self, url: str, params: Any = None, timeout: Any = None) -> FakeResponse:
        self.calls.append({"url": url, "params": dict(params or {}), "timeout": timeout})
        if not self.responses:
            return FakeResponse({"result": {"message": "ok"}})
        return self.responses.pop(0)

    @property
    def last_params(self) -> Dict[str, str]:
        return self.calls[-1]["params"]


@pytest.fixture
def config() -> UnitpayConfig:
    return UnitpayConfig(
        secret_key=SECRET_KEY,
        public_key="12345-abcde",
        project_id=12345,
        timeout_seconds=15,
    )


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(config: UnitpayConfig, session: FakeSession) -> UnitpayClient:
    return UnitpayClient(config, session=session)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make sure no real UNITPAY_* variables leak into config tests."""
    import os

    for key in list(os.environ):
        if key.startswith("UNITPAY_"):
            monkeypatch.delenv(key, raising=False)
