# SPDX-License-Identifier: MIT
"""Pytest configuration and fixtures for reCAPTCHA v3 guard tests."""

import os
from typing import Optional

import httpx
import pytest

from recaptcha_v3.config import get_settings


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio for async tests."""
    return "asyncio"


@pytest.fixture(autouse=True)
def clean_recaptcha_env(monkeypatch):
    """Keep RECAPTCHA_* variables from the host environment out of tests."""
    for key in list(os.environ):
        if key.startswith("RECAPTCHA_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class SiteVerifyStub:
    """Stands in for Google's siteverify endpoint and records every call."""

    def __init__(self):
        self.calls: list[httpx.Request] = []
        self.payload: dict = {"success": True, "score": 0.9}
        self.status_code: int = 200
        self.error: Optional[Exception] = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def last_params(self) -> dict:
        return dict(self.calls[-1].url.params)


@pytest.fixture
def siteverify() -> SiteVerifyStub:
    """Fake siteverify endpoint; set .payload, .status_code or .error per test."""
    return SiteVerifyStub()


@pytest.fixture
def http_client(siteverify) -> httpx.AsyncClient:
    """AsyncClient routed to the siteverify stub."""
    return httpx.AsyncClient(transport=httpx.MockTransport(siteverify))


@pytest.fixture
def recaptcha(http_client):
    """Verifier with the default threshold (0.5) and status code (403)."""
    from recaptcha_v3 import ReCaptchaV3

    return ReCaptchaV3(secret_key="test-secret", http_client=http_client)


class FakeRequest:
    """Minimal request shape: body and headers mappings."""

    def __init__(self, body=None, headers=None):
        self.body = body
        self.headers = headers


@pytest.fixture
def make_request():
    return FakeRequest
