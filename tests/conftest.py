"""
Test Configuration
------------------
Shared fixtures for all tests.

HTTP never leaves the process: clients are built with an
httpx.MockTransport that records every request it answers.
"""

import logging
import sys
from pathlib import Path
from typing import Callable, List

import httpx
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from deepl_api import DeepL


TEST_API_KEY = "test-key-0000"


# =============================================================================
# Test Isolation: Environment
# =============================================================================

@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove DEEPL_* variables so a developer's real key never leaks into tests."""
    for name in ("DEEPL_API_KEY", "DEEPL_FREE_TIER", "DEEPL_TIMEOUT_SECONDS", "DEEPL_API_KEY_ENV"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_deepl_logger():
    """Leave the deepl logger without handlers after each test."""
    yield
    logger = logging.getLogger("deepl")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


# =============================================================================
# HTTP Mocking
# =============================================================================

class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps the requests it has seen."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


def json_response(status_code: int, payload) -> Callable[[httpx.Request], httpx.Response]:
    """Handler answering every request with the same JSON body."""
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload)
    return _handler


def text_response(status_code: int, body: str) -> Callable[[httpx.Request], httpx.Response]:
    """Handler answering every request with the same raw body."""
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, text=body)
    return _handler


@pytest.fixture
def make_client():
    """
    Factory building a client wired to a RecordingTransport.

    Returns (client, transport) so tests can inspect transport.requests.
    """
    def _make(handler, free_tier: bool = False, api_key: str = TEST_API_KEY):
        transport = RecordingTransport(handler)
        return DeepL(api_key, free_tier=free_tier, transport=transport), transport
    return _make


@pytest.fixture(scope="session")
def project_root():
    """Return the project root path."""
    return PROJECT_ROOT
