"""
Test configuration and fixtures for the KAMPYN client
"""

import os
from typing import Callable
from unittest.mock import patch

import httpx
import pytest

from kampyn.domain.entities.cart_entity import Cart
from kampyn.infrastructure.configuration.config import reset_config
from kampyn.infrastructure.http.backend_client import BackendClient
from kampyn.infrastructure.repositories.session_stores import InMemorySessionStore

from .factories import samosa

BACKEND_URL = "https://api.kampyn.test"


# Mock environment variables for testing
@pytest.fixture(autouse=True)
def mock_env():
    """Mock environment variables for testing"""
    test_env = {
        "BACKEND_URL": BACKEND_URL,
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "DEBUG",
        "RAZORPAY_KEY_ID": "rzp_test_key",
    }

    reset_config()
    with patch.dict(os.environ, test_env, clear=True):
        yield test_env
    reset_config()


@pytest.fixture
def session_store():
    return InMemorySessionStore()


@pytest.fixture
def make_client(session_store) -> Callable[..., BackendClient]:
    """Build a BackendClient whose requests are answered by ``handler``"""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> BackendClient:
        return BackendClient(
            BACKEND_URL,
            session_store=session_store,
            transport=httpx.MockTransport(handler),
        )

    return _make


@pytest.fixture
def vendor_cart() -> Cart:
    return Cart("vendor_1", [samosa(3)])
