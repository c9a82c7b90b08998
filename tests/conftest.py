from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from app.main import app, get_relay
from relay import ContentBlock, ProviderReply, Relay


@pytest.fixture
def provider():
    fake = AsyncMock()
    fake.send.return_value = ProviderReply(
        content=[ContentBlock(type="text", text="Paris is the capital of France.")],
        model="claude-sonnet-4-5-20250929",
    )
    return fake


@pytest.fixture
def client(provider):
    app.dependency_overrides[get_relay] = lambda: Relay(provider)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
