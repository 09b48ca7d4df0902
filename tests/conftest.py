"""Pytest configuration and fixtures."""

import os
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

# Set test environment variables before importing settings
os.environ.setdefault("GOOGLE_API_KEY", "test-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from loyalty_pro.clients import GeminiResponse  # noqa: E402
from loyalty_pro.ledger import LedgerService  # noqa: E402
from loyalty_pro.models import Customer, HistoryEntry  # noqa: E402
from loyalty_pro.store import MemoryStore  # noqa: E402


@pytest.fixture
def memory_store():
    """An empty process-local store."""
    return MemoryStore()


@pytest.fixture
def ledger(memory_store):
    """A ledger over the memory store."""
    return LedgerService(memory_store)


@pytest_asyncio.fixture
async def registered_ledger(ledger):
    """A ledger with admin ``bob`` (password ``x``) already registered."""
    await ledger.register("Bob's Shop", "bob", "x")
    return ledger


@pytest.fixture
def mock_generator():
    """Test double for the Gemini client."""
    generator = AsyncMock()
    generator.generate = AsyncMock(
        return_value=GeminiResponse(
            content="Your top customer is CUST-9999.",
            stop_reason="end_turn",
            usage={"input_tokens": 120, "output_tokens": 8},
        )
    )
    return generator


@pytest.fixture
def sample_customers():
    """Two customers with one purchase each."""
    return [
        Customer(
            mobile="9999999999",
            name="Asha",
            pin="1234",
            points=10,
            total_spent=100.0,
            history=[
                HistoryEntry(date="2026-01-05T10:00:00Z", bill=100.0, points=10),
            ],
        ),
        Customer(
            mobile="8888881234",
            name="Ravi",
            pin="9876",
            points=5,
            total_spent=50.0,
            history=[
                HistoryEntry(date="2026-01-06T11:30:00Z", bill=50.0, points=5),
            ],
        ),
    ]
