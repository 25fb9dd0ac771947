"""
Centralized Test Configuration.
"""

import datetime
import uuid
from decimal import Decimal

import pytest
from httpx import AsyncClient, ASGITransport

from backend.app.main import app
from backend.app.models.ledger_enums import EntryKind
from backend.app.schemas.ledger import Entry

OWNER_ID = "owner-1"


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def owner_headers():
    return {"X-Owner-ID": OWNER_ID}


@pytest.fixture
def make_entry():
    """Factory for normalized entries owned by OWNER_ID."""
    counter = {"n": 0}

    def _make(amount, party_name="Ramesh", day=1, **overrides):
        counter["n"] += 1
        fields = {
            "id": overrides.pop("id", f"e{counter['n']}-{uuid.uuid4().hex[:6]}"),
            "owner_id": OWNER_ID,
            "party_name": party_name,
            "date": datetime.date(2024, 1, day),
            "amount": Decimal(str(amount)),
            "kind": EntryKind.MANUAL,
        }
        fields.update(overrides)
        return Entry(**fields)

    return _make
