"""
Party-to-party transfer and entry query tests.
"""

import datetime
from decimal import Decimal

import pytest

from backend.app.core.exceptions import ValidationError
from backend.app.domain.ledger.queries import search_entries, split_records
from backend.app.domain.ledger.transfer import build_transfer_entries
from backend.app.models.ledger_enums import EntryKind, EntrySide

OWNER = "owner-1"


def test_transfer_creates_opposite_entries():
    first, second = build_transfer_entries(
        OWNER, "Ramesh", "Suresh", Decimal("250"), EntrySide.CREDIT, entry_date=datetime.date(2024, 2, 1)
    )
    assert first.party_name == "Ramesh" and first.amount == Decimal("250")
    assert first.counterparty_label == "Suresh"
    assert second.party_name == "Suresh" and second.amount == Decimal("-250")
    assert second.counterparty_label == "Ramesh"
    assert second.kind == EntryKind.TRANSFER
    assert second.source_entry_id == first.id
    assert first.amount + second.amount == 0


def test_debit_transfer_signs():
    first, second = build_transfer_entries(OWNER, "Ramesh", "Suresh", Decimal("10"), EntrySide.DEBIT)
    assert first.amount == Decimal("-10")
    assert second.amount == Decimal("10")
    assert first.date == datetime.date.today()


def test_transfer_to_same_party_rejected():
    with pytest.raises(ValidationError):
        build_transfer_entries(OWNER, "Ramesh", " ramesh ", Decimal("10"), EntrySide.CREDIT)


def test_transfer_requires_positive_amount():
    with pytest.raises(ValidationError):
        build_transfer_entries(OWNER, "Ramesh", "Suresh", Decimal("0"), EntrySide.CREDIT)


def test_split_records(make_entry):
    live_entry = make_entry(1)
    old_entry = make_entry(2, is_old_record=True)
    assert split_records([old_entry, live_entry]) == ([live_entry], [old_entry])


def test_search_entries(make_entry):
    cash = make_entry(1, counterparty_label="Mahesh", note="cash")
    bank = make_entry(2, note="Bank transfer")
    other = make_entry(3, party_name="Suresh")

    assert search_entries([cash, bank, other], "BANK") == [bank]
    assert search_entries([cash, bank, other], "mahesh") == [cash]
    assert search_entries([cash, bank, other], "sures") == [other]
    assert search_entries([cash, bank], "  ") == [cash, bank]
