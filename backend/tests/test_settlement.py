"""
Settlement (Monday Final) tests.
"""

import datetime
from decimal import Decimal

import pytest

from backend.app.core.exceptions import ValidationError
from backend.app.domain.ledger.running_balance import compute_ledger
from backend.app.domain.ledger.settlement import ledger_state, settle_party
from backend.app.models.ledger_enums import EntryKind, LedgerState

OWNER = "owner-1"
MONDAY = datetime.date(2024, 1, 8)


def test_settlement_carries_forward_closing_balance(make_entry):
    entries = [make_entry(1000, day=1), make_entry(-300, day=2), make_entry(150, day=3)]

    result = settle_party(OWNER, "Ramesh", entries, settled_at=MONDAY)

    cf = result.carry_forward
    assert cf.amount == Decimal(850)
    assert cf.note == "Settlement carry-forward"
    assert cf.remarks == "Settlement carry-forward"
    assert cf.date == MONDAY
    assert cf.kind == EntryKind.SETTLEMENT
    assert cf.is_synthetic is True
    assert cf.is_old_record is False
    assert result.archived_entry_ids == [e.id for e in entries]
    assert all(e.is_old_record for e in result.archived_entries)
    # originals still available, unchanged
    assert not any(e.is_old_record for e in entries)


def test_settlement_summary(make_entry):
    entries = [make_entry(1000, day=1), make_entry(-300, day=2), make_entry(150, day=3)]
    summary = settle_party(OWNER, "Ramesh", entries, settled_at=MONDAY).summary
    assert summary.transaction_count == 3
    assert summary.total_credit == Decimal(1150)
    assert summary.total_debit == Decimal(300)
    assert summary.starting_balance == Decimal(0)
    assert summary.final_balance == Decimal(850)


def test_resettling_without_new_entries_is_stable(make_entry):
    entries = [make_entry(1000, day=1), make_entry(-300, day=2), make_entry(150, day=3)]
    first = settle_party(OWNER, "Ramesh", entries, settled_at=MONDAY)

    after = first.archived_entries + [first.carry_forward]
    assert ledger_state(after) == LedgerState.SETTLED
    assert compute_ledger(OWNER, after).closing_balance == Decimal(850)

    second = settle_party(OWNER, "Ramesh", after, settled_at=MONDAY + datetime.timedelta(days=7))
    assert second.carry_forward.amount == first.carry_forward.amount
    assert second.archived_entry_ids == [first.carry_forward.id]
    assert second.summary.starting_balance == Decimal(850)
    assert second.summary.transaction_count == 0


def test_new_entry_after_settlement_reactivates(make_entry):
    first = settle_party(OWNER, "Ramesh", [make_entry(400, day=1)], settled_at=MONDAY)
    after = first.archived_entries + [first.carry_forward, make_entry(-100, day=9)]

    assert ledger_state(after) == LedgerState.ACTIVE
    ledger = compute_ledger(OWNER, after)
    assert [e.running_balance for e in ledger.entries] == [Decimal(400), Decimal(300)]


def test_empty_party_settles_to_zero_marker():
    result = settle_party(OWNER, "Nobody", [], settled_at=MONDAY)
    assert result.carry_forward.amount == Decimal(0)
    assert result.archived_entry_ids == []
    assert result.summary.transaction_count == 0


def test_explicit_closing_balance_used(make_entry):
    result = settle_party(OWNER, "Ramesh", [make_entry(10)], closing_balance=Decimal("12.5"), settled_at=MONDAY)
    assert result.carry_forward.amount == Decimal("12.5")


def test_entry_of_other_party_rejected(make_entry):
    with pytest.raises(ValidationError):
        settle_party(OWNER, "Ramesh", [make_entry(10, party_name="Suresh")])
