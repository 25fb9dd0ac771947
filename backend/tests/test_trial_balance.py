"""
Trial Balance Aggregator tests.
"""

from decimal import Decimal

from backend.app.domain.ledger.trial_balance import build_trial_balance, generate_trial_balance
from backend.app.models.ledger_enums import CommissionMode, EntrySide
from backend.app.schemas.ledger import Party

OWNER = "owner-1"


# TEST 1: Partitioning
def test_credit_debit_partition_and_totals():
    data = build_trial_balance(OWNER, {"A": Decimal(500), "B": Decimal(-200), "C": Decimal(0)})

    assert [(r.party_name, r.amount, r.side) for r in data.credit_entries] == [("A", Decimal(500), EntrySide.CREDIT)]
    assert [(r.party_name, r.amount, r.side) for r in data.debit_entries] == [("B", Decimal(200), EntrySide.DEBIT)]
    assert data.credit_total == Decimal(500)
    assert data.debit_total == Decimal(200)
    assert data.balance_difference == Decimal(300)
    names = {r.party_name for r in data.credit_entries + data.debit_entries}
    assert "C" not in names


def test_every_nonzero_party_on_exactly_one_side():
    balances = {"A": Decimal("1"), "B": Decimal("-1"), "C": Decimal("0"), "D": Decimal("7.5"), "E": Decimal("-0.01")}
    data = build_trial_balance(OWNER, balances)

    credit_names = [r.party_name for r in data.credit_entries]
    debit_names = [r.party_name for r in data.debit_entries]
    assert sorted(credit_names + debit_names) == ["A", "B", "D", "E"]
    assert not set(credit_names) & set(debit_names)
    assert data.credit_total - data.debit_total == data.balance_difference


def test_sides_sorted_by_amount_then_name():
    balances = {"Zed": Decimal(100), "Amy": Decimal(100), "Bob": Decimal(300), "Cat": Decimal(-50), "Dan": Decimal(-80)}
    data = build_trial_balance(OWNER, balances)

    assert [r.party_name for r in data.credit_entries] == ["Bob", "Amy", "Zed"]
    assert [r.party_name for r in data.debit_entries] == ["Dan", "Cat"]


# TEST 2: Consistency reporting
def test_balanced_ledger_has_no_warning():
    data = build_trial_balance(OWNER, {"A": Decimal(250), "B": Decimal(-250)})
    assert data.balance_difference == 0
    assert data.consistency_warning is None


def test_unbalanced_ledger_reported_not_corrected():
    data = build_trial_balance(OWNER, {"A": Decimal(500), "B": Decimal(-200)})
    assert data.consistency_warning is not None
    assert data.consistency_warning.balance_difference == Decimal(300)
    # rows stay as given
    assert data.credit_entries[0].amount == Decimal(500)


def test_party_filter_narrows_rows_and_totals():
    data = build_trial_balance(OWNER, {"Ramesh": Decimal(10), "Rakesh": Decimal(-4), "Suresh": Decimal(9)}, party_filter="rA")
    assert [r.party_name for r in data.credit_entries] == ["Ramesh"]
    assert data.debit_total == Decimal(4)
    assert data.credit_total == Decimal(10)


# TEST 3: From raw ledgers
def test_generate_from_raw_ledgers():
    ledgers = {
        "A": [
            {"amount": 1000, "date": "2024-01-01"},
            {"amount": -300, "date": "2024-01-02"},
            {"amount": 150, "date": "2024-01-03"},
        ],
        "B": [{"credit": 0, "debit": 850, "date": "2024-01-02"}],
        "C": [],
    }
    data = generate_trial_balance(OWNER, ledgers)

    assert [(r.party_name, r.amount) for r in data.credit_entries] == [("A", Decimal(850))]
    assert [(r.party_name, r.amount) for r in data.debit_entries] == [("B", Decimal(850))]
    assert data.balance_difference == 0
    assert data.failures == []


def test_bad_party_reported_without_aborting_report():
    ledgers = {
        "A": [{"amount": 500, "date": "2024-01-01"}],
        "Broken": [{"credit": 10, "debit": 10, "date": "2024-01-01"}],
        "Misconfigured": [{"amount": 40, "date": "2024-01-01"}],
    }
    parties = [Party(name="Misconfigured", commission_mode=CommissionMode.TAKE, commission_rate=Decimal("-2"))]

    data = generate_trial_balance(OWNER, ledgers, parties=parties)

    assert [r.party_name for r in data.credit_entries] == ["A"]
    failures = {f.party_name: f.error_code for f in data.failures}
    assert failures == {"Broken": "ERR_LEDGER_VALIDATION", "Misconfigured": "ERR_COMMISSION_CONFIG"}


def test_float_closing_balances_use_their_decimal_text():
    data = build_trial_balance(OWNER, {"A": 0.1, "B": 0.2, "C": -0.3})
    assert data.credit_total == Decimal("0.3")
    assert data.balance_difference == 0
    assert data.consistency_warning is None
