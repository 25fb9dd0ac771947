"""
Running Balance Engine.

Folds a party's live entries into running balances and a closing balance.
"""

from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from backend.app.core.exceptions import ValidationError
from backend.app.domain.ledger.normalizer import parse_decimal
from backend.app.domain.ledger.queries import split_records
from backend.app.models.ledger_enums import EntryKind
from backend.app.schemas.ledger import Entry, LedgerSummary, PartyLedger

ZERO = Decimal("0")


def chronological(entries: Iterable[Entry]) -> List[Entry]:
    """Order by date; sort is stable so insertion order breaks ties."""
    return sorted(entries, key=lambda entry: entry.date)


def summarize(entries: Sequence[Entry]) -> LedgerSummary:
    total_credit = sum((e.amount for e in entries if e.amount > 0), ZERO)
    total_debit = sum((-e.amount for e in entries if e.amount < 0), ZERO)
    return LedgerSummary(
        total_credit=total_credit,
        total_debit=total_debit,
        calculated_balance=total_credit - total_debit,
        total_entries=len(entries),
    )


def last_carry_forward(entries: Iterable[Entry]) -> Optional[Entry]:
    """Most recent settlement carry-forward among ``entries``, if any."""
    found = None
    for entry in chronological(entries):
        if entry.kind == EntryKind.SETTLEMENT:
            found = entry
    return found


def compute_ledger(
    owner_id: str,
    entries: Iterable[Entry],
    carried_forward: Optional[Decimal] = None
) -> PartyLedger:
    """
    Annotate a party's live entries with running balances.

    Archived entries are passed through untouched in ``old_records``. With no
    live entries the closing balance is ``carried_forward`` if given, else the
    latest settlement carry-forward among the archived entries, else zero.

    Raises:
        ValidationError: An entry belongs to another owner.
    """
    entries = list(entries)
    for entry in entries:
        if entry.owner_id != owner_id:
            raise ValidationError(
                "Entry belongs to a different owner",
                details={"entry_id": entry.id, "owner_id": entry.owner_id}
            )

    live, old = split_records(entries)
    live = chronological(live)

    balance = ZERO
    annotated = []
    for entry in live:
        balance += entry.amount
        annotated.append(entry.model_copy(update={"running_balance": balance}))

    if annotated:
        closing_balance = balance
    elif carried_forward is not None:
        closing_balance = parse_decimal(carried_forward, "carried_forward")
    else:
        previous = last_carry_forward(old)
        closing_balance = previous.amount if previous is not None else ZERO

    party_names = {entry.party_name for entry in entries}

    return PartyLedger(
        owner_id=owner_id,
        party_name=party_names.pop() if len(party_names) == 1 else None,
        entries=annotated,
        old_records=old,
        closing_balance=closing_balance,
        summary=summarize(live),
    )
