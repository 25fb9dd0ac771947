"""
Settlement (Monday Final) Processor.

Collapses a party's live entries into one carry-forward entry. The entries it
replaces are flagged as old records and handed back; nothing is deleted.

Per party: ACTIVE -> settle -> SETTLED -> new transaction -> ACTIVE.
"""

import datetime
import logging
import uuid
from decimal import Decimal
from typing import Iterable, Optional

from backend.app.core.config import settings
from backend.app.core.exceptions import ValidationError
from backend.app.domain.ledger.normalizer import parse_decimal
from backend.app.domain.ledger.queries import split_records
from backend.app.domain.ledger.running_balance import chronological, compute_ledger
from backend.app.models.ledger_enums import EntryKind, LedgerState
from backend.app.schemas.ledger import Entry, SettlementResult, SettlementSummary
from backend.app.services.audit import AuditAction, log_event

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def ledger_state(entries: Iterable[Entry]) -> LedgerState:
    """SETTLED when nothing but a carry-forward entry is live."""
    live, _ = split_records(entries)
    if all(entry.kind == EntryKind.SETTLEMENT for entry in live):
        return LedgerState.SETTLED
    return LedgerState.ACTIVE


def settle_party(
    owner_id: str,
    party_name: str,
    entries: Iterable[Entry],
    closing_balance: Optional[Decimal] = None,
    settled_at: Optional[datetime.date] = None
) -> SettlementResult:
    """
    Run Monday Final for one party.

    ``closing_balance`` defaults to the running balance over ``entries``.
    Settling again with no new entries reproduces the same carry-forward
    amount. A party with no entries gets a zero carry-forward marker.

    Raises:
        ValidationError: An entry belongs to another owner or party.
    """
    entries = list(entries)
    for entry in entries:
        if entry.party_name != party_name:
            raise ValidationError(
                f"Entry belongs to party '{entry.party_name}', not '{party_name}'",
                details={"entry_id": entry.id}
            )

    ledger = compute_ledger(owner_id, entries)
    if closing_balance is None:
        closing_balance = ledger.closing_balance
    closing_balance = parse_decimal(closing_balance, "closing_balance")

    live = chronological(split_records(entries)[0])
    starting_balance = ZERO
    if live and live[0].kind == EntryKind.SETTLEMENT:
        starting_balance = live[0].amount
        period = live[1:]
    else:
        period = live

    total_credit = sum((e.amount for e in period if e.amount > 0), ZERO)
    total_debit = sum((-e.amount for e in period if e.amount < 0), ZERO)

    settled_at = settled_at or datetime.date.today()
    carry_forward = Entry(
        id=uuid.uuid4().hex,
        owner_id=owner_id,
        party_name=party_name,
        date=settled_at,
        amount=closing_balance,
        note=settings.settlement_remarks,
        is_synthetic=True,
        kind=EntryKind.SETTLEMENT,
    )

    archived = [entry.model_copy(update={"is_old_record": True, "running_balance": None}) for entry in live]

    if not entries:
        logger.info(
            "Settling party with no entries; recording zero carry-forward",
            extra={"owner_id": owner_id, "party_name": party_name}
        )

    log_event(
        action=AuditAction.PARTY_SETTLED,
        owner_id=owner_id,
        party_name=party_name,
        entry_id=carry_forward.id,
        metadata={
            "carry_forward": str(closing_balance),
            "archived_entry_ids": [entry.id for entry in archived],
            "settled_at": settled_at.isoformat(),
        }
    )

    return SettlementResult(
        owner_id=owner_id,
        party_name=party_name,
        carry_forward=carry_forward,
        archived_entry_ids=[entry.id for entry in archived],
        archived_entries=archived,
        summary=SettlementSummary(
            transaction_count=len(period),
            total_credit=total_credit,
            total_debit=total_debit,
            starting_balance=starting_balance,
            final_balance=closing_balance,
        ),
    )
