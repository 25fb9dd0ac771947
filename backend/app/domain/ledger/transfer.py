"""
Party-to-party transfers.

A transfer between two parties of the same owner is recorded on both ledgers
with opposite signs, each entry naming the other party.
"""

import datetime
import uuid
from decimal import Decimal
from typing import Optional, Tuple

from backend.app.core.exceptions import ValidationError
from backend.app.domain.ledger.normalizer import parse_decimal
from backend.app.models.ledger_enums import EntryKind, EntrySide
from backend.app.schemas.ledger import Entry
from backend.app.services.audit import AuditAction, log_event


def build_transfer_entries(
    owner_id: str,
    party_name: str,
    other_party_name: str,
    amount: Decimal,
    side: EntrySide,
    entry_date: Optional[datetime.date] = None
) -> Tuple[Entry, Entry]:
    """
    Entries for moving ``amount`` between two parties.

    ``side`` is the side of ``party_name``'s entry; the other party gets the
    opposite side. The second entry links back to the first.
    """
    amount = parse_decimal(amount, "amount")
    if amount <= 0:
        raise ValidationError("Transfer amount must be positive", details={"amount": str(amount)})
    if party_name.strip().lower() == other_party_name.strip().lower():
        raise ValidationError("Cannot transfer a party's balance to itself", details={"party_name": party_name})

    entry_date = entry_date or datetime.date.today()
    signed = amount if side == EntrySide.CREDIT else -amount

    first = Entry(
        id=uuid.uuid4().hex,
        owner_id=owner_id,
        party_name=party_name,
        date=entry_date,
        amount=signed,
        counterparty_label=other_party_name,
    )
    second = Entry(
        id=uuid.uuid4().hex,
        owner_id=owner_id,
        party_name=other_party_name,
        date=entry_date,
        amount=-signed,
        counterparty_label=party_name,
        kind=EntryKind.TRANSFER,
        source_entry_id=first.id,
    )

    log_event(
        action=AuditAction.TRANSFER_RECORDED,
        owner_id=owner_id,
        party_name=party_name,
        entry_id=first.id,
        metadata={"other_party": other_party_name, "amount": str(signed), "counter_entry_id": second.id}
    )
    return first, second
