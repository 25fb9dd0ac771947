"""
Commission Calculator.

Works out the commission owed on a transaction for a party's commission
arrangement and turns it into synthetic ledger entries. The principal entry
itself is never touched.
"""

import logging
import uuid
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, List, Mapping, Optional, Tuple

from backend.app.core.config import settings
from backend.app.core.exceptions import ConfigurationError, ValidationError
from backend.app.domain.ledger.normalizer import parse_decimal
from backend.app.models.ledger_enums import CommissionMode, EntryKind, EntrySide
from backend.app.schemas.ledger import CommissionResult, Entry, Party
from backend.app.services.audit import AuditAction, log_event

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


def money_quantum() -> Decimal:
    """Smallest currency unit, e.g. Decimal('0.01') for two decimal places."""
    return Decimal(1).scaleb(-settings.currency_decimal_places)


def validate_commission_config(party: Party) -> None:
    """
    Raises:
        ConfigurationError: If the commission rate is negative.
    """
    if party.commission_rate < 0:
        raise ConfigurationError(
            f"Commission rate for '{party.name}' is negative",
            party_name=party.name,
            details={"commission_rate": str(party.commission_rate)}
        )


def calculate_commission(party: Party, principal: Decimal) -> Optional[CommissionResult]:
    """
    Commission on ``principal`` under the party's arrangement.

    Returns None when the party has no commission (mode NONE or rate 0).
    TAKE debits the party, GIVE credits it. The amount is rounded half-up to
    the currency's minor unit once, after the multiplication.

    Raises:
        ConfigurationError: Negative commission rate.
        ValidationError: Principal is not a positive amount.
    """
    validate_commission_config(party)

    if party.commission_mode == CommissionMode.NONE or party.commission_rate == 0:
        return None

    principal = parse_decimal(principal, "principal")
    if principal <= 0:
        raise ValidationError(
            "Commission principal must be a positive amount",
            details={"principal": str(principal)}
        )

    raw = principal * party.commission_rate / HUNDRED
    try:
        amount = raw.quantize(money_quantum(), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(
            "Commission amount exceeds the supported precision",
            details={"principal": str(principal), "commission_rate": str(party.commission_rate)}
        )

    direction = EntrySide.DEBIT if party.commission_mode == CommissionMode.TAKE else EntrySide.CREDIT

    return CommissionResult(
        commission_amount=amount,
        direction=direction,
        counterparty_label=settings.commission_account_name,
    )


def build_commission_entries(
    owner_id: str,
    party: Party,
    source_entry: Entry,
    result: CommissionResult
) -> Tuple[Entry, Entry]:
    """
    Build the party's commission entry and its mirror on the business's
    commission ledger. Both are synthetic and point back at ``source_entry``.
    """
    signed = result.commission_amount if result.direction == EntrySide.CREDIT else -result.commission_amount
    note = f"Commission @ {party.commission_rate.normalize():f}%"

    party_entry = Entry(
        id=uuid.uuid4().hex,
        owner_id=owner_id,
        party_name=party.name,
        date=source_entry.date,
        amount=signed,
        counterparty_label=result.counterparty_label,
        note=note,
        is_synthetic=True,
        kind=EntryKind.COMMISSION,
        source_entry_id=source_entry.id,
    )
    mirror_entry = Entry(
        id=uuid.uuid4().hex,
        owner_id=owner_id,
        party_name=result.counterparty_label,
        date=source_entry.date,
        amount=-signed,
        counterparty_label=party.name,
        note=note,
        is_synthetic=True,
        kind=EntryKind.COMMISSION,
        source_entry_id=source_entry.id,
    )
    return party_entry, mirror_entry


def apply_commission(owner_id: str, party: Party, entry: Entry) -> List[Entry]:
    """
    Commission entries for a freshly entered transaction, or [] if none apply.

    Raises:
        ValidationError: The entry belongs to another owner or party.
    """
    if entry.owner_id != owner_id:
        raise ValidationError(
            "Entry belongs to a different owner",
            details={"entry_id": entry.id, "owner_id": entry.owner_id}
        )
    if entry.party_name != party.name:
        raise ValidationError(
            f"Entry belongs to party '{entry.party_name}', not '{party.name}'",
            details={"entry_id": entry.id}
        )
    if entry.amount == 0:
        return []

    result = calculate_commission(party, abs(entry.amount))
    if result is None:
        return []

    party_entry, mirror_entry = build_commission_entries(owner_id, party, entry, result)

    log_event(
        action=AuditAction.COMMISSION_SYNTHESIZED,
        owner_id=owner_id,
        party_name=party.name,
        entry_id=entry.id,
        metadata={
            "commission_amount": str(result.commission_amount),
            "direction": result.direction.value,
            "entry_ids": [party_entry.id, mirror_entry.id],
        }
    )
    return [party_entry, mirror_entry]


def party_from_record(raw: Mapping[str, Any]) -> Party:
    """
    Read a party record as stored by the ledger UI.

    Understands ``commiSystem`` (Take/Give), ``mCommission``
    ("No Commission"/"With Commission"), ``rate`` and ``balanceLimit`` next to
    the canonical field names.
    """
    name = raw.get("name") or raw.get("partyName") or raw.get("party_name")
    if not name or not str(name).strip():
        raise ValidationError("Party record has no name")
    name = str(name).strip()

    mode_value = raw.get("commission_mode") or raw.get("commiSystem")
    with_commission = raw.get("mCommission")
    rate_value = raw.get("commission_rate", raw.get("rate"))

    rate = Decimal("0")
    if rate_value not in (None, ""):
        try:
            rate = parse_decimal(rate_value, "rate")
        except ValidationError as exc:
            raise ConfigurationError(exc.message, party_name=name, details=exc.details)

    if isinstance(with_commission, str) and with_commission.strip().lower() == "no commission":
        mode = CommissionMode.NONE
    elif mode_value in (None, ""):
        mode = CommissionMode.NONE
    else:
        try:
            mode = CommissionMode(str(mode_value).strip().upper())
        except ValueError:
            raise ConfigurationError(
                f"Unknown commission system {mode_value!r}",
                party_name=name,
                details={"commission_mode": str(mode_value)}
            )

    limit_value = raw.get("balance_limit", raw.get("balanceLimit"))
    balance_limit = None
    if limit_value not in (None, "", "0", 0, "Unlimited"):
        balance_limit = parse_decimal(limit_value, "balanceLimit")

    return Party(
        name=name,
        commission_mode=mode,
        commission_rate=rate,
        balance_limit=balance_limit,
    )
