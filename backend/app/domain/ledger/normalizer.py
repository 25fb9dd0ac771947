"""
Entry Normalizer.

Turns loosely-shaped transaction records (as sent by the ledger UI and the
storage API, with their various field spellings) into strict Entry records.
Alias handling and the ``Name: Remarks`` convention live here and nowhere else.
"""

import datetime
import logging
import re
import uuid
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from backend.app.core.exceptions import ValidationError
from backend.app.models.ledger_enums import EntryKind
from backend.app.schemas.ledger import Entry
from backend.app.services.audit import AuditAction, log_event

logger = logging.getLogger(__name__)


# Canonical field -> accepted spellings, in order of preference
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "id": ("id", "_id", "entry_id"),
    "party_name": ("partyName", "party_name"),
    "party_id": ("partyId", "party_id"),
    "amount": ("amount",),
    "credit": ("credit",),
    "debit": ("debit",),
    "tns_type": ("tnsType", "tns_type", "type"),
    "date": ("date", "entry_date", "createdAt", "created_at"),
    "remarks": ("remarks",),
    "counterparty_label": ("counterparty", "counterpartyLabel", "counterparty_label"),
    "is_old_record": ("isOldRecord", "is_old_record"),
    "is_synthetic": ("isSynthetic", "is_synthetic"),
    "kind": ("kind",),
    "source_entry_id": ("sourceEntryId", "source_entry_id"),
}

# Display-only keys echoed back by the storage API; carry no ledger meaning
IGNORED_KEYS = frozenset({
    "balance", "chk", "ti", "mondayFinal", "updatedAt", "updated_at", "__v",
    "runningBalance", "running_balance",
})

KNOWN_KEYS = frozenset(alias for aliases in FIELD_ALIASES.values() for alias in aliases) | IGNORED_KEYS

CREDIT_TYPES = frozenset({"CR", "CREDIT"})
DEBIT_TYPES = frozenset({"DR", "DEBIT"})

SYNTHETIC_KINDS = frozenset({EntryKind.COMMISSION, EntryKind.SETTLEMENT})

# "1,250,000.50": commas only between groups of three integer digits
GROUPED_NUMBER = re.compile(r"^[+-]?\d{1,3}(,\d{3})+(\.\d*)?$")


def _pick(raw: Mapping[str, Any], field: str) -> Any:
    """Value of the first alias of ``field`` present and not blank."""
    for alias in FIELD_ALIASES[field]:
        value = raw.get(alias)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def parse_decimal(value: Any, field: str) -> Decimal:
    """Parse a numeric field into a Decimal via its string form."""
    if isinstance(value, bool):
        raise ValidationError(f"'{field}' must be a number", details={"field": field, "value": value})
    if isinstance(value, Decimal):
        result = value
    else:
        text = str(value).strip()
        if "," in text and GROUPED_NUMBER.match(text):
            text = text.replace(",", "")
        try:
            result = Decimal(text)
        except (InvalidOperation, ValueError):
            raise ValidationError(
                f"'{field}' is not a valid number: {value!r}",
                details={"field": field, "value": str(value)}
            )
    if not result.is_finite():
        raise ValidationError(f"'{field}' must be finite", details={"field": field, "value": str(value)})
    return result


def parse_date(value: Any) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        # ISO dates and timestamps, including a trailing "Z"
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.datetime.fromisoformat(text).date()
        except ValueError:
            pass
        try:
            return datetime.date.fromisoformat(text[:10])
        except ValueError:
            pass
    raise ValidationError(f"Unrecognized date: {value!r}", details={"field": "date", "value": str(value)})


def parse_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1", "y")
    return bool(value)


def split_remarks(remarks: Optional[str]) -> Tuple[str, str]:
    """
    Split ``"Name: note"`` into ``(label, note)``.

    The note is dropped when it is empty or just repeats the label.
    Remarks without a colon are all note.
    """
    if not remarks:
        return "", ""
    text = str(remarks)
    if ":" not in text:
        return "", text.strip()
    label, note = text.split(":", 1)
    label = label.strip()
    note = note.strip()
    if not note or note == label:
        note = ""
    return label, note


def resolve_amount(raw: Mapping[str, Any]) -> Decimal:
    """
    Derive the signed amount of a record.

    A signed ``amount`` wins. A CR/DR type alongside a non-negative amount
    signs it. Otherwise ``credit - debit``, provided only one of them is set.
    """
    amount = _pick(raw, "amount")
    tns_type = _pick(raw, "tns_type")

    if amount is not None:
        value = parse_decimal(amount, "amount")
        if tns_type is None:
            return value
        kind = str(tns_type).strip().upper()
        if kind in DEBIT_TYPES:
            return -abs(value)
        if kind in CREDIT_TYPES:
            if value < 0:
                raise ValidationError(
                    "Negative amount on a credit transaction",
                    details={"amount": str(value), "type": str(tns_type)}
                )
            return value
        # Types such as "Monday Settlement" carry no sign of their own
        return value

    credit = _pick(raw, "credit")
    debit = _pick(raw, "debit")
    if credit is None and debit is None:
        raise ValidationError("Record has no amount and no credit/debit fields", details={"keys": sorted(raw)})

    credit_value = parse_decimal(credit, "credit") if credit is not None else Decimal("0")
    debit_value = parse_decimal(debit, "debit") if debit is not None else Decimal("0")
    if credit_value != 0 and debit_value != 0:
        raise ValidationError(
            "Both credit and debit are set on the same record",
            details={"credit": str(credit_value), "debit": str(debit_value)}
        )
    return credit_value - debit_value


def normalize_entry(raw: Mapping[str, Any], owner_id: str, party_name: Optional[str] = None) -> Entry:
    """
    Normalize one raw record into an Entry owned by ``owner_id``.

    ``party_name`` is used when the record does not name its party itself.

    Raises:
        ValidationError: unknown keys, no usable amount, contradictory
            credit/debit, bad date, or no party.
    """
    if not isinstance(raw, Mapping):
        raise ValidationError("Ledger record must be an object", details={"type": type(raw).__name__})

    unknown = sorted(set(raw) - KNOWN_KEYS)
    if unknown:
        raise ValidationError("Unrecognized fields in ledger record", details={"fields": unknown})

    amount = resolve_amount(raw)

    party = _pick(raw, "party_name") or party_name
    if not party or not str(party).strip():
        raise ValidationError("Record does not name a party")
    party = str(party).strip()

    explicit_label = _pick(raw, "counterparty_label")
    remarks = _pick(raw, "remarks")
    if explicit_label is not None:
        label = str(explicit_label).strip()
        note = str(remarks).strip() if remarks is not None else ""
        if note == label:
            note = ""
    else:
        label, note = split_remarks(remarks)

    entry_id = _pick(raw, "id")
    entry_id = str(entry_id) if entry_id is not None else uuid.uuid4().hex

    raw_date = _pick(raw, "date")
    date_defaulted = raw_date is None
    if date_defaulted:
        entry_date = datetime.date.today()
        logger.warning(
            "Ledger record has no date; defaulting to today",
            extra={"owner_id": owner_id, "party_name": party, "entry_id": entry_id}
        )
        log_event(
            action=AuditAction.ENTRY_DATE_DEFAULTED,
            owner_id=owner_id,
            party_name=party,
            entry_id=entry_id,
            metadata={"defaulted_to": entry_date.isoformat()},
            level=logging.WARNING
        )
    else:
        entry_date = parse_date(raw_date)

    kind_value = _pick(raw, "kind")
    try:
        kind = EntryKind(str(kind_value).upper()) if kind_value is not None else EntryKind.MANUAL
    except ValueError:
        raise ValidationError(f"Unknown entry kind: {kind_value!r}", details={"field": "kind"})

    is_synthetic = _pick(raw, "is_synthetic")
    source_entry_id = _pick(raw, "source_entry_id")
    party_id = _pick(raw, "party_id")

    return Entry(
        id=entry_id,
        owner_id=owner_id,
        party_name=party,
        party_id=str(party_id) if party_id is not None else None,
        date=entry_date,
        amount=amount,
        counterparty_label=label,
        note=note,
        is_old_record=parse_flag(_pick(raw, "is_old_record") or False),
        is_synthetic=parse_flag(is_synthetic) if is_synthetic is not None else kind in SYNTHETIC_KINDS,
        kind=kind,
        source_entry_id=str(source_entry_id) if source_entry_id is not None else None,
        date_defaulted=date_defaulted,
    )


def normalize_entries(
    raws: Iterable[Mapping[str, Any]],
    owner_id: str,
    party_name: Optional[str] = None
) -> List[Entry]:
    """Normalize records in order; the first bad record rejects the batch."""
    return [normalize_entry(raw, owner_id, party_name) for raw in raws]
