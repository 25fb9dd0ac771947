"""
Audit logging service for ledger events.

Audit records are emitted on the ``ledger.audit`` logger; shipping them to
durable storage is the job of whatever handler the host application installs.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

audit_logger = logging.getLogger("ledger.audit")


# Audit event constants
class AuditAction:
    """Standardized audit action constants."""
    ENTRY_DATE_DEFAULTED = "ENTRY_DATE_DEFAULTED"
    COMMISSION_SYNTHESIZED = "COMMISSION_SYNTHESIZED"
    TRANSFER_RECORDED = "TRANSFER_RECORDED"
    PARTY_SETTLED = "PARTY_SETTLED"
    TRIAL_BALANCE_PARTY_FAILED = "TRIAL_BALANCE_PARTY_FAILED"
    TRIAL_BALANCE_UNBALANCED = "TRIAL_BALANCE_UNBALANCED"


def log_event(
    action: str,
    owner_id: str,
    party_name: Optional[str] = None,
    entry_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    level: int = logging.INFO
) -> Dict[str, Any]:
    """
    Emit an audit record.

    Args:
        action: Action being recorded (use AuditAction constants)
        owner_id: Tenant that owns the ledger
        party_name: Party the event concerns (if applicable)
        entry_id: Ledger entry the event concerns (if applicable)
        metadata: Additional context
        level: Logging level of the record

    Returns:
        The audit record as emitted
    """
    record = {
        "action": action,
        "owner_id": owner_id,
        "party_name": party_name,
        "entry_id": entry_id,
        "meta_data": metadata or {},
        "recorded_at": datetime.now(timezone.utc).isoformat(),
    }
    audit_logger.log(
        level,
        "%s owner=%s party=%s entry=%s",
        action, owner_id, party_name, entry_id,
        extra={"audit": record}
    )
    return record
