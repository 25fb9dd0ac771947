"""
Trial Balance Aggregator.

Splits party closing balances into credit-side and debit-side rows. A
non-zero balance difference is reported, never corrected.
"""

import logging
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from backend.app.core.exceptions import ConfigurationError, ValidationError
from backend.app.domain.ledger.commission import validate_commission_config
from backend.app.domain.ledger.normalizer import normalize_entries, parse_decimal
from backend.app.domain.ledger.running_balance import compute_ledger
from backend.app.models.ledger_enums import EntrySide
from backend.app.schemas.ledger import Party
from backend.app.schemas.trial_balance import (
    ConsistencyWarning, PartyFailure, TrialBalanceData, TrialBalanceRow
)
from backend.app.services.audit import AuditAction, log_event

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _row_order(row: TrialBalanceRow):
    return (-row.amount, row.party_name)


def build_trial_balance(
    owner_id: str,
    closing_balances: Mapping[str, Decimal],
    failures: Iterable[PartyFailure] = (),
    party_filter: Optional[str] = None
) -> TrialBalanceData:
    """
    Aggregate closing balances (party name -> signed amount).

    Positive balances go to the credit side, negative ones to the debit side
    as absolute amounts, zero balances are left out. Each side is ordered by
    amount descending, then party name. ``party_filter`` keeps only parties
    whose name contains it (case-insensitive); totals follow the kept rows.
    """
    needle = party_filter.strip().lower() if party_filter else ""

    credit_entries: List[TrialBalanceRow] = []
    debit_entries: List[TrialBalanceRow] = []

    for party_name, balance in closing_balances.items():
        if needle and needle not in party_name.lower():
            continue
        balance = parse_decimal(balance, party_name)
        if balance > 0:
            credit_entries.append(TrialBalanceRow(party_name=party_name, amount=balance, side=EntrySide.CREDIT))
        elif balance < 0:
            debit_entries.append(TrialBalanceRow(party_name=party_name, amount=-balance, side=EntrySide.DEBIT))

    credit_entries.sort(key=_row_order)
    debit_entries.sort(key=_row_order)

    credit_total = sum((row.amount for row in credit_entries), ZERO)
    debit_total = sum((row.amount for row in debit_entries), ZERO)
    balance_difference = credit_total - debit_total

    warning = None
    if balance_difference != 0:
        warning = ConsistencyWarning(
            balance_difference=balance_difference,
            message=f"Credits exceed debits by {balance_difference}" if balance_difference > 0
            else f"Debits exceed credits by {-balance_difference}",
        )
        log_event(
            action=AuditAction.TRIAL_BALANCE_UNBALANCED,
            owner_id=owner_id,
            metadata={
                "credit_total": str(credit_total),
                "debit_total": str(debit_total),
                "balance_difference": str(balance_difference),
            },
            level=logging.WARNING
        )

    return TrialBalanceData(
        owner_id=owner_id,
        credit_entries=credit_entries,
        debit_entries=debit_entries,
        credit_total=credit_total,
        debit_total=debit_total,
        balance_difference=balance_difference,
        consistency_warning=warning,
        failures=list(failures),
    )


def generate_trial_balance(
    owner_id: str,
    ledgers: Mapping[str, Sequence[Mapping[str, Any]]],
    parties: Optional[Iterable[Party]] = None,
    party_filter: Optional[str] = None
) -> TrialBalanceData:
    """
    Trial balance from each party's raw entry records.

    A party whose records fail normalization, or whose commission setup is
    inconsistent, is reported in ``failures`` and the rest of the report is
    still produced.
    """
    configs = {party.name: party for party in parties or ()}
    closing_balances = {}
    failures = []

    for party_name, raws in ledgers.items():
        try:
            party = configs.get(party_name)
            if party is not None:
                validate_commission_config(party)
            entries = normalize_entries(raws, owner_id, party_name=party_name)
            closing_balances[party_name] = compute_ledger(owner_id, entries).closing_balance
        except (ValidationError, ConfigurationError) as exc:
            logger.warning(
                "Party excluded from trial balance",
                extra={"owner_id": owner_id, "party_name": party_name, "error_code": exc.error_code}
            )
            log_event(
                action=AuditAction.TRIAL_BALANCE_PARTY_FAILED,
                owner_id=owner_id,
                party_name=party_name,
                metadata={"error_code": exc.error_code, "message": exc.message},
                level=logging.WARNING
            )
            failures.append(PartyFailure(party_name=party_name, error_code=exc.error_code, message=exc.message))

    return build_trial_balance(owner_id, closing_balances, failures=failures, party_filter=party_filter)
