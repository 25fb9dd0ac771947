"""
Trial Balance Schemas.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel

from backend.app.models.ledger_enums import EntrySide


class TrialBalanceRow(BaseModel):
    """One line of a trial balance. Amount is always non-negative."""
    party_name: str
    amount: Decimal
    side: EntrySide


class ConsistencyWarning(BaseModel):
    """Reported when credits and debits do not cancel out."""
    balance_difference: Decimal
    message: str


class PartyFailure(BaseModel):
    """A party left out of a trial balance because its data could not be processed."""
    party_name: str
    error_code: str
    message: str


class TrialBalanceData(BaseModel):
    owner_id: str
    credit_entries: List[TrialBalanceRow] = []
    debit_entries: List[TrialBalanceRow] = []
    credit_total: Decimal = Decimal("0")
    debit_total: Decimal = Decimal("0")
    balance_difference: Decimal = Decimal("0")
    consistency_warning: Optional[ConsistencyWarning] = None
    failures: List[PartyFailure] = []
