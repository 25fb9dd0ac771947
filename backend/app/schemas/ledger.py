"""
Ledger Schemas.

Plain records exchanged between the ledger core and its callers.
"""

import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from backend.app.models.ledger_enums import CommissionMode, EntryKind, EntrySide


class Entry(BaseModel):
    """One normalized ledger line for a party. Positive amount = credit, negative = debit."""
    id: str
    owner_id: str
    party_name: str
    party_id: Optional[str] = None
    date: datetime.date
    amount: Decimal
    counterparty_label: str = ""
    note: str = ""
    running_balance: Optional[Decimal] = None
    is_old_record: bool = False
    is_synthetic: bool = False
    kind: EntryKind = EntryKind.MANUAL
    source_entry_id: Optional[str] = None
    date_defaulted: bool = False

    @property
    def side(self) -> EntrySide:
        return EntrySide.DEBIT if self.amount < 0 else EntrySide.CREDIT

    @property
    def remarks(self) -> str:
        """Display form of counterparty and note, e.g. ``Ramesh: cash``."""
        if self.counterparty_label and self.note:
            return f"{self.counterparty_label}: {self.note}"
        return self.counterparty_label or self.note


class Party(BaseModel):
    """Counterparty with its commission arrangement."""
    name: str = Field(..., min_length=1)
    commission_mode: CommissionMode = CommissionMode.NONE
    commission_rate: Decimal = Decimal("0")
    # Advisory only, never enforced by the ledger core
    balance_limit: Optional[Decimal] = None


class CommissionResult(BaseModel):
    """Commission owed on a principal, before it becomes ledger entries."""
    commission_amount: Decimal
    direction: EntrySide
    counterparty_label: str


class LedgerSummary(BaseModel):
    total_credit: Decimal = Decimal("0")
    total_debit: Decimal = Decimal("0")
    calculated_balance: Decimal = Decimal("0")
    total_entries: int = 0


class PartyLedger(BaseModel):
    """Live entries annotated with running balances, plus the archived ones."""
    owner_id: str
    party_name: Optional[str] = None
    entries: List[Entry] = []
    old_records: List[Entry] = []
    closing_balance: Decimal = Decimal("0")
    summary: LedgerSummary = Field(default_factory=LedgerSummary)


class SettlementSummary(BaseModel):
    """Figures of one Monday Final run."""
    transaction_count: int
    total_credit: Decimal
    total_debit: Decimal
    starting_balance: Decimal
    final_balance: Decimal


class SettlementResult(BaseModel):
    owner_id: str
    party_name: str
    carry_forward: Entry
    archived_entry_ids: List[str] = []
    archived_entries: List[Entry] = []
    summary: SettlementSummary
