"""
Request and response bodies for the ledger API.

Raw ledger records are accepted as free-form objects; the normalizer decides
what they mean.
"""

import datetime
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from backend.app.models.ledger_enums import EntrySide
from backend.app.schemas.ledger import CommissionResult, Entry, Party


RawRecord = Dict[str, Any]


class NormalizeRequest(BaseModel):
    party_name: Optional[str] = None
    entries: List[RawRecord] = Field(..., min_length=1)


class RejectedRecord(BaseModel):
    index: int
    error_code: str
    message: str
    details: Dict[str, Any] = {}


class NormalizeResponse(BaseModel):
    entries: List[Entry]
    rejected: List[RejectedRecord]


class BalanceRequest(BaseModel):
    party_name: str = Field(..., min_length=1)
    entries: List[RawRecord] = []
    carried_forward: Optional[Decimal] = None


class CommissionRequest(BaseModel):
    party: Party
    entry: RawRecord


class CommissionResponse(BaseModel):
    principal_entry: Entry
    commission: Optional[CommissionResult] = None
    entries: List[Entry] = []


class TransferRequest(BaseModel):
    party_name: str = Field(..., min_length=1)
    other_party_name: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    side: EntrySide
    date: Optional[datetime.date] = None


class TransferResponse(BaseModel):
    entries: List[Entry]


class SettlementRequest(BaseModel):
    party_name: str = Field(..., min_length=1)
    entries: List[RawRecord] = []
    closing_balance: Optional[Decimal] = None
    settled_at: Optional[datetime.date] = None


class TrialBalanceRequest(BaseModel):
    """Per-party raw ledgers keyed by party name."""
    ledgers: Dict[str, List[RawRecord]]
    parties: List[Party] = []
    party_filter: Optional[str] = None


class ClosingBalancesRequest(BaseModel):
    closing_balances: Dict[str, Decimal]
    party_filter: Optional[str] = None
