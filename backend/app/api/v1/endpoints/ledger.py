"""
Ledger API Endpoints.

Stateless computations over records supplied by the caller: normalization,
running balances, commission, transfers and Monday Final settlement.
"""

from fastapi import APIRouter, Depends

from backend.app.core.dependencies import get_owner_id
from backend.app.core.exceptions import ValidationError
from backend.app.domain.ledger.commission import apply_commission, calculate_commission
from backend.app.domain.ledger.normalizer import normalize_entries, normalize_entry
from backend.app.domain.ledger.running_balance import compute_ledger
from backend.app.domain.ledger.settlement import settle_party
from backend.app.domain.ledger.transfer import build_transfer_entries
from backend.app.schemas.ledger import PartyLedger, SettlementResult
from backend.app.schemas.requests import (
    BalanceRequest, CommissionRequest, CommissionResponse,
    NormalizeRequest, NormalizeResponse, RejectedRecord,
    SettlementRequest, TransferRequest, TransferResponse
)

router = APIRouter(prefix="/ledger", tags=["Ledger"])


@router.post("/entries/normalize", response_model=NormalizeResponse)
async def normalize_ledger_entries(
    body: NormalizeRequest,
    owner_id: str = Depends(get_owner_id)
):
    """
    Normalize a batch of raw records.

    Records that cannot be normalized are listed in ``rejected`` by position;
    the others are returned normally.
    """
    entries = []
    rejected = []
    for index, raw in enumerate(body.entries):
        try:
            entries.append(normalize_entry(raw, owner_id, party_name=body.party_name))
        except ValidationError as exc:
            rejected.append(RejectedRecord(
                index=index,
                error_code=exc.error_code,
                message=exc.message,
                details=exc.details
            ))
    return NormalizeResponse(entries=entries, rejected=rejected)


@router.post("/balance", response_model=PartyLedger)
async def party_balance(
    body: BalanceRequest,
    owner_id: str = Depends(get_owner_id)
):
    """
    Running balances and closing balance for one party.
    """
    entries = normalize_entries(body.entries, owner_id, party_name=body.party_name)
    ledger = compute_ledger(owner_id, entries, carried_forward=body.carried_forward)
    if ledger.party_name is None:
        ledger.party_name = body.party_name
    return ledger


@router.post("/commission", response_model=CommissionResponse)
async def commission_for_entry(
    body: CommissionRequest,
    owner_id: str = Depends(get_owner_id)
):
    """
    Normalize a new transaction and derive its commission entries.
    """
    entry = normalize_entry(body.entry, owner_id, party_name=body.party.name)
    synthetic = apply_commission(owner_id, body.party, entry)
    commission = calculate_commission(body.party, abs(entry.amount)) if synthetic else None
    return CommissionResponse(principal_entry=entry, commission=commission, entries=synthetic)


@router.post("/transfer", response_model=TransferResponse)
async def party_transfer(
    body: TransferRequest,
    owner_id: str = Depends(get_owner_id)
):
    """
    Entries for a transfer between two parties.
    """
    first, second = build_transfer_entries(
        owner_id,
        body.party_name,
        body.other_party_name,
        body.amount,
        body.side,
        entry_date=body.date
    )
    return TransferResponse(entries=[first, second])


@router.post("/settlement", response_model=SettlementResult)
async def monday_final(
    body: SettlementRequest,
    owner_id: str = Depends(get_owner_id)
):
    """
    Monday Final for one party: carry-forward entry plus entries to archive.
    """
    entries = normalize_entries(body.entries, owner_id, party_name=body.party_name)
    return settle_party(
        owner_id,
        body.party_name,
        entries,
        closing_balance=body.closing_balance,
        settled_at=body.settled_at
    )
