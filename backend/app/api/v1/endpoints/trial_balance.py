"""
Trial Balance API Endpoints.
"""

from fastapi import APIRouter, Depends

from backend.app.core.dependencies import get_owner_id
from backend.app.domain.ledger.trial_balance import build_trial_balance, generate_trial_balance
from backend.app.schemas.requests import ClosingBalancesRequest, TrialBalanceRequest
from backend.app.schemas.trial_balance import TrialBalanceData

router = APIRouter(prefix="/trial-balance", tags=["Trial Balance"])


@router.post("", response_model=TrialBalanceData)
async def trial_balance_from_ledgers(
    body: TrialBalanceRequest,
    owner_id: str = Depends(get_owner_id)
):
    """
    Trial balance from every party's raw entries.

    Parties whose data cannot be processed are reported under ``failures``.
    """
    return generate_trial_balance(
        owner_id,
        body.ledgers,
        parties=body.parties,
        party_filter=body.party_filter
    )


@router.post("/closing-balances", response_model=TrialBalanceData)
async def trial_balance_from_closing_balances(
    body: ClosingBalancesRequest,
    owner_id: str = Depends(get_owner_id)
):
    """
    Trial balance from already computed closing balances.
    """
    return build_trial_balance(owner_id, body.closing_balances, party_filter=body.party_filter)
