"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from backend.app.api.v1.endpoints import ledger, trial_balance

router = APIRouter()

# Party ledger computations
router.include_router(ledger.router)

# Trial balance reporting
router.include_router(trial_balance.router)
