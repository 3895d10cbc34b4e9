"""
Credit endpoints for API v1.

These routes expose wallet balances, the credit history feed and
administrative grants/deductions.  All amounts are whole credits;
conversion to a display currency happens in the client.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from skill_events_api.app.api.deps import get_ledger, get_reconciliation_service
from skill_events_api.app.core.errors import InvalidAmount
from skill_events_api.app.core.security import require_admin
from skill_events_api.app.schemas.credits import (
    CreditApply,
    CreditBalance,
    CreditHistory,
    LedgerEntryRead,
    ReconciliationItem,
    ReconciliationReport,
)
from skill_events_api.app.services.ledger_service import LedgerService
from skill_events_api.app.services.reconciliation_service import ReconciliationService


router = APIRouter()


@router.post("/apply", response_model=CreditBalance)
async def apply_credits(
    payload: CreditApply,
    ledger: LedgerService = Depends(get_ledger),
    current_user: dict = Depends(require_admin),
) -> CreditBalance:
    """Grant (positive ``delta``) or deduct (negative ``delta``) credits.

    Returns 400 when ``delta`` is zero, fractional or not a number.
    Deductions may take the balance below zero.
    """
    try:
        balance = await ledger.apply_delta(payload.email, payload.delta, payload.note)
    except InvalidAmount as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return CreditBalance(balance=balance)


@router.get("/reconciliation", response_model=ReconciliationReport)
async def reconciliation_report(
    service: ReconciliationService = Depends(get_reconciliation_service),
    current_user: dict = Depends(require_admin),
) -> ReconciliationReport:
    """List join debits and admissions that do not match each other."""
    issues = await service.report()
    return ReconciliationReport(ok=not issues, issues=[ReconciliationItem(**item) for item in issues])


@router.get("/{email}", response_model=CreditBalance)
async def get_balance(email: str, ledger: LedgerService = Depends(get_ledger)) -> CreditBalance:
    """Return the wallet balance; unknown users have 0 credits."""
    try:
        return CreditBalance(balance=await ledger.get_balance(email))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e


@router.get("/{email}/history", response_model=CreditHistory)
async def get_history(
    email: str,
    q: Optional[str] = Query(None, description="Case-insensitive text to look for in entry notes"),
    limit: Optional[int] = Query(None, ge=1, description="Maximum number of entries (capped at 200)"),
    ledger: LedgerService = Depends(get_ledger),
) -> CreditHistory:
    """Return the credit history, most recent entry first."""
    try:
        entries = await ledger.get_history(email, filter_text=q, limit=limit)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return CreditHistory(history=[LedgerEntryRead.from_record(entry) for entry in entries])
