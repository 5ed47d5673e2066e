# fintrack/api/v1/routes/debt.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, Tuple

from fintrack.schemas.debt import DebtInit, DebtRepay, DebtStatusRead, DebtHistoryRead, RepaymentLogRead
from fintrack.schemas.dashboard import ChartPayload
from fintrack.crud.debt import get_debt_status, get_repayment_log, initialize_debt, record_repayment
from fintrack.core.database import get_async_session
from fintrack.core.auth import User
from fintrack.api.deps import chart_window, get_current_user, get_optional_current_user, owner_id_of
from fintrack.core.config import settings
from fintrack.models.debt import DebtStatus
from fintrack.utils.charts import debt_progress_chart
from fintrack.utils.metrics import repayment_percentage

router = APIRouter(prefix="/debt", tags=["debt"])

def status_read(debt: Optional[DebtStatus]) -> DebtStatusRead:
    if debt is None:
        return DebtStatusRead(configured=False)
    return DebtStatusRead(
        configured=True,
        initial_debt=debt.initial_debt,
        current_debt=debt.current_debt,
        last_updated=debt.last_updated,
        repayment_percentage=round(repayment_percentage(debt.initial_debt, debt.current_debt), 2),
    )

@router.get("", response_model=DebtHistoryRead)
async def read_debt(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Debt tracker state. `configured=false` means no initial debt was ever set."""
    owner_id = owner_id_of(user)
    debt = await get_debt_status(owner_id, db)
    entries = await get_repayment_log(owner_id, db) if debt is not None else []
    return DebtHistoryRead(
        status=status_read(debt),
        entries=[RepaymentLogRead.model_validate(e, from_attributes=True) for e in entries],
    )

@router.post("/init", response_model=DebtStatusRead)
async def init_debt(
    debt_in: DebtInit,
    db: AsyncSession = Depends(get_async_session),
    user: Optional[User] = Depends(get_optional_current_user),
):
    debt = await initialize_debt(owner_id_of(user), debt_in.initial_debt, db)
    return status_read(debt)

@router.post("/repay", response_model=DebtStatusRead)
async def repay_debt(
    repay_in: DebtRepay,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    debt = await get_debt_status(owner_id_of(user), db)
    if debt is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Debt tracker is not configured; set an initial debt first",
        )
    debt = await record_repayment(debt, repay_in.amount, db)
    return status_read(debt)

@router.get("/chart", response_model=ChartPayload)
async def debt_chart(
    window: Tuple[Optional[str], Optional[str]] = Depends(chart_window),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Remaining debt per day; the window only clips what is shown."""
    entries = await get_repayment_log(owner_id_of(user), db)
    start, end = window
    return debt_progress_chart(entries, start, end, settings.MAX_CHART_DAYS)
