# fintrack/crud/debt.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import asc
from typing import List, Optional
import uuid

from fintrack.core.exceptions import require_owner
from fintrack.core.live import record_feed, DEBT_STATUS
from fintrack.models.debt import DebtEvent, DebtStatus, RepaymentLogEntry
from fintrack.utils.bucketing import now_ms
from fintrack.utils.metrics import apply_repayment

async def get_debt_status(owner_id: uuid.UUID, db: AsyncSession) -> Optional[DebtStatus]:
    result = await db.execute(select(DebtStatus).where(DebtStatus.owner_id == owner_id))
    return result.scalar_one_or_none()

async def get_repayment_log(owner_id: uuid.UUID, db: AsyncSession) -> List[RepaymentLogEntry]:
    result = await db.execute(
        select(RepaymentLogEntry)
        .where(RepaymentLogEntry.owner_id == owner_id)
        .order_by(asc(RepaymentLogEntry.timestamp))
    )
    return result.scalars().all()

async def initialize_debt(owner_id: Optional[uuid.UUID], initial_debt: float, db: AsyncSession) -> DebtStatus:
    """Set (or re-set) the starting debt; logs an init entry."""
    owner_id = require_owner(owner_id)
    timestamp = now_ms()
    status = await get_debt_status(owner_id, db)
    if status is None:
        status = DebtStatus(owner_id=owner_id)
    status.initial_debt = initial_debt
    status.current_debt = initial_debt
    status.last_updated = timestamp
    db.add(status)
    db.add(RepaymentLogEntry(
        owner_id=owner_id,
        event=DebtEvent.init,
        amount=initial_debt,
        remaining_debt=initial_debt,
        timestamp=timestamp,
    ))
    await db.commit()
    await db.refresh(status)
    record_feed.publish(DEBT_STATUS, owner_id)
    return status

async def record_repayment(status: DebtStatus, amount: float, db: AsyncSession) -> DebtStatus:
    """Apply a repayment (clamped at zero) and log the remaining debt."""
    timestamp = now_ms()
    status.current_debt = apply_repayment(status.current_debt, amount)
    status.last_updated = timestamp
    db.add(status)
    db.add(RepaymentLogEntry(
        owner_id=status.owner_id,
        event=DebtEvent.repayment,
        amount=amount,
        remaining_debt=status.current_debt,
        timestamp=timestamp,
    ))
    await db.commit()
    await db.refresh(status)
    record_feed.publish(DEBT_STATUS, status.owner_id)
    return status
