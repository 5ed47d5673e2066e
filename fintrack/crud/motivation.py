# fintrack/crud/motivation.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import asc, desc
from typing import List, Optional
import uuid

from fintrack.core.exceptions import require_owner
from fintrack.core.live import record_feed, MOTIVATION_LOGS
from fintrack.models.goal import Goal
from fintrack.models.motivation import MotivationLog
from fintrack.schemas.motivation import MotivationLogCreate
from fintrack.utils.bucketing import now_ms

async def get_logs_for_owner(
    owner_id: uuid.UUID,
    db: AsyncSession,
    newest_first: bool = False,
) -> List[MotivationLog]:
    order = desc(MotivationLog.timestamp) if newest_first else asc(MotivationLog.timestamp)
    result = await db.execute(
        select(MotivationLog).where(MotivationLog.owner_id == owner_id).order_by(order)
    )
    return result.scalars().all()

async def get_log_by_id(log_id: uuid.UUID, owner_id: uuid.UUID, db: AsyncSession) -> Optional[MotivationLog]:
    result = await db.execute(
        select(MotivationLog).where(MotivationLog.id == log_id, MotivationLog.owner_id == owner_id)
    )
    return result.scalar_one_or_none()

async def create_log(
    owner_id: Optional[uuid.UUID],
    log_in: MotivationLogCreate,
    goal: Goal,
    db: AsyncSession,
) -> MotivationLog:
    owner_id = require_owner(owner_id)
    log = MotivationLog(
        owner_id=owner_id,
        goal_id=goal.id,
        goal_title=goal.title,
        score=log_in.score,
        notes=log_in.notes,
        timestamp=now_ms(),
    )
    db.add(log)
    await db.commit()
    await db.refresh(log)
    record_feed.publish(MOTIVATION_LOGS, owner_id)
    return log

async def delete_log(log: MotivationLog, db: AsyncSession) -> None:
    owner_id = log.owner_id
    await db.delete(log)
    await db.commit()
    record_feed.publish(MOTIVATION_LOGS, owner_id)
