# fintrack/api/v1/routes/motivation.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional, Tuple
import uuid

from fintrack.schemas.motivation import ActivityItem, MotivationLogCreate, MotivationLogRead, MotivationScore
from fintrack.schemas.dashboard import ChartPayload
from fintrack.crud.goal import get_goal_by_id, get_goals_for_owner
from fintrack.crud.motivation import create_log, delete_log, get_log_by_id, get_logs_for_owner
from fintrack.core.database import get_async_session
from fintrack.core.auth import User
from fintrack.api.deps import chart_window, get_current_user, get_optional_current_user, owner_id_of
from fintrack.core.config import settings
from fintrack.core.exceptions import require_owner
from fintrack.utils.charts import activity_items, motivation_chart, motivation_total

router = APIRouter(prefix="/motivation", tags=["motivation"])

@router.post("/logs", response_model=MotivationLogRead, status_code=status.HTTP_201_CREATED)
async def log_score(
    log_in: MotivationLogCreate,
    db: AsyncSession = Depends(get_async_session),
    user: Optional[User] = Depends(get_optional_current_user),
):
    owner_id = require_owner(owner_id_of(user))
    goal = await get_goal_by_id(log_in.goal_id, owner_id, db)
    if not goal:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Goal not found")
    return await create_log(owner_id, log_in, goal, db)

@router.get("/logs", response_model=List[ActivityItem])
async def read_activity_log(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Activity log, newest first."""
    owner_id = owner_id_of(user)
    logs = await get_logs_for_owner(owner_id, db, newest_first=True)
    goals = await get_goals_for_owner(owner_id, db)
    return activity_items(logs, goals)

@router.delete("/logs/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_log_endpoint(
    log_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    log = await get_log_by_id(log_id, owner_id_of(user), db)
    if not log:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Log not found")
    await delete_log(log, db)
    return None

@router.get("/score", response_model=MotivationScore)
async def read_score(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return motivation_total(await get_logs_for_owner(owner_id_of(user), db))

@router.get("/chart", response_model=ChartPayload)
async def score_chart(
    window: Tuple[Optional[str], Optional[str]] = Depends(chart_window),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Cumulative score (overall and per goal) over full history, clipped to [start, end]."""
    owner_id = owner_id_of(user)
    logs = await get_logs_for_owner(owner_id, db)
    goals = await get_goals_for_owner(owner_id, db)
    start, end = window
    return motivation_chart(logs, goals, start, end, settings.MAX_CHART_DAYS)
