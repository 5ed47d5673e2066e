# fintrack/api/v1/routes/goals.py
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from fintrack.schemas.goal import GoalCreate, GoalRead, GoalStatusUpdate, GoalUpdate, SubgoalList
from fintrack.crud.goal import (
    create_goal,
    delete_goal,
    get_goal_by_id,
    get_goals_for_owner,
    replace_subgoals,
    update_goal,
)
from fintrack.core.database import get_async_session
from fintrack.core.auth import User
from fintrack.api.deps import get_current_user, get_optional_current_user, owner_id_of
from fintrack.models.goal import Goal, GoalStatus

router = APIRouter(prefix="/goals", tags=["goals"])

async def _owned_goal(goal_id: uuid.UUID, user: User, db: AsyncSession) -> Goal:
    goal = await get_goal_by_id(goal_id, owner_id_of(user), db)
    if not goal:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Goal not found")
    return goal

@router.get("", response_model=List[GoalRead])
async def read_goals(
    goal_status: Optional[List[GoalStatus]] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await get_goals_for_owner(owner_id_of(user), db, statuses=goal_status)

@router.post("", response_model=GoalRead, status_code=status.HTTP_201_CREATED)
async def create_goal_endpoint(
    goal_in: GoalCreate,
    db: AsyncSession = Depends(get_async_session),
    user: Optional[User] = Depends(get_optional_current_user),
):
    return await create_goal(owner_id_of(user), goal_in, db)

@router.get("/{goal_id}", response_model=GoalRead)
async def read_goal(
    goal_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await _owned_goal(goal_id, user, db)

@router.patch("/{goal_id}", response_model=GoalRead)
async def update_goal_endpoint(
    goal_id: uuid.UUID,
    goal_in: GoalUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    goal = await _owned_goal(goal_id, user, db)
    return await update_goal(goal, goal_in, db)

@router.patch("/{goal_id}/status", response_model=GoalRead)
async def update_goal_status(
    goal_id: uuid.UUID,
    status_in: GoalStatusUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    goal = await _owned_goal(goal_id, user, db)
    return await update_goal(goal, GoalUpdate(status=status_in.status), db)

@router.put("/{goal_id}/subgoals", response_model=GoalRead)
async def replace_subgoals_endpoint(
    goal_id: uuid.UUID,
    subgoals_in: SubgoalList,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Replace the whole subgoal list; subgoals are never edited one by one."""
    goal = await _owned_goal(goal_id, user, db)
    return await replace_subgoals(goal, subgoals_in.subgoals, db)

@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal_endpoint(
    goal_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Delete a goal. Its motivation logs stay and show a placeholder title."""
    goal = await _owned_goal(goal_id, user, db)
    await delete_goal(goal, db)
    return None
