# fintrack/crud/goal.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import asc
from typing import Iterable, List, Optional
import uuid

from fintrack.core.exceptions import require_owner
from fintrack.core.live import record_feed, GOALS
from fintrack.models.goal import Goal, GoalStatus
from fintrack.schemas.goal import GoalCreate, GoalUpdate, Subgoal
from fintrack.utils.bucketing import now_ms

def _dump_subgoals(subgoals: Iterable[Subgoal]) -> List[dict]:
    return [s.model_dump(mode="json") for s in subgoals]

async def get_goals_for_owner(
    owner_id: uuid.UUID,
    db: AsyncSession,
    statuses: Optional[List[GoalStatus]] = None,
) -> List[Goal]:
    query = select(Goal).where(Goal.owner_id == owner_id)
    if statuses:
        query = query.where(Goal.status.in_(statuses))
    result = await db.execute(query.order_by(asc(Goal.created_at)))
    return result.scalars().all()

async def get_goal_by_id(goal_id: uuid.UUID, owner_id: uuid.UUID, db: AsyncSession) -> Optional[Goal]:
    result = await db.execute(
        select(Goal).where(Goal.id == goal_id, Goal.owner_id == owner_id)
    )
    return result.scalar_one_or_none()

async def create_goal(owner_id: Optional[uuid.UUID], goal_in: GoalCreate, db: AsyncSession) -> Goal:
    owner_id = require_owner(owner_id)
    goal = Goal(
        owner_id=owner_id,
        title=goal_in.title.strip(),
        status=GoalStatus.in_progress,
        subgoals=_dump_subgoals(goal_in.subgoals),
        created_at=now_ms(),
    )
    db.add(goal)
    await db.commit()
    await db.refresh(goal)
    record_feed.publish(GOALS, owner_id)
    return goal

async def update_goal(goal: Goal, goal_in: GoalUpdate, db: AsyncSession) -> Goal:
    for field, value in goal_in.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(goal, field, value.strip() if field == "title" else value)
    db.add(goal)
    await db.commit()
    await db.refresh(goal)
    record_feed.publish(GOALS, goal.owner_id)
    return goal

async def replace_subgoals(goal: Goal, subgoals: Iterable[Subgoal], db: AsyncSession) -> Goal:
    """Rewrite the embedded subgoal list in one write."""
    goal.subgoals = _dump_subgoals(subgoals)
    db.add(goal)
    await db.commit()
    await db.refresh(goal)
    record_feed.publish(GOALS, goal.owner_id)
    return goal

async def delete_goal(goal: Goal, db: AsyncSession) -> None:
    # Motivation logs pointing at this goal are kept on purpose
    owner_id = goal.owner_id
    await db.delete(goal)
    await db.commit()
    record_feed.publish(GOALS, owner_id)
