# fintrack/schemas/goal.py
from typing import List, Optional
from pydantic import BaseModel, Field
import uuid

from fintrack.models.goal import GoalStatus

class Subgoal(BaseModel):
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    text: str = Field(..., min_length=1, max_length=200)
    status: GoalStatus = GoalStatus.in_progress

class GoalCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    subgoals: List[Subgoal] = []

class GoalUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    status: Optional[GoalStatus] = None

class GoalStatusUpdate(BaseModel):
    status: GoalStatus

class SubgoalList(BaseModel):
    subgoals: List[Subgoal]

class GoalRead(BaseModel):
    id: uuid.UUID
    owner_id: uuid.UUID
    title: str
    status: GoalStatus
    subgoals: List[Subgoal] = []
    created_at: int

    class Config:
        from_attributes = True
