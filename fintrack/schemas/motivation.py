# fintrack/schemas/motivation.py
from typing import Optional, Union
from pydantic import BaseModel, Field
import uuid

class MotivationLogCreate(BaseModel):
    goal_id: uuid.UUID
    score: int = Field(..., description="Signed score for the task outcome")
    notes: Optional[str] = Field(None, max_length=500)

class MotivationLogRead(BaseModel):
    id: uuid.UUID
    owner_id: uuid.UUID
    goal_id: Optional[uuid.UUID] = None
    goal_title: Optional[str] = None
    score: int
    notes: Optional[str] = None
    timestamp: int

    class Config:
        from_attributes = True

class ActivityItem(BaseModel):
    id: str
    goal_id: Optional[str] = None
    goal_title: str
    score: int
    score_class: str
    notes: str
    timestamp: int

class MotivationScore(BaseModel):
    score: Union[int, float]
    sign: str
