# fintrack/schemas/record.py
from typing import Optional
from pydantic import BaseModel, Field
import uuid

class RecordBase(BaseModel):
    kind: str = Field(..., min_length=1, max_length=50, description="E.g. Income, Expense, Savings_Deposit, Bonus")
    amount: float = Field(..., ge=0, description="Non-negative currency amount")
    description: Optional[str] = Field(None, max_length=255)

class RecordCreate(RecordBase):
    pass

class RecordUpdate(BaseModel):
    # kind and timestamp are fixed once written
    amount: Optional[float] = Field(None, ge=0)
    description: Optional[str] = Field(None, max_length=255)

class RecordRead(RecordBase):
    id: uuid.UUID
    owner_id: uuid.UUID
    timestamp: int
    category: Optional[str] = None

    class Config:
        from_attributes = True
