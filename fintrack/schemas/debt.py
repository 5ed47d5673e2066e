# fintrack/schemas/debt.py
from typing import List, Optional
from pydantic import BaseModel, Field

class DebtInit(BaseModel):
    initial_debt: float = Field(..., ge=0)

class DebtRepay(BaseModel):
    amount: float = Field(..., gt=0)

class DebtStatusRead(BaseModel):
    configured: bool
    initial_debt: Optional[float] = None
    current_debt: Optional[float] = None
    last_updated: Optional[int] = None
    repayment_percentage: float = 0.0

class RepaymentLogRead(BaseModel):
    event: str
    amount: float
    remaining_debt: float
    timestamp: int

    class Config:
        from_attributes = True

class DebtHistoryRead(BaseModel):
    status: DebtStatusRead
    entries: List[RepaymentLogRead]
