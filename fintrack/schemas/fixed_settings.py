# fintrack/schemas/fixed_settings.py
from typing import Optional
from pydantic import BaseModel, Field

class FixedSettingsUpdate(BaseModel):
    fixed_salary: float = Field(0.0, ge=0, description="Monthly salary")
    fixed_debt: float = Field(0.0, ge=0, description="Monthly debt obligation")
    fixed_savings: float = Field(0.0, ge=0, description="Fixed savings contribution")

class FixedSettingsRead(FixedSettingsUpdate):
    configured: bool = True
    updated_at: Optional[int] = None

    class Config:
        from_attributes = True
