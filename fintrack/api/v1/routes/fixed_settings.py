# fintrack/api/v1/routes/fixed_settings.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from fintrack.schemas.fixed_settings import FixedSettingsRead, FixedSettingsUpdate
from fintrack.crud.fixed_settings import get_fixed_settings, upsert_fixed_settings
from fintrack.core.database import get_async_session
from fintrack.core.auth import User
from fintrack.api.deps import get_current_user, get_optional_current_user, owner_id_of

router = APIRouter(prefix="/settings", tags=["settings"])

@router.get("/fixed", response_model=FixedSettingsRead)
async def read_fixed_settings(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Fixed salary/debt/savings; `configured` is false until the first save."""
    doc = await get_fixed_settings(owner_id_of(user), db)
    if doc is None:
        return FixedSettingsRead(configured=False)
    return FixedSettingsRead.model_validate(doc, from_attributes=True)

@router.put("/fixed", response_model=FixedSettingsRead)
async def save_fixed_settings(
    settings_in: FixedSettingsUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: Optional[User] = Depends(get_optional_current_user),
):
    doc = await upsert_fixed_settings(owner_id_of(user), settings_in, db)
    return FixedSettingsRead.model_validate(doc, from_attributes=True)
