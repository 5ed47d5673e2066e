# fintrack/crud/fixed_settings.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import Optional
import uuid

from fintrack.core.exceptions import require_owner
from fintrack.core.live import record_feed, FIXED_SETTINGS
from fintrack.models.fixed_settings import FixedSettings
from fintrack.schemas.fixed_settings import FixedSettingsUpdate
from fintrack.utils.bucketing import now_ms

async def get_fixed_settings(owner_id: uuid.UUID, db: AsyncSession) -> Optional[FixedSettings]:
    result = await db.execute(select(FixedSettings).where(FixedSettings.owner_id == owner_id))
    return result.scalar_one_or_none()

async def upsert_fixed_settings(
    owner_id: Optional[uuid.UUID],
    settings_in: FixedSettingsUpdate,
    db: AsyncSession,
) -> FixedSettings:
    """Create or replace the owner's single settings document."""
    owner_id = require_owner(owner_id)
    doc = await get_fixed_settings(owner_id, db)
    if doc is None:
        doc = FixedSettings(owner_id=owner_id)
    for field, value in settings_in.model_dump().items():
        setattr(doc, field, value)
    doc.updated_at = now_ms()
    db.add(doc)
    await db.commit()
    await db.refresh(doc)
    record_feed.publish(FIXED_SETTINGS, owner_id)
    return doc
