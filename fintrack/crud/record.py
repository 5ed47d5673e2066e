# fintrack/crud/record.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import asc, desc
from typing import List, Optional
import uuid

from fintrack.core.exceptions import require_owner
from fintrack.core.live import record_feed, FINANCIAL_RECORDS
from fintrack.models.record import FinancialRecord
from fintrack.schemas.record import RecordCreate, RecordUpdate
from fintrack.utils.bucketing import now_ms

async def get_records_for_owner(
    owner_id: uuid.UUID,
    db: AsyncSession,
    since: Optional[int] = None,
    until: Optional[int] = None,
    kinds: Optional[List[str]] = None,
    newest_first: bool = False,
) -> List[FinancialRecord]:
    """Owner-scoped records, optionally limited to [since, until] in ms."""
    query = select(FinancialRecord).where(FinancialRecord.owner_id == owner_id)
    if since is not None:
        query = query.where(FinancialRecord.timestamp >= since)
    if until is not None:
        query = query.where(FinancialRecord.timestamp <= until)
    if kinds:
        query = query.where(FinancialRecord.kind.in_(kinds))
    order = desc(FinancialRecord.timestamp) if newest_first else asc(FinancialRecord.timestamp)
    result = await db.execute(query.order_by(order))
    return result.scalars().all()

async def get_record_by_id(record_id: uuid.UUID, owner_id: uuid.UUID, db: AsyncSession) -> Optional[FinancialRecord]:
    result = await db.execute(
        select(FinancialRecord).where(FinancialRecord.id == record_id, FinancialRecord.owner_id == owner_id)
    )
    return result.scalar_one_or_none()

async def create_record(owner_id: Optional[uuid.UUID], record_in: RecordCreate, db: AsyncSession) -> FinancialRecord:
    owner_id = require_owner(owner_id)
    record = FinancialRecord(**record_in.model_dump(), owner_id=owner_id, timestamp=now_ms())
    db.add(record)
    await db.commit()
    await db.refresh(record)
    record_feed.publish(FINANCIAL_RECORDS, owner_id)
    return record

async def update_record(record: FinancialRecord, record_in: RecordUpdate, db: AsyncSession) -> FinancialRecord:
    for field, value in record_in.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(record, field, value)
    db.add(record)
    await db.commit()
    await db.refresh(record)
    record_feed.publish(FINANCIAL_RECORDS, record.owner_id)
    return record

async def delete_record(record: FinancialRecord, db: AsyncSession) -> None:
    owner_id = record.owner_id
    await db.delete(record)
    await db.commit()
    record_feed.publish(FINANCIAL_RECORDS, owner_id)
