# fintrack/api/v1/routes/records.py
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from fintrack.schemas.record import RecordCreate, RecordRead, RecordUpdate
from fintrack.crud.record import (
    create_record,
    get_records_for_owner,
    get_record_by_id,
    update_record,
    delete_record,
)
from fintrack.core.database import get_async_session
from fintrack.core.auth import User
from fintrack.api.deps import get_current_user, get_optional_current_user, owner_id_of
from fintrack.models.record import FinancialRecord
from fintrack.utils.bucketing import Granularity, start_of_relative_period
from fintrack.utils.classifier import KindClassifier, get_classifier

router = APIRouter(prefix="/records", tags=["records"])

def to_read(record: FinancialRecord, classifier: KindClassifier) -> RecordRead:
    read = RecordRead.model_validate(record, from_attributes=True)
    read.category = classifier.classify(record.kind).value
    return read

@router.get("", response_model=List[RecordRead])
async def read_records(
    period: Optional[Granularity] = Query(None, description="Only records inside this rolling period"),
    kind: Optional[List[str]] = Query(None, description="Filter by raw kind tag"),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
    classifier: KindClassifier = Depends(get_classifier),
):
    since = start_of_relative_period(None, period) if period else None
    records = await get_records_for_owner(owner_id_of(user), db, since=since, kinds=kind, newest_first=True)
    return [to_read(r, classifier) for r in records]

@router.post("", response_model=RecordRead, status_code=status.HTTP_201_CREATED)
async def create_record_endpoint(
    record_in: RecordCreate,
    db: AsyncSession = Depends(get_async_session),
    user: Optional[User] = Depends(get_optional_current_user),
    classifier: KindClassifier = Depends(get_classifier),
):
    # Unknown kinds are stored; they just never reach a total
    record = await create_record(owner_id_of(user), record_in, db)
    return to_read(record, classifier)

@router.get("/{record_id}", response_model=RecordRead)
async def read_record(
    record_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
    classifier: KindClassifier = Depends(get_classifier),
):
    record = await get_record_by_id(record_id, owner_id_of(user), db)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Record not found")
    return to_read(record, classifier)

@router.patch("/{record_id}", response_model=RecordRead)
async def update_record_endpoint(
    record_id: uuid.UUID,
    record_in: RecordUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
    classifier: KindClassifier = Depends(get_classifier),
):
    record = await get_record_by_id(record_id, owner_id_of(user), db)
    if not record:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Record not found")
    return to_read(await update_record(record, record_in, db), classifier)

@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_record_endpoint(
    record_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    record = await get_record_by_id(record_id, owner_id_of(user), db)
    if not record:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Record not found")
    await delete_record(record, db)
    return None
