# Daily Records Feature - Dependencies

from fastapi import Depends, Path
from app.core.store import DocumentStore
from app.database import get_store
from app.features.records.service import DailyRecordService
from app.features.records.sync import DailyRecordSynchronizer
from app.shared.dates import format_record_date
from app.shared.exceptions import BadRequestException


def get_record_service(store: DocumentStore = Depends(get_store)) -> DailyRecordService:
    return DailyRecordService(DailyRecordSynchronizer(store))


def valid_record_date(
    record_date: str = Path(..., description="Calendar day, YYYY-MM-DD")
) -> str:
    """Normalize the path date or reject it with a 400."""
    try:
        return format_record_date(record_date)
    except ValueError:
        raise BadRequestException("Date must be formatted as YYYY-MM-DD")
