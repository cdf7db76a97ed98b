# Daily Records Feature - Router

from fastapi import APIRouter, Depends
from app.features.auth.dependencies import get_current_principal
from app.features.auth.schemas import Principal
from app.features.records.dependencies import get_record_service, valid_record_date
from app.features.records.schemas import (
    BloodPressureCreate,
    DailyRecordSnapshot,
    MedicationStatusUpdate,
    NoteCreate,
)
from app.features.records.service import DailyRecordService


router = APIRouter(prefix="/records", tags=["Daily Records"])


@router.get("/{record_date}", response_model=DailyRecordSnapshot)
async def get_daily_record(
    record_date: str = Depends(valid_record_date),
    service: DailyRecordService = Depends(get_record_service),
    principal: Principal = Depends(get_current_principal),
):
    """
    Get the check marks, notes and blood pressure readings of a day.

    A day with no record returns empty values.
    """
    return await service.get_record(record_date)


@router.put("/{record_date}/medication-status", response_model=DailyRecordSnapshot)
async def set_medication_status(
    update: MedicationStatusUpdate,
    record_date: str = Depends(valid_record_date),
    service: DailyRecordService = Depends(get_record_service),
    principal: Principal = Depends(get_current_principal),
):
    """
    Replace the whole check-mark mapping of a day.

    - **medication_status**: medication id -> checked
    """
    return await service.set_medication_status(record_date, update.medication_status)


@router.post("/{record_date}/medication-status/{medication_id}/toggle", response_model=DailyRecordSnapshot)
async def toggle_medication(
    medication_id: str,
    record_date: str = Depends(valid_record_date),
    service: DailyRecordService = Depends(get_record_service),
    principal: Principal = Depends(get_current_principal),
):
    """Flip one medication's check mark for a day."""
    return await service.toggle_medication(record_date, medication_id)


@router.post("/{record_date}/notes", response_model=DailyRecordSnapshot)
async def add_note(
    note_data: NoteCreate,
    record_date: str = Depends(valid_record_date),
    service: DailyRecordService = Depends(get_record_service),
    principal: Principal = Depends(get_current_principal),
):
    """
    Append a note to a day.

    - **text**: Note text
    - **author**: Display name of the family member
    """
    return await service.add_note(record_date, note_data)


@router.post("/{record_date}/blood-pressure", response_model=DailyRecordSnapshot)
async def add_blood_pressure(
    reading_data: BloodPressureCreate,
    record_date: str = Depends(valid_record_date),
    service: DailyRecordService = Depends(get_record_service),
    principal: Principal = Depends(get_current_principal),
):
    """
    Append a blood pressure reading to a day.

    - **systolic** / **diastolic**: Values as entered
    - **author**: Display name of the family member
    """
    return await service.add_blood_pressure(record_date, reading_data)
