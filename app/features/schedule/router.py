# Schedule Feature - Router

from fastapi import APIRouter, Depends
from app.core.store import DocumentStore
from app.database import get_store
from app.features.auth.dependencies import get_current_principal
from app.features.auth.schemas import Principal
from app.features.medications.service import MedicationService
from app.features.records.dependencies import valid_record_date
from app.features.schedule.defaults import CARE_GUIDANCE
from app.features.schedule.resolver import as_needed_guidance, resolve_schedule
from app.features.schedule.schemas import DayScheduleResponse, GuidanceResponse, ScheduleSlot
from app.shared.dates import describe_date, format_record_date, shift_date
from app.shared.exceptions import ServiceUnavailableException, StoreError


router = APIRouter(prefix="/schedule", tags=["Schedule"])


async def _load_definitions(store: DocumentStore):
    try:
        return await MedicationService(store).get_definitions()
    except StoreError:
        raise ServiceUnavailableException("Could not load medication definitions")


# NOTE: /guidance must be registered before /{record_date}

@router.get("/guidance", response_model=GuidanceResponse)
async def get_guidance(
    store: DocumentStore = Depends(get_store),
    principal: Principal = Depends(get_current_principal),
):
    """Static caregiver instructions and the as-needed medications."""
    definitions = await _load_definitions(store)
    return GuidanceResponse(
        instructions=CARE_GUIDANCE,
        as_needed=as_needed_guidance(definitions),
    )


@router.get("/{record_date}", response_model=DayScheduleResponse)
async def get_day_schedule(
    record_date: str = Depends(valid_record_date),
    store: DocumentStore = Depends(get_store),
    principal: Principal = Depends(get_current_principal),
):
    """
    Get the medications due on a day, grouped by time slot in display order.

    - **record_date**: Calendar day (YYYY-MM-DD)
    """
    definitions = await _load_definitions(store)
    grouped = resolve_schedule(definitions, record_date)

    return DayScheduleResponse(
        date=record_date,
        label=describe_date(record_date),
        previous_date=format_record_date(shift_date(record_date, -1)),
        next_date=format_record_date(shift_date(record_date, 1)),
        slots=[ScheduleSlot(time_slot=slot, medications=meds) for slot, meds in grouped.items()],
    )
