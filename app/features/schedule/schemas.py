# Schedule Feature - Schemas

from typing import List
from pydantic import BaseModel
from app.features.medications.schemas import MedicationDefinition


class ScheduleSlot(BaseModel):
    """Medications given in one time slot."""
    time_slot: str
    medications: List[MedicationDefinition]


class DayScheduleResponse(BaseModel):
    """Schema for the checklist of one calendar day."""
    date: str
    label: str
    previous_date: str
    next_date: str
    slots: List[ScheduleSlot]

    class Config:
        json_schema_extra = {
            "example": {
                "date": "2024-03-05",
                "label": "martes, 5 de marzo de 2024",
                "previous_date": "2024-03-04",
                "next_date": "2024-03-06",
                "slots": [
                    {
                        "time_slot": "Ayunas",
                        "medications": [
                            {"id": "t4", "name": "T4", "dosage": "", "time_slot": "Ayunas", "frequency": "Diario"}
                        ],
                    }
                ],
            }
        }


class GuidanceResponse(BaseModel):
    """Schema for the static caregiver instructions."""
    instructions: List[str]
    as_needed: List[MedicationDefinition]
