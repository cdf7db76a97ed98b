# Medications Feature - Schemas

from typing import List
from pydantic import BaseModel, Field
from app.shared.exceptions import MedicationValidationError


# Time slots offered by the management form. "Otro" lets the caregiver type
# a freeform slot name.
TIME_SLOTS = [
    "Ayunas",
    "Mañana Post desayuno",
    "Antes de Comer 13hs",
    "Tarde 18hs",
    "Noche",
    "Mensual",
    "Según necesidad",
    "Otro",
]


class MedicationDefinition(BaseModel):
    """A medication the caregiver administers, and when."""
    id: str = Field(..., description="Stable unique id")
    name: str
    dosage: str = ""
    time_slot: str = Field(..., description="Time of day the medication is given")
    frequency: str = Field(..., description="Frequency rule, e.g. 'Diario'")

    class Config:
        json_schema_extra = {
            "example": {
                "id": "levecom-m",
                "name": "Levecom",
                "dosage": "500mg",
                "time_slot": "Mañana Post desayuno",
                "frequency": "Diario",
            }
        }


class MedicationDraft(BaseModel):
    """
    Add/edit form contents.

    Fields are optional at the schema level so a half-filled form can be
    reported with a single readable message instead of a 422.
    """
    name: str = ""
    dosage: str = ""
    time_slot: str = ""
    frequency: str = ""

    def validate_required(self) -> "MedicationDraft":
        """
        Check required fields and return a whitespace-trimmed copy.

        Raises:
            MedicationValidationError: If name, time_slot or frequency is blank
        """
        cleaned = MedicationDraft(
            name=self.name.strip(),
            dosage=self.dosage.strip(),
            time_slot=self.time_slot.strip(),
            frequency=self.frequency.strip(),
        )
        missing = [
            field for field in ("name", "time_slot", "frequency")
            if not getattr(cleaned, field)
        ]
        if missing:
            raise MedicationValidationError(missing)
        return cleaned

    class Config:
        json_schema_extra = {
            "example": {
                "name": "B12",
                "dosage": "sublingual",
                "time_slot": "Antes de Comer 13hs",
                "frequency": "Martes, Jueves, Sábados",
            }
        }


class MedicationListResponse(BaseModel):
    """Schema for the full ordered medication list."""
    medications: List[MedicationDefinition]
    total: int
