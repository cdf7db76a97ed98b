# Daily Records Feature - Schemas

import json
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ValidationError
from app.core.logging import logger


class RecordField(str, Enum):
    """Independently persisted fields of a daily record (stored names)."""
    MEDICATION_STATUS = "medicationStatus"
    NOTES = "notes"
    BLOOD_PRESSURE = "bloodPressure"


class NoteEntry(BaseModel):
    """A free-text note left by a family member."""
    text: str
    author: str
    timestamp: str = Field(..., description="ISO-8601 creation time")


class BloodPressureReading(BaseModel):
    """A blood pressure reading, kept as entered."""
    systolic: str
    diastolic: str
    author: str
    timestamp: str = Field(..., description="ISO-8601 creation time")


class DailyRecordSnapshot(BaseModel):
    """Decoded state of one calendar day."""
    date: str
    medication_status: Dict[str, bool] = Field(default_factory=dict)
    notes: List[NoteEntry] = Field(default_factory=list)
    blood_pressure: List[BloodPressureReading] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "date": "2024-03-05",
                "medication_status": {"t4": True, "levecom-m": False},
                "notes": [
                    {"text": "Durmió bien", "author": "Ana", "timestamp": "2024-03-05T09:12:00+00:00"}
                ],
                "blood_pressure": [
                    {"systolic": "120", "diastolic": "80", "author": "Juan", "timestamp": "2024-03-05T18:40:00+00:00"}
                ],
            }
        }

    @classmethod
    def empty(cls, date: str) -> "DailyRecordSnapshot":
        return cls(date=date)

    @classmethod
    def from_document(cls, date: str, document: Optional[Dict[str, Any]]) -> "DailyRecordSnapshot":
        """
        Decode stored fields. A missing document, a missing field or a field
        that fails to decode yields that field's empty default.
        """
        if not document:
            return cls.empty(date)

        return cls(
            date=date,
            medication_status=_decode(document, RecordField.MEDICATION_STATUS, dict, _parse_status),
            notes=_decode(document, RecordField.NOTES, list, _parse_list(NoteEntry)),
            blood_pressure=_decode(document, RecordField.BLOOD_PRESSURE, list, _parse_list(BloodPressureReading)),
        )


def encode_field(value: Any) -> str:
    """Serialize a field value the way it is stored."""
    if isinstance(value, BaseModel):
        value = value.model_dump()
    elif isinstance(value, list):
        value = [item.model_dump() if isinstance(item, BaseModel) else item for item in value]
    return json.dumps(value, ensure_ascii=False)


def _parse_status(raw: Any) -> Dict[str, bool]:
    if not isinstance(raw, dict):
        raise TypeError("medicationStatus must be an object")
    return {str(key): bool(value) for key, value in raw.items()}


def _parse_list(model):
    def parse(raw: Any) -> list:
        if not isinstance(raw, list):
            raise TypeError(f"expected a list of {model.__name__}")
        return [model.model_validate(item) for item in raw]
    return parse


def _decode(document: Dict[str, Any], field: RecordField, default, parse):
    raw = document.get(field.value)
    if raw is None or raw == "":
        return default()
    try:
        return parse(json.loads(raw) if isinstance(raw, str) else raw)
    except (ValueError, TypeError, ValidationError) as e:
        logger.warning(f"Discarding undecodable {field.value} for {document.get('date')}: {e}")
        return default()


# ==================== Requests ====================

class MedicationStatusUpdate(BaseModel):
    """Schema for replacing the whole check-mark mapping."""
    medication_status: Dict[str, bool]


class NoteCreate(BaseModel):
    """Schema for appending a note."""
    text: str = Field(..., min_length=1, description="Note text")
    author: str = Field(..., min_length=1, description="Display name of the writer")


class BloodPressureCreate(BaseModel):
    """Schema for appending a blood pressure reading."""
    systolic: str = Field(..., min_length=1)
    diastolic: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1, description="Display name of the writer")

    class Config:
        json_schema_extra = {
            "example": {"systolic": "130", "diastolic": "85", "author": "Ana"}
        }
