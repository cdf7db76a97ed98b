# Daily Records Feature - Models

from typing import Optional
from beanie import Document, Indexed
from app.shared.models import TimestampMixin


class DailyRecordDocument(Document, TimestampMixin):
    """
    Daily record document model.
    One document per calendar day per application namespace. Each of the
    three tracked fields is stored as its own JSON string so a write to one
    never touches the others.
    """

    # "{app_id}:{YYYY-MM-DD}"
    id: str

    app_id: Indexed(str)
    date: str  # YYYY-MM-DD

    medication_status: Optional[str] = None
    notes: Optional[str] = None
    blood_pressure: Optional[str] = None

    class Settings:
        name = "daily_records"
        use_state_management = True
        indexes = [
            [("app_id", 1), ("date", -1)],
        ]

    class Config:
        json_schema_extra = {
            "example": {
                "id": "default-app-id:2024-03-05",
                "app_id": "default-app-id",
                "date": "2024-03-05",
                "medication_status": '{"t4": true}',
                "notes": '[{"text": "Durmió bien", "author": "Ana", "timestamp": "2024-03-05T09:12:00+00:00"}]',
                "blood_pressure": "[]",
            }
        }
