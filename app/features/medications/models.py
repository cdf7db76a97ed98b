# Medications Feature - Models

from typing import List
from beanie import Document, Indexed
from pydantic import Field
from app.features.medications.schemas import MedicationDefinition
from app.shared.models import TimestampMixin


class MedicationCatalog(Document, TimestampMixin):
    """
    Singleton document holding the ordered medication list of a namespace.
    The whole list is rewritten on every add, edit or delete.
    """

    # "{app_id}:currentDefinitions"
    id: str

    app_id: Indexed(str)
    medications: List[MedicationDefinition] = Field(default_factory=list)

    class Settings:
        name = "medication_definitions"
        use_state_management = True
