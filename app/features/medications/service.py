# Medications Feature - Service

import time
from typing import List

from app.core.logging import logger
from app.core.store import DocumentStore
from app.features.medications.schemas import MedicationDefinition, MedicationDraft
from app.features.schedule.defaults import default_medications
from app.shared.exceptions import NotFoundException, StoreError


class MedicationService:
    """Service class for the shared medication list."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def get_definitions(self) -> List[MedicationDefinition]:
        """
        Get the medication list, seeding the defaults on first run.

        Raises:
            StoreError: If the store cannot be read or seeded
        """
        stored = await self.store.get_definitions()
        if stored is not None:
            return [MedicationDefinition.model_validate(med) for med in stored]

        medications = default_medications()
        await self._save(medications)
        logger.info(f"Seeded {len(medications)} default medication definitions")
        return medications

    async def _save(self, medications: List[MedicationDefinition]) -> None:
        try:
            await self.store.replace_definitions([med.model_dump() for med in medications])
        except StoreError as e:
            logger.error(f"Error saving medication definitions: {e}")
            raise

    @staticmethod
    def _new_id(existing: List[MedicationDefinition]) -> str:
        taken = {med.id for med in existing}
        candidate = int(time.time() * 1000)
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    async def add_definition(self, draft: MedicationDraft) -> MedicationDefinition:
        """
        Append a new medication.

        Raises:
            MedicationValidationError: If required fields are blank (no store call is made)
        """
        cleaned = draft.validate_required()
        medications = await self.get_definitions()

        medication = MedicationDefinition(id=self._new_id(medications), **cleaned.model_dump())
        await self._save([*medications, medication])

        logger.info(f"Added medication '{medication.name}' ({medication.id}) at {medication.time_slot}")
        return medication

    async def update_definition(self, medication_id: str, draft: MedicationDraft) -> MedicationDefinition:
        """
        Replace a medication in place, keeping its id and position.

        Raises:
            MedicationValidationError: If required fields are blank
            NotFoundException: If no medication has that id
        """
        cleaned = draft.validate_required()
        medications = await self.get_definitions()

        if not any(med.id == medication_id for med in medications):
            raise NotFoundException("Medication not found")

        updated = MedicationDefinition(id=medication_id, **cleaned.model_dump())
        await self._save([updated if med.id == medication_id else med for med in medications])

        logger.info(f"Updated medication {medication_id}")
        return updated

    async def delete_definition(self, medication_id: str) -> bool:
        """
        Remove a medication from the list.

        Raises:
            NotFoundException: If no medication has that id
        """
        medications = await self.get_definitions()
        remaining = [med for med in medications if med.id != medication_id]

        if len(remaining) == len(medications):
            raise NotFoundException("Medication not found")

        await self._save(remaining)

        logger.info(f"Deleted medication {medication_id}")
        return True
