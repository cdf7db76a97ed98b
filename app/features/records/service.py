# Daily Records Feature - Service

from typing import Dict

from app.core.logging import logger
from app.features.records.schemas import (
    BloodPressureCreate,
    BloodPressureReading,
    DailyRecordSnapshot,
    NoteCreate,
    NoteEntry,
    RecordField,
)
from app.features.records.sync import DailyRecordSynchronizer
from app.shared.dates import DateLike, format_record_date
from app.shared.exceptions import ServiceUnavailableException, StoreError
from app.shared.models import utcnow


class DailyRecordService:
    """Service class for daily record operations over HTTP."""

    def __init__(self, synchronizer: DailyRecordSynchronizer):
        self.synchronizer = synchronizer

    async def get_record(self, day: DateLike) -> DailyRecordSnapshot:
        return await self.synchronizer.load(day)

    async def _write(self, day: DateLike, field: RecordField, value) -> DailyRecordSnapshot:
        try:
            return await self.synchronizer.patch(day, field, value)
        except StoreError:
            raise ServiceUnavailableException(
                f"Could not save {field.value} for {format_record_date(day)}. Please try again."
            )

    async def set_medication_status(self, day: DateLike, status: Dict[str, bool]) -> DailyRecordSnapshot:
        """Replace the whole check-mark mapping of a day."""
        return await self._write(day, RecordField.MEDICATION_STATUS, status)

    async def toggle_medication(self, day: DateLike, medication_id: str) -> DailyRecordSnapshot:
        """
        Flip one medication's check mark.

        Args:
            day: Calendar day
            medication_id: MedicationDefinition id

        Returns:
            Snapshot after the write
        """
        current = await self.synchronizer.load(day)
        status = dict(current.medication_status)
        status[medication_id] = not status.get(medication_id, False)

        logger.info(f"Toggling {medication_id} to {status[medication_id]} on {current.date}")
        return await self._write(day, RecordField.MEDICATION_STATUS, status)

    async def add_note(self, day: DateLike, note_data: NoteCreate) -> DailyRecordSnapshot:
        """Append a note; the whole list is written back."""
        current = await self.synchronizer.load(day)
        note = NoteEntry(
            text=note_data.text.strip(),
            author=note_data.author.strip(),
            timestamp=utcnow().isoformat(),
        )
        return await self._write(day, RecordField.NOTES, [*current.notes, note])

    async def add_blood_pressure(self, day: DateLike, reading_data: BloodPressureCreate) -> DailyRecordSnapshot:
        """Append a blood pressure reading; the whole list is written back."""
        current = await self.synchronizer.load(day)
        reading = BloodPressureReading(
            systolic=reading_data.systolic.strip(),
            diastolic=reading_data.diastolic.strip(),
            author=reading_data.author.strip(),
            timestamp=utcnow().isoformat(),
        )
        return await self._write(day, RecordField.BLOOD_PRESSURE, [*current.blood_pressure, reading])
