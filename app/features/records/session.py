# Daily Records Feature - Caregiver session
"""
Device-side state of the calendar page.

A `CalendarSession` owns one active date at a time. Changing the date
cancels the previous date's subscription before the next one opens, and any
snapshot tagged with a date other than the active one is discarded.
User actions update local state first and then merge-write the field; the
snapshot pushed back by the store replaces local state.

This is the device-side client API; the HTTP and Socket.IO routes serve
remote devices, while an embedding front end drives a session directly:

    session = CalendarSession(
        store,
        identity=IdentityGate(),
        preferences=LocalPreferences(),
    )
    if await session.start():
        await session.toggle_medication("t4")
        await session.next_day()
    await session.close()

`IdentityGate` holds the anonymous principal every remote call waits on, and
`LocalPreferences` keeps the display name on the device.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Callable, Dict, List, Optional

from app.core.logging import logger
from app.core.preferences import LocalPreferences
from app.core.store import DocumentStore
from app.features.auth.identity import IdentityGate, IdentityNotReadyError
from app.features.medications.schemas import MedicationDefinition, MedicationDraft
from app.features.medications.service import MedicationService
from app.features.records.schemas import (
    BloodPressureReading,
    DailyRecordSnapshot,
    NoteEntry,
    RecordField,
)
from app.features.records.sync import DailyRecordSynchronizer, Subscription
from app.features.schedule.resolver import as_needed_guidance, resolve_schedule
from app.features.share.service import build_share_link
from app.shared.dates import DateLike, format_record_date, shift_date
from app.shared.exceptions import MedicationValidationError, NotFoundException, StoreError
from app.shared.models import utcnow


NAME_REQUIRED_NOTE = "Por favor, ingresa tu nombre para añadir una nota."
NAME_REQUIRED_READING = "Por favor, ingresa tu nombre para registrar la presión."
SAVE_FAILED = "No se pudo guardar el cambio. Revisa tu conexión."
MEDICATIONS_SAVE_FAILED = "Error al guardar los medicamentos. Inténtalo de nuevo."
MEDICATIONS_DELETE_FAILED = "Error al eliminar el medicamento. Inténtalo de nuevo."
IDENTITY_FAILED = "No se pudo conectar con el servidor."
NAME_SAVE_FAILED = "No se pudo guardar tu nombre en este dispositivo."


class SyncStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"


@dataclass
class DayState:
    """Local copy of the active date's record."""
    date: str
    status: SyncStatus = SyncStatus.LOADING
    medication_status: Dict[str, bool] = field(default_factory=dict)
    notes: List[NoteEntry] = field(default_factory=list)
    blood_pressure: List[BloodPressureReading] = field(default_factory=list)


@dataclass
class MedicationForm:
    """Add/edit form draft of the medication manager."""
    draft: MedicationDraft = field(default_factory=MedicationDraft)
    editing_id: Optional[str] = None


class CalendarSession:
    """One caregiver's view of the shared calendar."""

    def __init__(
        self,
        store: DocumentStore,
        identity: Optional[IdentityGate] = None,
        preferences: Optional[LocalPreferences] = None,
        today: Optional[DateLike] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.synchronizer = DailyRecordSynchronizer(store)
        self.medications = MedicationService(store)
        self.identity = identity or IdentityGate()
        self.preferences = preferences or LocalPreferences()
        self.clock = clock

        self.state = DayState(date=format_record_date(today or date.today()))
        self.form = MedicationForm()
        self.definitions: List[MedicationDefinition] = []
        self.user_name: Optional[str] = None
        self.needs_name = False
        self.notice: Optional[str] = None

        self._subscription: Optional[Subscription] = None

    # ==================== Lifecycle ====================

    async def start(self) -> bool:
        """
        Load the display name, establish identity, then load definitions and
        open the active date. Returns False if identity could not be set up,
        in which case the session stays LOADING.
        """
        self.user_name = self.preferences.get_user_name()
        self.needs_name = not self.user_name

        try:
            await self.identity.ensure()
        except IdentityNotReadyError:
            self.notice = IDENTITY_FAILED
            return False

        await self.load_definitions()
        await self._open(self.state.date)
        return True

    async def close(self) -> None:
        self._close_subscription()

    @property
    def subscription(self) -> Optional[Subscription]:
        return self._subscription

    def _close_subscription(self) -> None:
        if self._subscription is not None:
            logger.info(f"Cleaning up listener for daily record {self._subscription.date}")
            self._subscription.cancel()
            self._subscription = None

    async def _open(self, date_key: str) -> None:
        subscription = await self.synchronizer.observe(date_key, on_snapshot=self.apply_snapshot)

        # The date may have changed while the initial snapshot was loading
        if self.state.date != date_key:
            subscription.cancel()
            return

        self._close_subscription()
        self._subscription = subscription

    # ==================== Date navigation ====================

    async def set_date(self, day: DateLike) -> None:
        """Switch the active date: cancel, reset to LOADING, resubscribe."""
        date_key = format_record_date(day)
        self._close_subscription()
        self.state = DayState(date=date_key)

        if not self.identity.ready:
            logger.warning(f"Identity not ready; {date_key} stays loading")
            return

        await self._open(date_key)

    async def previous_day(self) -> None:
        await self.set_date(shift_date(self.state.date, -1))

    async def next_day(self) -> None:
        await self.set_date(shift_date(self.state.date, 1))

    def apply_snapshot(self, snapshot: DailyRecordSnapshot) -> bool:
        """
        Replace local state with a pushed snapshot.

        Returns False (and changes nothing) for a snapshot of another date.
        """
        if snapshot.date != self.state.date:
            logger.debug(f"Discarding stale snapshot for {snapshot.date} (active {self.state.date})")
            return False

        self.state.medication_status = dict(snapshot.medication_status)
        self.state.notes = list(snapshot.notes)
        self.state.blood_pressure = list(snapshot.blood_pressure)
        self.state.status = SyncStatus.READY
        return True

    # ==================== Daily record actions ====================

    def _can_write(self) -> bool:
        try:
            self.identity.require()
        except IdentityNotReadyError:
            logger.error("Authentication not ready. Cannot save data.")
            self.notice = IDENTITY_FAILED
            return False
        return True

    async def _patch(self, date_key: str, record_field: RecordField, value) -> bool:
        try:
            await self.synchronizer.patch(date_key, record_field, value)
        except StoreError:
            self.notice = SAVE_FAILED
            return False
        return True

    async def toggle_medication(self, medication_id: str) -> bool:
        """Flip a check mark locally, then persist the whole mapping."""
        if not self._can_write():
            return False

        status = dict(self.state.medication_status)
        status[medication_id] = not status.get(medication_id, False)
        self.state.medication_status = status

        return await self._patch(self.state.date, RecordField.MEDICATION_STATUS, status)

    async def add_note(self, text: str) -> bool:
        """Append a note signed with the display name."""
        text = text.strip()
        if not self.user_name:
            self.needs_name = True
            self.notice = NAME_REQUIRED_NOTE
            return False
        if not text or not self._can_write():
            return False

        note = NoteEntry(text=text, author=self.user_name, timestamp=self.clock().isoformat())
        notes = [*self.state.notes, note]
        self.state.notes = notes

        return await self._patch(self.state.date, RecordField.NOTES, notes)

    async def add_blood_pressure(self, systolic: str, diastolic: str) -> bool:
        """Append a blood pressure reading signed with the display name."""
        systolic, diastolic = systolic.strip(), diastolic.strip()
        if not self.user_name:
            self.needs_name = True
            self.notice = NAME_REQUIRED_READING
            return False
        if not systolic or not diastolic or not self._can_write():
            return False

        reading = BloodPressureReading(
            systolic=systolic,
            diastolic=diastolic,
            author=self.user_name,
            timestamp=self.clock().isoformat(),
        )
        readings = [*self.state.blood_pressure, reading]
        self.state.blood_pressure = readings

        return await self._patch(self.state.date, RecordField.BLOOD_PRESSURE, readings)

    # ==================== Display name ====================

    def save_user_name(self, name: str) -> bool:
        """
        Persist the display name. If the device cannot store it, the name is
        still used for this session and a notice is set.
        """
        try:
            if not self.preferences.save_user_name(name):
                return False
        except OSError as e:
            logger.error(f"Error saving display name: {e}")
            self.notice = NAME_SAVE_FAILED
            self.user_name = name.strip()
            self.needs_name = False
            return False
        self.user_name = name.strip()
        self.needs_name = False
        return True

    # ==================== Schedule ====================

    def schedule(self) -> Dict[str, List[MedicationDefinition]]:
        """Medications due on the active date, grouped by time slot."""
        return resolve_schedule(self.definitions, self.state.date)

    def guidance(self) -> List[MedicationDefinition]:
        return as_needed_guidance(self.definitions)

    def share_link(self, page_url: str) -> str:
        return build_share_link(page_url)

    # ==================== Medication management ====================

    async def load_definitions(self) -> None:
        if not self._can_write():
            return
        try:
            self.definitions = await self.medications.get_definitions()
        except StoreError as e:
            logger.error(f"Error fetching or setting medication definitions: {e}")

    def edit_medication(self, medication_id: str) -> None:
        """Fill the form with an existing medication."""
        for med in self.definitions:
            if med.id == medication_id:
                self.form = MedicationForm(
                    draft=MedicationDraft(**med.model_dump(exclude={"id"})),
                    editing_id=med.id,
                )
                return
        raise NotFoundException("Medication not found")

    async def save_medication(self) -> Optional[MedicationDefinition]:
        """
        Submit the form: add, or update when editing. Validation failures
        leave the store and the list untouched.
        """
        if not self._can_write():
            return None
        try:
            if self.form.editing_id:
                saved = await self.medications.update_definition(self.form.editing_id, self.form.draft)
                self.definitions = [saved if med.id == saved.id else med for med in self.definitions]
            else:
                saved = await self.medications.add_definition(self.form.draft)
                self.definitions = [*self.definitions, saved]
        except MedicationValidationError as e:
            self.notice = str(e)
            return None
        except NotFoundException as e:
            self.notice = e.detail
            return None
        except StoreError:
            self.notice = MEDICATIONS_SAVE_FAILED
            return None

        self.form = MedicationForm()
        return saved

    async def delete_medication(self, medication_id: str) -> bool:
        if not self._can_write():
            return False
        try:
            await self.medications.delete_definition(medication_id)
        except NotFoundException as e:
            self.notice = e.detail
            return False
        except StoreError:
            self.notice = MEDICATIONS_DELETE_FAILED
            return False

        self.definitions = [med for med in self.definitions if med.id != medication_id]
        return True
