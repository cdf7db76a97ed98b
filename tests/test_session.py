"""
Tests for the caregiver session in `app/features/records/session.py`.

Covers:
- Start-up gating on identity and the persistent loading state
- Optimistic updates reconciled by pushed snapshots
- Date switching and stale snapshot rejection
- Display-name requirement for notes and readings
- Write failures: notice, no rollback, no retry
- Medication form validation and CRUD
"""

import asyncio

import pytest

from app.features.auth.identity import IdentityGate
from app.features.medications.schemas import MedicationDraft
from app.features.records.schemas import DailyRecordSnapshot, RecordField
from app.features.records.session import (
    IDENTITY_FAILED,
    NAME_REQUIRED_NOTE,
    NAME_SAVE_FAILED,
    SAVE_FAILED,
    CalendarSession,
    SyncStatus,
)
from app.features.records.sync import DailyRecordSynchronizer
from tests.conftest import FIXED_NOW, FailingWriteStore, SlowReadStore


def _session(store, identity, preferences, today="2024-03-05") -> CalendarSession:
    return CalendarSession(
        store,
        identity=identity,
        preferences=preferences,
        today=today,
        clock=lambda: FIXED_NOW,
    )


@pytest.mark.asyncio
async def test_start_loads_defaults_and_becomes_ready(store, identity, preferences) -> None:
    session = _session(store, identity, preferences)
    assert session.state.status == SyncStatus.LOADING

    assert await session.start()

    assert session.state.status == SyncStatus.READY
    assert session.state.date == "2024-03-05"
    assert len(session.definitions) == 17
    assert session.needs_name
    assert "Ayunas" in session.schedule()
    await session.close()


@pytest.mark.asyncio
async def test_identity_failure_keeps_loading(store, preferences) -> None:
    def broken_sign_in():
        raise ConnectionError("offline")

    session = _session(store, IdentityGate(sign_in=broken_sign_in), preferences)

    assert not await session.start()
    assert session.state.status == SyncStatus.LOADING
    assert session.notice
    assert not await session.toggle_medication("t4")
    assert await store.get_record("2024-03-05") is None


@pytest.mark.asyncio
async def test_identity_failure_blocks_medication_changes(store, preferences) -> None:
    def broken_sign_in():
        raise ConnectionError("offline")

    session = _session(store, IdentityGate(sign_in=broken_sign_in), preferences)
    assert not await session.start()

    await session.load_definitions()
    assert session.definitions == []

    session.form.draft = MedicationDraft(name="Ibuprofeno", dosage="400mg", time_slot="Noche", frequency="Diario")
    assert await session.save_medication() is None
    assert not await session.delete_medication("t4")

    assert session.notice == IDENTITY_FAILED
    assert await store.get_definitions() is None


@pytest.mark.asyncio
async def test_switching_date_while_loading(identity, preferences) -> None:
    slow = SlowReadStore("test-app", {"2024-03-06": 0.05})
    session = _session(slow, identity, preferences)
    await session.start()

    opened = {}
    observe = session.synchronizer.observe

    async def recording_observe(day, on_snapshot=None):
        subscription = await observe(day, on_snapshot=on_snapshot)
        opened[subscription.date] = subscription
        return subscription

    session.synchronizer.observe = recording_observe

    loading = asyncio.create_task(session.set_date("2024-03-06"))
    await asyncio.sleep(0)
    await session.set_date("2024-03-07")
    await loading

    assert opened["2024-03-06"].cancelled
    assert slow.listener_count("2024-03-06") == 0
    assert session.subscription is opened["2024-03-07"]
    assert session.state.date == "2024-03-07"
    assert session.state.status == SyncStatus.READY

    other = DailyRecordSynchronizer(slow)
    await other.patch("2024-03-06", RecordField.MEDICATION_STATUS, {"t4": True})

    assert session.state.date == "2024-03-07"
    assert session.state.medication_status == {}
    await session.close()
    assert slow.listener_count("2024-03-07") == 0


@pytest.mark.asyncio
async def test_toggle_then_reload_same_date(store, identity, preferences) -> None:
    session = _session(store, identity, preferences)
    await session.start()

    assert await session.toggle_medication("t4")
    assert session.state.medication_status == {"t4": True}

    await session.next_day()
    assert session.state.medication_status == {}
    await session.previous_day()

    assert session.state.date == "2024-03-05"
    assert session.state.medication_status == {"t4": True}
    await session.close()


@pytest.mark.asyncio
async def test_remote_change_replaces_local_state(store, identity, preferences) -> None:
    session = _session(store, identity, preferences)
    await session.start()
    await session.toggle_medication("t4")

    # Another family member overwrites the whole mapping
    other = DailyRecordSynchronizer(store)
    await other.patch("2024-03-05", RecordField.MEDICATION_STATUS, {"b12": True})

    assert session.state.medication_status == {"b12": True}
    await session.close()


@pytest.mark.asyncio
async def test_switching_date_cancels_previous_stream(store, identity, preferences) -> None:
    session = _session(store, identity, preferences)
    await session.start()
    first = session.subscription

    await session.set_date("2024-03-06")

    assert first.cancelled
    assert store.listener_count("2024-03-05") == 0
    assert store.listener_count("2024-03-06") == 1

    other = DailyRecordSynchronizer(store)
    await other.patch("2024-03-05", RecordField.MEDICATION_STATUS, {"t4": True})

    assert session.state.date == "2024-03-06"
    assert session.state.medication_status == {}
    await session.close()
    assert store.listener_count("2024-03-06") == 0


@pytest.mark.asyncio
async def test_stale_snapshot_is_discarded(store, identity, preferences) -> None:
    session = _session(store, identity, preferences)
    await session.start()
    await session.set_date("2024-03-06")

    stale = DailyRecordSnapshot(date="2024-03-05", medication_status={"t4": True})

    assert not session.apply_snapshot(stale)
    assert session.state.medication_status == {}
    await session.close()


@pytest.mark.asyncio
async def test_note_requires_display_name(store, identity, preferences) -> None:
    session = _session(store, identity, preferences)
    await session.start()

    assert not await session.add_note("Durmió bien")
    assert session.needs_name
    assert session.notice == NAME_REQUIRED_NOTE
    assert session.state.notes == []
    await session.close()


@pytest.mark.asyncio
async def test_note_and_reading_are_signed(store, identity, preferences) -> None:
    session = _session(store, identity, preferences)
    await session.start()
    assert session.save_user_name("  Ana ")

    assert await session.add_note("Durmió bien")
    assert await session.add_blood_pressure("120", "80")

    note = session.state.notes[0]
    assert (note.text, note.author, note.timestamp) == ("Durmió bien", "Ana", FIXED_NOW.isoformat())
    reading = session.state.blood_pressure[0]
    assert (reading.systolic, reading.diastolic, reading.author) == ("120", "80", "Ana")
    assert preferences.get_user_name() == "Ana"
    await session.close()


@pytest.mark.asyncio
async def test_unwritable_preferences_keep_name_for_session(
    store, identity, preferences, monkeypatch: pytest.MonkeyPatch
) -> None:
    def read_only(key, value):
        raise PermissionError("read-only file system")

    monkeypatch.setattr(preferences, "set", read_only)
    session = _session(store, identity, preferences)
    await session.start()

    assert not session.save_user_name("Ana")
    assert session.notice == NAME_SAVE_FAILED
    assert session.user_name == "Ana"
    assert await session.add_note("Durmió bien")
    await session.close()


@pytest.mark.asyncio
async def test_saved_name_is_loaded_on_start(store, identity, preferences) -> None:
    preferences.save_user_name("Juan")
    session = _session(store, identity, preferences)
    await session.start()

    assert session.user_name == "Juan"
    assert not session.needs_name
    await session.close()


@pytest.mark.asyncio
async def test_write_failure_sets_notice_without_rollback(identity, preferences) -> None:
    store = FailingWriteStore("test-app")
    session = _session(store, identity, preferences)
    await session.start()

    assert not await session.toggle_medication("t4")

    assert session.notice == SAVE_FAILED
    assert session.state.medication_status == {"t4": True}
    await session.close()


@pytest.mark.asyncio
async def test_medication_validation_blocks_store_call(store, identity, preferences) -> None:
    session = _session(store, identity, preferences)
    await session.start()
    before = list(session.definitions)

    session.form.draft = MedicationDraft(name="Ibuprofeno", time_slot="", frequency="Diario")
    assert await session.save_medication() is None

    assert "time_slot" in session.notice
    assert session.definitions == before
    assert len(await store.get_definitions()) == len(before)
    await session.close()


@pytest.mark.asyncio
async def test_add_edit_delete_medication(store, identity, preferences) -> None:
    session = _session(store, identity, preferences)
    await session.start()

    session.form.draft = MedicationDraft(name="Ibuprofeno", dosage="400mg", time_slot="Noche", frequency="Diario")
    added = await session.save_medication()
    assert added is not None
    assert session.definitions[-1] == added

    session.edit_medication(added.id)
    session.form.draft.dosage = "200mg"
    edited = await session.save_medication()
    assert edited.id == added.id
    assert edited.dosage == "200mg"
    assert session.form.editing_id is None

    assert await session.delete_medication(added.id)
    assert added.id not in [med.id for med in session.definitions]
    assert added.id not in [med["id"] for med in await store.get_definitions()]
    await session.close()
