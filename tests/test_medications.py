"""Tests for the medication list service in `app/features/medications/service.py`."""

import pytest

from app.features.medications.schemas import MedicationDraft
from app.features.medications.service import MedicationService
from app.features.schedule.defaults import DEFAULT_MEDICATIONS
from app.shared.exceptions import MedicationValidationError, NotFoundException, StoreError
from tests.conftest import FailingWriteStore


@pytest.fixture
def service(store) -> MedicationService:
    return MedicationService(store)


@pytest.mark.asyncio
async def test_first_read_seeds_defaults(service: MedicationService, store) -> None:
    assert await store.get_definitions() is None

    medications = await service.get_definitions()

    assert medications == DEFAULT_MEDICATIONS
    assert [med["id"] for med in await store.get_definitions()][:2] == ["t4", "levecom-m"]


@pytest.mark.asyncio
async def test_stored_list_is_not_reseeded(service: MedicationService, store) -> None:
    await store.replace_definitions([])
    assert await service.get_definitions() == []


@pytest.mark.asyncio
async def test_add_appends_with_fresh_id(service: MedicationService) -> None:
    first = await service.add_definition(MedicationDraft(name=" Ibuprofeno ", time_slot="Noche", frequency="Diario"))
    second = await service.add_definition(MedicationDraft(name="Paracetamol", time_slot="Noche", frequency="Diario"))

    medications = await service.get_definitions()
    assert medications[-2:] == [first, second]
    assert first.name == "Ibuprofeno"
    assert first.id != second.id
    assert first.id.isdigit()


@pytest.mark.parametrize(
    "draft,missing",
    [
        (MedicationDraft(time_slot="Noche", frequency="Diario"), ["name"]),
        (MedicationDraft(name="X", frequency="Diario"), ["time_slot"]),
        (MedicationDraft(name="X", time_slot="Noche", frequency="   "), ["frequency"]),
        (MedicationDraft(), ["name", "time_slot", "frequency"]),
    ],
)
@pytest.mark.asyncio
async def test_validation_rejected_before_store(draft: MedicationDraft, missing: list) -> None:
    service = MedicationService(FailingWriteStore("test-app"))
    with pytest.raises(MedicationValidationError) as exc_info:
        await service.add_definition(draft)
    assert exc_info.value.missing == missing


@pytest.mark.asyncio
async def test_update_keeps_id_and_position(service: MedicationService) -> None:
    updated = await service.update_definition(
        "b12", MedicationDraft(name="B12", dosage="1mg", time_slot="Ayunas", frequency="Diario")
    )

    medications = await service.get_definitions()
    index = [med.id for med in medications].index("b12")
    assert index == [med.id for med in DEFAULT_MEDICATIONS].index("b12")
    assert medications[index] == updated
    assert updated.time_slot == "Ayunas"


@pytest.mark.asyncio
async def test_update_unknown_id(service: MedicationService) -> None:
    with pytest.raises(NotFoundException):
        await service.update_definition("nope", MedicationDraft(name="X", time_slot="Noche", frequency="Diario"))


@pytest.mark.asyncio
async def test_delete(service: MedicationService) -> None:
    assert await service.delete_definition("t4")
    assert "t4" not in [med.id for med in await service.get_definitions()]

    with pytest.raises(NotFoundException):
        await service.delete_definition("t4")


@pytest.mark.asyncio
async def test_seed_failure_propagates() -> None:
    service = MedicationService(FailingWriteStore("test-app"))
    with pytest.raises(StoreError):
        await service.get_definitions()
