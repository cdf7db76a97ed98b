# Medications Feature - Router

from fastapi import APIRouter, Depends, status
from app.core.store import DocumentStore
from app.database import get_store
from app.features.auth.dependencies import get_current_principal
from app.features.auth.schemas import Principal
from app.features.medications.schemas import (
    MedicationDefinition,
    MedicationDraft,
    MedicationListResponse,
)
from app.features.medications.service import MedicationService
from app.shared.exceptions import (
    BadRequestException,
    MedicationValidationError,
    ServiceUnavailableException,
    StoreError,
)


router = APIRouter(prefix="/medications", tags=["Medications"])


def get_medication_service(store: DocumentStore = Depends(get_store)) -> MedicationService:
    return MedicationService(store)


@router.get("", response_model=MedicationListResponse)
async def list_medications(
    service: MedicationService = Depends(get_medication_service),
    principal: Principal = Depends(get_current_principal),
):
    """Get the shared medication list (seeded with the defaults on first run)."""
    try:
        medications = await service.get_definitions()
    except StoreError:
        raise ServiceUnavailableException("Could not load medication definitions")
    return MedicationListResponse(medications=medications, total=len(medications))


@router.post("", response_model=MedicationDefinition, status_code=status.HTTP_201_CREATED)
async def add_medication(
    draft: MedicationDraft,
    service: MedicationService = Depends(get_medication_service),
    principal: Principal = Depends(get_current_principal),
):
    """
    Add a medication.

    - **name**: Medication name (required)
    - **dosage**: Optional dosage text
    - **time_slot**: Time of day (required)
    - **frequency**: Frequency rule, e.g. "Diario" (required)
    """
    try:
        return await service.add_definition(draft)
    except MedicationValidationError as e:
        raise BadRequestException(str(e))
    except StoreError:
        raise ServiceUnavailableException("Error al guardar los medicamentos. Inténtalo de nuevo.")


@router.put("/{medication_id}", response_model=MedicationDefinition)
async def update_medication(
    medication_id: str,
    draft: MedicationDraft,
    service: MedicationService = Depends(get_medication_service),
    principal: Principal = Depends(get_current_principal),
):
    """Replace a medication's fields, keeping its id and list position."""
    try:
        return await service.update_definition(medication_id, draft)
    except MedicationValidationError as e:
        raise BadRequestException(str(e))
    except StoreError:
        raise ServiceUnavailableException("Error al guardar los medicamentos. Inténtalo de nuevo.")


@router.delete("/{medication_id}")
async def delete_medication(
    medication_id: str,
    service: MedicationService = Depends(get_medication_service),
    principal: Principal = Depends(get_current_principal),
):
    """Delete a medication from the shared list."""
    try:
        await service.delete_definition(medication_id)
    except StoreError:
        raise ServiceUnavailableException("Error al eliminar el medicamento. Inténtalo de nuevo.")
    return {"message": "Medication deleted successfully"}
