"""Shared fixtures. The app is configured for the in-memory store before import."""

import asyncio
import os
import tempfile
from datetime import datetime, timezone

os.environ["STORE_BACKEND"] = "memory"
os.environ["APP_ID"] = "test-app"
os.environ.setdefault("PREFERENCES_PATH", os.path.join(tempfile.mkdtemp(), "preferences.json"))

import pytest

from app.core.preferences import LocalPreferences
from app.core.store import MemoryDocumentStore
from app.features.auth.identity import IdentityGate
from app.features.auth.schemas import AnonymousSessionResponse
from app.features.medications.schemas import MedicationDefinition
from app.shared.exceptions import StoreError


FIXED_NOW = datetime(2024, 3, 5, 9, 30, tzinfo=timezone.utc)


class FailingWriteStore(MemoryDocumentStore):
    """Memory store whose writes always fail."""

    async def _merge_record(self, date_key, fields):
        raise StoreError("write refused")

    async def replace_definitions(self, medications):
        raise StoreError("write refused")


class FailingReadStore(MemoryDocumentStore):
    """Memory store whose daily record reads always fail."""

    async def get_record(self, date_key):
        raise StoreError("read refused")


class SlowReadStore(MemoryDocumentStore):
    """Memory store whose daily record reads take a per-date delay (seconds)."""

    def __init__(self, app_id, delays):
        super().__init__(app_id)
        self.delays = delays

    async def get_record(self, date_key):
        await asyncio.sleep(self.delays.get(date_key, 0))
        return await super().get_record(date_key)


def make_med(id: str, time_slot: str = "Ayunas", frequency: str = "Diario", name: str = "") -> MedicationDefinition:
    return MedicationDefinition(id=id, name=name or id.upper(), dosage="", time_slot=time_slot, frequency=frequency)


@pytest.fixture
def store() -> MemoryDocumentStore:
    return MemoryDocumentStore("test-app")


@pytest.fixture
def preferences(tmp_path) -> LocalPreferences:
    return LocalPreferences(str(tmp_path / "preferences.json"))


@pytest.fixture
def identity() -> IdentityGate:
    return IdentityGate(
        sign_in=lambda: AnonymousSessionResponse(access_token="token", principal_id="device-1")
    )
