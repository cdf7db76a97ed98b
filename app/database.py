"""MongoDB database connection manager and document store backends."""

from typing import Any, Dict, List, Optional

from beanie import init_beanie
from beanie.operators import Set
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from app.config import settings
from app.core.logging import logger
from app.core.store import DocumentStore, MemoryDocumentStore
from app.features.medications.models import MedicationCatalog
from app.features.records.models import DailyRecordDocument
from app.shared.exceptions import ServiceUnavailableException, StoreError
from app.shared.models import utcnow


# Stored field name -> DailyRecordDocument attribute
RECORD_ATTRIBUTES = {
    "date": "date",
    "medicationStatus": "medication_status",
    "notes": "notes",
    "bloodPressure": "blood_pressure",
}


class BeanieDocumentStore(DocumentStore):
    """MongoDB backend built on Beanie document models."""

    def _to_fields(self, document: DailyRecordDocument) -> Dict[str, Any]:
        fields = {}
        for field, attribute in RECORD_ATTRIBUTES.items():
            value = getattr(document, attribute)
            if value is not None:
                fields[field] = value
        return fields

    async def get_record(self, date_key: str) -> Optional[Dict[str, Any]]:
        try:
            document = await DailyRecordDocument.get(self.record_key(date_key))
        except PyMongoError as e:
            raise StoreError(f"Failed to read daily record {date_key}: {e}") from e

        if document is None:
            return None
        return self._to_fields(document)

    async def _merge_record(self, date_key: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        doc_id = self.record_key(date_key)
        update = {RECORD_ATTRIBUTES[field]: value for field, value in fields.items()}

        try:
            await DailyRecordDocument.find_one(DailyRecordDocument.id == doc_id).upsert(
                Set({**update, "updated_at": utcnow()}),
                on_insert=DailyRecordDocument(
                    id=doc_id,
                    app_id=self.app_id,
                    **{"date": date_key, **update},
                ),
            )
            document = await DailyRecordDocument.get(doc_id)
        except PyMongoError as e:
            raise StoreError(f"Failed to write daily record {date_key}: {e}") from e

        return self._to_fields(document) if document else dict(fields)

    async def get_definitions(self) -> Optional[List[Dict[str, Any]]]:
        try:
            catalog = await MedicationCatalog.get(self.definitions_key)
        except PyMongoError as e:
            raise StoreError(f"Failed to read medication definitions: {e}") from e

        if catalog is None:
            return None
        return [med.model_dump() for med in catalog.medications]

    async def replace_definitions(self, medications: List[Dict[str, Any]]) -> None:
        catalog = MedicationCatalog(
            id=self.definitions_key,
            app_id=self.app_id,
            medications=medications,
        )
        try:
            await catalog.save()
        except PyMongoError as e:
            raise StoreError(f"Failed to write medication definitions: {e}") from e


class Database:
    """MongoDB database connection manager."""

    client: Optional[AsyncIOMotorClient] = None
    store: Optional[DocumentStore] = None

    @classmethod
    async def connect_db(cls):
        """Connect to MongoDB, initialize Beanie and select the store backend."""
        if settings.STORE_BACKEND == "memory":
            cls.store = MemoryDocumentStore(settings.APP_ID)
            logger.warning("Using in-memory document store; data is lost on restart")
            return

        cls.client = AsyncIOMotorClient(settings.MONGODB_URL)

        await init_beanie(
            database=cls.client[settings.DATABASE_NAME],
            document_models=[
                DailyRecordDocument,
                MedicationCatalog,
            ]
        )
        cls.store = BeanieDocumentStore(settings.APP_ID)

        logger.info(f"Connected to MongoDB database: {settings.DATABASE_NAME} (namespace {settings.APP_ID})")

    @classmethod
    async def close_db(cls):
        """Close MongoDB connection."""
        if cls.client:
            cls.client.close()
            cls.client = None
            logger.info("Closed MongoDB connection")
        cls.store = None


def get_store() -> DocumentStore:
    """Dependency for document store access."""
    if Database.store is None:
        raise ServiceUnavailableException("Database not connected")
    return Database.store
