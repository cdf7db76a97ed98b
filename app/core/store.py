"""
Document store used by the calendar.

Two logical collections live under one application namespace:

- the singleton medication definitions document
- one daily record document per calendar date

Writes to a daily record are merge-writes (fields absent from the write are
left alone) and are pushed to every listener registered for that date.
"""

import copy
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from app.core.logging import logger


Listener = Callable[[Optional[Dict[str, Any]]], None]


class DocumentStore(ABC):
    """Base class for store backends; owns the in-process listener registry."""

    def __init__(self, app_id: str):
        self.app_id = app_id
        self._listeners: Dict[str, List[Listener]] = {}

    def record_key(self, date_key: str) -> str:
        """Namespaced document id of a daily record."""
        return f"{self.app_id}:{date_key}"

    @property
    def definitions_key(self) -> str:
        return f"{self.app_id}:currentDefinitions"

    # ==================== Daily records ====================

    @abstractmethod
    async def get_record(self, date_key: str) -> Optional[Dict[str, Any]]:
        """Return the stored record fields for a date, or None if absent."""

    @abstractmethod
    async def _merge_record(self, date_key: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Merge fields into the record and return the full stored fields."""

    async def merge_record(self, date_key: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge-write fields into a daily record and notify listeners.

        Raises:
            StoreError: If the backend write fails
        """
        document = await self._merge_record(date_key, fields)
        self._notify(date_key, document)
        return document

    def subscribe(self, date_key: str, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for full-document snapshots of one date.

        Returns:
            Callable that removes the listener. Safe to call more than once.
        """
        self._listeners.setdefault(date_key, []).append(listener)
        logger.debug(f"Listener added for {date_key} ({len(self._listeners[date_key])} active)")

        def unsubscribe() -> None:
            listeners = self._listeners.get(date_key, [])
            if listener in listeners:
                listeners.remove(listener)
                logger.debug(f"Listener removed for {date_key} ({len(listeners)} active)")
            if not listeners:
                self._listeners.pop(date_key, None)

        return unsubscribe

    def listener_count(self, date_key: str) -> int:
        return len(self._listeners.get(date_key, []))

    def _notify(self, date_key: str, document: Dict[str, Any]) -> None:
        for listener in list(self._listeners.get(date_key, [])):
            try:
                listener(copy.deepcopy(document))
            except Exception as e:
                logger.error(f"Snapshot listener for {date_key} failed: {type(e).__name__}: {e}")

    # ==================== Medication definitions ====================

    @abstractmethod
    async def get_definitions(self) -> Optional[List[Dict[str, Any]]]:
        """Return the stored definition list, or None if never written."""

    @abstractmethod
    async def replace_definitions(self, medications: List[Dict[str, Any]]) -> None:
        """Overwrite the whole definition list."""


class MemoryDocumentStore(DocumentStore):
    """In-process backend. Used for local development and tests."""

    def __init__(self, app_id: str):
        super().__init__(app_id)
        self._records: Dict[str, Dict[str, Any]] = {}
        self._definitions: Optional[List[Dict[str, Any]]] = None

    async def get_record(self, date_key: str) -> Optional[Dict[str, Any]]:
        document = self._records.get(self.record_key(date_key))
        return copy.deepcopy(document) if document is not None else None

    async def _merge_record(self, date_key: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        document = self._records.setdefault(self.record_key(date_key), {})
        document.update(copy.deepcopy(fields))
        return copy.deepcopy(document)

    async def get_definitions(self) -> Optional[List[Dict[str, Any]]]:
        return copy.deepcopy(self._definitions)

    async def replace_definitions(self, medications: List[Dict[str, Any]]) -> None:
        self._definitions = copy.deepcopy(medications)
