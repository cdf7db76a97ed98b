# Daily Records Feature - Synchronizer
"""
Live view of daily records.

`DailyRecordSynchronizer.observe` hands out one `Subscription` per caller.
A subscription is tagged with the date it was opened for, delivers the
current snapshot first and then one snapshot per change, and is released by
calling `cancel()` (idempotent). Delivery after cancellation is dropped.
"""

import asyncio
from typing import Any, AsyncIterator, Callable, Dict, Optional

from app.core.logging import logger
from app.core.store import DocumentStore
from app.features.records.schemas import DailyRecordSnapshot, RecordField, encode_field
from app.shared.dates import DateLike, format_record_date
from app.shared.exceptions import StoreError


SnapshotCallback = Callable[[DailyRecordSnapshot], None]


class Subscription:
    """Cancellable stream of snapshots for a single date."""

    def __init__(self, date: str, on_snapshot: Optional[SnapshotCallback] = None):
        self.date = date
        self._on_snapshot = on_snapshot
        self._queue: "asyncio.Queue[Optional[DailyRecordSnapshot]]" = asyncio.Queue()
        self._release: Optional[Callable[[], None]] = None
        self._cancelled = False
        self.delivered = 0

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _bind(self, release: Callable[[], None]) -> None:
        self._release = release

    def deliver(self, snapshot: DailyRecordSnapshot, initial: bool = False) -> bool:
        """
        Hand a snapshot to the consumer.

        The initial snapshot is skipped when a pushed change already arrived
        while it was being fetched. Returns True if the snapshot was delivered.
        """
        if self._cancelled or snapshot.date != self.date:
            return False
        if initial and self.delivered:
            return False

        self.delivered += 1
        if self._on_snapshot is not None:
            self._on_snapshot(snapshot)
        else:
            self._queue.put_nowait(snapshot)
        return True

    def cancel(self) -> None:
        """Stop delivery and release the store listener. Later calls are no-ops."""
        if self._cancelled:
            return
        self._cancelled = True
        if self._release is not None:
            self._release()
            self._release = None
        self._queue.put_nowait(None)
        logger.debug(f"Subscription for {self.date} cancelled")

    async def next(self) -> Optional[DailyRecordSnapshot]:
        """Wait for the next snapshot; None once cancelled."""
        if self._cancelled and self._queue.empty():
            return None
        return await self._queue.get()

    def __aiter__(self) -> AsyncIterator[DailyRecordSnapshot]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[DailyRecordSnapshot]:
        while True:
            snapshot = await self.next()
            if snapshot is None:
                return
            yield snapshot


class DailyRecordSynchronizer:
    """Reads, observes and merge-writes daily records."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def load(self, day: DateLike) -> DailyRecordSnapshot:
        """
        Fetch the current snapshot for a date.

        Read failures degrade to an empty record and are logged.
        """
        date_key = format_record_date(day)
        try:
            document = await self.store.get_record(date_key)
        except StoreError as e:
            logger.error(f"Error fetching daily record {date_key}: {e}")
            return DailyRecordSnapshot.empty(date_key)

        if document is None:
            logger.debug(f"No daily record found for {date_key}")
        return DailyRecordSnapshot.from_document(date_key, document)

    async def observe(
        self,
        day: DateLike,
        on_snapshot: Optional[SnapshotCallback] = None,
    ) -> Subscription:
        """
        Open a live subscription for a date.

        Args:
            day: Calendar day to follow
            on_snapshot: Optional push callback; without one, iterate the
                returned subscription instead

        Returns:
            Subscription whose first delivery is the current state
        """
        date_key = format_record_date(day)
        subscription = Subscription(date_key, on_snapshot)

        def listener(document: Optional[Dict[str, Any]]) -> None:
            subscription.deliver(DailyRecordSnapshot.from_document(date_key, document))

        subscription._bind(self.store.subscribe(date_key, listener))
        logger.info(f"Setting up listener for daily record {date_key}")

        initial = await self.load(date_key)
        subscription.deliver(initial, initial=True)
        return subscription

    async def patch(self, day: DateLike, field: RecordField, value: Any) -> DailyRecordSnapshot:
        """
        Merge-write one field plus the record's date string.

        Other fields of the record are left untouched. Subscribers of the date
        receive the resulting snapshot.

        Raises:
            StoreError: If the write fails (logged here, handled by callers)
        """
        field = RecordField(field)
        date_key = format_record_date(day)
        try:
            document = await self.store.merge_record(
                date_key,
                {field.value: encode_field(value), "date": date_key},
            )
        except StoreError as e:
            logger.error(f"Error updating {field.value} for {date_key}: {e}")
            raise

        logger.info(f"Updated {field.value} for {date_key}")
        return DailyRecordSnapshot.from_document(date_key, document)
