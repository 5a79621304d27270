"""
PaymentRecordStore: the local (persisted) record and the imported (shared) record.
"""

from __future__ import annotations

import json
from typing import Callable

from uplatimi.domains.payment.record import PaymentRecord, serialize_record
from uplatimi.infrastructure.storage.local_storage import KeyValueStorage
from uplatimi.utils.logger import get_logger

logger = get_logger()

STORAGE_KEY = "uplatimi-data"

RecordMutator = Callable[[PaymentRecord], PaymentRecord]


class StorageParseError(ValueError):
    """Raised when the stored record cannot be parsed."""


def parse_stored_record(raw: str | None) -> PaymentRecord | None:
    """
    Parse a stored value. Returns None when nothing usable was stored
    (missing, empty string, JSON ``null`` or ``""``).

    Raises:
        StorageParseError: If the value is not JSON or not a valid record.
    """
    if raw is None or not raw.strip():
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise StorageParseError(f"Stored record is not valid JSON: {e}") from e
    if data is None or data == "":
        return None
    if not isinstance(data, dict):
        raise StorageParseError(f"Stored record is {type(data).__name__}, expected an object")
    try:
        return PaymentRecord.from_dict(data)
    except ValueError as e:
        raise StorageParseError(str(e)) from e


class PaymentRecordStore:
    """
    Holds the user's own record (durable, under a single storage key) and, when the
    page was opened from a share link, the imported record (memory only).
    """

    def __init__(self, storage: KeyValueStorage, key: str = STORAGE_KEY) -> None:
        self._storage = storage
        self._key = key
        self._local = PaymentRecord()
        self._imported: PaymentRecord | None = None

    @property
    def local(self) -> PaymentRecord:
        return self._local

    @property
    def imported(self) -> PaymentRecord | None:
        return self._imported

    @property
    def has_imported(self) -> bool:
        return self._imported is not None

    def load(self) -> PaymentRecord:
        """Read the local record from storage, falling back to the default record."""
        raw = self._storage.get_item(self._key)
        try:
            record = parse_stored_record(raw)
        except StorageParseError as e:
            logger.warning("Ignoring unreadable stored record: %s", e)
            record = None
        self._local = record or PaymentRecord()
        return self._local

    def save(self, record: PaymentRecord) -> None:
        """Write ``record`` (deburred JSON) under the storage key."""
        self._storage.set_item(self._key, serialize_record(record))

    def update(self, mutator: RecordMutator) -> PaymentRecord:
        """
        Apply ``mutator`` and return the new record.

        Without an imported record the local record is replaced and saved. With one,
        storage and the local record are untouched and only the imported record changes.
        """
        if self._imported is not None:
            self._imported = mutator(self._imported)
            return self._imported
        self._local = mutator(self._local)
        self.save(self._local)
        return self._local

    def set_imported(self, record: PaymentRecord) -> None:
        self._imported = record

    def update_imported_amount(self, raw: str) -> PaymentRecord | None:
        """Adjust the imported record's amount in memory; None when nothing is imported."""
        if self._imported is None:
            return None
        self._imported = self._imported.with_amount(raw)
        return self._imported
