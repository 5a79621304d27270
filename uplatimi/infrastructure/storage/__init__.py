"""Local storage backends."""

from uplatimi.infrastructure.storage.local_storage import FileStorage, KeyValueStorage, MemoryStorage

__all__ = ["FileStorage", "KeyValueStorage", "MemoryStorage"]
