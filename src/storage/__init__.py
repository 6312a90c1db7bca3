"""Key-value persistence for the student portal."""

from .local_storage import LocalStorage, MemoryStorage

__all__ = ["LocalStorage", "MemoryStorage"]
