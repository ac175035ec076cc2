from abc import ABC, abstractmethod
from datetime import datetime
from typing import List

from .schemas import EbookRecord, ViewLogEntry


class EbookStore(ABC):
    """Interface of the relational metadata store used by the workflows."""

    @abstractmethod
    def create_record(self, record: EbookRecord) -> None:
        """Insert a new e-book record."""

    @abstractmethod
    def mark_ready(self, object_path: str, owner_id: str, size_bytes: int, updated_at: datetime) -> bool:
        """Set the record identified by (object_path, owner_id) to ready.

        Returns:
            True if a record matched, False otherwise
        """

    @abstractmethod
    def list_ready(self, owner_id: str) -> List[EbookRecord]:
        """Ready records of an owner, newest first."""

    @abstractmethod
    def add_view_log(self, entry: ViewLogEntry) -> None:
        """Append a view audit entry."""
