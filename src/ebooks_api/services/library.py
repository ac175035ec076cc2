"""Listing of a user's uploaded e-books."""
import logging
from typing import List, Optional

from ebooks_api.database import EbookRecord, EbookStatus, EbookStore
from ebooks_api.errors import Unauthenticated

logger = logging.getLogger(__name__)


class LibraryService:
    def __init__(self, store: EbookStore):
        self.store = store

    def list_ready(self, owner_id: Optional[str]) -> List[EbookRecord]:
        """Ready e-books of `owner_id`, newest first. Pending uploads are never listed."""
        if not owner_id:
            raise Unauthenticated()
        records = [
            record for record in self.store.list_ready(owner_id)
            if record.status == EbookStatus.READY
        ]
        logger.debug(f"Listed {len(records)} ready e-books for user={owner_id}")
        return records
