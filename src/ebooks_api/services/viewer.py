"""View workflow: hand out short-lived, view-only signed URLs."""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from ebooks_api.adapters.storage import ObjectStorage
from ebooks_api.config.settings import DEFAULT_SIGNED_URL_EXPIRES_IN
from ebooks_api.database import EbookStore, ViewLogEntry
from ebooks_api.services.access import authorize_object_path
from ebooks_api.services.uploads import utc_now
from ebooks_api.utils.decorators import log_execution_time

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewUrl:
    url: str
    expires_at: datetime
    expires_in: int


class ViewService:
    """View workflow controller."""

    def __init__(
        self,
        storage: ObjectStorage,
        store: EbookStore,
        expires_in: int = DEFAULT_SIGNED_URL_EXPIRES_IN,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.storage = storage
        self.store = store
        self.expires_in = expires_in
        self.clock = clock

    @log_execution_time
    def create_view_url(self, owner_id: Optional[str], object_path: Optional[str]) -> ViewUrl:
        """
        Issue a view-only signed URL for an e-book the caller owns.

        The view is logged on a best-effort basis: a failed log write is
        reported as a warning and does not affect the result.
        """
        authorize_object_path(self.storage, owner_id, object_path)

        logger.info(f"View URL requested: user={owner_id}, objectPath={object_path}")
        url = self.storage.create_signed_view_url(object_path, self.expires_in)
        viewed_at = self.clock()
        expires_at = viewed_at + timedelta(seconds=self.expires_in)

        try:
            self.store.add_view_log(ViewLogEntry(
                user_id=owner_id,
                object_path=object_path,
                viewed_at=viewed_at,
                expires_at=expires_at,
            ))
        except Exception as e:
            logger.warning(f"Failed to record view log (ignored): {str(e)}")

        logger.info(f"View URL issued: objectPath={object_path}, expiresAt={expires_at.isoformat()}")
        return ViewUrl(url=url, expires_at=expires_at, expires_in=self.expires_in)
