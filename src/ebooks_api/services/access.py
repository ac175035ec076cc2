"""Ownership check for object paths."""
import logging
from typing import Optional

from ebooks_api.adapters.storage import ObjectStorage
from ebooks_api.errors import Forbidden, InvalidArgument, NotFound, Unauthenticated

logger = logging.getLogger(__name__)


def can_access(identity: str, object_path: str) -> bool:
    """
    Return True if `identity` owns `object_path`.

    Object paths look like `{owner_id}/{file_id}.pdf`: the first segment names
    the owner and at least one more segment must follow. No ACL table is
    consulted; swapping in one only requires changing this predicate.
    """
    if not identity or not object_path:
        return False
    path_parts = object_path.split("/")
    if len(path_parts) < 2:
        return False
    return path_parts[0] == identity


def authorize_object_path(
    storage: ObjectStorage,
    owner_id: Optional[str],
    object_path: Optional[str],
) -> None:
    """Guard shared by the completion and view flows: identity, ownership, existence."""
    if not owner_id:
        raise Unauthenticated()
    if not object_path:
        raise InvalidArgument("objectPath is required", required=["objectPath"])
    if not can_access(owner_id, object_path):
        logger.warning(f"Access denied: user={owner_id}, objectPath={object_path}")
        raise Forbidden()
    if not storage.object_exists(object_path):
        raise NotFound(objectPath=object_path)
