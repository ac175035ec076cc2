"""FastAPI dependencies: caller identity and workflow services."""
import logging
from typing import Optional

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from ebooks_api.adapters.storage import ObjectStorage
from ebooks_api.config.settings import Settings
from ebooks_api.database import EbookStore
from ebooks_api.errors import Unauthenticated
from ebooks_api.services.library import LibraryService
from ebooks_api.services.uploads import UploadService
from ebooks_api.services.viewer import ViewService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings_from_app(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> ObjectStorage:
    return request.app.state.storage


def get_store(request: Request) -> EbookStore:
    return request.app.state.store


def decode_identity(token: str, settings: Settings) -> str:
    """Verify a Bearer token and return its `sub` claim."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options={"verify_aud": settings.jwt_audience is not None},
        )
    except JWTError as e:
        logger.info(f"Rejected Bearer token: {str(e)}")
        raise Unauthenticated("Invalid or expired token") from e

    subject = payload.get("sub")
    if not subject:
        raise Unauthenticated("Token has no subject")
    return str(subject)


def get_current_user_id(
    settings: Settings = Depends(get_settings_from_app),
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """
    Resolve the caller's identity.

    In `header` mode the `X-User-Id` header is trusted (development
    only). In `jwt` mode a valid Bearer token is required. Returns None when
    no identity is presented; the workflows turn that into a 401.

    :raises Unauthenticated: the identity contains `/`. It would not be the
        first segment of the object paths minted for it.
    """
    if settings.auth_mode == "jwt":
        if not credentials:
            return None
        user_id = decode_identity(credentials.credentials, settings)
    else:
        user_id = x_user_id or None

    if user_id and "/" in user_id:
        logger.info(f"Rejected identity containing a path separator: {user_id}")
        raise Unauthenticated("Invalid user identity")
    return user_id


def get_upload_service(
    settings: Settings = Depends(get_settings_from_app),
    storage: ObjectStorage = Depends(get_storage),
    store: EbookStore = Depends(get_store),
) -> UploadService:
    return UploadService(
        storage=storage,
        store=store,
        max_file_size=settings.max_file_size,
        expires_in=settings.upload_url_expires_in,
    )


def get_view_service(
    settings: Settings = Depends(get_settings_from_app),
    storage: ObjectStorage = Depends(get_storage),
    store: EbookStore = Depends(get_store),
) -> ViewService:
    return ViewService(storage=storage, store=store, expires_in=settings.view_url_expires_in)


def get_library_service(store: EbookStore = Depends(get_store)) -> LibraryService:
    return LibraryService(store)
