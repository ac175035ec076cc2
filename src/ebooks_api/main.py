from textwrap import dedent
import logging
from typing import Optional

import pydantic
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute

from ebooks_api.adapters.storage import ObjectStorage, S3ObjectStorage
from ebooks_api.config.settings import Settings
from ebooks_api.database import EbookStore, SQLiteEbookStore, init_db
from ebooks_api.errors import (
    EbookError,
    handle_broad_exceptions,
    handle_ebook_errors,
    handle_pydantic_validation_errors,
    handle_request_validation_errors,
)
from ebooks_api.logging_config import configure_logging
from ebooks_api.routers.health import router as health_router
from ebooks_api.routers.pdf import router as pdf_router

# Set up logging
logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[ObjectStorage] = None,
    store: Optional[EbookStore] = None,
) -> FastAPI:
    """
    Create a FastAPI application.

    `storage` and `store` default to the S3 bucket and SQLite file named in
    `settings`; tests pass in-memory fakes instead.
    """
    settings = settings or Settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Ebooks API",
        summary="Upload and view e-books through signed URLs",
        version="v1",
        description=dedent(
            """\
        Clients upload PDF/EPUB files straight to object storage:

        1. `POST /api/pdf/uploads/sign` returns a signed upload URL.
        2. `PUT` the file bytes to that URL.
        3. `POST /api/pdf/uploads/complete` marks the e-book ready.

        `POST /api/pdf/view-url` returns a short-lived, view-only URL.
        """
        ),
        docs_url="/",  # its easier to find the docs when they live on the base url
        generate_unique_id_function=custom_generate_unique_id,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if store is None:
        logger.info(f"Initializing database at {settings.database_path}")
        init_db(settings.database_path)
        store = SQLiteEbookStore(settings.database_path)

    if storage is None:
        storage = S3ObjectStorage.from_settings(settings)
    if settings.create_bucket_on_startup:
        storage.ensure_bucket()

    app.state.settings = settings
    app.state.storage = storage
    app.state.store = store

    app.include_router(pdf_router, prefix="/api/pdf", tags=["pdf"])
    app.include_router(health_router, tags=["health"])

    app.add_exception_handler(EbookError, handle_ebook_errors)
    app.add_exception_handler(RequestValidationError, handle_request_validation_errors)
    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    app = create_app()
    uvicorn.run(app, host="0.0.0.0", port=8000)
