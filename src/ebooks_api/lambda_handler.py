"""AWS Lambda entry point: the Ebooks API behind API Gateway, adapted by Mangum."""
import logging
from typing import Optional

from mangum import Mangum

from ebooks_api.config.settings import get_settings
from ebooks_api.main import create_app

logger = logging.getLogger(__name__)

_asgi_handler: Optional[Mangum] = None


def get_asgi_handler() -> Mangum:
    """Build the app once per container; warm invocations reuse it."""
    global _asgi_handler
    if _asgi_handler is None:
        settings = get_settings()
        logger.info(f"Cold start: bucket={settings.s3_bucket_name}, database={settings.database_path}")
        _asgi_handler = Mangum(create_app(settings), lifespan="off")
    return _asgi_handler


def lambda_handler(event, context):
    return get_asgi_handler()(event, context)
