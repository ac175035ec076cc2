# cli.py
import logging

import click

from ebooks_api.adapters.storage import S3ObjectStorage
from ebooks_api.config.settings import get_settings
from ebooks_api.database import init_db
from ebooks_api.logging_config import configure_logging

# Configure logging
logger = logging.getLogger(__name__)


@click.group()
def cli():
    """CLI commands for the Ebooks API"""
    configure_logging(get_settings().log_level)


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    click.echo("Current Configuration:")
    click.echo(f"  AWS Region: {settings.aws_region}")
    click.echo(f"  AWS Endpoint: {settings.aws_endpoint_url}")
    click.echo(f"  S3 Bucket: {settings.s3_bucket_name}")
    click.echo(f"  Max File Size: {settings.max_file_size}")
    click.echo(f"  Upload URL Expiry: {settings.upload_url_expires_in}s")
    click.echo(f"  View URL Expiry: {settings.view_url_expires_in}s")
    click.echo(f"  Database Path: {settings.database_path}")
    click.echo(f"  Auth Mode: {settings.auth_mode}")


@cli.command("init-db")
@click.option("--db-path", default=None, help="SQLite file to initialize (defaults to DATABASE_PATH)")
def init_database(db_path):
    """Create the metadata tables"""
    settings = get_settings()
    db_path = db_path or settings.database_path
    init_db(db_path)
    click.echo(f"Initialized database at {db_path}")


@cli.command()
def create_bucket():
    """Create the S3 bucket if it does not exist"""
    settings = get_settings()
    S3ObjectStorage.from_settings(settings).ensure_bucket()
    click.echo(f"Bucket ready: {settings.s3_bucket_name}")


@cli.command()
@click.option("--host", default="0.0.0.0", help="Interface to bind")
@click.option("--port", default=8000, type=int, help="Port to listen on")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host, port, reload):
    """Run the API with uvicorn"""
    import uvicorn

    uvicorn.run("ebooks_api.main:create_app", factory=True, host=host, port=port, reload=reload)


if __name__ == "__main__":
    cli()
