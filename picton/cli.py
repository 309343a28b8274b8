"""
Picton Command-Line Interface

Lease, transfer and sharing commands for a single blob.

Author: Picton Contributors
Date: 2025
"""

import asyncio
import logging
import uuid
from datetime import timedelta
from pathlib import Path
from typing import Any, Awaitable, Dict, Optional

import click
from azure.core.exceptions import HttpResponseError

from picton import __version__
from picton.blob import leases, sas, transfer
from picton.blob.azure_blob import AzureBlobResource
from picton.blob.models import BlobType
from picton.core.config_manager import ConfigManager, PictonConfig
from picton.core.logging_config import set_correlation_id, setup_logging
from picton.exceptions import PictonError

logger = logging.getLogger("picton.cli")


def _run(awaitable: Awaitable[Any]) -> Any:
    """Run a coroutine, turning expected failures into CLI errors."""
    try:
        return asyncio.run(awaitable)
    except PictonError as e:
        raise click.ClickException(e.message)
    except HttpResponseError as e:
        code = getattr(e, "error_code", None) or e.status_code
        raise click.ClickException(f"Storage request failed ({code}): {e.message}")


def _open_blob(
    ctx: click.Context,
    blob_name: str,
    container: Optional[str],
    blob_type: BlobType = BlobType.BLOCK_BLOB,
) -> AzureBlobResource:
    config: PictonConfig = ctx.obj["config"]
    try:
        return AzureBlobResource.from_config(config, blob_name, container=container, blob_type=blob_type)
    except PictonError as e:
        raise click.ClickException(e.message)


container_option = click.option(
    "--container",
    help="Container name (defaults to storage.container from configuration)",
)


@click.group()
@click.version_option(version=__version__, prog_name="picton")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Logging level (overrides configuration)",
)
@click.option(
    "--log-format",
    type=click.Choice(["json", "text"], case_sensitive=False),
    help="Log format (overrides configuration)",
)
@click.pass_context
def cli(ctx, config: Optional[Path], log_level: Optional[str], log_format: Optional[str]):
    """
    Picton - Azure Blob Storage helpers

    Acquire and manage leases, move content and share blobs.
    """
    ctx.ensure_object(dict)

    overrides: Dict[str, Any] = {}
    if log_level:
        overrides.setdefault("logging", {})["level"] = log_level.upper()
    if log_format:
        overrides.setdefault("logging", {})["format"] = log_format.lower()

    manager = ConfigManager()
    try:
        loaded = manager.load(config_file=str(config) if config else None, cli_overrides=overrides)
    except (ValueError, FileNotFoundError) as e:
        raise click.ClickException(f"Invalid configuration: {e}")

    try:
        setup_logging(loaded.logging)
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}")
    set_correlation_id(str(uuid.uuid4()))

    ctx.obj["config"] = loaded


# ========== Lease Commands ==========

@cli.group()
def lease():
    """Acquire, renew and release blob leases."""
    pass


@lease.command("acquire")
@click.argument("blob_name")
@container_option
@click.option("--duration", type=click.IntRange(15, 60), help="Lease duration in seconds (15-60)")
@click.option("--attempts", type=click.IntRange(1, 10), help="Maximum acquire attempts (1-10)")
@click.pass_context
def lease_acquire(ctx, blob_name: str, container: Optional[str], duration: Optional[int], attempts: Optional[int]):
    """
    Acquire a lease and print its id.

    Exits with status 1 when the blob stays leased by someone else.

    Examples:
        picton lease acquire jobs/lock --duration 30 --attempts 5
    """
    config: PictonConfig = ctx.obj["config"]
    duration = duration if duration is not None else config.lease.duration
    attempts = attempts if attempts is not None else config.lease.max_attempts

    async def run() -> Optional[str]:
        async with _open_blob(ctx, blob_name, container) as blob:
            return await leases.try_acquire_lease(blob, duration, attempts)

    lease_id = _run(run())
    if lease_id is None:
        click.echo(f"Lease not acquired after {attempts} attempt(s)", err=True)
        ctx.exit(1)
    click.echo(lease_id)


@lease.command("renew")
@click.argument("blob_name")
@click.argument("lease_id")
@container_option
@click.pass_context
def lease_renew(ctx, blob_name: str, lease_id: str, container: Optional[str]):
    """Renew a lease held on a blob."""

    async def run() -> None:
        async with _open_blob(ctx, blob_name, container) as blob:
            await leases.renew_lease(blob, lease_id)

    _run(run())
    click.echo(f"Renewed lease {lease_id}")


@lease.command("release")
@click.argument("blob_name")
@click.argument("lease_id")
@container_option
@click.pass_context
def lease_release(ctx, blob_name: str, lease_id: str, container: Optional[str]):
    """Release a lease held on a blob."""

    async def run() -> None:
        async with _open_blob(ctx, blob_name, container) as blob:
            await leases.release_lease(blob, lease_id)

    _run(run())
    click.echo(f"Released lease {lease_id}")


# ========== Blob Commands ==========

@cli.group()
def blob():
    """Upload, download and share blobs."""
    pass


@blob.command("download")
@click.argument("blob_name")
@container_option
@click.option("--encoding", default="utf-8", show_default=True, help="Text encoding of the blob")
@click.pass_context
def blob_download(ctx, blob_name: str, container: Optional[str], encoding: str):
    """Print a blob's content as text."""

    async def run() -> str:
        async with _open_blob(ctx, blob_name, container) as resource:
            return await transfer.download_text(resource, encoding=encoding)

    click.echo(_run(run()), nl=False)


@blob.command("upload")
@click.argument("blob_name")
@click.argument("source", type=click.File("rb"))
@container_option
@click.option("--lease-id", help="Lease id, if the blob is leased")
@click.option("--append", is_flag=True, help="Append to the blob instead of replacing it")
@click.option("--append-blob", is_flag=True, help="Treat the target as an append blob")
@click.pass_context
def blob_upload(
    ctx,
    blob_name: str,
    source,
    container: Optional[str],
    lease_id: Optional[str],
    append: bool,
    append_blob: bool,
):
    """
    Upload a local file to a blob.

    Examples:
        picton blob upload reports/today.csv ./today.csv
        picton blob upload logs/app.log ./new.log --append --append-blob
    """
    blob_type = BlobType.APPEND_BLOB if append_blob else BlobType.BLOCK_BLOB

    async def run() -> None:
        async with _open_blob(ctx, blob_name, container, blob_type) as resource:
            if append:
                await transfer.append_stream(resource, source, lease_id)
            else:
                await transfer.upload_stream(resource, source, lease_id)

    _run(run())
    click.echo(f"{'Appended' if append else 'Uploaded'} {source.name} to {blob_name}")


@blob.command("sas")
@click.argument("blob_name")
@container_option
@click.option("--permission", default="r", show_default=True, help="SAS permission letters")
@click.option("--minutes", type=click.IntRange(min=1), help="Validity in minutes (defaults to configuration)")
@click.pass_context
def blob_sas(ctx, blob_name: str, container: Optional[str], permission: str, minutes: Optional[int]):
    """Print a shared access signature URI for a blob."""
    config: PictonConfig = ctx.obj["config"]
    minutes = minutes or config.sas.default_duration_minutes

    async def run() -> str:
        async with _open_blob(ctx, blob_name, container) as resource:
            return sas.get_shared_access_signature_uri(
                resource,
                permission,
                duration=timedelta(minutes=minutes),
                start_skew=timedelta(minutes=config.sas.start_skew_minutes),
            )

    try:
        click.echo(_run(run()))
    except ValueError as e:
        raise click.ClickException(str(e))


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
