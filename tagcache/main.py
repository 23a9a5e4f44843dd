"""Main entry point for the tagcache command line.

Sets up the Typer CLI application, wires the cache service to the
configured storage (Composition Root), and defines one command per
cache operation.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from typing_extensions import Annotated

from tagcache.core.cache_service import CacheService
from tagcache.domain.models.common import CacheDefaults, CacheOptions, CacheStorageType
from tagcache.infrastructure.cli.display import ConsoleDisplay
from tagcache.infrastructure.config.settings import (
    get_default_max_age,
    get_logging_settings,
    get_storage_dir,
    get_storage_type,
    load_configuration,
)
from tagcache.infrastructure.monitoring.logger_setup import setup_logging
from tagcache.infrastructure.storage import create_storage

logger = logging.getLogger(__name__)


def create_dependencies(storage_name: Optional[str] = None) -> Dict[str, Any]:
    """Creates and wires up the UI and the cache service.

    Args:
        storage_name: Storage type overriding the configured one.

    Raises:
        ValueError: If the storage type name is unknown.
    """
    load_configuration()
    log_settings = get_logging_settings()
    setup_logging(log_level=log_settings['level'], log_format=log_settings['format'], log_file=log_settings['file'])

    storage_type = CacheStorageType(storage_name.lower()) if storage_name else get_storage_type()
    storage_dir: Path = get_storage_dir()
    storage = create_storage(storage_type, storage_dir if storage_type is CacheStorageType.LOCAL_STORAGE else None)

    default_max_age = get_default_max_age()
    defaults = CacheDefaults(max_age=default_max_age) if default_max_age is not None else CacheDefaults()

    dependencies: Dict[str, Any] = {
        'ui': ConsoleDisplay(),
        'cache_service': CacheService(storage=storage, defaults=defaults),
    }
    logger.info(f"Dependencies initialized with {dependencies['cache_service'].storage.type().value} storage.")
    return dependencies


def parse_value(raw: str) -> Any:
    """Parses a command line value as JSON, falling back to the raw string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


# --- Typer App Definition ---
app = typer.Typer(
    name="tagcache",
    help="tagcache: inspect and manage a tag-aware, expiring key/value cache.",
    add_completion=False,
)

StorageOption = Annotated[
    Optional[str],
    typer.Option("--storage", "-s", help="Storage to use ('local_storage', 'session_storage', 'memory'). Uses config if not set.")
]


@app.callback()
def main_callback(ctx: typer.Context, storage: StorageOption = None):
    """Wires dependencies shared by every command."""
    try:
        ctx.obj = create_dependencies(storage)
    except ValueError as e:
        logger.error(f"Invalid storage configuration: {e}")
        ConsoleDisplay().display_error(f"Invalid storage configuration: {e}")
        raise typer.Exit(code=2)
    close = getattr(ctx.obj['cache_service'].storage, 'close', None)
    if close is not None:
        ctx.call_on_close(close)


def _service(ctx: typer.Context) -> CacheService:
    return ctx.obj['cache_service']


def _ui(ctx: typer.Context) -> ConsoleDisplay:
    return ctx.obj['ui']


# --- CLI Commands ---

@app.command(name="set")
def set_command(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Cache key.")],
    value: Annotated[str, typer.Argument(help="Value (JSON, or a plain string).")],
    max_age: Annotated[Optional[int], typer.Option("--max-age", help="Lifetime in seconds.")] = None,
    expires: Annotated[Optional[int], typer.Option("--expires", help="Absolute expiry in epoch milliseconds.")] = None,
    tag: Annotated[Optional[str], typer.Option("--tag", "-t", help="Tag to group the entry under.")] = None,
):
    """Store a value."""
    options = CacheOptions(expires=expires, max_age=max_age, tag=tag)
    if not _service(ctx).set(key, parse_value(value), options):
        _ui(ctx).display_error(f"Storage rejected the value for '{key}'.")
        raise typer.Exit(code=1)
    _ui(ctx).display_info(f"Stored '{key}'.")


@app.command(name="get")
def get_command(ctx: typer.Context, key: Annotated[str, typer.Argument(help="Cache key.")]):
    """Print a cached value."""
    value = _service(ctx).get(key)
    if value is None:
        _ui(ctx).display_warning(f"No live entry for '{key}'.")
        raise typer.Exit(code=1)
    _ui(ctx).display_output(value)


@app.command(name="exists")
def exists_command(ctx: typer.Context, key: Annotated[str, typer.Argument(help="Cache key.")]):
    """Print the entry status: present, expired or absent."""
    _ui(ctx).display_output(_service(ctx).status(key).value)


@app.command(name="remove")
def remove_command(ctx: typer.Context, key: Annotated[str, typer.Argument(help="Cache key.")]):
    """Remove a single entry."""
    _service(ctx).remove(key)
    _ui(ctx).display_info(f"Removed '{key}'.")


@app.command(name="tag")
def tag_command(ctx: typer.Context, tag: Annotated[str, typer.Argument(help="Tag name.")]):
    """List the live entries of a tag."""
    data = _service(ctx).get_tag_data(tag)
    if not data:
        _ui(ctx).display_info(f"No live entries tagged '{tag}'.")
        return
    _ui(ctx).display_mapping(f"Tag: {tag}", data)


@app.command(name="remove-tag")
def remove_tag_command(ctx: typer.Context, tag: Annotated[str, typer.Argument(help="Tag name.")]):
    """Remove every entry of a tag."""
    _service(ctx).remove_tag(tag)
    _ui(ctx).display_info(f"Removed tag '{tag}'.")


@app.command(name="clear")
def clear_command(ctx: typer.Context):
    """Remove every entry, tags included."""
    _service(ctx).remove_all()
    _ui(ctx).display_info("Cache cleared.")


@app.command(name="info")
def info_command(ctx: typer.Context):
    """Show the storage in use."""
    storage = _service(ctx).storage
    _ui(ctx).display_mapping("Storage", {
        "type": storage.type().value,
        "enabled": storage.is_enabled(),
        "items": storage.length,
    })


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
