#!/usr/bin/env python3
"""
Gallery Database Management CLI
-------------------------------

Command-line interface for maintaining a gallery database.

This module provides the main CLI group and shared context setup
for all database commands.

Command Structure:
    - Setup & Initialization (init)
    - Maintenance (prune-tags, stats)
    - Event log (events)

Usage:
    # Get general help
    gallerydb --help

    # Create or upgrade the schema of a database
    gallerydb --db-path ~/gallery.db init

    # Preview the orphan tag sweep
    gallerydb prune-tags --dry-run
"""
import click
import logging
from pathlib import Path

from gallerydb.core.logging_manager import GalleryLogger
from gallerydb.core.paths import ALEMBIC_DIR, DB_PATH, LOG_DIR
from gallerydb.database.manager import GalleryDB


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    default=str(DB_PATH),
    help="Path to database file",
)
@click.option(
    "--alembic-dir",
    type=click.Path(),
    default=str(ALEMBIC_DIR),
    help="Path to Alembic directory",
)
@click.option(
    "--log-dir",
    type=click.Path(),
    default=str(LOG_DIR),
    help="Path to log directory",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show detailed errors and tracebacks",
)
@click.pass_context
def cli(ctx, db_path, alembic_dir, log_dir, verbose):
    """Gallery Database Management CLI"""

    # Suppress Alembic INFO logging by default
    logging.getLogger("alembic").setLevel(logging.WARNING)

    ctx.ensure_object(dict)
    ctx.obj["db_path"] = Path(db_path)
    ctx.obj["alembic_dir"] = Path(alembic_dir)
    ctx.obj["log_dir"] = Path(log_dir)
    ctx.obj["verbose"] = verbose
    ctx.obj["logger"] = GalleryLogger(Path(log_dir) / "cli", component_name="cli")
    ctx.call_on_close(ctx.obj["logger"].close)


def get_db(ctx) -> GalleryDB:
    """Get or create database instance from context."""
    if "db" not in ctx.obj:
        ctx.obj["db"] = GalleryDB(
            db_path=ctx.obj["db_path"],
            alembic_dir=ctx.obj["alembic_dir"],
            log_dir=ctx.obj["log_dir"],
        )
        ctx.call_on_close(ctx.obj["db"].close)
    return ctx.obj["db"]


# Import and register command modules
# These imports must come after CLI group definition
from .setup import init  # noqa: E402
from .maintenance import prune_tags, stats  # noqa: E402
from .events import events  # noqa: E402

cli.add_command(init)
cli.add_command(prune_tags)
cli.add_command(stats)
cli.add_command(events)


if __name__ == "__main__":
    cli(obj={})
