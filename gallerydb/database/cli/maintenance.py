"""
Maintenance Commands
--------------------

Orphan tag pruning and database statistics.

Commands:
    - prune-tags: Remove tags no metadata item references
    - stats: Display row counts per table

Usage:
    # List orphaned tags
    gallerydb prune-tags --list

    # Preview deletion
    gallerydb prune-tags --dry-run

    # Actually delete them
    gallerydb prune-tags
"""
# --- Annotations ---
from __future__ import annotations

# --- Third-party imports ---
import click

# --- Local imports ---
from gallerydb.core.exceptions import DatabaseError
from gallerydb.core.logging_manager import handle_cli_error
from gallerydb.database.managers import TagManager
from . import get_db


@click.command("prune-tags")
@click.option("--list", "list_only", is_flag=True, help="Only list orphans, don't delete")
@click.option("--dry-run", is_flag=True, help="Show what would be deleted without actually deleting")
@click.pass_context
def prune_tags(ctx: click.Context, list_only: bool, dry_run: bool) -> None:
    """
    Detect and remove orphaned tags.

    A tag is orphaned when no metadata item references it any more, which
    normally only happens after an interrupted delete.

    Args:
        ctx: Click context with database configuration
        list_only: If True, only list orphans without deleting
        dry_run: If True, show what would be deleted without deleting
    """
    try:
        db = get_db(ctx)

        with db.session_scope() as session:
            orphans = [tag.name for tag in TagManager(session, db.logger).get_unused()]

        if list_only or dry_run:
            click.echo(f"\n🏷️  Orphaned tags: {len(orphans)}")
            for name in orphans:
                click.echo(f"  • {name}")
            if dry_run:
                click.echo(f"\nWould delete {len(orphans)} orphaned tags")
            return

        deleted = db.delete_unused_tags()
        click.echo(f"✅ Deleted {deleted} orphaned tags")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "prune_tags")


@click.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Display database statistics."""
    try:
        db = get_db(ctx)
        stats_data = db.get_stats()

        click.echo("\n📊 Database Statistics")
        click.echo("=" * 50)
        click.echo(f"  Galleries: {stats_data.get('galleries', 0)}")
        click.echo(f"  Albums: {stats_data.get('albums', 0)}")
        click.echo(f"  Media Objects: {stats_data.get('media_objects', 0)}")
        click.echo(f"  Metadata Items: {stats_data.get('metadata_items', 0)}")
        click.echo(f"  Tags: {stats_data.get('tags', 0)}")
        click.echo(f"  Tag Links: {stats_data.get('metadata_tags', 0)}")
        click.echo(f"  Events: {stats_data.get('app_events', 0)}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "stats")
