"""
Event Log Commands
------------------

Inspect or clear the application event log.

Commands:
    - events: List recent events, or clear them with --clear

Usage:
    gallerydb events --limit 10
    gallerydb events --gallery-id 1 --clear
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Optional

# --- Third-party imports ---
import click

# --- Local imports ---
from gallerydb.core.exceptions import DatabaseError
from gallerydb.core.logging_manager import handle_cli_error
from gallerydb.database.managers import EventManager
from . import get_db


@click.command()
@click.option("--gallery-id", type=int, default=None, help="Only events of this gallery")
@click.option("--limit", type=int, default=20, show_default=True, help="Events to show")
@click.option("--clear", is_flag=True, help="Delete the listed events instead of showing them")
@click.pass_context
def events(ctx: click.Context, gallery_id: Optional[int], limit: int, clear: bool) -> None:
    """Show or clear the application event log."""
    try:
        db = get_db(ctx)

        with db.session_scope() as session:
            manager = EventManager(session, db.logger)

            if clear:
                removed = manager.clear_event_log(gallery_id)
                click.echo(f"✅ Deleted {removed} events")
                return

            entries = manager.get_all(gallery_id)

            click.echo(f"\n📜 Events: {len(entries)}")
            for entry in entries[:limit]:
                stamp = entry.timestamp.strftime("%Y-%m-%d %H:%M:%S")
                scope = f"gallery {entry.gallery_id}" if entry.gallery_id is not None else "system"
                label = entry.event_type.value.upper()
                click.echo(f"  [{entry.id}] {stamp} {label} ({scope}): {entry.message}")
                if entry.ex_type:
                    click.echo(f"      {entry.ex_type} in {entry.ex_source}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "events")
