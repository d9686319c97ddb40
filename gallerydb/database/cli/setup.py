"""
Setup & Initialization Commands
--------------------------------

Database schema initialization.

Commands:
    - init: Create a fresh schema or upgrade an existing one
"""
import click

from gallerydb.core.logging_manager import handle_cli_error
from gallerydb.core.exceptions import DatabaseError
from . import get_db


@click.command()
@click.pass_context
def init(ctx):
    """Create or upgrade the database schema."""
    try:
        db = get_db(ctx)
        click.echo(f"🗄️  Initializing database schema at {db.db_path}...")
        db.initialize_schema()
        click.echo("✅ Database initialized!")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "init")
