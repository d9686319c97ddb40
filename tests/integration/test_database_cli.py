#!/usr/bin/env python3
"""
Integration tests for the gallerydb CLI.

Tests the maintenance commands against a temporary database.
"""
import pytest
from click.testing import CliRunner

from gallerydb.database.cli import cli
from gallerydb.database.manager import GalleryDB
from gallerydb.database.managers import EventManager, TagManager
from gallerydb.database.models import EventType


class TestDatabaseCLI:
    """Test database CLI commands with a temporary database."""

    @pytest.fixture
    def runner(self):
        """Create Click test runner."""
        return CliRunner()

    @pytest.fixture
    def test_dirs(self, tmp_path):
        """Paths for the database and logs."""
        return {
            "db_path": tmp_path / "gallery.db",
            "log_dir": tmp_path / "logs",
        }

    @pytest.fixture
    def seeded(self, test_dirs):
        """Database holding one orphaned tag and two events."""
        db = GalleryDB(test_dirs["db_path"])
        try:
            gallery_id = db.create_gallery("Family")
            with db.session_scope() as session:
                TagManager(session).ensure_tags_exist(["Orphan"])
                events = EventManager(session)
                events.record_event("Gallery created", gallery_id=gallery_id)
                events.record_event("Disk almost full", EventType.WARNING)
        finally:
            db.close()
        return gallery_id

    def invoke_cli(self, runner, test_dirs, args, **kwargs):
        """Helper to invoke CLI with test configuration."""
        base_args = [
            "--db-path", str(test_dirs["db_path"]),
            "--log-dir", str(test_dirs["log_dir"]),
        ]
        return runner.invoke(cli, base_args + args, **kwargs)

    def test_cli_help(self, runner):
        """Test that CLI help message works."""
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "prune-tags" in result.output

    def test_init_command(self, runner, test_dirs):
        """Test 'init' creates the database file."""
        result = self.invoke_cli(runner, test_dirs, ["init"])

        assert result.exit_code == 0, result.output
        assert "Initializing database schema" in result.output
        assert "Database initialized" in result.output
        assert test_dirs["db_path"].exists()
        assert (test_dirs["log_dir"] / "cli" / "cli.log").exists()

    def test_init_is_repeatable(self, runner, test_dirs):
        assert self.invoke_cli(runner, test_dirs, ["init"]).exit_code == 0
        assert self.invoke_cli(runner, test_dirs, ["init"]).exit_code == 0

    def test_stats(self, runner, test_dirs, seeded):
        result = self.invoke_cli(runner, test_dirs, ["stats"])

        assert result.exit_code == 0, result.output
        assert "Database Statistics" in result.output
        assert "Galleries: 1" in result.output
        assert "Tags: 1" in result.output
        assert "Events: 2" in result.output

    def test_prune_tags_list(self, runner, test_dirs, seeded):
        result = self.invoke_cli(runner, test_dirs, ["prune-tags", "--list"])

        assert result.exit_code == 0, result.output
        assert "Orphaned tags: 1" in result.output
        assert "Orphan" in result.output
        assert "Would delete" not in result.output

    def test_prune_tags_dry_run_keeps_tags(self, runner, test_dirs, seeded):
        result = self.invoke_cli(runner, test_dirs, ["prune-tags", "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "Would delete 1 orphaned tags" in result.output
        stats = self.invoke_cli(runner, test_dirs, ["stats"])
        assert "Tags: 1" in stats.output

    def test_prune_tags(self, runner, test_dirs, seeded):
        result = self.invoke_cli(runner, test_dirs, ["prune-tags"])

        assert result.exit_code == 0, result.output
        assert "Deleted 1 orphaned tags" in result.output
        stats = self.invoke_cli(runner, test_dirs, ["stats"])
        assert "Tags: 0" in stats.output

    def test_events_list(self, runner, test_dirs, seeded):
        result = self.invoke_cli(runner, test_dirs, ["events"])

        assert result.exit_code == 0, result.output
        assert "Events: 2" in result.output
        assert "WARNING (system): Disk almost full" in result.output
        assert f"INFO (gallery {seeded}): Gallery created" in result.output

    def test_events_limit_and_gallery(self, runner, test_dirs, seeded):
        result = self.invoke_cli(
            runner, test_dirs, ["events", "--gallery-id", str(seeded), "--limit", "1"]
        )

        assert result.exit_code == 0, result.output
        assert "Events: 1" in result.output
        assert "Disk almost full" not in result.output

    def test_events_clear(self, runner, test_dirs, seeded):
        result = self.invoke_cli(runner, test_dirs, ["events", "--clear"])

        assert result.exit_code == 0, result.output
        assert "Deleted 2 events" in result.output
        stats = self.invoke_cli(runner, test_dirs, ["stats"])
        assert "Events: 0" in stats.output

    def test_unusable_database_path(self, runner, test_dirs, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        test_dirs["db_path"] = blocker / "gallery.db"

        result = self.invoke_cli(runner, test_dirs, ["stats"])

        assert result.exit_code == 1
        assert "DatabaseError" in result.output
