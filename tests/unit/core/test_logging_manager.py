"""
Tests for logging_manager module.

Covers the file layout written by GalleryLogger, the null-safe logger used
by managers, and the CLI error helper.
"""
import click
import pytest
from unittest.mock import MagicMock

from gallerydb.core.exceptions import ConcurrencyConflictError, DatabaseError
from gallerydb.core.logging_manager import (
    GalleryLogger,
    NullLogger,
    handle_cli_error,
    safe_logger,
)


@pytest.fixture
def gallery_logger(tmp_path):
    """A real logger writing under a temporary directory."""
    logger = GalleryLogger(tmp_path / "logs", component_name="gallery_test")
    yield logger
    logger.close()


def _flush(logger: GalleryLogger) -> None:
    for handler in logger.logger.handlers:
        handler.flush()


def _read(logger: GalleryLogger, name: str) -> str:
    _flush(logger)
    return (logger.log_dir / name).read_text()


class TestGalleryLogger:
    """Tests for the rotating file logger."""

    def test_creates_log_directory(self, tmp_path):
        """The log directory is created on demand."""
        log_dir = tmp_path / "nested" / "logs"
        logger = GalleryLogger(log_dir, component_name="mkdir_test")
        try:
            assert log_dir.is_dir()
        finally:
            logger.close()

    def test_operation_written_to_component_log(self, gallery_logger):
        """log_operation writes JSON details to <component>.log."""
        gallery_logger.log_operation("save_album", {"album_id": 7})
        _flush(gallery_logger)

        content = (gallery_logger.log_dir / "gallery_test.log").read_text()
        assert "operation save_album" in content
        assert '"album_id": 7' in content

    def test_error_written_to_error_log(self, gallery_logger):
        """log_error writes type, message and context to errors.log."""
        error = ConcurrencyConflictError("gave up", attempts=11)
        gallery_logger.log_error(error, {"operation": "save"})
        _flush(gallery_logger)

        content = (gallery_logger.log_dir / "errors.log").read_text()
        assert "ConcurrencyConflictError: gave up" in content
        assert '"operation": "save"' in content

    def test_debug_goes_to_component_log_only(self, gallery_logger):
        """Debug messages never reach errors.log."""
        gallery_logger.log_debug("staging rows", {"count": 3})
        _flush(gallery_logger)

        assert "staging rows" in (gallery_logger.log_dir / "gallery_test.log").read_text()
        assert "staging rows" not in (gallery_logger.log_dir / "errors.log").read_text()

    def test_close_detaches_handlers(self, tmp_path):
        """close() removes every handler it created."""
        logger = GalleryLogger(tmp_path / "logs", component_name="close_test")
        logger.close()

        assert logger.logger.handlers == []

    def test_raised_error_keeps_traceback(self, gallery_logger):
        """An error caught after raising is logged with its traceback."""
        try:
            raise DatabaseError("disk gone")
        except DatabaseError as e:
            gallery_logger.log_error(e)

        content = _read(gallery_logger, "errors.log")
        assert "Traceback" in content
        assert "disk gone" in content

    def test_reopening_does_not_duplicate_handlers(self, tmp_path):
        """A second logger for a component replaces the first one's handlers."""
        first = GalleryLogger(tmp_path / "logs", component_name="reopen_test")
        second = GalleryLogger(tmp_path / "logs", component_name="reopen_test")
        try:
            assert second.logger is first.logger
            assert len(second.logger.handlers) == 3
        finally:
            second.close()

    def test_cli_error_format(self, gallery_logger):
        """log_cli_error returns a short message unless traceback is wanted."""
        message = gallery_logger.log_cli_error(DatabaseError("Connection failed"))
        assert message == "❌ DatabaseError: Connection failed"


class TestStoreEvents:
    """Helpers for concurrency and cleanup events."""

    def test_conflict_retry_is_a_warning(self, gallery_logger):
        gallery_logger.log_conflict_retry(2, 10, ValueError("stale row"))

        content = _read(gallery_logger, "gallery_test.log")
        assert "WARNING" in content
        assert "Concurrency conflict, retrying save" in content
        assert '"attempt": 2' in content
        assert '"error": "stale row"' in content

    def test_conflict_exhausted_goes_to_error_log(self, gallery_logger):
        error = ConcurrencyConflictError("Save failed after 11 attempts", attempts=11)
        gallery_logger.log_conflict_exhausted(error, 11)

        content = _read(gallery_logger, "errors.log")
        assert "ConcurrencyConflictError: Save failed after 11 attempts" in content
        assert '"attempts": 11' in content

    def test_conflict_resolved(self, gallery_logger):
        gallery_logger.log_conflict_resolved(4)
        assert 'Save succeeded after conflicts {"attempts": 4}' in _read(
            gallery_logger, "gallery_test.log"
        )

    def test_cascade_delete_counts(self, gallery_logger):
        gallery_logger.log_cascade_delete("Album", 7, {"albums": 3, "tags_swept": 1})

        content = _read(gallery_logger, "gallery_test.log")
        assert 'Album deleted {"albums": 3, "id": 7, "tags_swept": 1}' in content

    def test_empty_tag_sweep_not_logged(self, gallery_logger):
        gallery_logger.log_tag_sweep(0)
        gallery_logger.log_tag_sweep(2)

        content = _read(gallery_logger, "gallery_test.log")
        assert content.count("Unused tags deleted") == 1
        assert '{"count": 2}' in content


class TestNullLogger:
    """Tests for NullLogger class."""

    def test_all_methods_are_no_ops(self):
        """Every logging method accepts its arguments and does nothing."""
        logger = NullLogger()
        logger.log_operation("op", {"key": "value"})
        logger.log_error(ValueError("boom"), {"context": "test"})
        logger.log_debug("debug", {"key": "value"})
        logger.log_info("info")
        logger.log_warning("warning", {"attempt": 2})
        logger.log_conflict_retry(1, 10, ValueError("stale"))
        logger.log_conflict_resolved(2)
        logger.log_conflict_exhausted(ValueError("stale"), 11)
        logger.log_cascade_delete("Album", 1, {"albums": 1})
        logger.log_tag_sweep(3)

    def test_cli_error_still_formats(self):
        """NullLogger.log_cli_error still returns a printable message."""
        result = NullLogger().log_cli_error(ValueError("test error"))
        assert "ValueError" in result
        assert "test error" in result


class TestSafeLogger:
    """Tests for safe_logger function."""

    def test_returns_given_logger(self):
        """safe_logger returns the same logger when not None."""
        mock_logger = MagicMock(spec=GalleryLogger)
        assert safe_logger(mock_logger) is mock_logger

    def test_returns_shared_null_logger(self):
        """safe_logger returns one NullLogger instance for None."""
        assert isinstance(safe_logger(None), NullLogger)
        assert safe_logger(None) is safe_logger(None)


class TestHandleCliError:
    """Tests for handle_cli_error."""

    def test_logs_echoes_and_exits(self, capsys):
        """The error is logged with the operation, printed, and exit code used."""
        mock_logger = MagicMock(spec=GalleryLogger)
        mock_logger.log_cli_error.return_value = "❌ DatabaseError: nope"
        ctx = click.Context(click.Command("test"), obj={"logger": mock_logger})

        with pytest.raises(SystemExit) as exc_info:
            handle_cli_error(ctx, DatabaseError("nope"), "prune_tags", {"dry_run": True})

        assert exc_info.value.code == 1
        context = mock_logger.log_cli_error.call_args[0][1]
        assert context == {"operation": "prune_tags", "dry_run": True}
        assert "DatabaseError: nope" in capsys.readouterr().err

    def test_works_without_logger(self, capsys):
        """A missing logger falls back to the null logger."""
        ctx = click.Context(click.Command("test"), obj={})

        with pytest.raises(SystemExit):
            handle_cli_error(ctx, ValueError("bad"), "stats", exit_code=2)

        assert "ValueError: bad" in capsys.readouterr().err
