#!/usr/bin/env python3
"""
paths.py
-------------------
Path constants and configuration for the gallery store.

Paths are resolved at import time relative to the package location.
The data directory can be moved by setting the ``GALLERYDB_DATA_DIR``
environment variable; everything that holds user data (database file,
logs) follows it.

The layout:
    DATA_DIR/
    ├── gallery.db     # SQLite store
    └── logs/          # Rotating operation and error logs
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
from pathlib import Path


def _get_package_root() -> Path:
    """
    Determine the package directory.

    Assumes this file is at PACKAGE/core/paths.py.

    Returns:
        Path object for the gallerydb package directory
    """
    return Path(__file__).resolve().parent.parent


def _get_data_dir() -> Path:
    """
    Resolve the data directory, honouring ``GALLERYDB_DATA_DIR``.

    Returns:
        Absolute path of the data directory (not created here)
    """
    override = os.environ.get("GALLERYDB_DATA_DIR")
    if override:
        return Path(override).expanduser().resolve()
    return Path.home() / ".gallerydb"


# ----- Package directory -----
ROOT: Path = _get_package_root()

# --- Database ---
ALEMBIC_DIR = ROOT / "migrations"
ALEMBIC_INI = ROOT / "alembic.ini"

# ----- User data -----
DATA_DIR = _get_data_dir()
DB_PATH = DATA_DIR / "gallery.db"

# ---- Logs ----
LOG_DIR = DATA_DIR / "logs"
