# File: tests/conftest.py

import io
import os
import sys
import tempfile

# 1. Force test mode BEFORE settings are imported (class attributes read env once)
_TEST_ROOT = tempfile.mkdtemp(prefix="skinsage_tests_")
os.environ["USE_SQLITE"] = "true"
os.environ["SQLITE_PATH"] = os.path.join(_TEST_ROOT, "test_skinsage.db")
os.environ["STORAGE_BACKEND"] = "local"
os.environ["ARTIFACTS_DIR"] = os.path.join(_TEST_ROOT, "artifacts")

import logging
import numpy as np
import pytest
import sqlalchemy
from PIL import Image
from sqlalchemy import text
from sqlalchemy_utils import database_exists, create_database

# 2. Add project root to path
sys.path.append(os.getcwd())

from skinsage.core.database.connection import engine as TEST_ENGINE
from skinsage.features.media_storage.data.local_store import LocalObjectStorage


@pytest.fixture(scope="session", autouse=True)
def global_setup():
    """
    Runs once per test session.
    Ensures DB exists and all tables are registered and created.
    """
    logging.getLogger("skinsage").setLevel(logging.DEBUG)

    if not database_exists(TEST_ENGINE.url):
        create_database(TEST_ENGINE.url)

    # Import all models to ensure they are registered
    from skinsage.core.database.base import Base
    import skinsage.features.scans.data.sql_models
    import skinsage.core.jobs.models

    Base.metadata.create_all(bind=TEST_ENGINE)

    yield


@pytest.fixture(scope="function", autouse=True)
def clean_db(global_setup):
    """
    Runs before EVERY test.
    Wipes every table (SQLite: no TRUNCATE, so DELETE with FKs off).
    """
    from skinsage.core.database.base import Base

    Base.metadata.create_all(bind=TEST_ENGINE)

    with TEST_ENGINE.connect() as conn:
        trans = conn.begin()
        table_names = sqlalchemy.inspect(TEST_ENGINE).get_table_names()
        conn.execute(text("PRAGMA foreign_keys = OFF;"))
        for table in table_names:
            conn.execute(text(f'DELETE FROM "{table}";'))
        conn.execute(text("PRAGMA foreign_keys = ON;"))
        trans.commit()

    yield


@pytest.fixture
def local_storage(tmp_path):
    """Filesystem object store rooted in the test's tmp dir."""
    return LocalObjectStorage(tmp_path / "objects")


# --- Synthetic images ---

def encode_png(pixels: np.ndarray) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(pixels.astype(np.uint8)).save(buf, format="PNG")
    return buf.getvalue()


def checkerboard(size: int = 32, low: int = 0, high: int = 255) -> np.ndarray:
    """1-pixel checkerboard: the sharpest possible pattern."""
    yy, xx = np.indices((size, size))
    return np.where((xx + yy) % 2 == 0, high, low).astype(np.uint8)


@pytest.fixture
def sharp_png():
    """Bright and sharp: passes every quality threshold."""
    return encode_png(checkerboard(32, 0, 255))


@pytest.fixture
def flat_png():
    """Constant mid-grey: zero sharpness, adequate light."""
    return encode_png(np.full((32, 32), 128, dtype=np.uint8))


@pytest.fixture
def dark_png():
    """Sharp but dark (mean 20)."""
    return encode_png(checkerboard(32, 0, 40))
