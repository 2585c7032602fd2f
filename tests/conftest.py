import os
import tempfile
import pytest
from webproxy.history import db as history_db

@pytest.fixture(autouse=True)
def setup_test_environment():
    """Point the history store at a temporary database"""
    original_db_path = history_db.DATABASE_PATH

    temp_db = tempfile.NamedTemporaryFile(suffix='.sqlite', delete=False)
    temp_db_path = temp_db.name
    temp_db.close()

    history_db.DATABASE_PATH = temp_db_path
    history_db.init_db()

    yield

    history_db.DATABASE_PATH = original_db_path

    if os.path.exists(temp_db_path):
        os.unlink(temp_db_path)
