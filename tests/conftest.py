from pathlib import Path
import os
import tempfile
import pytest

# Point the app at a throwaway SQLite file before `school_records` is imported.
TEST_DB = Path(tempfile.gettempdir()) / "school_records_test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB}"

from sqlmodel import Session  # noqa: E402
from school_records.database import engine, create_db_and_tables, drop_db_and_tables  # noqa: E402


@pytest.fixture(autouse=True)
def reset_db():
    """Give every test empty tables."""
    drop_db_and_tables()
    create_db_and_tables()
    yield


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s
