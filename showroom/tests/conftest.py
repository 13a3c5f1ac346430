import os
import tempfile
from pathlib import Path

import pytest

# Must be set before showroom.app.core.settings is imported by any test module.
_DB_PATH = Path(tempfile.mkdtemp(prefix="showroom-tests-")) / "showroom.db"
os.environ.setdefault("DATABASE_URL", f"sqlite+pysqlite:///{_DB_PATH}")


@pytest.fixture(scope="session", autouse=True)
def _database_schema():
    from showroom.app.db.session import create_schema

    create_schema()
