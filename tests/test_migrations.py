# ======================================================
# tests/test_migrations.py
# ======================================================
# Here, we are running the alembic migrations up and down
# against a throwaway SQLite file.
# ======================================================

import shutil
import tempfile
import unittest
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

ROOT = Path(__file__).resolve().parents[1]


class TestMigrations(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = Path(tempfile.mkdtemp())
        self.url = f"sqlite:///{self.tmp_dir / 'migrated.db'}"
        self.cfg = Config(str(ROOT / "alembic.ini"))
        self.cfg.set_main_option("script_location", str(ROOT / "alembic"))
        self.cfg.set_main_option("sqlalchemy.url", self.url)
        self.cfg.attributes["configure_logger"] = False

    def tearDown(self):
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def tables(self):
        engine = create_engine(self.url)
        try:
            return set(inspect(engine).get_table_names())
        finally:
            engine.dispose()

    def test_upgrade_and_downgrade(self):
        command.upgrade(self.cfg, "head")
        self.assertTrue({"terms", "labels", "clean_contents"} <= self.tables())
        command.downgrade(self.cfg, "base")
        self.assertFalse({"terms", "labels", "clean_contents"} & self.tables())


if __name__ == "__main__":
    unittest.main()
