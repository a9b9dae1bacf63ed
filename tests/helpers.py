# ======================================================
# tests/helpers.py
# ======================================================
# A throwaway SQLite file database per test case.
# ======================================================

import shutil
import tempfile
import unittest
from pathlib import Path

from store.db import init_db, make_engine, make_sessionmaker


class DatabaseTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = Path(tempfile.mkdtemp())
        self.engine = make_engine(f"sqlite:///{self.tmp_dir / 'test.db'}", lock_timeout_ms=30000)
        init_db(self.engine)
        self.Session = make_sessionmaker(self.engine)
        self.session = self.Session()

    def tearDown(self):
        self.session.close()
        self.engine.dispose()
        shutil.rmtree(self.tmp_dir, ignore_errors=True)
