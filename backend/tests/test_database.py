"""Engine construction for the supported SQLite URLs."""

import sys
import os
import threading

from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tycoon.database import Base, make_engine
from tycoon.models import Player


class TestMakeEngine:
    def test_in_memory_sessions_share_one_database(self):
        engine = make_engine("sqlite://")
        assert isinstance(engine.pool, StaticPool)
        Base.metadata.create_all(bind=engine)
        Session = sessionmaker(bind=engine)

        writer = Session()
        writer.add(Player(balance=7))
        writer.commit()
        writer.close()

        reader = Session()
        assert reader.query(Player).one().balance == 7
        reader.close()
        engine.dispose()

    def test_file_database_usable_from_worker_thread(self, tmp_path):
        """Scheduled ticks open their session on a worker thread."""
        engine = make_engine(f"sqlite:///{tmp_path / 'tycoon.db'}")
        assert not isinstance(engine.pool, StaticPool)
        Base.metadata.create_all(bind=engine)
        Session = sessionmaker(bind=engine)
        errors = []

        def write():
            session = Session()
            try:
                session.add(Player(balance=3))
                session.commit()
            except Exception as e:
                errors.append(e)
            finally:
                session.close()

        worker = threading.Thread(target=write)
        worker.start()
        worker.join()

        session = Session()
        assert errors == []
        assert session.query(Player).one().balance == 3
        session.close()
        engine.dispose()
