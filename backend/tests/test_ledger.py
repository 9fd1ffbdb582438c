"""Optimistic-concurrency retry tests."""

import sys
import os

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.exc import StaleDataError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tycoon.database import Base, make_engine
from tycoon.models import Player
from tycoon.services.ledger import LedgerConflictError, apply_with_retry


@pytest.fixture
def file_sessions(tmp_path):
    """Two independent sessions on one on-disk database."""
    engine = make_engine(f"sqlite:///{tmp_path / 'ledger.db'}")
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    first, second = Session(), Session()
    yield first, second
    first.close()
    second.close()
    engine.dispose()


class TestApplyWithRetry:
    def test_commits_result(self, db):
        player = Player(balance=0)
        db.add(player)
        db.commit()

        def unit(session):
            p = session.get(Player, player.id)
            p.balance += 5
            return p.balance

        assert apply_with_retry(db, unit) == 5
        db.expire_all()
        assert db.get(Player, player.id).balance == 5

    def test_retries_after_conflict(self, db):
        calls = []

        def unit(session):
            calls.append(1)
            if len(calls) == 1:
                raise StaleDataError("lost the race")
            return "ok"

        assert apply_with_retry(db, unit, max_retries=2) == "ok"
        assert len(calls) == 2

    def test_gives_up(self, db):
        def unit(session):
            raise StaleDataError("always stale")

        with pytest.raises(LedgerConflictError):
            apply_with_retry(db, unit, max_retries=2)

    def test_other_errors_propagate(self, db):
        def unit(session):
            raise RuntimeError("store down")

        with pytest.raises(RuntimeError):
            apply_with_retry(db, unit)

    def test_concurrent_balance_write_is_not_lost(self, file_sessions):
        """A stale version is detected and the credit is re-applied on fresh state."""
        mine, theirs = file_sessions
        player = Player(balance=100)
        mine.add(player)
        mine.commit()
        player_id = player.id
        mine.get(Player, player_id).balance  # loaded at version 1

        other = theirs.get(Player, player_id)
        other.balance -= 30
        theirs.commit()

        def credit(session):
            p = session.get(Player, player_id)
            p.balance += 10

        apply_with_retry(mine, credit)
        mine.expire_all()
        assert mine.get(Player, player_id).balance == 80
