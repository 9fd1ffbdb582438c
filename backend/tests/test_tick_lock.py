"""Run lease tests."""

from datetime import timedelta
import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tycoon.models import TickLease
from tycoon.services.tick_lock import (
    TickInProgressError,
    acquire_lease,
    release_lease,
    tick_lease,
)

from factories import NOW

TTL = timedelta(minutes=10)


class TestTickLease:
    def test_second_acquire_rejected(self, db):
        acquire_lease(db, NOW, TTL)
        with pytest.raises(TickInProgressError):
            acquire_lease(db, NOW + timedelta(minutes=1), TTL)

    def test_release_allows_reacquire(self, db):
        holder = acquire_lease(db, NOW, TTL)
        release_lease(db, holder)
        assert acquire_lease(db, NOW, TTL)

    def test_expired_lease_taken_over(self, db):
        stale = acquire_lease(db, NOW, TTL)
        fresh = acquire_lease(db, NOW + TTL + timedelta(seconds=1), TTL)
        assert fresh != stale
        assert db.get(TickLease, "market_tick").holder == fresh

    def test_release_by_stale_holder_is_ignored(self, db):
        stale = acquire_lease(db, NOW, TTL)
        acquire_lease(db, NOW + TTL + timedelta(seconds=1), TTL)
        release_lease(db, stale)
        assert db.query(TickLease).count() == 1

    def test_context_manager_releases_on_error(self, db):
        with pytest.raises(RuntimeError):
            with tick_lease(db, NOW, TTL):
                raise RuntimeError("boom")
        assert db.query(TickLease).count() == 0
