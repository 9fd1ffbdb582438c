"""Run lease that keeps two ticks from being in flight at once."""

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tycoon.clock import as_utc
from tycoon.models.tick import TickLease

logger = logging.getLogger(__name__)

TICK_LEASE_NAME = "market_tick"


class TickInProgressError(ValueError):
    """Another tick holds the lease."""


def acquire_lease(db: Session, now: datetime, ttl: timedelta, name: str = TICK_LEASE_NAME) -> str:
    """Take the named lease, or raise if a live holder exists.

    An expired lease (a crashed tick) is taken over with a conditional update
    so that two contenders can't both win it.

    Returns:
        The holder token needed to release the lease.
    """
    holder = str(uuid.uuid4())
    lease = db.get(TickLease, name)

    if lease is None:
        db.add(TickLease(name=name, holder=holder, acquired_at=now, expires_at=now + ttl))
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise TickInProgressError("A tick is already running")
        return holder

    if as_utc(lease.expires_at) > now:
        raise TickInProgressError(
            f"A tick is already running (lease held since {as_utc(lease.acquired_at).isoformat()})"
        )

    stale_holder = lease.holder
    taken = (
        db.query(TickLease)
        .filter(TickLease.name == name, TickLease.holder == stale_holder)
        .update(
            {"holder": holder, "acquired_at": now, "expires_at": now + ttl},
            synchronize_session=False,
        )
    )
    db.commit()
    if taken != 1:
        raise TickInProgressError("A tick is already running")
    logger.warning("Took over expired tick lease from %s", stale_holder)
    db.expire_all()
    return holder


def release_lease(db: Session, holder: str, name: str = TICK_LEASE_NAME) -> None:
    db.query(TickLease).filter(TickLease.name == name, TickLease.holder == holder).delete(
        synchronize_session=False
    )
    db.commit()


@contextmanager
def tick_lease(db: Session, now: datetime, ttl: timedelta, name: str = TICK_LEASE_NAME):
    holder = acquire_lease(db, now, ttl, name)
    try:
        yield holder
    finally:
        # Discard whatever a failed step left pending before touching the lease
        db.rollback()
        release_lease(db, holder, name)
