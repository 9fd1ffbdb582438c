"""Ledger writes: short units of work with optimistic-concurrency retry.

Player and company rows carry a version counter. A balance write issues
``UPDATE ... WHERE id = ? AND version = ?``; if another writer got there first
SQLAlchemy raises StaleDataError, and the unit is re-run against fresh rows.
"""

import logging
from typing import Callable, Optional, TypeVar

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from tycoon.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LedgerConflictError(ValueError):
    """A unit of work kept losing the version race."""


def apply_with_retry(
    db: Session,
    unit: Callable[[Session], T],
    label: str = "ledger write",
    max_retries: Optional[int] = None,
) -> T:
    """Run ``unit(db)`` and commit it as one transaction.

    The unit must read the rows it mutates inside itself (``db.get`` or a
    query); a rollback expires everything, so a retry sees current values.

    Raises:
        LedgerConflictError: if every attempt hit a version conflict.
    """
    retries = settings.LEDGER_MAX_RETRIES if max_retries is None else max_retries
    for attempt in range(retries + 1):
        try:
            result = unit(db)
            db.commit()
            return result
        except StaleDataError:
            db.rollback()
            logger.warning("%s: version conflict (attempt %d/%d)", label, attempt + 1, retries + 1)
        except Exception:
            db.rollback()
            raise
    raise LedgerConflictError(f"{label}: gave up after {retries + 1} conflicting attempts")
