"""Background tick loop: the in-process stand-in for a cron trigger."""

import asyncio
import logging
from typing import Optional

from tycoon.config import settings
from tycoon.services.tick_lock import TickInProgressError
from tycoon.services.tick_service import run_scheduled_tick

logger = logging.getLogger(__name__)


async def tick_loop(interval: Optional[float] = None):
    """Run a tick every ``interval`` seconds until cancelled.

    Ticks run in a worker thread so the event loop keeps serving requests.
    A failed tick is logged and left for the next period; there is no retry.
    """
    interval = interval or settings.TICK_INTERVAL_SECONDS
    while True:
        await asyncio.sleep(interval)
        try:
            await asyncio.to_thread(run_scheduled_tick)
        except TickInProgressError as e:
            logger.warning("Scheduled tick skipped: %s", e)
        except Exception:
            logger.exception("Scheduled tick failed")
