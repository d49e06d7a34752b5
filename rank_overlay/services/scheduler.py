import asyncio
import logging
from enum import Enum
from typing import Optional

from rank_overlay.errors import UpstreamError
from rank_overlay.services.cache import SnapshotCache
from rank_overlay.services.snapshot import SnapshotBuilder

log = logging.getLogger("scheduler")
if not log.handlers:
  h = logging.StreamHandler()
  h.setFormatter(logging.Formatter("[SCHED] %(levelname)s: %(message)s"))
  log.addHandler(h)
  log.setLevel(logging.INFO)


class State(str, Enum):
  IDLE = "idle"
  REFRESHING = "refreshing"


class RefreshScheduler:
  def __init__(self, builder: SnapshotBuilder, cache: SnapshotCache, period_seconds: float):
    self.builder = builder
    self.cache = cache
    self.period_seconds = period_seconds
    self.state = State.IDLE
    self._task: Optional[asyncio.Task] = None

  async def run_once(self) -> bool:
    """Run one refresh cycle. Returns False when a cycle is already in flight."""
    if self.state is State.REFRESHING:
      log.info("Refresh already in flight, skipping")
      return False

    self.state = State.REFRESHING
    try:
      snapshot = await self.builder.build()
    except UpstreamError as e:
      log.error("Refresh failed: %s", e)
      self.cache.publish_failure(str(e))
    except Exception as e:
      log.exception("Unexpected refresh failure")
      self.cache.publish_failure(str(e) or type(e).__name__)
    else:
      self.cache.publish_success(snapshot)
    finally:
      self.state = State.IDLE
    return True

  async def _loop(self):
    while True:
      await asyncio.sleep(self.period_seconds)
      await self.run_once()

  async def start(self):
    """
    Initial refresh first, then the periodic loop in the background. The
    loop sleeps `period_seconds` after each cycle finishes, so the actual
    spacing between cycle starts is the period plus the refresh time.
    """
    await self.run_once()
    if self._task is None:
      self._task = asyncio.create_task(self._loop())

  async def stop(self):
    if self._task is None:
      return
    self._task.cancel()
    try:
      await self._task
    except asyncio.CancelledError:
      pass
    self._task = None
