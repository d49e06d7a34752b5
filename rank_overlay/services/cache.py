import asyncio
import time
from typing import Optional

from pydantic import BaseModel, ConfigDict

from rank_overlay.models import Snapshot


class CacheState(BaseModel):
  model_config = ConfigDict(frozen=True)

  snapshot: Optional[Snapshot] = None
  error: Optional[str] = None
  updatedAt: int = 0

  @property
  def ok(self) -> bool:
    return self.snapshot is not None and self.error is None


class SnapshotCache:
  """
  Single-writer holder for the latest CacheState. Each publish builds a
  new state and swaps one reference, so readers see the old state or the
  new one and never a mix.
  """

  def __init__(self):
    self._state = CacheState()
    self._ready = asyncio.Event()

  @property
  def state(self) -> CacheState:
    return self._state

  @property
  def ready(self) -> bool:
    return self._ready.is_set()

  async def wait_ready(self, timeout: Optional[float] = None) -> bool:
    try:
      await asyncio.wait_for(self._ready.wait(), timeout)
    except asyncio.TimeoutError:
      return False
    return True

  def publish_success(self, snapshot: Snapshot) -> CacheState:
    self._state = CacheState(snapshot=snapshot, error=None, updatedAt=int(time.time() * 1000))
    self._ready.set()
    return self._state

  def publish_failure(self, error: str) -> CacheState:
    self._state = CacheState(snapshot=self._state.snapshot, error=error, updatedAt=int(time.time() * 1000))
    self._ready.set()
    return self._state
