# rank_overlay/riot_client.py
import asyncio
import json
import logging
import time
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from rank_overlay.config import Settings
from rank_overlay.errors import UpstreamError
from rank_overlay.models import Account

log = logging.getLogger("riot_client")
if not log.handlers:
  h = logging.StreamHandler()
  h.setFormatter(logging.Formatter("[RIOT] %(levelname)s: %(message)s"))
  log.addHandler(h)
  log.setLevel(logging.INFO)

MATCH_TTL = 3600

# ----------------------------
# Async token bucket (dev keys allow 20 req / 1s, so stay a little under)
# ----------------------------
class _AsyncTokenBucket:
  def __init__(self, rate_per_sec: float, capacity: int):
    self.rate = rate_per_sec
    self.capacity = capacity
    self.tokens = float(capacity)
    self.updated = time.monotonic()
    self.lock = asyncio.Lock()

  async def acquire(self):
    while True:
      async with self.lock:
        now = time.monotonic()
        elapsed = now - self.updated
        self.updated = now
        self.tokens = min(self.capacity, self.tokens + elapsed * self.rate)
        if self.tokens >= 1.0:
          self.tokens -= 1.0
          return
      # sleep outside lock to let others progress
      await asyncio.sleep(1.0 / self.rate)

# ----------------------------
# Finished match records, expired entries evicted on every store
# ----------------------------
class _MatchCache:
  def __init__(self, ttl: float):
    self.ttl = ttl
    self._m: Dict[str, Tuple[float, dict]] = {}

  def get(self, match_id: str) -> Optional[dict]:
    hit = self._m.get(match_id)
    if hit is None:
      return None
    expires, payload = hit
    if time.time() > expires:
      del self._m[match_id]
      return None
    return payload

  def evict_expired(self) -> int:
    now = time.time()
    stale = [mid for mid, (expires, _) in self._m.items() if now > expires]
    for mid in stale:
      del self._m[mid]
    return len(stale)

  def put(self, match_id: str, payload: dict):
    self.evict_expired()
    self._m[match_id] = (time.time() + self.ttl, payload)

  def __len__(self):
    return len(self._m)


class RiotClient:
  """
  Thin async wrapper over the four Riot endpoints the overlay needs.
  Every call sends the same X-Riot-Token header and either returns parsed
  JSON or raises UpstreamError. There are no retries here; the refresh
  period is the retry.
  """

  def __init__(self, settings: Settings, *, transport: Optional[httpx.AsyncBaseTransport] = None,
               rate_per_sec: float = 15.0, burst: int = 20):
    self.settings = settings
    self._transport = transport
    self._client: Optional[httpx.AsyncClient] = None
    self._bucket = _AsyncTokenBucket(rate_per_sec=rate_per_sec, capacity=burst)
    self._matches = _MatchCache(ttl=MATCH_TTL)

  async def __aenter__(self):
    limits = httpx.Limits(max_keepalive_connections=10, max_connections=20)
    # Small connect timeout; generous read timeout because match bodies are a bit larger
    self._client = httpx.AsyncClient(
        timeout=httpx.Timeout(15.0, connect=5.0),
        limits=limits,
        headers={"X-Riot-Token": self.settings.api_key},
        transport=self._transport,
    )
    return self

  async def __aexit__(self, *exc):
    if self._client:
      await self._client.aclose()
      self._client = None

  @property
  def _regional(self) -> str:
    return f"https://{self.settings.regional}.api.riotgames.com"

  @property
  def _platform(self) -> str:
    return f"https://{self.settings.platform}.api.riotgames.com"

  async def _get(self, url: str, *, params: dict | None = None) -> Any:
    if self._client is None:
      raise RuntimeError("RiotClient used outside 'async with'")

    await self._bucket.acquire()
    try:
      r = await self._client.get(url, params=params)
    except httpx.HTTPError as e:
      raise UpstreamError(f"Request failed for {url}: {e!r}", url=url) from e

    text = r.text
    if not r.is_success:
      raise UpstreamError.http(url, r.status_code, text)
    if not text.strip():
      return None
    try:
      return json.loads(text)
    except ValueError:
      raise UpstreamError.invalid_json(url, text, status=r.status_code) from None

  async def _get_list(self, url: str, *, params: dict | None = None) -> list:
    data = await self._get(url, params=params)
    if data is None:
      return []
    if not isinstance(data, list):
      raise UpstreamError(f"Expected a JSON list from {url}", url=url, body=json.dumps(data)[:250])
    return data

  # -------- Account / PUUID via REGIONAL --------
  async def resolve_account(self, game_name: str, tag_line: str) -> Account:
    url = f"{self._regional}/riot/account/v1/accounts/by-riot-id/{quote(game_name, safe='')}/{quote(tag_line, safe='')}"
    data = await self._get(url)
    if not isinstance(data, dict) or not data.get("puuid"):
      raise UpstreamError("Account lookup failed (no puuid).", url=url, body=json.dumps(data)[:250])
    try:
      return Account.model_validate(data)
    except ValidationError as e:
      raise UpstreamError.invalid_payload("account", e, url=url, body=json.dumps(data)[:250]) from e

  # -------- League entries via PLATFORM --------
  async def rank_entries(self, puuid: str) -> List[dict]:
    url = f"{self._platform}/lol/league/v4/entries/by-puuid/{quote(puuid, safe='')}"
    return await self._get_list(url)

  # -------- Match IDs via REGIONAL --------
  async def recent_match_ids(self, puuid: str, count: int) -> List[str]:
    url = f"{self._regional}/lol/match/v5/matches/by-puuid/{quote(puuid, safe='')}/ids"
    ids = await self._get_list(url, params={"start": 0, "count": count})
    return [str(mid) for mid in ids]

  # -------- Match detail via REGIONAL --------
  async def match(self, match_id: str) -> dict:
    hit = self._matches.get(match_id)
    if hit is not None:
      return hit
    url = f"{self._regional}/lol/match/v5/matches/{quote(match_id, safe='')}"
    data = await self._get(url)
    if not isinstance(data, dict):
      raise UpstreamError(f"Expected a match object from {url}", url=url, body=json.dumps(data)[:250])
    self._matches.put(match_id, data)
    return data

  async def matches(self, match_ids: List[str], *, concurrency: int = 8) -> List[dict]:
    """
    Fetch match details concurrently. The first failure propagates and the
    whole batch is discarded; in-flight siblings finish on their own.
    """
    sem = asyncio.Semaphore(concurrency)

    async def _one(mid: str) -> dict:
      async with sem:
        return await self.match(mid)

    return list(await asyncio.gather(*[_one(mid) for mid in match_ids]))
