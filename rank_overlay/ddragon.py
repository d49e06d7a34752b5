import logging
import time
from typing import Optional
from urllib.parse import quote

import httpx

from rank_overlay.config import DDRAGON_FALLBACK_VERSION, DDRAGON_REFRESH_SECONDS
from rank_overlay.models import Tier

log = logging.getLogger("ddragon")
if not log.handlers:
  h = logging.StreamHandler()
  h.setFormatter(logging.Formatter("[DDRAGON] %(levelname)s: %(message)s"))
  log.addHandler(h)
  log.setLevel(logging.INFO)

VERSIONS_URL = "https://ddragon.leagueoflegends.com/api/versions.json"
CDN = "https://ddragon.leagueoflegends.com/cdn"
EMBLEMS = (
  "https://raw.communitydragon.org/latest/plugins/"
  "rcp-fe-lol-shared-components/global/default/images/ranked-emblems"
)


def rank_badge(tier: Tier) -> str:
  """Emblem image for a ranked tier; unranked players get no badge."""
  if tier is Tier.UNRANKED:
    return ""
  return f"{EMBLEMS}/{tier.value.lower()}.png"


class IconResolver:
  """
  Champion icon URLs from Data Dragon. The CDN version token is looked up
  at most once per refresh window; a failed lookup keeps the old token.
  """

  def __init__(self, client: httpx.AsyncClient, *, refresh_seconds: float = DDRAGON_REFRESH_SECONDS,
               version: str = DDRAGON_FALLBACK_VERSION):
    self._client = client
    self.refresh_seconds = refresh_seconds
    self.version = version
    self._checked_at: Optional[float] = None

  async def _ensure_version(self) -> None:
    now = time.monotonic()
    if self._checked_at is not None and now - self._checked_at < self.refresh_seconds:
      return
    self._checked_at = now
    try:
      r = await self._client.get(VERSIONS_URL)
      r.raise_for_status()
      versions = r.json()
    except (httpx.HTTPError, ValueError) as e:
      log.warning("Version lookup failed, keeping %s: %s", self.version, e)
      return
    if isinstance(versions, list) and versions and isinstance(versions[0], str):
      if versions[0] != self.version:
        log.info("Data Dragon version %s -> %s", self.version, versions[0])
      self.version = versions[0]

  async def champion_icon(self, champion: str) -> str:
    await self._ensure_version()
    return f"{CDN}/{self.version}/img/champion/{quote(champion, safe='')}.png"
