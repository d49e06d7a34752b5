import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from rank_overlay.errors import ConfigurationError

REGIONAL = {
  "americas": "americas.api.riotgames.com",
  "europe":   "europe.api.riotgames.com",
  "asia":     "asia.api.riotgames.com",
  "sea":      "sea.api.riotgames.com",
}

PLATFORMS = {
  # Americas cluster
  "na1", "br1", "la1", "la2", "oc1",
  # Europe
  "euw1", "eun1", "tr1", "ru", "me1",
  # Asia
  "kr", "jp1",
  # SEA
  "ph2", "sg2", "th2", "tw2", "vn2",
}

REGION_LABELS = {"euw1": "EUW", "eun1": "EUNE", "na1": "NA", "kr": "KR"}

HISTORY_COUNT = 10        # matches shown on the overlay
MATCH_FETCH_COUNT = 16    # over-fetch so the session window has enough timestamps
DDRAGON_REFRESH_SECONDS = 12 * 60 * 60
DDRAGON_FALLBACK_VERSION = "14.1.1"


class Settings(BaseModel):
  model_config = ConfigDict(frozen=True)

  api_key: str
  game_name: str
  tag_line: str
  platform: str
  regional: str
  rank_queue: str = "RANKED_SOLO_5x5"
  poll_seconds: float = 180
  session_gap_minutes: float = 60
  port: int = 8787
  history_count: int = HISTORY_COUNT
  match_fetch_count: int = MATCH_FETCH_COUNT

  @property
  def riot_id(self) -> str:
    return f"{self.game_name}#{self.tag_line}"

  @property
  def session_gap_ms(self) -> int:
    return int(self.session_gap_minutes * 60 * 1000)

  @property
  def region_label(self) -> str:
    return REGION_LABELS.get(self.platform, self.platform.upper())


def _required(env: Mapping[str, str], name: str) -> str:
  v = (env.get(name) or "").strip()
  if not v:
    raise ConfigurationError(f"Missing required env var: {name}")
  return v


def _positive(env: Mapping[str, str], name: str, default: float) -> float:
  raw = (env.get(name) or "").strip()
  if not raw:
    return default
  try:
    v = float(raw)
  except ValueError:
    raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
  if v <= 0:
    raise ConfigurationError(f"{name} must be positive, got {raw!r}")
  return v


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
  """
  Read settings from the process environment (after loading .env).
  Passing `env` skips both and reads from that mapping instead.
  """
  if env is None:
    load_dotenv()
    env = os.environ

  regional = _required(env, "RIOT_REGIONAL_ROUTING").lower()
  if regional not in REGIONAL:
    raise ConfigurationError("RIOT_REGIONAL_ROUTING must be one of: americas, europe, asia, sea")
  platform = _required(env, "RIOT_PLATFORM_ROUTING").lower()
  if platform not in PLATFORMS:
    raise ConfigurationError(f"RIOT_PLATFORM_ROUTING {platform!r} is not a known platform")

  return Settings(
      api_key=_required(env, "RIOT_API_KEY"),
      game_name=_required(env, "RIOT_GAME_NAME"),
      tag_line=_required(env, "RIOT_TAG_LINE"),
      platform=platform,
      regional=regional,
      rank_queue=(env.get("RIOT_RANK_QUEUE") or "").strip() or "RANKED_SOLO_5x5",
      poll_seconds=_positive(env, "POLL_SECONDS", 180),
      session_gap_minutes=_positive(env, "SESSION_GAP_MINUTES", 60),
      port=int(_positive(env, "PORT", 8787)),
  )
