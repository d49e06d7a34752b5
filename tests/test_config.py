import pytest

from rank_overlay.config import load_settings
from rank_overlay.errors import ConfigurationError

ENV = {
  "RIOT_API_KEY": "RGAPI-x",
  "RIOT_GAME_NAME": "Faker",
  "RIOT_TAG_LINE": "KR1",
  "RIOT_PLATFORM_ROUTING": "EUW1",
  "RIOT_REGIONAL_ROUTING": "europe",
}


def test_defaults():
  s = load_settings(dict(ENV))
  assert s.platform == "euw1"
  assert s.rank_queue == "RANKED_SOLO_5x5"
  assert s.poll_seconds == 180
  assert s.session_gap_ms == 60 * 60 * 1000
  assert s.riot_id == "Faker#KR1"
  assert s.region_label == "EUW"
  assert s.port == 8787


def test_overrides():
  s = load_settings({**ENV, "POLL_SECONDS": "30", "SESSION_GAP_MINUTES": "15", "RIOT_RANK_QUEUE": "RANKED_FLEX_SR",
                     "RIOT_PLATFORM_ROUTING": "br1"})
  assert s.poll_seconds == 30
  assert s.session_gap_ms == 15 * 60 * 1000
  assert s.rank_queue == "RANKED_FLEX_SR"
  assert s.region_label == "BR1"


@pytest.mark.parametrize("name", ["RIOT_API_KEY", "RIOT_GAME_NAME", "RIOT_TAG_LINE",
                                  "RIOT_PLATFORM_ROUTING", "RIOT_REGIONAL_ROUTING"])
def test_missing_required(name):
  env = dict(ENV)
  del env[name]
  with pytest.raises(ConfigurationError, match=name):
    load_settings(env)


def test_bad_values():
  with pytest.raises(ConfigurationError):
    load_settings({**ENV, "RIOT_REGIONAL_ROUTING": "mars"})
  with pytest.raises(ConfigurationError):
    load_settings({**ENV, "RIOT_PLATFORM_ROUTING": "xx9"})
  with pytest.raises(ConfigurationError, match="POLL_SECONDS"):
    load_settings({**ENV, "POLL_SECONDS": "soon"})
  with pytest.raises(ConfigurationError, match="SESSION_GAP_MINUTES"):
    load_settings({**ENV, "SESSION_GAP_MINUTES": "0"})
