import pytest

from rank_overlay.config import Settings

PUUID = "puuid-me"


@pytest.fixture
def settings():
  return Settings(
      api_key="RGAPI-test",
      game_name="Faker",
      tag_line="KR1",
      platform="euw1",
      regional="europe",
      session_gap_minutes=60,
  )


def make_match(match_id, *, start=None, end=None, champion="Ahri", win=True, k=1, d=1, a=1, puuid=PUUID):
  info = {"participants": [
      {"puuid": "someone-else", "championName": "Garen", "win": not win, "kills": 0, "deaths": 0, "assists": 0},
      {"puuid": puuid, "championName": champion, "win": win, "kills": k, "deaths": d, "assists": a},
  ]}
  if start is not None:
    info["gameStartTimestamp"] = start
  if end is not None:
    info["gameEndTimestamp"] = end
  return {"metadata": {"matchId": match_id}, "info": info}
