from rank_overlay.models import Tier
from rank_overlay.services.extract import percent_int, to_match_fact, to_rank_record

from conftest import PUUID, make_match


def test_rank_record_for_target_queue():
  entries = [
    {"queueType": "RANKED_FLEX_SR", "tier": "SILVER", "rank": "I", "leaguePoints": 10, "wins": 3, "losses": 4},
    {"queueType": "RANKED_SOLO_5x5", "tier": "GOLD", "rank": "II", "leaguePoints": 55, "wins": 40, "losses": 38},
  ]
  r = to_rank_record(entries, "RANKED_SOLO_5x5")
  assert r.tier is Tier.GOLD
  assert r.display == "GOLD II"
  assert (r.lp, r.wins, r.losses) == (55, 40, 38)
  assert percent_int(r.wins, r.wins + r.losses) == 51


def test_rank_record_first_match_wins():
  entries = [
    {"queueType": "RANKED_SOLO_5x5", "tier": "GOLD", "rank": "II", "leaguePoints": 1, "wins": 1, "losses": 1},
    {"queueType": "RANKED_SOLO_5x5", "tier": "IRON", "rank": "IV", "leaguePoints": 2, "wins": 2, "losses": 2},
  ]
  assert to_rank_record(entries, "RANKED_SOLO_5x5").tier is Tier.GOLD


def test_rank_record_missing_queue_is_unranked():
  r = to_rank_record([{"queueType": "RANKED_FLEX_SR", "tier": "GOLD", "rank": "I"}], "RANKED_SOLO_5x5")
  assert r.tier is Tier.UNRANKED
  assert (r.rank, r.lp, r.wins, r.losses) == ("", 0, 0, 0)
  assert r.display == "UNRANKED"
  assert to_rank_record([], "RANKED_SOLO_5x5").display == "UNRANKED"


def test_match_fact_for_player():
  f = to_match_fact(make_match("EUW1_1", start=1000, end=2000, champion="Lux", win=False, k=2, d=7, a=11), PUUID)
  assert f.champion == "Lux"
  assert f.win is False
  assert (f.kills, f.deaths, f.assists) == (2, 7, 11)
  assert (f.start, f.end) == (1000, 2000)


def test_match_fact_defaults_missing_fields():
  raw = {"info": {"participants": [{"puuid": PUUID, "championName": "Zed"}]}}
  f = to_match_fact(raw, PUUID)
  assert (f.kills, f.deaths, f.assists) == (0, 0, 0)
  assert f.win is False
  assert f.start is None and f.end is None


def test_match_fact_missing_participant_returns_none():
  assert to_match_fact(make_match("EUW1_1", puuid="other"), PUUID) is None
  assert to_match_fact({}, PUUID) is None


def test_percent_int():
  assert percent_int(0, 0) == 0
  assert percent_int(1, 2) == 50
  assert percent_int(1, 8) == 13  # 12.5 rounds up
  assert percent_int(1, 3) == 33
  assert percent_int(2, 3) == 67
  for g in range(1, 60):
    for w in range(g + 1):
      assert 0 <= percent_int(w, g) <= 100
