from typing import Iterable, Optional

from rank_overlay.models import MatchFact, RankRecord


def to_rank_record(entries: Iterable[dict], target_queue: str) -> RankRecord:
  """First entry for `target_queue` wins; no entry means UNRANKED with zeroed counters."""
  e = next((x for x in entries or [] if x.get("queueType") == target_queue), None)
  if e is None:
    return RankRecord(queue=target_queue)
  return RankRecord(
      queue=target_queue,
      tier=e.get("tier") or "UNRANKED",
      rank=e.get("rank") or "",
      lp=e.get("leaguePoints") or 0,
      wins=e.get("wins") or 0,
      losses=e.get("losses") or 0,
  )


def _ts(v) -> Optional[int]:
  if isinstance(v, bool) or not isinstance(v, (int, float)):
    return None
  return int(v)


def to_match_fact(match: dict, puuid: str) -> Optional[MatchFact]:
  info = (match or {}).get("info") or {}
  you = next((p for p in info.get("participants") or [] if p.get("puuid") == puuid), None)
  if you is None:
    return None
  return MatchFact(
      champion=you.get("championName") or "",
      win=bool(you.get("win")),
      kills=you.get("kills") or 0,
      deaths=you.get("deaths") or 0,
      assists=you.get("assists") or 0,
      start=_ts(info.get("gameStartTimestamp")),
      end=_ts(info.get("gameEndTimestamp")),
  )


def percent_int(wins: int, games: int) -> int:
  """Whole-number percentage, rounding halves up. Zero games is 0%."""
  if not games:
    return 0
  # integer arithmetic: floor((200*w + g) / (2*g)) == round-half-up(100*w/g)
  return (200 * wins + games) // (2 * games)
