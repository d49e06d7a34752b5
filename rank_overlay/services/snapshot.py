import json
import logging
import time
from typing import List

from pydantic import ValidationError

from rank_overlay.config import Settings
from rank_overlay.ddragon import IconResolver, rank_badge
from rank_overlay.errors import UpstreamError
from rank_overlay.models import HistoryEntry, MatchFact, SeasonSummary, Snapshot
from rank_overlay.riot_client import RiotClient
from rank_overlay.services.extract import percent_int, to_match_fact, to_rank_record
from rank_overlay.services.session import session_summary

log = logging.getLogger("snapshot")
if not log.handlers:
  h = logging.StreamHandler()
  h.setFormatter(logging.Formatter("[SNAP] %(levelname)s: %(message)s"))
  log.addHandler(h)
  log.setLevel(logging.INFO)


def _now_ms() -> int:
  return int(time.time() * 1000)


class SnapshotBuilder:
  """
  One refresh: account -> rank entries -> recent match ids -> match details,
  then the derived history list, session and season numbers.

  Any UpstreamError aborts the build; nothing partial is ever returned.
  """

  def __init__(self, riot: RiotClient, icons: IconResolver, settings: Settings):
    self.riot = riot
    self.icons = icons
    self.settings = settings

  async def _facts(self, puuid: str) -> List[MatchFact]:
    s = self.settings
    ids = await self.riot.recent_match_ids(puuid, s.match_fetch_count)
    details = await self.riot.matches(ids[:s.match_fetch_count])

    facts: List[MatchFact] = []
    for mid, m in zip(ids, details):
      try:
        f = to_match_fact(m, puuid)
      except ValidationError as e:
        raise UpstreamError.invalid_payload(f"match {mid}", e) from e
      if f is None:
        log.warning("Participant %s not found in match %s, dropping it", puuid, mid)
        continue
      facts.append(f)
    return facts

  async def _history(self, facts: List[MatchFact]) -> tuple:
    newest = sorted(facts, key=lambda f: f.start or 0, reverse=True)[:self.settings.history_count]
    return tuple([
      HistoryEntry(championName=f.champion, championIcon=await self.icons.champion_icon(f.champion), win=f.win)
      for f in newest
    ])

  async def build(self) -> Snapshot:
    s = self.settings
    account = await self.riot.resolve_account(s.game_name, s.tag_line)

    entries = await self.riot.rank_entries(account.puuid)
    try:
      rank = to_rank_record(entries, s.rank_queue)
    except ValidationError as e:
      raise UpstreamError.invalid_payload("rank entry", e, body=json.dumps(entries)[:250]) from e
    games = rank.wins + rank.losses
    season = SeasonSummary(games=games, wins=rank.wins, losses=rank.losses,
                           winrate=percent_int(rank.wins, games))

    facts = await self._facts(account.puuid)
    history = await self._history(facts)
    # session runs over the whole fetched batch, not only the displayed history
    session = session_summary(facts, s.session_gap_ms)

    log.info("Built snapshot for %s: %s, %d matches, session %d-%d",
             s.riot_id, rank.display, len(facts), session.wins, session.losses)
    return Snapshot(
        updatedAt=_now_ms(),
        riotId=s.riot_id,
        region=s.region_label,
        rank=rank,
        badge=rank_badge(rank.tier),
        history=history,
        historyCount=s.history_count,
        session=session,
        season=season,
    )
