from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List

from rank_overlay.models import MatchFact, SessionSummary


def _timed_newest_first(facts: Iterable[MatchFact]) -> List[MatchFact]:
  items = [f for f in facts if f is not None and f.start is not None and f.end is not None]
  return sorted(items, key=lambda f: f.start, reverse=True)


def current_session(facts: Iterable[MatchFact], gap_ms: int) -> List[MatchFact]:
  """
  Trailing run of matches played in one sitting, newest first.

  Matches without both timestamps are ignored. Walking from the newest
  match backwards, the session ends at the first pair where the newer
  game started more than `gap_ms` after the older one ended.
  """
  items = _timed_newest_first(facts)
  cutoff = len(items)
  for i in range(len(items) - 1):
    newer, older = items[i], items[i + 1]
    if newer.start - older.end > gap_ms:
      cutoff = i + 1
      break
  return items[:cutoff]


def format_kda(kills: int, deaths: int, assists: int) -> str:
  ratio = Decimal(kills + assists) / Decimal(max(1, deaths))
  return str(ratio.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def summarize(session: Iterable[MatchFact]) -> SessionSummary:
  wins = losses = k = d = a = 0
  for m in session:
    if m.win:
      wins += 1
    else:
      losses += 1
    k += m.kills
    d += m.deaths
    a += m.assists
  return SessionSummary(
      wins=wins, losses=losses, games=wins + losses,
      kills=k, deaths=d, assists=a,
      kda=format_kda(k, d, a),
  )


def session_summary(facts: Iterable[MatchFact], gap_ms: int) -> SessionSummary:
  return summarize(current_session(facts, gap_ms))
