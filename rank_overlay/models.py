from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Tier(str, Enum):
  UNRANKED = "UNRANKED"
  IRON = "IRON"
  BRONZE = "BRONZE"
  SILVER = "SILVER"
  GOLD = "GOLD"
  PLATINUM = "PLATINUM"
  EMERALD = "EMERALD"
  DIAMOND = "DIAMOND"
  MASTER = "MASTER"
  GRANDMASTER = "GRANDMASTER"
  CHALLENGER = "CHALLENGER"


class Account(BaseModel):
  model_config = ConfigDict(frozen=True, extra="ignore")

  puuid: str
  gameName: str = ""
  tagLine: str = ""


class RankRecord(BaseModel):
  model_config = ConfigDict(frozen=True)

  queue: str
  tier: Tier = Tier.UNRANKED
  rank: str = ""
  lp: int = Field(0, ge=0)
  wins: int = Field(0, ge=0)
  losses: int = Field(0, ge=0)

  @property
  def display(self) -> str:
    if self.tier is Tier.UNRANKED:
      return "UNRANKED"
    return f"{self.tier.value} {self.rank}"


class MatchFact(BaseModel):
  model_config = ConfigDict(frozen=True)

  champion: str = ""
  win: bool = False
  kills: int = Field(0, ge=0)
  deaths: int = Field(0, ge=0)
  assists: int = Field(0, ge=0)
  start: Optional[int] = None   # epoch millis
  end: Optional[int] = None


class SessionSummary(BaseModel):
  model_config = ConfigDict(frozen=True)

  wins: int = 0
  losses: int = 0
  games: int = 0
  kills: int = 0
  deaths: int = 0
  assists: int = 0
  kda: str = "0.0"


class SeasonSummary(BaseModel):
  model_config = ConfigDict(frozen=True)

  games: int = 0
  wins: int = 0
  losses: int = 0
  winrate: int = 0


class HistoryEntry(BaseModel):
  model_config = ConfigDict(frozen=True)

  championName: str
  championIcon: str
  win: bool


class Snapshot(BaseModel):
  """One complete refresh result. Never mutated once built."""
  model_config = ConfigDict(frozen=True)

  updatedAt: int
  riotId: str
  region: str
  rank: RankRecord
  badge: str = ""
  history: tuple[HistoryEntry, ...] = ()
  historyCount: int = 10
  session: SessionSummary = Field(default_factory=SessionSummary)
  season: SeasonSummary = Field(default_factory=SeasonSummary)

  def to_payload(self) -> dict:
    return {
      "updatedAt": self.updatedAt,
      "player": {"riotId": self.riotId, "region": self.region},
      "rank": {
        "queue": self.rank.queue,
        "tier": self.rank.tier.value,
        "rank": self.rank.rank,
        "lp": self.rank.lp,
        "wins": self.rank.wins,
        "losses": self.rank.losses,
        "display": self.rank.display,
        "badge": self.badge,
      },
      "matchHistory": {
        "lastN": [h.model_dump() for h in self.history],
        "count": self.historyCount,
      },
      "session": self.session.model_dump(),
      "season": {
        "games": self.season.games,
        "winrate": self.season.winrate,
        "wins": self.season.wins,
        "losses": self.season.losses,
      },
    }

