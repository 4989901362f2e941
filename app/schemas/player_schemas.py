import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

class PlayerBase(BaseModel):
    name: str = Field(..., min_length=1)
    telegram: Optional[str] = None
    phone: Optional[str] = None

class PlayerCreate(PlayerBase):
    # All three contact fields are required when an admin registers a player
    name: str = Field(..., min_length=1)
    telegram: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)

class PlayerUpdate(PlayerBase):
    pass

class PlayerRead(PlayerBase):
    id: int
    created_at: Optional[datetime.datetime] = None

    class Config:
        from_attributes = True

class PlayerPage(BaseModel):
    players: List[PlayerRead]
    page: int
    limit: int
    total: int
    total_pages: int

class PlayerStatisticsRead(BaseModel):
    total_tournaments: int = 0
    total_points: int = 0
    average_rank: float = 0
    best_rank: Optional[int] = None
    bounty: float = 0

    class Config:
        from_attributes = True

class TournamentHistoryEntry(BaseModel):
    id: int
    name: str
    date: datetime.date
    points: Optional[int] = None
    rank: Optional[int] = None
    reentries: int = 0

class PlayerProfile(BaseModel):
    id: int
    name: str
    statistics: PlayerStatisticsRead
    tournament_history: List[TournamentHistoryEntry]
