from pydantic import BaseModel
from typing import List, Optional

class ClubStatistics(BaseModel):
    total_players: int
    total_tournaments: int
    total_reentries: int
    total_points: int

class ScoreboardEntry(BaseModel):
    id: int
    name: str
    total_points: int = 0
    total_tournaments: int = 0
    bounty: float = 0
    average_rank: float = 0
    best_rank: Optional[int] = None
    rank: int = 0

class ScoreboardPage(BaseModel):
    players: List[ScoreboardEntry]
    page: int
    limit: int
    total: int
    total_pages: int

class DatabaseHealth(BaseModel):
    healthy: bool
    error: Optional[str] = None
