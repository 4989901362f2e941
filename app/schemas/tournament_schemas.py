from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
import datetime

class TournamentBase(BaseModel):
    name: str = Field(..., min_length=1)
    date: datetime.date
    location: str = Field(..., min_length=1)
    description: Optional[str] = None
    buy_in: Optional[float] = Field(None, ge=0)
    rebuy_amount: Optional[float] = Field(None, ge=0)

class TournamentCreate(TournamentBase):
    pass

class TournamentRead(TournamentBase):
    id: int

    class Config:
        from_attributes = True

class TournamentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    date: Optional[datetime.date] = None
    location: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    buy_in: Optional[float] = Field(None, ge=0)
    rebuy_amount: Optional[float] = Field(None, ge=0)

    @field_validator("name", "date", "location")
    @classmethod
    def not_null(cls, v):
        # may be omitted, but not cleared
        if v is None:
            raise ValueError("must not be null")
        return v

class TournamentPlayer(BaseModel):
    """A row of the tournament results table."""
    id: int
    name: str
    rank: Optional[int] = None
    points: Optional[int] = None
    bounty: Optional[float] = None
    reentries: int = 0

class TournamentDetail(TournamentRead):
    players: List[TournamentPlayer] = []
