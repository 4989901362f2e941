from pydantic import BaseModel, Field
from typing import Optional
from .player_schemas import PlayerRead

class ParticipantCreate(BaseModel):
    player_id: int

class ParticipantRead(BaseModel):
    id: int
    player_id: int
    tournament_id: int
    rank: Optional[int] = None
    points: Optional[int] = None
    bounty: Optional[float] = None
    reentries: int = 0
    player: PlayerRead

    class Config:
        from_attributes = True

class ParticipantUpdate(BaseModel):
    """Partial result update; only fields present in the request are applied.

    Sending `"rank": null` clears a placement.
    """
    rank: Optional[int] = Field(None, gt=0)
    points: Optional[int] = None
    bounty: Optional[float] = Field(None, ge=0)
    reentries: Optional[int] = Field(None, ge=0)
