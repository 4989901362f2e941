from sqlalchemy import Column, Integer, ForeignKey, Float, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base

class Participant(Base):
    """A player's result in one tournament."""
    __tablename__ = "player_tournaments"
    __table_args__ = (UniqueConstraint("player_id", "tournament_id", name="uq_player_tournament"),)

    id = Column(Integer, primary_key=True, index=True)
    player_id = Column(Integer, ForeignKey("players.id"), nullable=False, index=True)
    tournament_id = Column(Integer, ForeignKey("tournaments.id"), nullable=False, index=True)
    rank = Column(Integer, nullable=True) # null until a placement is recorded
    points = Column(Integer, nullable=True) # derived from rank by the scoring service
    bounty = Column(Float, nullable=True)
    reentries = Column(Integer, default=0, nullable=False)

    player = relationship("Player", back_populates="participations")
    tournament = relationship("Tournament", back_populates="participants")
