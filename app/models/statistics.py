from sqlalchemy import Column, Integer, ForeignKey, Float
from sqlalchemy.orm import relationship
from app.core.database import Base

class PlayerStatistics(Base):
    __tablename__ = "player_statistics"

    id = Column(Integer, primary_key=True, index=True)
    player_id = Column(Integer, ForeignKey("players.id"), unique=True, nullable=False)
    total_tournaments = Column(Integer, default=0, nullable=False)
    total_points = Column(Integer, default=0, nullable=False)
    average_rank = Column(Float, default=0, nullable=False)
    best_rank = Column(Integer, nullable=True)
    bounty = Column(Float, default=0, nullable=False)

    player = relationship("Player", back_populates="statistics")
