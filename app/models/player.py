import datetime

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from app.core.database import Base

class Player(Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    telegram = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    participations = relationship("Participant", back_populates="player", cascade="all, delete-orphan")
    # Derived row, rebuilt by the scoring service; never edited by hand
    statistics = relationship("PlayerStatistics", back_populates="player", uselist=False, cascade="all, delete-orphan")
