import datetime

from sqlalchemy import Column, Integer, String, Date, DateTime, Float
from sqlalchemy.orm import relationship
from app.core.database import Base

class Tournament(Base):
    __tablename__ = "tournaments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    date = Column(Date, nullable=False, index=True)
    location = Column(String, nullable=False)
    description = Column(String, nullable=True)
    buy_in = Column(Float, nullable=True)
    rebuy_amount = Column(Float, nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    participants = relationship("Participant", back_populates="tournament", cascade="all, delete-orphan")
