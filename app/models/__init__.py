from app.core.database import Base, engine

# Import all models here to ensure they are registered with Base
from .user import User
from .player import Player
from .tournament import Tournament
from .participant import Participant
from .statistics import PlayerStatistics
from .audit_log import AuditLog

# Create all tables in the database.
# A migration tool would own this in a larger deployment.
Base.metadata.create_all(bind=engine)
