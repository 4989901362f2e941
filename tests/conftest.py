import os

# Keep the application's own engine in memory; tests bind their own sessions below
os.environ.setdefault("DATABASE_URL", "sqlite://")

import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base
from app.models.player import Player
from app.models.tournament import Tournament
from app.models.user import User, ROLE_ADMIN, ROLE_PLAYER


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def admin_user(db_session):
    user = User(email="admin@pokerclub.org", name="Admin", hashed_password="not-a-real-hash", role=ROLE_ADMIN)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def regular_user(db_session):
    user = User(email="member@pokerclub.org", name="Member", hashed_password="not-a-real-hash", role=ROLE_PLAYER)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def make_player(db_session):
    def _make(name, telegram=None, phone=None):
        player = Player(name=name, telegram=telegram or f"@{name.lower()}", phone=phone or "555-0100")
        db_session.add(player)
        db_session.commit()
        db_session.refresh(player)
        return player
    return _make


@pytest.fixture
def make_tournament(db_session):
    def _make(name, date=datetime.date(2024, 1, 1), location="Club Room"):
        tournament = Tournament(name=name, date=date, location=location)
        db_session.add(tournament)
        db_session.commit()
        db_session.refresh(tournament)
        return tournament
    return _make
