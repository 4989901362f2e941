import math
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.database import transaction
from app.core.logging import setup_logger
from app.models import audit_log as audit_model
from app.models import participant as participant_model
from app.models import player as player_model
from app.models import statistics as statistics_model
from app.models import tournament as tournament_model
from app.models import user as user_model
from app.schemas import player_schemas
from app.services import audit_service, scoring_service

logger = setup_logger(__name__)

def check_database(db: Session) -> Optional[str]:
    """Run a trivial query; returns the error message, or None when healthy."""
    try:
        db.query(func.count(player_model.Player.id)).scalar()
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        db.rollback()
        return str(e)
    return None

def is_database_healthy(db: Session) -> bool:
    return check_database(db) is None

def get_player(db: Session, player_id: int) -> Optional[player_model.Player]:
    return db.query(player_model.Player).filter(player_model.Player.id == player_id).first()

def get_player_or_404(db: Session, player_id: int) -> player_model.Player:
    player = get_player(db, player_id)
    if not player:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Player not found")
    return player

def create_player(db: Session, player_in: player_schemas.PlayerCreate, current_user: user_model.User) -> player_model.Player:
    if not is_database_healthy(db):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database is currently unavailable. Please try again later.",
        )
    with transaction(db, "Failed to create player"):
        db_player = player_model.Player(**player_in.model_dump())
        db.add(db_player)
        db.flush()
        audit_service.record(
            db, current_user, audit_model.ACTION_CREATE, audit_model.ENTITY_PLAYER, db_player.id,
            {"name": db_player.name},
        )
    db.refresh(db_player)
    logger.info(f"Created player {db_player.id} ({db_player.name})")
    return db_player

def list_players(db: Session, page: int = 1, limit: int = 20, search: Optional[str] = None) -> dict:
    query = db.query(player_model.Player)
    search = search.strip() if search else None
    if search:
        pattern = f"%{search.lower()}%"
        query = query.filter(or_(
            func.lower(player_model.Player.name).like(pattern),
            func.lower(player_model.Player.telegram).like(pattern),
            func.lower(player_model.Player.phone).like(pattern),
        ))
    total = query.count()
    players = query.order_by(player_model.Player.name.asc(), player_model.Player.id.asc())\
        .offset((page - 1) * limit)\
        .limit(limit)\
        .all()
    return {
        "players": players,
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": math.ceil(total / limit),
    }

def update_player(db: Session, player_id: int, player_update: player_schemas.PlayerUpdate, current_user: user_model.User) -> player_model.Player:
    db_player = get_player_or_404(db, player_id)
    # name is always written; contact fields only when the request carries them
    update_data = player_update.model_dump(exclude_unset=True)
    update_data["name"] = player_update.name
    with transaction(db, "Failed to update player"):
        for key, value in update_data.items():
            setattr(db_player, key, value)
        audit_service.record(
            db, current_user, audit_model.ACTION_UPDATE, audit_model.ENTITY_PLAYER, db_player.id, update_data,
        )
    db.refresh(db_player)
    return db_player

def delete_player(db: Session, player_id: int, current_user: user_model.User) -> bool:
    """
    Delete a player together with their statistics and participations.

    Each tournament the player was in loses a participant, so those
    tournaments are re-scored and their remaining players' statistics rebuilt.
    """
    db_player = get_player_or_404(db, player_id)
    with transaction(db, "Failed to delete player"):
        stats = db.query(statistics_model.PlayerStatistics)\
            .filter(statistics_model.PlayerStatistics.player_id == player_id)\
            .first()
        if stats is not None:
            db.delete(stats)
        participations = db.query(participant_model.Participant)\
            .filter(participant_model.Participant.player_id == player_id)\
            .all()
        tournament_ids = sorted({p.tournament_id for p in participations})
        for participation in participations:
            db.delete(participation)
        db.flush()
        db.delete(db_player)
        db.flush()
        for tournament_id in tournament_ids:
            scoring_service.rescore_tournament(db, tournament_id)
        audit_service.record(
            db, current_user, audit_model.ACTION_DELETE, audit_model.ENTITY_PLAYER, player_id,
            {"name": db_player.name, "tournaments": tournament_ids},
        )
    logger.info(f"Deleted player {player_id}; re-scored {len(tournament_ids)} tournament(s)")
    return True

def get_player_profile(db: Session, player_id: int) -> player_schemas.PlayerProfile:
    player = db.query(player_model.Player)\
        .options(joinedload(player_model.Player.statistics))\
        .filter(player_model.Player.id == player_id)\
        .first()
    if not player:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Player not found")

    participations: List[participant_model.Participant] = db.query(participant_model.Participant)\
        .join(tournament_model.Tournament)\
        .options(joinedload(participant_model.Participant.tournament))\
        .filter(participant_model.Participant.player_id == player_id)\
        .order_by(tournament_model.Tournament.date.desc(), tournament_model.Tournament.id.desc())\
        .all()

    if player.statistics is not None:
        statistics = player_schemas.PlayerStatisticsRead.model_validate(player.statistics)
    else:
        statistics = player_schemas.PlayerStatisticsRead()

    return player_schemas.PlayerProfile(
        id=player.id,
        name=player.name,
        statistics=statistics,
        tournament_history=[
            player_schemas.TournamentHistoryEntry(
                id=pt.tournament.id,
                name=pt.tournament.name,
                date=pt.tournament.date,
                points=pt.points,
                rank=pt.rank,
                reentries=pt.reentries or 0,
            )
            for pt in participations
        ],
    )
