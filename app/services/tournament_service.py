from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, joinedload

from app.core.database import transaction
from app.core.logging import setup_logger
from app.models import audit_log as audit_model
from app.models import participant as participant_model
from app.models import player as player_model
from app.models import tournament as tournament_model
from app.models import user as user_model
from app.schemas import participant_schemas, tournament_schemas
from app.services import audit_service, scoring_service

logger = setup_logger(__name__)

def create_tournament(db: Session, tournament: tournament_schemas.TournamentCreate, current_user: user_model.User) -> tournament_model.Tournament:
    with transaction(db, "Failed to create tournament"):
        db_tournament = tournament_model.Tournament(**tournament.model_dump())
        db.add(db_tournament)
        db.flush()
        audit_service.record(
            db, current_user, audit_model.ACTION_CREATE, audit_model.ENTITY_TOURNAMENT, db_tournament.id,
            {"name": db_tournament.name},
        )
    db.refresh(db_tournament)
    logger.info(f"Created tournament {db_tournament.id} ({db_tournament.name})")
    return db_tournament

def get_tournament(db: Session, tournament_id: int) -> Optional[tournament_model.Tournament]:
    return db.query(tournament_model.Tournament).filter(tournament_model.Tournament.id == tournament_id).first()

def get_tournament_or_404(db: Session, tournament_id: int) -> tournament_model.Tournament:
    db_tournament = get_tournament(db, tournament_id)
    if not db_tournament:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tournament not found")
    return db_tournament

def list_tournaments(db: Session) -> List[tournament_model.Tournament]:
    return db.query(tournament_model.Tournament)\
        .order_by(tournament_model.Tournament.date.desc(), tournament_model.Tournament.id.desc())\
        .all()

def get_tournament_detail(db: Session, tournament_id: int) -> tournament_schemas.TournamentDetail:
    db_tournament = get_tournament_or_404(db, tournament_id)
    participants = db.query(participant_model.Participant)\
        .options(joinedload(participant_model.Participant.player))\
        .filter(participant_model.Participant.tournament_id == tournament_id)\
        .order_by(participant_model.Participant.id)\
        .all()
    detail = tournament_schemas.TournamentDetail.model_validate(db_tournament)
    detail.players = [
        tournament_schemas.TournamentPlayer(
            id=pt.player.id,
            name=pt.player.name,
            rank=pt.rank,
            points=pt.points,
            bounty=pt.bounty,
            reentries=pt.reentries or 0,
        )
        for pt in participants
    ]
    return detail

def update_tournament(db: Session, tournament_id: int, tournament_update: tournament_schemas.TournamentUpdate, current_user: user_model.User) -> tournament_model.Tournament:
    db_tournament = get_tournament_or_404(db, tournament_id)
    update_data = tournament_update.model_dump(exclude_unset=True)
    with transaction(db, "Failed to update tournament"):
        for key, value in update_data.items():
            setattr(db_tournament, key, value)
        audit_service.record(
            db, current_user, audit_model.ACTION_UPDATE, audit_model.ENTITY_TOURNAMENT, tournament_id,
            {key: str(value) if value is not None else None for key, value in update_data.items()},
        )
    db.refresh(db_tournament)
    return db_tournament

def delete_tournament(db: Session, tournament_id: int, current_user: user_model.User) -> bool:
    db_tournament = get_tournament_or_404(db, tournament_id)
    with transaction(db, "Failed to delete tournament"):
        player_ids = scoring_service.tournament_player_ids(db, tournament_id)
        for participation in db.query(participant_model.Participant)\
                .filter(participant_model.Participant.tournament_id == tournament_id)\
                .all():
            db.delete(participation)
        db.flush()
        db.delete(db_tournament)
        db.flush()
        scoring_service.refresh_statistics_for(db, player_ids)
        audit_service.record(
            db, current_user, audit_model.ACTION_DELETE, audit_model.ENTITY_TOURNAMENT, tournament_id,
            {"name": db_tournament.name, "players": sorted(player_ids)},
        )
    logger.info(f"Deleted tournament {tournament_id}; refreshed {len(player_ids)} player(s)")
    return True

def list_participants(db: Session, tournament_id: int) -> List[participant_model.Participant]:
    get_tournament_or_404(db, tournament_id)
    return db.query(participant_model.Participant)\
        .options(joinedload(participant_model.Participant.player))\
        .filter(participant_model.Participant.tournament_id == tournament_id)\
        .order_by(participant_model.Participant.id)\
        .all()

def _get_participant_or_404(db: Session, tournament_id: int, player_id: int) -> participant_model.Participant:
    participant = db.query(participant_model.Participant).filter(
        participant_model.Participant.tournament_id == tournament_id,
        participant_model.Participant.player_id == player_id
    ).first()
    if not participant:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Participant not found")
    return participant

def add_participant(db: Session, tournament_id: int, participant_in: participant_schemas.ParticipantCreate, current_user: user_model.User) -> participant_model.Participant:
    get_tournament_or_404(db, tournament_id)
    player = db.query(player_model.Player).filter(player_model.Player.id == participant_in.player_id).first()
    if not player:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Player not found")

    existing_participant = db.query(participant_model.Participant).filter(
        participant_model.Participant.tournament_id == tournament_id,
        participant_model.Participant.player_id == participant_in.player_id
    ).first()
    if existing_participant:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Player already in tournament.")

    with transaction(db, "Failed to add player."):
        db_participant = participant_model.Participant(
            tournament_id=tournament_id,
            player_id=participant_in.player_id,
            reentries=0,
        )
        db.add(db_participant)
        db.flush()
        # An unranked newcomer cannot change derived points; only totals move
        scoring_service.refresh_statistics_for(db, scoring_service.tournament_player_ids(db, tournament_id))
        audit_service.record(
            db, current_user, audit_model.ACTION_UPDATE, audit_model.ENTITY_TOURNAMENT, tournament_id,
            {"added_player_id": player.id, "player_name": player.name},
        )
    db.refresh(db_participant)
    return db_participant

def update_participant(db: Session, tournament_id: int, player_id: int, participant_update: participant_schemas.ParticipantUpdate, current_user: user_model.User) -> participant_model.Participant:
    """
    Apply a partial result update, then re-derive the tournament's points and
    rebuild the statistics of everyone in it.

    A `points` value sent for a ranked entry is overwritten by the derivation;
    it only sticks on unranked entries.
    """
    get_tournament_or_404(db, tournament_id)
    participant = _get_participant_or_404(db, tournament_id, player_id)
    update_data = participant_update.model_dump(exclude_unset=True)
    if update_data.get("reentries", 0) is None:
        update_data["reentries"] = 0

    with transaction(db, "Failed to update player."):
        for key, value in update_data.items():
            setattr(participant, key, value)
        db.flush()
        scoring_service.rescore_tournament(db, tournament_id)
        audit_service.record(
            db, current_user, audit_model.ACTION_UPDATE, audit_model.ENTITY_TOURNAMENT, tournament_id,
            {"player_id": player_id, "changes": update_data},
        )
    db.refresh(participant)
    return participant

def remove_participant(db: Session, tournament_id: int, player_id: int, current_user: user_model.User) -> bool:
    get_tournament_or_404(db, tournament_id)
    participant = _get_participant_or_404(db, tournament_id, player_id)
    with transaction(db, "Failed to remove player."):
        db.delete(participant)
        db.flush()
        scoring_service.rescore_tournament(db, tournament_id, extra_player_ids=[player_id])
        audit_service.record(
            db, current_user, audit_model.ACTION_UPDATE, audit_model.ENTITY_TOURNAMENT, tournament_id,
            {"removed_player_id": player_id},
        )
    return True
