from typing import List, Dict

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.services import tournament_service, auth_service
from app.models import user as user_model
from app.schemas import tournament_schemas, participant_schemas
from app.api.dependencies import get_db

router = APIRouter()

@router.get("/", response_model=List[tournament_schemas.TournamentRead])
def list_tournaments_endpoint(db: Session = Depends(get_db)):
    return tournament_service.list_tournaments(db=db)

@router.post("/", response_model=tournament_schemas.TournamentRead, status_code=status.HTTP_201_CREATED)
def create_tournament_endpoint(
    tournament_in: tournament_schemas.TournamentCreate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_admin),
):
    return tournament_service.create_tournament(db=db, tournament=tournament_in, current_user=current_user)

@router.get("/{tournament_id}", response_model=tournament_schemas.TournamentDetail)
def get_tournament_endpoint(
    tournament_id: int,
    db: Session = Depends(get_db),
):
    return tournament_service.get_tournament_detail(db=db, tournament_id=tournament_id)

@router.put("/{tournament_id}", response_model=tournament_schemas.TournamentRead)
def update_tournament_endpoint(
    tournament_id: int,
    tournament_in: tournament_schemas.TournamentUpdate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_admin),
):
    return tournament_service.update_tournament(
        db=db, tournament_id=tournament_id, tournament_update=tournament_in, current_user=current_user
    )

@router.delete("/{tournament_id}", response_model=Dict[str, bool])
def delete_tournament_endpoint(
    tournament_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_admin),
):
    tournament_service.delete_tournament(db=db, tournament_id=tournament_id, current_user=current_user)
    return {"success": True}

@router.get("/{tournament_id}/players", response_model=List[participant_schemas.ParticipantRead])
def list_participants_endpoint(
    tournament_id: int,
    db: Session = Depends(get_db),
):
    return tournament_service.list_participants(db=db, tournament_id=tournament_id)

@router.post("/{tournament_id}/players", response_model=participant_schemas.ParticipantRead, status_code=status.HTTP_201_CREATED)
def add_participant_endpoint(
    tournament_id: int,
    participant_in: participant_schemas.ParticipantCreate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_admin),
):
    return tournament_service.add_participant(
        db=db, tournament_id=tournament_id, participant_in=participant_in, current_user=current_user
    )

@router.patch("/{tournament_id}/players/{player_id}", response_model=participant_schemas.ParticipantRead)
def update_participant_endpoint(
    tournament_id: int,
    player_id: int,
    participant_in: participant_schemas.ParticipantUpdate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_admin),
):
    return tournament_service.update_participant(
        db=db,
        tournament_id=tournament_id,
        player_id=player_id,
        participant_update=participant_in,
        current_user=current_user
    )

@router.delete("/{tournament_id}/players/{player_id}", response_model=Dict[str, bool])
def remove_participant_endpoint(
    tournament_id: int,
    player_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_admin),
):
    tournament_service.remove_participant(db=db, tournament_id=tournament_id, player_id=player_id, current_user=current_user)
    return {"success": True}
