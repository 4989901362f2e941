from typing import Dict, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.services import auth_service, player_service
from app.models import user as user_model
from app.schemas import player_schemas
from app.api.dependencies import Pagination, get_db, get_pagination

router = APIRouter()

@router.get("/", response_model=player_schemas.PlayerPage)
def list_players_endpoint(
    search: Optional[str] = None,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    return player_service.list_players(db=db, page=pagination.page, limit=pagination.limit, search=search)

@router.get("/{player_id}", response_model=player_schemas.PlayerProfile)
def get_player_profile_endpoint(
    player_id: int,
    db: Session = Depends(get_db),
):
    return player_service.get_player_profile(db=db, player_id=player_id)

@router.put("/{player_id}", response_model=player_schemas.PlayerRead)
def update_player_endpoint(
    player_id: int,
    player_in: player_schemas.PlayerUpdate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_admin),
):
    return player_service.update_player(db=db, player_id=player_id, player_update=player_in, current_user=current_user)

@router.delete("/{player_id}", response_model=Dict[str, bool])
def delete_player_endpoint(
    player_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_admin),
):
    player_service.delete_player(db=db, player_id=player_id, current_user=current_user)
    return {"success": True}
