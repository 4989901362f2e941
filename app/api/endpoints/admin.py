from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.services import audit_service, auth_service, player_service
from app.models import user as user_model
from app.schemas import audit_schemas, player_schemas, statistics_schemas
from app.api.dependencies import Pagination, get_db, get_pagination

router = APIRouter()

@router.post("/players", response_model=player_schemas.PlayerRead, status_code=status.HTTP_201_CREATED)
def add_player_endpoint(
    player_in: player_schemas.PlayerCreate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_admin),
):
    return player_service.create_player(db=db, player_in=player_in, current_user=current_user)

@router.get("/audit-logs", response_model=audit_schemas.AuditLogPage)
def list_audit_logs_endpoint(
    action: Optional[str] = None,
    entity_type: Optional[str] = None,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_admin),
):
    return audit_service.list_audit_logs(
        db=db, page=pagination.page, limit=pagination.limit, action=action, entity_type=entity_type
    )

@router.get("/db-health", response_model=statistics_schemas.DatabaseHealth)
def db_health_endpoint(db: Session = Depends(get_db)):
    error = player_service.check_database(db)
    if error is not None:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"healthy": False, "error": error},
        )
    return {"healthy": True}
