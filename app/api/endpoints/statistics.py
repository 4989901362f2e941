from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.services import statistics_service
from app.schemas import statistics_schemas
from app.api.dependencies import Pagination, get_db, get_pagination

router = APIRouter()

@router.get("/statistics", response_model=statistics_schemas.ClubStatistics)
def get_club_statistics_endpoint(db: Session = Depends(get_db)):
    return statistics_service.get_club_statistics(db=db)

@router.get("/scoreboard", response_model=statistics_schemas.ScoreboardPage)
def get_scoreboard_endpoint(
    search: Optional[str] = None,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    return statistics_service.get_scoreboard_page(db=db, page=pagination.page, limit=pagination.limit, search=search)
