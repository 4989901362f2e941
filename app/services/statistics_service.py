import math
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models import participant as participant_model
from app.models import player as player_model
from app.models import statistics as statistics_model
from app.models import tournament as tournament_model
from app.schemas import statistics_schemas
from app.services import scoring_service

def get_club_statistics(db: Session) -> statistics_schemas.ClubStatistics:
    total_players = db.query(func.count(player_model.Player.id)).scalar() or 0
    total_tournaments = db.query(func.count(tournament_model.Tournament.id)).scalar() or 0
    total_reentries = db.query(func.sum(participant_model.Participant.reentries)).scalar() or 0
    total_points = db.query(func.sum(participant_model.Participant.points)).scalar() or 0
    return statistics_schemas.ClubStatistics(
        total_players=total_players,
        total_tournaments=total_tournaments,
        total_reentries=total_reentries,
        total_points=total_points,
    )

def build_scoreboard(db: Session) -> List[statistics_schemas.ScoreboardEntry]:
    """Every player with their stored statistics, ranked for the scoreboard.

    Players who never played (no statistics row) appear with zero totals.
    """
    rows = db.query(player_model.Player, statistics_model.PlayerStatistics)\
        .outerjoin(statistics_model.PlayerStatistics, statistics_model.PlayerStatistics.player_id == player_model.Player.id)\
        .all()
    entries = []
    for player, stats in rows:
        entries.append(statistics_schemas.ScoreboardEntry(
            id=player.id,
            name=player.name,
            total_points=stats.total_points if stats else 0,
            total_tournaments=stats.total_tournaments if stats else 0,
            bounty=stats.bounty if stats else 0,
            average_rank=stats.average_rank if stats else 0,
            best_rank=stats.best_rank if stats else None,
        ))
    return scoring_service.rank_scoreboard(entries)

def get_scoreboard_page(db: Session, page: int = 1, limit: int = 20, search: Optional[str] = None) -> dict:
    # Positions come from the full club ordering; search only narrows what is shown
    ranked = build_scoreboard(db)
    search = search.strip().casefold() if search else None
    if search:
        ranked = [entry for entry in ranked if search in entry.name.casefold()]
    total = len(ranked)
    start = (page - 1) * limit
    return {
        "players": ranked[start:start + limit],
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": math.ceil(total / limit),
    }
