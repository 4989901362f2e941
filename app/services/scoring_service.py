"""
Scoring & statistics engine.

Points are derived from placements: with n ranked players in a tournament the
winner gets n points and the last ranked player gets 1. Player statistics are
a projection over all of a player's participations and are rebuilt from
scratch whenever one of them changes, never adjusted incrementally.

The pure functions (`rank_points`, `apply_rank_points`, `aggregate_statistics`,
`rank_scoreboard`) work on any objects exposing the relevant attributes; the
`recalculate_*` / `refresh_*` functions load rows through a Session and flush
the results, leaving the commit to the caller's transaction.

Scoreboard names compare case-insensitively first, then by the raw name, so
"ann" and "Ann" sit together and ties still resolve the same way every time.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from app.core.logging import setup_logger
from app.models import participant as participant_model
from app.models import statistics as statistics_model
from app.schemas import statistics_schemas

logger = setup_logger(__name__)

Participant = participant_model.Participant


@dataclass(frozen=True)
class StatisticsSummary:
    total_tournaments: int
    total_points: int
    total_bounty: float
    average_rank: float
    best_rank: Optional[int]


def rank_points(participations: Iterable) -> List[Tuple[object, int]]:
    """
    Pair every ranked participation with the points its placement earns.

    Entries without a rank are left out. Equal ranks keep their input order
    (sorting is stable) and still receive consecutive point values.
    """
    ranked = sorted((p for p in participations if p.rank is not None), key=lambda p: p.rank)
    n = len(ranked)
    return [(p, n - i) for i, p in enumerate(ranked)]


def apply_rank_points(participations: Iterable) -> list:
    """Write derived points onto ranked entries; returns the entries that changed.

    Unranked entries keep whatever points they already had.
    """
    changed = []
    for participation, points in rank_points(participations):
        if participation.points != points:
            participation.points = points
            changed.append(participation)
    return changed


def aggregate_statistics(participations: Sequence) -> StatisticsSummary:
    participations = list(participations)
    ranks = [p.rank for p in participations if p.rank is not None]
    return StatisticsSummary(
        total_tournaments=len(participations),
        total_points=sum(p.points or 0 for p in participations),
        total_bounty=sum(p.bounty or 0 for p in participations),
        average_rank=sum(ranks) / len(ranks) if ranks else 0,
        best_rank=min(ranks) if ranks else None,
    )


def scoreboard_sort_key(entry: statistics_schemas.ScoreboardEntry):
    # points, tournaments and bounty descending; average rank ascending; then name
    return (
        -(entry.total_points or 0),
        -(entry.total_tournaments or 0),
        -(entry.bounty or 0),
        entry.average_rank or 0,
        entry.name.casefold(),
        entry.name,
    )


def rank_scoreboard(entries: Iterable[statistics_schemas.ScoreboardEntry]) -> List[statistics_schemas.ScoreboardEntry]:
    """Order players for the club scoreboard and number them 1..n.

    Ties on every key still get consecutive positions, never a shared one.
    """
    ordered = sorted(entries, key=scoreboard_sort_key)
    return [entry.model_copy(update={"rank": position}) for position, entry in enumerate(ordered, start=1)]


def recalculate_tournament_points(db: Session, tournament_id: int) -> list:
    participations = db.query(Participant)\
        .filter(Participant.tournament_id == tournament_id)\
        .order_by(Participant.id)\
        .all()
    changed = apply_rank_points(participations)
    if changed:
        db.flush()
    logger.debug(f"Tournament {tournament_id}: re-derived points, {len(changed)} participation(s) changed")
    return changed


def refresh_player_statistics(db: Session, player_id: int) -> statistics_model.PlayerStatistics:
    """Rebuild one player's statistics row from all of their participations (upsert)."""
    participations = db.query(Participant).filter(Participant.player_id == player_id).all()
    summary = aggregate_statistics(participations)

    stats = db.query(statistics_model.PlayerStatistics)\
        .filter(statistics_model.PlayerStatistics.player_id == player_id)\
        .first()
    if stats is None:
        stats = statistics_model.PlayerStatistics(player_id=player_id)
        db.add(stats)

    stats.total_tournaments = summary.total_tournaments
    stats.total_points = summary.total_points
    stats.average_rank = summary.average_rank
    stats.best_rank = summary.best_rank
    stats.bounty = summary.total_bounty
    db.flush()
    return stats


def refresh_statistics_for(db: Session, player_ids: Iterable[int]) -> int:
    player_ids = sorted(set(player_ids))
    for player_id in player_ids:
        refresh_player_statistics(db, player_id)
    logger.info(f"Refreshed statistics for {len(player_ids)} player(s)")
    return len(player_ids)


def tournament_player_ids(db: Session, tournament_id: int) -> List[int]:
    rows = db.query(Participant.player_id).filter(Participant.tournament_id == tournament_id).all()
    return [row[0] for row in rows]


def rescore_tournament(db: Session, tournament_id: int, extra_player_ids: Iterable[int] = ()) -> None:
    """Re-derive a tournament's points, then refresh everyone it touches.

    `extra_player_ids` covers players who just left the tournament.
    """
    recalculate_tournament_points(db, tournament_id)
    refresh_statistics_for(db, list(tournament_player_ids(db, tournament_id)) + list(extra_player_ids))
