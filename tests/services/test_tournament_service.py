import datetime

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import OperationalError

from app.models.audit_log import AuditLog
from app.models.participant import Participant
from app.models.statistics import PlayerStatistics
from app.models.tournament import Tournament
from app.schemas.participant_schemas import ParticipantCreate, ParticipantUpdate
from app.schemas.tournament_schemas import TournamentCreate, TournamentUpdate
from app.services import scoring_service, tournament_service


def points_by_player(db_session, tournament_id):
    rows = db_session.query(Participant).filter(Participant.tournament_id == tournament_id).all()
    return {row.player_id: row.points for row in rows}


def stats_for(db_session, player_id):
    return db_session.query(PlayerStatistics).filter(PlayerStatistics.player_id == player_id).first()


@pytest.fixture
def seated_tournament(db_session, admin_user, make_player, make_tournament):
    """A tournament with four seated, unranked players."""
    tournament = make_tournament("Friday Night Hold'em")
    players = [make_player(name) for name in ("Ann", "Ben", "Cid", "Dee")]
    for player in players:
        tournament_service.add_participant(db_session, tournament.id, ParticipantCreate(player_id=player.id), admin_user)
    return tournament, players


class TestTournamentCrud:

    def test_create_tournament_writes_audit_entry(self, db_session, admin_user):
        created = tournament_service.create_tournament(
            db_session,
            TournamentCreate(name="Sunday Deepstack", date=datetime.date(2024, 3, 3), location="Back Room", buy_in=50, rebuy_amount=25),
            admin_user,
        )

        assert created.id is not None
        assert created.buy_in == 50
        log = db_session.query(AuditLog).one()
        assert (log.action, log.entity_type, log.entity_id, log.user_id) == ("CREATE", "Tournament", created.id, admin_user.id)

    def test_list_tournaments_newest_first(self, db_session, make_tournament):
        make_tournament("Old", date=datetime.date(2023, 5, 1))
        make_tournament("New", date=datetime.date(2024, 5, 1))

        names = [t.name for t in tournament_service.list_tournaments(db_session)]

        assert names == ["New", "Old"]

    def test_update_tournament_partial(self, db_session, admin_user, make_tournament):
        tournament = make_tournament("Typo Cup", location="Main Hall")

        updated = tournament_service.update_tournament(db_session, tournament.id, TournamentUpdate(name="Turbo Cup"), admin_user)

        assert updated.name == "Turbo Cup"
        assert updated.location == "Main Hall"

    def test_update_tournament_not_found(self, db_session, admin_user):
        with pytest.raises(HTTPException) as exc_info:
            tournament_service.update_tournament(db_session, 999, TournamentUpdate(name="Nope"), admin_user)
        assert exc_info.value.status_code == 404

    def test_detail_lists_players_with_results(self, db_session, admin_user, seated_tournament):
        tournament, players = seated_tournament
        tournament_service.update_participant(db_session, tournament.id, players[1].id, ParticipantUpdate(rank=1, bounty=20), admin_user)

        detail = tournament_service.get_tournament_detail(db_session, tournament.id)

        assert len(detail.players) == 4
        ben = next(p for p in detail.players if p.id == players[1].id)
        assert (ben.name, ben.rank, ben.points, ben.bounty, ben.reentries) == ("Ben", 1, 1, 20, 0)


class TestParticipants:

    def test_add_participant_twice_rejected(self, db_session, admin_user, seated_tournament):
        tournament, players = seated_tournament

        with pytest.raises(HTTPException) as exc_info:
            tournament_service.add_participant(db_session, tournament.id, ParticipantCreate(player_id=players[0].id), admin_user)
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Player already in tournament."

    def test_add_unknown_player_not_found(self, db_session, admin_user, make_tournament):
        tournament = make_tournament("Empty Table")

        with pytest.raises(HTTPException) as exc_info:
            tournament_service.add_participant(db_session, tournament.id, ParticipantCreate(player_id=404), admin_user)
        assert exc_info.value.status_code == 404

    def test_adding_creates_statistics_without_points(self, db_session, seated_tournament):
        tournament, players = seated_tournament

        stats = stats_for(db_session, players[0].id)
        assert stats.total_tournaments == 1
        assert stats.total_points == 0
        assert stats.average_rank == 0
        assert stats.best_rank is None
        assert all(points is None for points in points_by_player(db_session, tournament.id).values())

    def test_ranking_derives_points_for_ranked_subset(self, db_session, admin_user, seated_tournament):
        tournament, (ann, ben, cid, dee) = seated_tournament

        for player, rank in ((ann, 2), (cid, 4), (dee, 1)):
            tournament_service.update_participant(db_session, tournament.id, player.id, ParticipantUpdate(rank=rank), admin_user)

        assert points_by_player(db_session, tournament.id) == {dee.id: 3, ann.id: 2, cid.id: 1, ben.id: None}
        assert stats_for(db_session, dee.id).total_points == 3
        assert stats_for(db_session, dee.id).best_rank == 1
        assert stats_for(db_session, ben.id).total_points == 0

    def test_points_sent_for_ranked_entry_are_overwritten(self, db_session, admin_user, seated_tournament):
        tournament, (ann, ben, _, _) = seated_tournament
        tournament_service.update_participant(db_session, tournament.id, ann.id, ParticipantUpdate(rank=1), admin_user)

        updated = tournament_service.update_participant(db_session, tournament.id, ann.id, ParticipantUpdate(points=50), admin_user)
        unranked = tournament_service.update_participant(db_session, tournament.id, ben.id, ParticipantUpdate(points=50), admin_user)

        assert updated.points == 1
        assert unranked.points == 50

    def test_clearing_rank_keeps_last_points(self, db_session, admin_user, seated_tournament):
        tournament, (ann, ben, _, _) = seated_tournament
        tournament_service.update_participant(db_session, tournament.id, ann.id, ParticipantUpdate(rank=1), admin_user)
        tournament_service.update_participant(db_session, tournament.id, ben.id, ParticipantUpdate(rank=2), admin_user)
        assert points_by_player(db_session, tournament.id)[ben.id] == 1

        tournament_service.update_participant(db_session, tournament.id, ben.id, ParticipantUpdate(rank=None), admin_user)

        points = points_by_player(db_session, tournament.id)
        assert points[ann.id] == 1
        assert points[ben.id] == 1
        ben_stats = stats_for(db_session, ben.id)
        assert ben_stats.total_points == 1
        assert ben_stats.average_rank == 0
        assert ben_stats.best_rank is None

    def test_removing_participant_rescores_and_refreshes_everyone(self, db_session, admin_user, seated_tournament):
        tournament, (ann, ben, cid, dee) = seated_tournament
        for player, rank in ((ann, 1), (ben, 2), (cid, 3)):
            tournament_service.update_participant(db_session, tournament.id, player.id, ParticipantUpdate(rank=rank), admin_user)

        tournament_service.remove_participant(db_session, tournament.id, ann.id, admin_user)

        assert points_by_player(db_session, tournament.id) == {ben.id: 2, cid.id: 1, dee.id: None}
        removed = stats_for(db_session, ann.id)
        assert removed.total_tournaments == 0
        assert removed.total_points == 0
        assert stats_for(db_session, ben.id).total_points == 2

    def test_remove_unknown_participant(self, db_session, admin_user, make_tournament):
        tournament = make_tournament("Quiet Night")

        with pytest.raises(HTTPException) as exc_info:
            tournament_service.remove_participant(db_session, tournament.id, 12, admin_user)
        assert exc_info.value.detail == "Participant not found"

    def test_null_reentries_stored_as_zero(self, db_session, admin_user, seated_tournament):
        tournament, (ann, _, _, _) = seated_tournament

        updated = tournament_service.update_participant(db_session, tournament.id, ann.id, ParticipantUpdate(reentries=None), admin_user)

        assert updated.reentries == 0

    def test_participant_changes_are_audited_on_tournament(self, db_session, admin_user, seated_tournament):
        tournament, (ann, _, _, _) = seated_tournament
        tournament_service.update_participant(db_session, tournament.id, ann.id, ParticipantUpdate(rank=1, bounty=5), admin_user)

        latest = db_session.query(AuditLog).order_by(AuditLog.id.desc()).first()

        assert (latest.action, latest.entity_type, latest.entity_id) == ("UPDATE", "Tournament", tournament.id)
        assert latest.details == {"player_id": ann.id, "changes": {"rank": 1, "bounty": 5}}


    def test_failed_statistics_write_rolls_back_whole_update(self, db_session, admin_user, seated_tournament, monkeypatch):
        tournament, (ann, ben, _, _) = seated_tournament
        tournament_service.update_participant(db_session, tournament.id, ann.id, ParticipantUpdate(rank=1), admin_user)
        tournament_service.update_participant(db_session, tournament.id, ben.id, ParticipantUpdate(rank=2), admin_user)
        audit_count = db_session.query(AuditLog).count()

        def fail(db, player_id):
            raise OperationalError("UPDATE player_statistics", {}, Exception("disk I/O error"))

        monkeypatch.setattr(scoring_service, "refresh_player_statistics", fail)

        with pytest.raises(HTTPException) as exc_info:
            tournament_service.update_participant(db_session, tournament.id, ann.id, ParticipantUpdate(rank=3), admin_user)

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Failed to update player."
        rows = {
            row.player_id: (row.rank, row.points)
            for row in db_session.query(Participant).filter(Participant.tournament_id == tournament.id)
        }
        assert rows[ann.id] == (1, 2)
        assert rows[ben.id] == (2, 1)
        assert stats_for(db_session, ann.id).total_points == 2
        assert db_session.query(AuditLog).count() == audit_count


class TestDeleteTournament:

    def test_statistics_rebuilt_from_remaining_tournaments(self, db_session, admin_user, make_player, make_tournament):
        ann = make_player("Ann")
        first = make_tournament("First")
        second = make_tournament("Second")
        for tournament in (first, second):
            tournament_service.add_participant(db_session, tournament.id, ParticipantCreate(player_id=ann.id), admin_user)
            tournament_service.update_participant(db_session, tournament.id, ann.id, ParticipantUpdate(rank=1, bounty=3), admin_user)
        assert stats_for(db_session, ann.id).total_tournaments == 2

        tournament_service.delete_tournament(db_session, first.id, admin_user)

        stats = stats_for(db_session, ann.id)
        assert stats.total_tournaments == 1
        assert stats.total_points == 1
        assert stats.bounty == 3
        assert db_session.query(Tournament).filter(Tournament.id == first.id).first() is None
        assert db_session.query(Participant).filter(Participant.tournament_id == first.id).count() == 0

    def test_delete_missing_tournament(self, db_session, admin_user):
        with pytest.raises(HTTPException) as exc_info:
            tournament_service.delete_tournament(db_session, 77, admin_user)
        assert exc_info.value.status_code == 404
