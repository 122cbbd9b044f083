"""Tests for team listing, creation, joining and leaving (`/api/teams`)."""

from datetime import timedelta

from services.api.app.models import Team, TeamMember, utcnow


def test_tournament_without_teams_lists_empty(client, make_user, make_tournament) -> None:
    tournament = make_tournament(make_user())

    resp = client.get(f"/api/teams/{tournament.id}")

    assert resp.status_code == 200
    assert resp.json() == {"teams": []}


def test_unknown_tournament_lists_empty(client) -> None:
    resp = client.get("/api/teams/nope")

    assert resp.status_code == 200
    assert resp.json() == {"teams": []}


def test_teams_listed_oldest_first_with_member_summaries(
    client, make_user, make_tournament, make_team
) -> None:
    tournament = make_tournament(make_user(), is_team_based=True)
    now = utcnow()
    alice = make_user("alice", avatar_url="/a.png")
    make_team(tournament, "Late", make_user(), created_at=now)
    make_team(tournament, "Early", alice, created_at=now - timedelta(hours=1))

    resp = client.get(f"/api/teams/{tournament.id}")

    teams = resp.json()["teams"]
    assert [t["name"] for t in teams] == ["Early", "Late"]
    member_user = teams[0]["members"][0]["user"]
    assert member_user == {"id": alice.id, "pseudo": "alice", "avatar_url": "/a.png"}


def test_create_team_requires_registration(
    client, auth, make_user, make_tournament, register
) -> None:
    tournament = make_tournament(make_user(), is_team_based=True)
    player = make_user()

    resp = client.post(
        "/api/teams", json={"tournament_id": tournament.id, "name": "Solo"}, headers=auth(player)
    )
    assert resp.status_code == 403

    register(tournament, player)
    resp = client.post(
        "/api/teams", json={"tournament_id": tournament.id, "name": "Solo"}, headers=auth(player)
    )
    assert resp.status_code == 201
    team = resp.json()["team"]
    assert team["name"] == "Solo"
    assert team["tournament_id"] == tournament.id


def test_organizer_cannot_create_team(client, auth, make_user, make_tournament) -> None:
    organizer = make_user()
    tournament = make_tournament(organizer, is_team_based=True)

    resp = client.post(
        "/api/teams", json={"tournament_id": tournament.id, "name": "Staff"}, headers=auth(organizer)
    )

    assert resp.status_code == 403


def test_create_team_unknown_tournament(client, auth, make_user) -> None:
    resp = client.post(
        "/api/teams", json={"tournament_id": "missing", "name": "X"}, headers=auth(make_user())
    )
    assert resp.status_code == 404


def test_join_team_happy_path(
    client, db, auth, make_user, make_tournament, make_team, register
) -> None:
    tournament = make_tournament(make_user(), is_team_based=True, team_max_size=2)
    captain, mate = make_user(), make_user()
    register(tournament, captain, mate)
    team = make_team(tournament, "Duo", captain)

    resp = client.post(f"/api/teams/{team.id}/join", headers=auth(mate))

    assert resp.status_code == 201
    assert resp.json()["member"]["user_id"] == mate.id
    assert db.query(TeamMember).filter(TeamMember.team_id == team.id).count() == 2


def test_join_team_rules(client, auth, make_user, make_tournament, make_team, register) -> None:
    organizer = make_user()
    tournament = make_tournament(organizer, is_team_based=True, team_max_size=1)
    captain, late, unregistered = make_user(), make_user(), make_user()
    register(tournament, captain, late)
    full_team = make_team(tournament, "Full", captain)

    assert client.post("/api/teams/missing/join", headers=auth(late)).status_code == 404
    assert client.post(f"/api/teams/{full_team.id}/join", headers=auth(organizer)).status_code == 403
    assert client.post(f"/api/teams/{full_team.id}/join", headers=auth(unregistered)).status_code == 403

    resp = client.post(f"/api/teams/{full_team.id}/join", headers=auth(late))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Team is full"


def test_cannot_join_two_teams_of_same_tournament(
    client, auth, make_user, make_tournament, make_team, register
) -> None:
    tournament = make_tournament(make_user(), is_team_based=True)
    player = make_user()
    register(tournament, player)
    make_team(tournament, "First", player)
    second = make_team(tournament, "Second", make_user())

    resp = client.post(f"/api/teams/{second.id}/join", headers=auth(player))

    assert resp.status_code == 400


def test_cannot_join_after_deadline_or_when_closed(
    client, auth, make_user, make_tournament, make_team, register
) -> None:
    player = make_user()
    late = make_tournament(
        make_user(), is_team_based=True, registration_deadline=utcnow() - timedelta(days=1)
    )
    closed = make_tournament(make_user(), is_team_based=True, status="IN_PROGRESS")
    for tournament in (late, closed):
        register(tournament, player)
        team = make_team(tournament, "Team", make_user())
        resp = client.post(f"/api/teams/{team.id}/join", headers=auth(player))
        assert resp.status_code == 400


def test_leave_team_keeps_team_with_members(
    client, db, auth, make_user, make_tournament, make_team
) -> None:
    tournament = make_tournament(make_user(), is_team_based=True)
    captain, mate = make_user(), make_user()
    team = make_team(tournament, "Duo", captain, mate)

    resp = client.delete(f"/api/teams/{team.id}/join", headers=auth(mate))

    assert resp.status_code == 200
    assert resp.json()["team_deleted"] is False
    assert db.get(Team, team.id) is not None


def test_last_member_leaving_deletes_team(
    client, db, auth, make_user, make_tournament, make_team
) -> None:
    tournament = make_tournament(make_user(), is_team_based=True)
    captain = make_user()
    team = make_team(tournament, "Solo", captain)
    team_id = team.id

    resp = client.delete(f"/api/teams/{team_id}/join", headers=auth(captain))

    assert resp.status_code == 200
    assert resp.json() == {
        "message": "You left the team. The team was deleted (last member).",
        "team_deleted": True,
        "team_id": team_id,
    }
    db.expire_all()
    assert db.get(Team, team_id) is None


def test_leave_requires_membership(client, auth, make_user, make_tournament, make_team) -> None:
    tournament = make_tournament(make_user(), is_team_based=True)
    team = make_team(tournament, "Team", make_user())

    resp = client.delete(f"/api/teams/{team.id}/join", headers=auth(make_user()))

    assert resp.status_code == 400
