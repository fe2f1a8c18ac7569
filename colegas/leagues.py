"""League lifecycle, membership and scoreboard."""

import logging
import random
from datetime import datetime, timezone
from typing import Any, Optional

from .config import get_join_code_length
from .constants import JOIN_CODE_ALPHABET
from .exceptions import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from .models import LeagueRole, RequestStatus, UserScore
from .permissions import count_admins, is_admin, is_member, require_admin, require_member
from .rosters import create_random_roster
from .schemas import JoinRequest, League, LeagueCreate, LeagueDatabase, Membership
from .store import (
    LeagueStore,
    find_league,
    find_membership,
    find_user,
    get_league_score,
    next_id,
)
from .utils import parse_payload

logger = logging.getLogger('colegas.leagues')


def generate_join_code(db: LeagueDatabase, rng: Optional[random.Random] = None) -> str:
    """Random join code not used by any other league."""
    rng = rng or random.SystemRandom()
    length = get_join_code_length()
    taken = {league.join_code for league in db.leagues}
    while True:
        code = ''.join(rng.choice(JOIN_CODE_ALPHABET) for _ in range(length))
        if code not in taken:
            return code


def league_view(db: LeagueDatabase, league: League) -> dict[str, Any]:
    """League details with its admins, participants and players."""
    members = [m for m in db.memberships if m.league_id == league.id]

    def user_view(user_id: int) -> dict[str, Any]:
        user = find_user(db, user_id)
        return {'id': user.id, 'username': user.username}

    return {
        'id': league.id,
        'name': league.name,
        'description': league.description,
        'image': league.image,
        'is_private': league.is_private,
        'join_code': league.join_code,
        'number_of_players': league.number_of_players,
        'team_size': league.team_size,
        'admins': [user_view(m.user_id) for m in members if m.role == LeagueRole.ADMIN],
        'participants': [user_view(m.user_id) for m in members],
        'players': [
            {'id': p.id, 'name': p.name, 'image': p.image, 'total_points': p.total_points}
            for p in db.players
            if p.league_id == league.id
        ],
    }


def _add_member(db: LeagueDatabase, league: League, user_id: int, role: LeagueRole) -> None:
    db.memberships.append(Membership(user_id=user_id, league_id=league.id, role=role))
    league.number_of_players = sum(1 for m in db.memberships if m.league_id == league.id)
    create_random_roster(db, league, user_id)


def _drop_member(db: LeagueDatabase, league: League, membership: Membership) -> None:
    db.memberships = [m for m in db.memberships if m is not membership]
    db.roster_slots = [
        s
        for s in db.roster_slots
        if not (s.user_id == membership.user_id and s.league_id == league.id)
    ]
    league.number_of_players = sum(1 for m in db.memberships if m.league_id == league.id)


def create_league(store: LeagueStore, payload: LeagueCreate | dict[str, Any], user_id: int) -> dict[str, Any]:
    """
    Create a league with the caller as its admin.

    The creator gets a random roster right away.
    """
    request = parse_payload(LeagueCreate, payload)

    with store.transaction() as db:
        find_user(db, user_id)
        league = League(
            id=next_id(db, 'league'),
            name=request.name,
            description=request.description,
            image=request.image,
            is_private=request.is_private,
            join_code=generate_join_code(db),
            number_of_players=0,
            team_size=request.team_size,
        )
        db.leagues.append(league)
        _add_member(db, league, user_id, LeagueRole.ADMIN)
        view = league_view(db, league)

    logger.info(f'User {user_id} created league {league.name} (id={league.id}, code={league.join_code})')
    return view


def join_league(store: LeagueStore, join_code: str, user_id: int) -> dict[str, Any]:
    """
    Join a public league by code.

    Raises:
        NotFoundError: Unknown join code
        PermissionDeniedError: The league is private
        ConflictError: Already a member
    """
    with store.transaction() as db:
        league = next((lg for lg in db.leagues if lg.join_code == join_code), None)
        if league is None:
            raise NotFoundError('League', f'join code {join_code}')
        if league.is_private:
            raise PermissionDeniedError('League is private and requires a join request')
        find_user(db, user_id)
        if is_member(db, league.id, user_id):
            raise ConflictError('User is already a member of this league')

        _add_member(db, league, user_id, LeagueRole.PARTICIPANT)
        view = league_view(db, league)

    logger.info(f'User {user_id} joined league {league.id}')
    return view


def send_join_request(store: LeagueStore, league_id: int, user_id: int) -> JoinRequest:
    """Ask to join a private league."""
    with store.transaction() as db:
        league = find_league(db, league_id)
        if not league.is_private:
            raise ValidationError('League is public, join it with its code')
        find_user(db, user_id)
        if is_member(db, league_id, user_id):
            raise ConflictError('User is already a member of this league')
        if any(
            r.league_id == league_id and r.user_id == user_id and r.status == RequestStatus.PENDING
            for r in db.join_requests
        ):
            raise ConflictError('A join request for this league is already pending')

        request = JoinRequest(
            id=next_id(db, 'join_request'),
            user_id=user_id,
            league_id=league_id,
            requested_at=datetime.now(timezone.utc),
            status=RequestStatus.PENDING,
        )
        db.join_requests.append(request)

    return request


def get_pending_join_requests(store: LeagueStore, league_id: int, user_id: int) -> list[JoinRequest]:
    db = store.snapshot()
    find_league(db, league_id)
    require_admin(db, league_id, user_id, 'review join requests')
    return [
        r for r in db.join_requests if r.league_id == league_id and r.status == RequestStatus.PENDING
    ]


def _pending_request(db: LeagueDatabase, request_id: int, admin_user_id: int) -> JoinRequest:
    request = next((r for r in db.join_requests if r.id == request_id), None)
    if request is None:
        raise NotFoundError('JoinRequest', request_id)
    require_admin(db, request.league_id, admin_user_id, 'review join requests')
    if request.status != RequestStatus.PENDING:
        raise ConflictError(f'Join request {request_id} is already {request.status.value.lower()}')
    return request


def accept_join_request(store: LeagueStore, request_id: int, admin_user_id: int) -> None:
    """Admit the requesting user as a participant with a random roster."""
    with store.transaction() as db:
        request = _pending_request(db, request_id, admin_user_id)
        request.status = RequestStatus.ACCEPTED
        league = find_league(db, request.league_id)
        if not is_member(db, league.id, request.user_id):
            _add_member(db, league, request.user_id, LeagueRole.PARTICIPANT)


def reject_join_request(store: LeagueStore, request_id: int, admin_user_id: int) -> None:
    with store.transaction() as db:
        request = _pending_request(db, request_id, admin_user_id)
        request.status = RequestStatus.REJECTED


def get_league(store: LeagueStore, league_id: int, user_id: int) -> dict[str, Any]:
    db = store.snapshot()
    league = find_league(db, league_id)
    require_member(db, league_id, user_id, 'view this league')
    return league_view(db, league)


def update_league(
    store: LeagueStore, league_id: int, payload: LeagueCreate | dict[str, Any], user_id: int
) -> dict[str, Any]:
    """Replace a league's settings (admins only)."""
    request = parse_payload(LeagueCreate, payload)

    with store.transaction() as db:
        league = find_league(db, league_id)
        require_admin(db, league_id, user_id, 'edit the league')
        league.name = request.name
        league.description = request.description
        league.image = request.image
        league.is_private = request.is_private
        league.team_size = request.team_size
        return league_view(db, league)


def update_team_size(store: LeagueStore, league_id: int, team_size: int, user_id: int) -> dict[str, Any]:
    if not 3 <= team_size <= 11:
        raise ValidationError(f'Team size must be between 3 and 11, got {team_size}')

    with store.transaction() as db:
        league = find_league(db, league_id)
        require_admin(db, league_id, user_id, 'change the team size')
        league.team_size = team_size
        return league_view(db, league)


def change_user_role(
    store: LeagueStore, league_id: int, admin_user_id: int, target_user_id: int, new_role: LeagueRole
) -> None:
    """
    Promote or demote a member (admins only).

    The last admin of a league can't be demoted.
    """
    new_role = LeagueRole(new_role)
    if admin_user_id == target_user_id:
        raise ValidationError('You cannot change your own role')

    with store.transaction() as db:
        require_admin(db, league_id, admin_user_id, 'change member roles')
        membership = find_membership(db, league_id, target_user_id)
        if membership is None:
            raise NotFoundError('Membership', f'user {target_user_id} in league {league_id}')
        if (
            membership.role == LeagueRole.ADMIN
            and new_role == LeagueRole.PARTICIPANT
            and count_admins(db, league_id) <= 1
        ):
            raise ValidationError('Cannot demote the only admin of the league')
        membership.role = new_role


def leave_league(store: LeagueStore, league_id: int, user_id: int) -> None:
    """Leave a league, dropping the user's roster. The only admin can't leave."""
    with store.transaction() as db:
        league = find_league(db, league_id)
        membership = find_membership(db, league_id, user_id)
        if membership is None:
            raise ValidationError('User is not a member of this league')
        if membership.role == LeagueRole.ADMIN and count_admins(db, league_id) == 1:
            raise ValidationError('The only admin cannot leave the league')
        _drop_member(db, league, membership)


def expel_user(store: LeagueStore, league_id: int, admin_user_id: int, target_user_id: int) -> None:
    if admin_user_id == target_user_id:
        raise ValidationError('You cannot expel yourself from the league')

    with store.transaction() as db:
        league = find_league(db, league_id)
        require_admin(db, league_id, admin_user_id, 'expel members')
        membership = find_membership(db, league_id, target_user_id)
        if membership is None:
            raise NotFoundError('Membership', f'user {target_user_id} in league {league_id}')
        if membership.role == LeagueRole.ADMIN and count_admins(db, league_id) == 1:
            raise ValidationError('Cannot expel the only admin of the league')
        _drop_member(db, league, membership)


def delete_league(store: LeagueStore, league_id: int, user_id: int) -> None:
    """Delete a league and everything that belongs to it (admins only)."""
    with store.transaction() as db:
        find_league(db, league_id)
        require_admin(db, league_id, user_id, 'delete the league')

        match_ids = {m.id for m in db.matches if m.league_id == league_id}
        db.roster_slots = [s for s in db.roster_slots if s.league_id != league_id]
        db.players = [p for p in db.players if p.league_id != league_id]
        db.memberships = [m for m in db.memberships if m.league_id != league_id]
        db.join_requests = [r for r in db.join_requests if r.league_id != league_id]
        db.player_match_stats = [s for s in db.player_match_stats if s.match_id not in match_ids]
        db.matches = [m for m in db.matches if m.league_id != league_id]
        db.league_scores = [s for s in db.league_scores if s.league_id != league_id]
        db.score_credits = [c for c in db.score_credits if c.league_id != league_id]
        db.leagues = [lg for lg in db.leagues if lg.id != league_id]

    logger.info(f'League {league_id} deleted by user {user_id}')


def get_scoreboard(store: LeagueStore, league_id: int) -> list[UserScore]:
    """Every member's cumulative score, best first."""
    db = store.snapshot()
    find_league(db, league_id)

    scoreboard = []
    for membership in db.memberships:
        if membership.league_id != league_id:
            continue
        user = find_user(db, membership.user_id)
        scoreboard.append(
            UserScore(
                user_id=user.id,
                username=user.username,
                total_points=get_league_score(db, user.id, league_id),
            )
        )

    scoreboard.sort(key=lambda s: s.total_points, reverse=True)
    return scoreboard


def get_user_points(store: LeagueStore, league_id: int, user_id: int) -> UserScore:
    db = store.snapshot()
    find_league(db, league_id)
    user = find_user(db, user_id)
    return UserScore(user_id=user.id, username=user.username, total_points=get_league_score(db, user_id, league_id))


def user_is_admin(store: LeagueStore, league_id: int, user_id: int) -> bool:
    return is_admin(store.snapshot(), league_id, user_id)
