"""Serverless function for league actions.

Every request is a JSON POST naming an action. Apart from registration,
callers authenticate with their username and password on each request.
"""

from http.server import BaseHTTPRequestHandler
import json
import logging
import os

from colegas.auth import authenticate, get_user, register_user, update_user
from colegas.exceptions import ColegasError, PermissionDeniedError
from colegas.leagues import (
    accept_join_request,
    change_user_role,
    create_league,
    delete_league,
    expel_user,
    get_league,
    get_pending_join_requests,
    get_scoreboard,
    join_league,
    leave_league,
    reject_join_request,
    send_join_request,
    update_league,
    update_team_size,
)
from colegas.matches import create_match, is_admin_of_match_league, update_player_match_stats
from colegas.players import (
    create_player,
    delete_player,
    get_player,
    update_player,
    update_player_points,
)
from colegas.rosters import create_roster, get_roster_by_team, get_user_roster
from colegas.store import LeagueStore

logger = logging.getLogger('colegas.api')


def get_store() -> LeagueStore:
    """Store for this request (COLEGAS_DATA_PATH overrides the config)."""
    return LeagueStore(os.environ.get("COLEGAS_DATA_PATH") or None)


def handle_register(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = register_user(store, {
        "username": data.get("username"),
        "email": data.get("email"),
        "password": data.get("password"),
    })
    return 201, {"success": True, "user_id": user.id, "username": user.username}


def handle_create_league(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    league = create_league(store, data.get("league") or {}, user.id)
    return 201, {"success": True, "league": league}


def handle_join_league(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    join_code = (data.get("join_code") or "").strip().upper()
    if not join_code:
        return 400, {"error": "Missing join code"}
    league = join_league(store, join_code, user.id)
    return 200, {"success": True, "league": league}


def handle_get_user(store: LeagueStore, data: dict) -> tuple[int, dict]:
    authenticate(store, data.get("username"), data.get("password"))
    return 200, {"user": get_user(store, int(data.get("user_id", 0)))}


def handle_update_user(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    profile = update_user(store, int(data.get("user_id", user.id)), data.get("user") or {}, user.id)
    return 200, {"success": True, "user": profile}


def handle_get_league(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    return 200, {"league": get_league(store, int(data.get("league_id", 0)), user.id)}


def handle_update_league(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    league = update_league(store, int(data.get("league_id", 0)), data.get("league") or {}, user.id)
    return 200, {"success": True, "league": league}


def handle_delete_league(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    delete_league(store, int(data.get("league_id", 0)), user.id)
    return 200, {"success": True}


def handle_update_team_size(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    league = update_team_size(
        store, int(data.get("league_id", 0)), int(data.get("team_size", 0)), user.id
    )
    return 200, {"success": True, "league": league}


def handle_change_user_role(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    change_user_role(
        store,
        int(data.get("league_id", 0)),
        user.id,
        int(data.get("target_user_id", 0)),
        (data.get("role") or "").upper(),
    )
    return 200, {"success": True}


def handle_send_join_request(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    request = send_join_request(store, int(data.get("league_id", 0)), user.id)
    return 201, {"success": True, "join_request": request.model_dump(mode="json")}


def handle_list_join_requests(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    requests = get_pending_join_requests(store, int(data.get("league_id", 0)), user.id)
    return 200, {"join_requests": [r.model_dump(mode="json") for r in requests]}


def handle_accept_join_request(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    accept_join_request(store, int(data.get("request_id", 0)), user.id)
    return 200, {"success": True}


def handle_reject_join_request(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    reject_join_request(store, int(data.get("request_id", 0)), user.id)
    return 200, {"success": True}


def handle_leave_league(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    leave_league(store, int(data.get("league_id", 0)), user.id)
    return 200, {"success": True}


def handle_expel_user(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    expel_user(store, int(data.get("league_id", 0)), user.id, int(data.get("target_user_id", 0)))
    return 200, {"success": True}


def handle_create_player(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    player = create_player(store, int(data.get("league_id", 0)), data.get("player") or {}, user.id)
    return 201, {"success": True, "player": player.model_dump(mode="json")}


def handle_get_player(store: LeagueStore, data: dict) -> tuple[int, dict]:
    authenticate(store, data.get("username"), data.get("password"))
    player = get_player(store, int(data.get("league_id", 0)), int(data.get("player_id", 0)))
    return 200, {"player": player.model_dump(mode="json")}


def handle_update_player(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    player = update_player(
        store,
        int(data.get("league_id", 0)),
        int(data.get("player_id", 0)),
        data.get("player") or {},
        user.id,
    )
    return 200, {"success": True, "player": player.model_dump(mode="json")}


def handle_delete_player(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    delete_player(store, int(data.get("league_id", 0)), int(data.get("player_id", 0)), user.id)
    return 200, {"success": True}


def handle_update_player_points(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    player = update_player_points(
        store,
        int(data.get("league_id", 0)),
        int(data.get("player_id", 0)),
        int(data.get("total_points", 0)),
        user.id,
    )
    return 200, {"success": True, "player": player.model_dump(mode="json")}


def handle_create_roster(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    league_id = int(data.get("league_id", 0))
    create_roster(store, league_id, {"players": data.get("players") or []}, user.id)
    return 200, {"success": True, "roster": get_user_roster(store, league_id, user.id)}


def handle_get_roster(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    return 200, {"roster": get_user_roster(store, int(data.get("league_id", 0)), user.id)}


def handle_get_team_roster(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    team = get_roster_by_team(
        store, int(data.get("league_id", 0)), int(data.get("team_user_id", 0)), user.id
    )
    return 200, {"team": team}


def handle_create_match(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    match = create_match(store, data.get("match") or {}, user.id)
    return 201, {"success": True, "match": match.model_dump(mode="json")}


def handle_update_stats(store: LeagueStore, data: dict) -> tuple[int, dict]:
    user = authenticate(store, data.get("username"), data.get("password"))
    match_id = int(data.get("match_id", 0))
    if not is_admin_of_match_league(store, match_id, user.id):
        raise PermissionDeniedError("Only league admins can record match stats")

    result = update_player_match_stats(
        store, match_id, int(data.get("player_id", 0)), data.get("stats") or {}
    )
    return 200, {
        "success": True,
        "stats_id": result.stats_id,
        "total_field_points": result.total_field_points,
        "total_goalkeeper_points": result.total_goalkeeper_points,
        "credited_users": result.credited_users,
    }


def handle_scoreboard(store: LeagueStore, data: dict) -> tuple[int, dict]:
    authenticate(store, data.get("username"), data.get("password"))
    scoreboard = get_scoreboard(store, int(data.get("league_id", 0)))
    return 200, {
        "scoreboard": [
            {"user_id": s.user_id, "username": s.username, "total_points": s.total_points}
            for s in scoreboard
        ]
    }


ACTIONS = {
    "register": handle_register,
    "create_league": handle_create_league,
    "join_league": handle_join_league,
    "create_player": handle_create_player,
    "create_roster": handle_create_roster,
    "create_match": handle_create_match,
    "update_stats": handle_update_stats,
    "scoreboard": handle_scoreboard,
    "get_user": handle_get_user,
    "update_user": handle_update_user,
    "get_league": handle_get_league,
    "update_league": handle_update_league,
    "delete_league": handle_delete_league,
    "update_team_size": handle_update_team_size,
    "change_user_role": handle_change_user_role,
    "send_join_request": handle_send_join_request,
    "list_join_requests": handle_list_join_requests,
    "accept_join_request": handle_accept_join_request,
    "reject_join_request": handle_reject_join_request,
    "leave_league": handle_leave_league,
    "expel_user": handle_expel_user,
    "get_player": handle_get_player,
    "update_player": handle_update_player,
    "delete_player": handle_delete_player,
    "update_player_points": handle_update_player_points,
    "get_roster": handle_get_roster,
    "get_team_roster": handle_get_team_roster,
}


def dispatch(store: LeagueStore, data: dict) -> tuple[int, dict]:
    """Run the requested action and map league errors to status codes."""
    action = data.get("action")
    action_handler = ACTIONS.get(action)
    if action_handler is None:
        return 400, {"error": f"Unknown action: {action}"}

    try:
        return action_handler(store, data)
    except ColegasError as e:
        return e.http_status, {"error": e.message}
    except (TypeError, ValueError) as e:
        return 400, {"error": f"Invalid request: {e}"}


class handler(BaseHTTPRequestHandler):
    def do_OPTIONS(self):
        """Handle CORS preflight - no auth needed."""
        self.send_response(200)
        self.send_header("Access-Control-Allow-Origin", "*")
        self.send_header("Access-Control-Allow-Methods", "GET, POST, OPTIONS")
        self.send_header("Access-Control-Allow-Headers", "Content-Type, Authorization")
        self.send_header("Access-Control-Max-Age", "86400")
        self.send_header("Content-Length", "0")
        self.end_headers()

    def do_GET(self):
        """Health check."""
        self._send_json(200, {"status": "API is running", "actions": sorted(ACTIONS)})

    def do_POST(self):
        try:
            content_length = int(self.headers.get("Content-Length", 0))
            body = self.rfile.read(content_length)
            data = json.loads(body.decode()) if body else {}
            if not isinstance(data, dict):
                return self._send_json(400, {"error": "Request body must be a JSON object"})

            status, payload = dispatch(get_store(), data)
            return self._send_json(status, payload)

        except json.JSONDecodeError:
            return self._send_json(400, {"error": "Invalid JSON"})
        except Exception as e:
            logger.exception("Unhandled error in league API")
            return self._send_json(500, {"error": str(e)})

    def _send_json(self, status_code: int, data: dict):
        """Send JSON response with CORS headers."""
        self.send_response(status_code)
        self.send_header("Content-Type", "application/json")
        self.send_header("Access-Control-Allow-Origin", "*")
        self.send_header("Access-Control-Allow-Methods", "GET, POST, OPTIONS")
        self.send_header("Access-Control-Allow-Headers", "Content-Type, Authorization")
        self.end_headers()
        self.wfile.write(json.dumps(data).encode())

    def log_message(self, format, *args):
        """Route access logs through the colegas logger."""
        logger.debug(format % args)
