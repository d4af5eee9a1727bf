"""HockeyTech schedule feed client — one day's games with scores and status.

The feed is best-effort: an off-day, an empty body or a payload that does not
parse all mean "no games". Only a failed request raises (FeedError).
"""
import json

import requests

from config import FEED_BASE_URL, FEED_KEY, FEED_LEAGUE_ID, REQUEST_TIMEOUT
from models import FeedError, RawGame
from shared_utils import setup_logger

log = setup_logger("feed", "sync.log")


def _get(params):
    """GET the statviewfeed endpoint and return the response body as text."""
    params = dict(params)
    params.setdefault("feed", "statviewfeed")
    params.setdefault("key", FEED_KEY)
    try:
        resp = requests.get(FEED_BASE_URL, params=params, timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise FeedError(f"feed request failed: {e}") from e
    return resp.text


def _decode(text):
    """Parse the body, which statviewfeed sometimes wraps as JSONP '(...)'."""
    body = (text or "").strip()
    if body.startswith("(") and body.endswith(")"):
        body = body[1:-1]
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        return None


def _goals(value):
    """Goal count as int, or None when not reported yet."""
    if value is None or str(value).strip() == "":
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def _flag(value):
    return str(value).strip().lower() in ("1", "true", "yes")


def parse_game(entry):
    """Convert one schedule entry to a RawGame, or None if it lacks teams."""
    if not isinstance(entry, dict):
        return None
    home = str(entry.get("home_team_name") or "").strip()
    away = str(entry.get("visiting_team_name") or "").strip()
    if not home or not away:
        return None
    return RawGame(
        home_team=home,
        away_team=away,
        home_goals=_goals(entry.get("home_goal_count")),
        away_goals=_goals(entry.get("visiting_goal_count")),
        status=str(entry.get("game_status") or "").strip(),
        overtime=_flag(entry.get("overtime")),
        shootout=_flag(entry.get("shootout")),
    )


def parse_schedule(data):
    """Pull RawGames out of a decoded feed document."""
    if isinstance(data, list) and data and isinstance(data[0], dict) and "schedule" in data[0]:
        data = data[0]
    if not isinstance(data, dict):
        return []
    schedule = data.get("schedule")
    if not isinstance(schedule, list):
        return []
    games = []
    for entry in schedule:
        game = parse_game(entry)
        if game is not None:
            games.append(game)
    return games


class FeedClient:
    """Fetch a day's games for one league."""

    def __init__(self, league_id=FEED_LEAGUE_ID):
        self.league_id = league_id

    def fetch_games(self, date):
        """Games scheduled on `date` (a datetime.date or 'YYYY-MM-DD')."""
        day = date if isinstance(date, str) else date.isoformat()
        text = _get({"view": "schedule", "date": day, "league_id": self.league_id})
        data = _decode(text)
        if data is None:
            log.warning(f"Feed returned no parseable body for {day}")
            return []
        return parse_schedule(data)
