"""Data models and error types for the pick'em bot."""

from dataclasses import dataclass, field

STATUS_SCHEDULED = "Scheduled"
STATUS_FINAL = "Final"
STATUS_OT = "OT"
STATUS_SO = "SO"

TERMINAL_STATUSES = (STATUS_FINAL, STATUS_OT, STATUS_SO)

# Results sheet layout: A=date B=home C=away D=home score E=away score F=status
RESULTS_HEADER_ROWS = 1


@dataclass
class MetaConfig:
    """Contest-period settings kept on the Meta sheet."""
    start_row: int      # first Picks row for today's games
    games_today: int    # number of picks every submission must contain


@dataclass
class RawGame:
    """One entry of the HockeyTech schedule feed."""
    home_team: str
    away_team: str
    home_goals: object = None     # int, or None before the game starts
    away_goals: object = None
    status: str = ""              # e.g. "Final", "Final OT", "7:00 pm MST"
    overtime: bool = False
    shootout: bool = False


@dataclass
class GameRecord:
    """One row of the Results sheet."""
    date: str
    home_team: str
    away_team: str
    home_score: object = ""
    away_score: object = ""
    status: str = STATUS_SCHEDULED

    @property
    def key(self):
        return (self.date, self.home_team, self.away_team)

    def to_row(self):
        return [self.date, self.home_team, self.away_team,
                self.home_score, self.away_score, self.status]

    @classmethod
    def from_row(cls, row):
        """Build from a sheet row; the API drops trailing empty cells."""
        cells = [str(c).strip() for c in row] + [""] * (6 - len(row))
        return cls(
            date=cells[0],
            home_team=cells[1],
            away_team=cells[2],
            home_score=cells[3],
            away_score=cells[4],
            status=cells[5] or STATUS_SCHEDULED,
        )


@dataclass
class SyncResult:
    """Outcome of one GameSyncEngine phase."""
    phase: str
    date: str
    fetched: int = 0
    written: list = field(default_factory=list)

    @property
    def count(self):
        return len(self.written)


# ── Errors ──────────────────────────────────────────────────────────────

class ValidationError(Exception):
    """A pick submission was rejected before anything was written."""
    reply = "❌ Invalid submission."


class MissingMetaError(ValidationError):
    reply = "❌ Meta sheet missing start_row or games_today."


class CountMismatchError(ValidationError):
    def __init__(self, expected, actual):
        super().__init__(f"expected {expected} picks, got {actual}")
        self.expected = expected
        self.actual = actual

    @property
    def reply(self):
        return f"❌ You must submit exactly {self.expected} picks. You submitted {self.actual}."


class UnregisteredUserError(ValidationError):
    reply = "❌ You are not registered in the Users sheet."

    def __init__(self, submitter_id):
        super().__init__(f"user {submitter_id} has no column in the Users sheet")
        self.submitter_id = submitter_id


class GatewayError(Exception):
    """Network, permission or quota failure talking to Sheets or the feed.

    The underlying exception is chained as __cause__.
    """


class WriteError(GatewayError):
    """Writing picks to the ledger failed; partial success is unknown."""


class FeedError(GatewayError):
    """The schedule feed could not be reached."""
