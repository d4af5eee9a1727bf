"""Results sheet sync — keep one row per game in step with the HockeyTech feed.

Two phases, run independently:
  insert  — append a Scheduled row for every game of the day not yet present
  update  — write score + status into rows whose game has finished

A row's status only ever moves Scheduled → Final / OT / SO. Both phases are
idempotent: a second run against the same feed writes nothing.
"""
from config import RESULTS_SHEET, TERMINAL_POLICY
from models import (RESULTS_HEADER_ROWS, STATUS_FINAL, STATUS_OT, STATUS_SO,
                    GameRecord, SyncResult)
from shared_utils import setup_logger

log = setup_logger("sync", "sync.log")

READ_RANGE = "A2:F"
APPEND_RANGE = "A:F"


# ── Terminality policy ──────────────────────────────────────────────────

def is_final_by_status(game):
    """Finished when the feed status reads 'Final' ('Final', 'Final OT', 'Final SO')."""
    return game.status.lower().startswith("final")


def is_final_by_goals(game):
    """Finished when both goal counts are reported (a live 0-0 counts as final)."""
    return game.home_goals is not None and game.away_goals is not None


TERMINAL_POLICIES = {
    "status": is_final_by_status,
    "goals": is_final_by_goals,
}


def get_terminal_policy(name):
    try:
        return TERMINAL_POLICIES[name]
    except KeyError:
        raise ValueError(f"unknown terminal policy {name!r}, "
                         f"expected one of {sorted(TERMINAL_POLICIES)}") from None


def final_status(game):
    """Shootout beats overtime beats regulation."""
    if game.shootout:
        return STATUS_SO
    if game.overtime:
        return STATUS_OT
    return STATUS_FINAL


def _cell(value):
    return "" if value is None else value


class GameSyncEngine:
    """Fetch a day's games and reconcile them with the Results sheet."""

    def __init__(self, gateway, feed, sheet_name=RESULTS_SHEET, terminal_policy=TERMINAL_POLICY):
        self.gateway = gateway
        self.feed = feed
        self.sheet_name = sheet_name
        self.is_terminal = (terminal_policy if callable(terminal_policy)
                            else get_terminal_policy(terminal_policy))

    def _read_rows(self):
        return self.gateway.get_range(self.sheet_name, READ_RANGE)

    def insert_scheduled(self, date):
        """Append a Scheduled row for each of the day's games not already listed."""
        result = SyncResult(phase="insert", date=date)
        games = self.feed.fetch_games(date)
        result.fetched = len(games)
        if not games:
            log.info(f"No games found for {date}")
            return result

        existing = {GameRecord.from_row(r).key for r in self._read_rows()}

        inserts = []
        for g in games:
            record = GameRecord(date=date, home_team=g.home_team, away_team=g.away_team)
            if record.key in existing:
                continue
            # the feed can list a game twice; keep the first
            existing.add(record.key)
            inserts.append(record.to_row())

        if not inserts:
            log.info("All games already exist")
            return result

        self.gateway.append_rows(self.sheet_name, APPEND_RANGE, inserts)
        result.written = inserts
        log.info(f"Inserted {len(inserts)} games for {date}")
        return result

    def update_results(self, date):
        """Write final scores and status into the day's rows.

        Sheet row numbers come from each row's position in the read, so the
        rows are enumerated as read, never sorted or filtered first.
        """
        result = SyncResult(phase="update", date=date)
        games = self.feed.fetch_games(date)
        result.fetched = len(games)
        if not games:
            log.info(f"No games found for {date}")
            return result

        finished = {}
        for g in games:
            if self.is_terminal(g):
                finished.setdefault((g.home_team, g.away_team), g)

        updates = []
        labels = []
        for i, row in enumerate(self._read_rows()):
            record = GameRecord.from_row(row)
            if record.date != date:
                continue
            game = finished.get((record.home_team, record.away_team))
            if game is None:
                continue

            values = [_cell(game.home_goals), _cell(game.away_goals), final_status(game)]
            current = [record.home_score, record.away_score, record.status]
            if [str(v) for v in values] == [str(v) for v in current]:
                continue

            sheet_row = i + RESULTS_HEADER_ROWS + 1
            updates.append((f"D{sheet_row}:F{sheet_row}", [values]))
            labels.append(f"{record.away_team} @ {record.home_team}: {values[1]}-{values[0]} {values[2]}")

        if updates:
            self.gateway.batch_update(self.sheet_name, updates)
            for label in labels:
                log.info(f"Updated {label}")
        else:
            log.info(f"No finished games to update for {date}")
        result.written = updates
        return result
