"""Pick submission — validate a /pick command and write it to the Picks sheet.

Row addressing uses the fixed start-row policy: pick i of today's submission
lands in row start_row + i of the submitter's column, so resubmitting the same
day overwrites the same cells instead of appending below them.

Usage:
    from picks import submit_picks

    reply = submit_picks(gateway, "123456789012345678", "EDM, CGY\nVAN")
"""
import re
import threading

from config import META_SHEET, PICKS_SHEET, USERS_SHEET
from models import (CountMismatchError, GatewayError, MetaConfig, MissingMetaError,
                    UnregisteredUserError, ValidationError, WriteError)
from shared_utils import column_range, normalize_column, setup_logger

log = setup_logger("picks", "bot.log")

SEPARATOR_RE = re.compile(r",|\r?\n")

SUCCESS_REPLY = "✅ Picks submitted successfully!"
FAILURE_REPLY = "❌ Error writing picks."


def parse_picks(raw_text):
    """Split on commas or newlines, trim, drop empties. Order is kept."""
    if not raw_text:
        return []
    tokens = (t.strip() for t in SEPARATOR_RE.split(raw_text))
    return [t for t in tokens if t]


def _positive_int(value):
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    if not number.is_integer() or number <= 0:
        return None
    return int(number)


def parse_meta(meta):
    """MetaConfig from the Meta sheet's key/value pairs.

    meta: mapping of key → cell text, e.g. {"start_row": "5", "games_today": "3"}.
    Zero, blank or non-numeric values are treated as missing.
    """
    meta = meta or {}
    start_row = _positive_int(meta.get("start_row"))
    games_today = _positive_int(meta.get("games_today"))
    if start_row is None or games_today is None:
        raise MissingMetaError("start_row or games_today missing from Meta sheet")
    return MetaConfig(start_row=start_row, games_today=games_today)


def find_column(submitter_id, directory):
    """Column letter for a Discord user id. First match wins."""
    for row in directory or []:
        if len(row) >= 2 and str(row[0]).strip() == submitter_id:
            return normalize_column(row[1])
    return None


def validate(submitter_id, raw_text, meta, directory):
    """Check a submission against the Meta settings and the Users directory.

    Returns (picks, column_letter, meta_config). Raises a ValidationError
    subclass; has no side effects.
    """
    picks = parse_picks(raw_text)
    config = parse_meta(meta)
    if len(picks) != config.games_today:
        raise CountMismatchError(config.games_today, len(picks))
    column = find_column(str(submitter_id), directory)
    if column is None:
        raise UnregisteredUserError(submitter_id)
    return picks, column, config


class ColumnLocks:
    """One lock per destination column.

    Two submissions landing in the same column are written one after the other.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = {}

    def get(self, column):
        with self._guard:
            lock = self._locks.get(column)
            if lock is None:
                lock = self._locks[column] = threading.Lock()
            return lock


class PickLedgerWriter:
    """Writes a validated submission into the Picks sheet."""

    def __init__(self, gateway, sheet_name=PICKS_SHEET):
        self.gateway = gateway
        self.sheet_name = sheet_name

    def target_range(self, column, start_row, count):
        return column_range(column, start_row, start_row + count - 1)

    def write(self, column, start_row, picks):
        """Write all picks in one range update; returns the number of rows written."""
        if not picks:
            return 0
        rng = self.target_range(column, start_row, len(picks))
        try:
            self.gateway.update_range(self.sheet_name, rng, [[p] for p in picks])
        except GatewayError as e:
            raise WriteError(f"writing {self.sheet_name}!{rng} failed: {e}") from e
        return len(picks)


def read_meta(gateway):
    rows = gateway.get_range(META_SHEET, "A:B")
    return {str(r[0]).strip(): (r[1] if len(r) > 1 else "") for r in rows if r}


def read_directory(gateway):
    return gateway.get_range(USERS_SHEET, "A:B")


def submit_picks(gateway, submitter_id, raw_text, locks=None):
    """Handle one /pick submission end to end and return the reply text."""
    try:
        meta = read_meta(gateway)
        directory = read_directory(gateway)
        picks, column, config = validate(submitter_id, raw_text, meta, directory)
        writer = PickLedgerWriter(gateway)
        if locks is None:
            writer.write(column, config.start_row, picks)
        else:
            with locks.get(column):
                writer.write(column, config.start_row, picks)
    except ValidationError as e:
        log.info(f"Rejected picks from {submitter_id}: {e}")
        return e.reply
    except GatewayError:
        log.exception(f"Sheets error handling picks from {submitter_id}")
        return FAILURE_REPLY

    log.info(f"Wrote {len(picks)} picks for {submitter_id} to {PICKS_SHEET}!"
             f"{writer.target_range(column, config.start_row, len(picks))}")
    return SUCCESS_REPLY
