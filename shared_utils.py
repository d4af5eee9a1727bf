"""Shared utilities for the bot and the sync runners."""
import logging
import re
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

PROJECT_ROOT = Path(__file__).parent
LOGS = PROJECT_ROOT / "logs"

COLUMN_RE = re.compile(r"^[A-Z]{1,3}$")


def setup_logger(name, filename):
    """Create a logger that writes to both file and stdout."""
    LOGS.mkdir(parents=True, exist_ok=True)
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    # Prevent duplicate handlers on re-import
    if not logger.handlers:
        fh = logging.FileHandler(str(LOGS / filename))
        fh.setFormatter(logging.Formatter('%(asctime)s [%(name)s] %(levelname)s %(message)s'))
        logger.addHandler(fh)
        ch = logging.StreamHandler()
        ch.setLevel(logging.INFO)
        logger.addHandler(ch)
    return logger


def now_in_zone(timezone):
    """Current wall-clock time in the named IANA timezone."""
    return datetime.now(ZoneInfo(timezone))


def today_iso(timezone):
    """Today's calendar date in the given timezone, as YYYY-MM-DD."""
    return now_in_zone(timezone).date().isoformat()


def normalize_column(letter):
    """Uppercase and validate a column letter from the Users sheet.

    Returns None when the value is not a plain A1 column (e.g. 'C', 'AB').
    """
    if letter is None:
        return None
    letter = str(letter).strip().upper()
    return letter if COLUMN_RE.match(letter) else None


def column_range(column, first_row, last_row):
    """A1 range covering one column between two rows, e.g. 'C5:C7'."""
    return f"{column}{first_row}:{column}{last_row}"
