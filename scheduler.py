"""Daily sync scheduler — run each sync phase once per calendar day inside its window.

The scheduler is ticked on a fixed polling interval. Each phase has a gate:

    idle  ──(hour enters window)──▶  eligible  ──(phase succeeds)──▶  ran_today
      ▲                                                                   │
      └─────────────────────────(calendar date changes)───────────────────┘

Windows are half-open hour ranges [start, end) in TIMEZONE; when start > end
the window wraps past midnight (22–01 covers 22:00 through 00:59).

Trade-off of the 22–01 update window: the gate is marked as run by the first
successful tick after 22:00, even if no game has finished yet, and the 00:xx
ticks belong to the next calendar date, so they sync that date's unplayed
games. A game ending after the 22:00 run keeps its Scheduled row until
`run_sync.py --phase update --date ...` is run for it.
"""
from datetime import datetime
from zoneinfo import ZoneInfo

from config import INSERT_WINDOW, TIMEZONE, UPDATE_WINDOW
from models import GatewayError
from shared_utils import setup_logger

log = setup_logger("scheduler", "sync.log")

IDLE = "idle"
ELIGIBLE = "eligible"
RAN_TODAY = "ran_today"


def hour_in_window(hour, start, end):
    """True if `hour` falls in [start, end), wrapping past midnight when start > end."""
    if start <= end:
        return start <= hour < end
    return hour >= start or hour < end


class PhaseGate:
    """Once-per-day gate for one phase."""

    def __init__(self, name, window):
        self.name = name
        self.start, self.end = window
        self.last_run_date = None

    def state(self, now):
        if not hour_in_window(now.hour, self.start, self.end):
            return IDLE
        if self.last_run_date == now.date().isoformat():
            return RAN_TODAY
        return ELIGIBLE

    def mark_ran(self, now):
        self.last_run_date = now.date().isoformat()


class SyncScheduler:
    """Decides on every tick whether the insert and update phases should run.

    insert_phase / update_phase are callables taking the local date as
    'YYYY-MM-DD'. A phase that raises GatewayError is logged and left
    eligible, so the next tick inside the window retries it.
    """

    def __init__(self, insert_phase, update_phase, timezone=TIMEZONE,
                 insert_window=INSERT_WINDOW, update_window=UPDATE_WINDOW):
        self.zone = ZoneInfo(timezone)
        self.insert_gate = PhaseGate("insert", insert_window)
        self.update_gate = PhaseGate("update", update_window)
        self._phases = [
            (self.insert_gate, insert_phase, "☀️ Running morning game sync"),
            (self.update_gate, update_phase, "🌙 Running night score sync"),
        ]

    @property
    def last_insert_run_date(self):
        return self.insert_gate.last_run_date

    @property
    def last_update_run_date(self):
        return self.update_gate.last_run_date

    def localize(self, now=None):
        if now is None:
            return datetime.now(self.zone)
        if now.tzinfo is None:
            return now.replace(tzinfo=self.zone)
        return now.astimezone(self.zone)

    def tick(self, now=None):
        """Run whichever phases are eligible; returns the names of those that ran."""
        now = self.localize(now)
        ran = []
        for gate, phase, banner in self._phases:
            if gate.state(now) != ELIGIBLE:
                continue
            log.info(banner)
            try:
                phase(now.date().isoformat())
            except GatewayError:
                log.exception(f"{gate.name} phase failed, will retry next tick")
                continue
            gate.mark_ran(now)
            ran.append(gate.name)
        return ran
