"""Tests for the once-per-day sync gates."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from models import GatewayError
from scheduler import ELIGIBLE, IDLE, RAN_TODAY, PhaseGate, SyncScheduler, hour_in_window

TZ = "America/Edmonton"
ZONE = ZoneInfo(TZ)


def at(day, hour, minute=0):
    return datetime(2025, 10, day, hour, minute, tzinfo=ZONE)


class Recorder:
    def __init__(self, fail_times=0):
        self.calls = []
        self.fail_times = fail_times

    def __call__(self, date):
        self.calls.append(date)
        if self.fail_times:
            self.fail_times -= 1
            raise GatewayError("sheets down")


def make_scheduler(insert=None, update=None):
    return SyncScheduler(insert or Recorder(), update or Recorder(), timezone=TZ,
                         insert_window=(8, 10), update_window=(22, 1))


@pytest.mark.parametrize("hour, expected", [
    (21, False), (22, True), (23, True), (0, True), (1, False), (12, False),
])
def test_wrapping_window(hour, expected):
    assert hour_in_window(hour, 22, 1) is expected


@pytest.mark.parametrize("hour, expected", [(7, False), (8, True), (9, True), (10, False)])
def test_plain_window_is_half_open(hour, expected):
    assert hour_in_window(hour, 8, 10) is expected


def test_gate_states():
    gate = PhaseGate("insert", (8, 10))
    assert gate.state(at(3, 7)) == IDLE
    assert gate.state(at(3, 8)) == ELIGIBLE
    gate.mark_ran(at(3, 8))
    assert gate.state(at(3, 9, 55)) == RAN_TODAY
    assert gate.state(at(3, 11)) == IDLE
    assert gate.state(at(4, 8)) == ELIGIBLE


def test_insert_runs_once_per_day_within_window():
    insert = Recorder()
    scheduler = make_scheduler(insert=insert)

    assert scheduler.tick(at(3, 8, 0)) == ["insert"]
    assert scheduler.tick(at(3, 8, 5)) == []
    assert scheduler.tick(at(3, 9, 55)) == []
    assert insert.calls == ["2025-10-03"]
    assert scheduler.last_insert_run_date == "2025-10-03"

    # next calendar day re-arms the gate
    assert scheduler.tick(at(4, 8, 0)) == ["insert"]
    assert insert.calls == ["2025-10-03", "2025-10-04"]


def test_nothing_runs_outside_windows():
    insert, update = Recorder(), Recorder()
    scheduler = make_scheduler(insert, update)
    for hour in (1, 7, 10, 12, 21):
        assert scheduler.tick(at(3, hour)) == []
    assert insert.calls == update.calls == []


def test_update_window_wraps_midnight():
    update = Recorder()
    scheduler = make_scheduler(update=update)

    assert scheduler.tick(at(3, 22, 30)) == ["update"]
    assert scheduler.tick(at(3, 23, 30)) == []
    # 00:xx is a new calendar date in the local zone
    assert scheduler.tick(at(4, 0, 10)) == ["update"]
    assert scheduler.tick(at(4, 0, 15)) == []
    assert update.calls == ["2025-10-03", "2025-10-04"]
    assert scheduler.last_update_run_date == "2025-10-04"


def test_failed_phase_retries_next_tick():
    insert = Recorder(fail_times=1)
    scheduler = make_scheduler(insert=insert)

    assert scheduler.tick(at(3, 8, 0)) == []
    assert scheduler.last_insert_run_date is None
    assert scheduler.tick(at(3, 8, 5)) == ["insert"]
    assert insert.calls == ["2025-10-03", "2025-10-03"]


def test_tick_converts_to_local_zone():
    insert = Recorder()
    scheduler = make_scheduler(insert=insert)
    # 14:30 UTC is 08:30 in Edmonton (MDT, UTC-6)
    utc = datetime(2025, 10, 3, 14, 30, tzinfo=timezone.utc)
    assert scheduler.tick(utc) == ["insert"]
    assert insert.calls == ["2025-10-03"]


def test_local_date_used_near_midnight_utc():
    update = Recorder()
    scheduler = make_scheduler(update=update)
    # 05:30 UTC on the 4th is 23:30 on the 3rd in Edmonton
    scheduler.tick(datetime(2025, 10, 4, 5, 30, tzinfo=timezone.utc))
    assert update.calls == ["2025-10-03"]
