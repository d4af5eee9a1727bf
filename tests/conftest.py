"""In-memory stand-ins for the Sheets gateway and the HockeyTech feed."""

import re

import pytest

from models import GatewayError, RawGame

RANGE_RE = re.compile(r"^([A-Z]+)(\d*)(?::([A-Z]+)(\d*))?$")


def col_index(letters):
    n = 0
    for ch in letters:
        n = n * 26 + (ord(ch) - 64)
    return n - 1


def parse_range(rng):
    """'C5:C7' → (first_row, last_row or None, first_col, last_col), 0-based."""
    m = RANGE_RE.match(rng)
    assert m, f"bad range {rng!r}"
    c1, r1, c2, r2 = m.groups()
    c2 = c2 or c1
    first_row = int(r1) - 1 if r1 else 0
    last_row = int(r2) - 1 if r2 else (first_row if r1 and not m.group(3) else None)
    return first_row, last_row, col_index(c1), col_index(c2)


class FakeGateway:
    """Sheets held as lists of rows; reads come back as strings like the real API."""

    def __init__(self, sheets=None):
        self.sheets = {name: [list(r) for r in rows] for name, rows in (sheets or {}).items()}
        self.calls = []
        self.fail_on = set()

    def _check(self, op):
        self.calls.append(op)
        if op[0] in self.fail_on:
            raise GatewayError(f"simulated {op[0]} failure")

    def _grid(self, sheet_name):
        return self.sheets.setdefault(sheet_name, [])

    def _set(self, sheet_name, row, col, value):
        grid = self._grid(sheet_name)
        while len(grid) <= row:
            grid.append([])
        cells = grid[row]
        while len(cells) <= col:
            cells.append("")
        cells[col] = value

    def get_range(self, sheet_name, rng):
        self._check(("get", sheet_name, rng))
        first_row, last_row, c1, c2 = parse_range(rng)
        grid = self._grid(sheet_name)
        end = len(grid) if last_row is None else min(last_row + 1, len(grid))
        out = []
        for row in grid[first_row:end]:
            cells = ["" if v is None else str(v) for v in row[c1:c2 + 1]]
            while cells and cells[-1] == "":
                cells.pop()
            out.append(cells)
        while out and not out[-1]:
            out.pop()
        return out

    def update_range(self, sheet_name, rng, grid):
        self._check(("update", sheet_name, rng, grid))
        first_row, _, c1, _ = parse_range(rng)
        for i, row in enumerate(grid):
            for j, value in enumerate(row):
                self._set(sheet_name, first_row + i, c1 + j, value)

    def append_rows(self, sheet_name, rng, grid):
        self._check(("append", sheet_name, rng, grid))
        sheet = self._grid(sheet_name)
        while sheet and not any(str(c) for c in sheet[-1]):
            sheet.pop()
        sheet.extend(list(r) for r in grid)

    def batch_update(self, sheet_name, updates):
        self._check(("batch", sheet_name, updates))
        for rng, grid in updates:
            first_row, _, c1, _ = parse_range(rng)
            for i, row in enumerate(grid):
                for j, value in enumerate(row):
                    self._set(sheet_name, first_row + i, c1 + j, value)

    def writes(self):
        return [c for c in self.calls if c[0] in ("update", "append", "batch")]


class FakeFeed:
    def __init__(self, games=None):
        self.games = list(games or [])
        self.requested = []
        self.error = None

    def fetch_games(self, date):
        self.requested.append(date)
        if self.error is not None:
            raise self.error
        return list(self.games)


def game(home, away, home_goals=None, away_goals=None, status="7:00 pm MST",
         overtime=False, shootout=False):
    return RawGame(home_team=home, away_team=away, home_goals=home_goals,
                   away_goals=away_goals, status=status, overtime=overtime,
                   shootout=shootout)


RESULTS_HEADER = ["Date", "Home", "Away", "Home Score", "Away Score", "Status"]


@pytest.fixture
def pick_sheets():
    return FakeGateway({
        "Meta": [["start_row", "5"], ["games_today", "3"]],
        "Users": [["111", "C"], ["222", "D"]],
        "Picks": [],
    })


@pytest.fixture
def results_sheet():
    return FakeGateway({"Results": [list(RESULTS_HEADER)]})
