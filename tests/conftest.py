import re

import pytest

from apptsync.sheets import SheetsError
from apptsync.storage import JsonFileStore, WatermarkStore

_A1 = re.compile(r"^(?P<tab>[^!]+)!(?P<c1>[A-Z]+)(?P<r1>\d*)(?::(?P<c2>[A-Z]+)(?P<r2>\d*))?$")


def _col(letters: str) -> int:
    n = 0
    for ch in letters:
        n = n * 26 + (ord(ch) - 64)
    return n


class FakeSheets:
    """In-memory spreadsheets keyed by (spreadsheet id, tab); rows are 1-based."""

    def __init__(self):
        self.data = {}
        self.reads = []
        self.writes = []
        self.fail_reads = set()
        self.fail_writes = set()

    def seed(self, sheet_id, rows, tab="Sheet1"):
        self.data[(sheet_id, tab)] = [list(r) for r in rows]

    def rows(self, sheet_id, tab="Sheet1"):
        return self.data.get((sheet_id, tab), [])

    def _parse(self, a1_range):
        m = _A1.match(a1_range)
        assert m, a1_range
        c1 = _col(m["c1"])
        c2 = _col(m["c2"]) if m["c2"] else c1
        r1 = int(m["r1"]) if m["r1"] else 1
        if m["c2"] is None:
            r2 = r1
        else:
            r2 = int(m["r2"]) if m["r2"] else None
        return m["tab"], c1, r1, c2, r2

    def read_range(self, spreadsheet_id, a1_range):
        self.reads.append((spreadsheet_id, a1_range))
        if spreadsheet_id in self.fail_reads:
            raise SheetsError("boom", 500)
        tab, c1, r1, c2, r2 = self._parse(a1_range)
        grid = self.rows(spreadsheet_id, tab)
        last = len(grid) if r2 is None else min(r2, len(grid))
        out = [list(grid[i - 1][c1 - 1 : c2]) for i in range(r1, last + 1)]
        # the API trims trailing empty cells and trailing empty rows
        for r in out:
            while r and r[-1] == "":
                r.pop()
        while out and not out[-1]:
            out.pop()
        return out

    def write_range(self, spreadsheet_id, a1_range, rows):
        if spreadsheet_id in self.fail_writes:
            raise SheetsError("write refused", 403)
        self.writes.append((spreadsheet_id, a1_range, [list(r) for r in rows]))
        tab, c1, r1, _c2, _r2 = self._parse(a1_range)
        grid = self.data.setdefault((spreadsheet_id, tab), [])
        for offset, values in enumerate(rows):
            idx = r1 + offset
            while len(grid) < idx:
                grid.append([])
            row = grid[idx - 1]
            while len(row) < c1 - 1 + len(values):
                row.append("")
            row[c1 - 1 : c1 - 1 + len(values)] = list(values)


@pytest.fixture
def fake_sheets():
    return FakeSheets()


@pytest.fixture
def state_store(tmp_path):
    return JsonFileStore(str(tmp_path / "state.json"))


@pytest.fixture
def watermark(state_store):
    return WatermarkStore(state_store)
