from apptsync.scanner import ScannedRow, scan_new_rows


def sample_master():
    return [
        ["Patient Name", "Email"],
        ["A", "a@x.com", "1"],
        ["", "orphan@x.com"],
        ["B", "b@x.com"],
    ]


def test_scan_starts_after_watermark(fake_sheets):
    fake_sheets.seed("m", sample_master())
    rows = scan_new_rows(fake_sheets, "m", "Sheet1", 2)
    assert fake_sheets.reads == [("m", "Sheet1!A3:G")]
    assert rows == [ScannedRow(row_index=4, values=["B", "b@x.com"])]


def test_scan_row_indexes_are_positional(fake_sheets):
    fake_sheets.seed("m", sample_master())
    rows = scan_new_rows(fake_sheets, "m", "Sheet1", 1)
    assert [r.row_index for r in rows] == [2, 4]


def test_scan_past_end_is_empty(fake_sheets):
    fake_sheets.seed("m", sample_master())
    assert scan_new_rows(fake_sheets, "m", "Sheet1", 10) == []
