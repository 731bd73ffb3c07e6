import pytest

from apptsync import directory


def sample_users():
    return [
        ["email", "password", "spreadsheetid"],
        ["Alice@Example.com", "secret", " sheet-alice "],
        ["bob@example.com", "hunter2", ""],
        ["", "nobody", "sheet-x"],
        ["carol@example.com", "pw"],
    ]


def seeded(fake_sheets):
    fake_sheets.seed("users", sample_users())
    return fake_sheets


def test_load_directory_skips_incomplete_rows(fake_sheets):
    d = directory.load_directory(seeded(fake_sheets), "users", "Sheet1")
    assert d == {"alice@example.com": "sheet-alice"}


def test_load_directory_accepts_sheet_url(fake_sheets):
    seeded(fake_sheets)
    d = directory.load_directory(
        fake_sheets, "https://docs.google.com/spreadsheets/d/users/edit#gid=0", "Sheet1"
    )
    assert "alice@example.com" in d


def test_load_directory_rejects_bad_id(fake_sheets):
    with pytest.raises(ValueError):
        directory.load_directory(fake_sheets, "https://example.com/not/a/sheet", "Sheet1")


def test_authenticate_matches_email_case_insensitively(fake_sheets):
    user = directory.authenticate(seeded(fake_sheets), " alice@EXAMPLE.com", "secret", "users", "Sheet1")
    assert user is not None
    assert user.email == "Alice@Example.com"
    assert user.appointments_sheet == "sheet-alice"


def test_authenticate_rejects_wrong_password(fake_sheets):
    assert directory.authenticate(seeded(fake_sheets), "alice@example.com", "Secret", "users", "Sheet1") is None
    assert directory.authenticate(fake_sheets, "", "secret", "users", "Sheet1") is None


def test_register_appends_row(fake_sheets):
    seeded(fake_sheets)
    user = directory.register(fake_sheets, "dave@example.com", "pw", "sheet-dave", "users", "Sheet1")
    assert user.appointments_sheet == "sheet-dave"
    assert fake_sheets.rows("users")[-1] == ["dave@example.com", "pw", "sheet-dave"]
    assert fake_sheets.writes[-1][1] == "Sheet1!A6:C6"


def test_register_uses_placeholder_sheet(fake_sheets):
    user = directory.register(seeded(fake_sheets), "erin@example.com", "pw", None, "users", "Sheet1")
    assert user.appointments_sheet.startswith("new-sheet-")


def test_register_refuses_existing_email(fake_sheets):
    with pytest.raises(directory.AlreadyRegistered):
        directory.register(seeded(fake_sheets), "ALICE@example.com", "x", None, "users", "Sheet1")
    assert fake_sheets.writes == []


def test_register_requires_email_and_password(fake_sheets):
    with pytest.raises(ValueError):
        directory.register(seeded(fake_sheets), " ", "pw", None, "users", "Sheet1")
    with pytest.raises(ValueError):
        directory.register(fake_sheets, "x@y.z", "", None, "users", "Sheet1")
