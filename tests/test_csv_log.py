"""Tests for the CSV summary appender."""
from sitestore.csv_log import append_record, append_row, ensure_header, read_rows

HEADER = ["Timestamp", "Name", "Email"]


def test_ensure_header_is_idempotent(tmp_path):
    path = str(tmp_path / "summary.csv")

    assert ensure_header(path, HEADER) is True
    assert ensure_header(path, HEADER) is False

    lines = (tmp_path / "summary.csv").read_text(encoding="utf-8").splitlines()
    assert lines == ["Timestamp,Name,Email"]


def test_ensure_header_never_truncates_existing_rows(tmp_path):
    path = str(tmp_path / "summary.csv")
    append_record(path, HEADER, ["t1", "Ann", "ann@example.com"])

    ensure_header(path, HEADER)

    assert len((tmp_path / "summary.csv").read_text(encoding="utf-8").splitlines()) == 2


def test_append_row_quotes_every_field_and_doubles_quotes(tmp_path):
    path = str(tmp_path / "summary.csv")

    append_row(path, ["t1", 'The "Best" Co', None])

    assert (tmp_path / "summary.csv").read_text(encoding="utf-8") == '"t1","The ""Best"" Co",""\n'


def test_rows_read_back_with_commas_and_quotes(tmp_path):
    path = str(tmp_path / "summary.csv")
    append_record(path, HEADER, ["t1", 'Doe, "JD" John', "jd@example.com"])

    rows = read_rows(path)

    assert rows == [{"Timestamp": "t1", "Name": 'Doe, "JD" John', "Email": "jd@example.com"}]
