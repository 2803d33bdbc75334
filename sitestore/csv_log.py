# sitestore/csv_log.py
import os, csv
from typing import Iterable, List


def ensure_header(path: str, header: List[str]) -> bool:
    """
    Write the header line iff the file does not exist yet.
    Existing content is never truncated. Returns True when a header was written.
    """
    try:
        # "x" fails if another writer got there first
        with open(path, "x", newline="", encoding="utf-8") as f:
            csv.writer(f, lineterminator="\n").writerow(header)
        return True
    except FileExistsError:
        return False


def append_row(path: str, fields: Iterable) -> None:
    """Append one fully quoted row; embedded quotes are doubled."""
    row = ["" if v is None else str(v) for v in fields]
    with open(path, "a", newline="", encoding="utf-8") as f:
        csv.writer(f, quoting=csv.QUOTE_ALL, lineterminator="\n").writerow(row)


def append_record(path: str, header: List[str], fields: Iterable) -> None:
    ensure_header(path, header)
    append_row(path, fields)


def read_rows(path: str) -> List[dict]:
    if not os.path.exists(path):
        return []
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))
