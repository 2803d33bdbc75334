# sitestore/forms.py
"""
Form submissions: lead applications, contact messages and email signups.

Each kind is an explicit allow-list of fields copied from the request into
the stored record, a RecordStore directory, and a CSV summary file whose
column order never changes.
"""
import os, re, logging
from typing import Any, Callable, Dict, List, Optional
from sitestore import csv_log
from sitestore.errors import ValidationError
from sitestore.identifiers import contained_path, timestamp_key
from sitestore.records import RecordStore, sort_newest_first
from sitestore.timeutil import display_datetime, isoz, utcnow

logger = logging.getLogger(__name__)

_RE_EMAIL = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
_RE_FILENAME = re.compile(r'[^A-Za-z0-9._-]+')

MAX_FILES = 10

APPLICATION_FIELDS = (
    "fullName", "jobTitle", "email", "phone", "businessName", "yearFounded",
    "website", "industry", "city", "province", "employeeCount", "serviceInterest",
    "companyDescription", "targetCustomer", "focusArea", "valueProposition",
    "auditGoals", "productStatus", "videoParticipation", "acknowledgement",
)
APPLICATION_REQUIRED = ("fullName", "email", "businessName")
APPLICATION_CSV = "applications_summary.csv"
APPLICATION_HEADER = ["Timestamp", "Name", "Email", "Phone", "Business Name", "Industry", "Website", "Employee Count"]

CONTACT_FIELDS = ("name", "email", "subject", "message")
CONTACT_REQUIRED = ("name", "email", "message")
CONTACT_CSV = "contacts_summary.csv"
CONTACT_HEADER = ["Timestamp", "Name", "Email", "Subject", "Message"]

SIGNUP_FIELDS = ("name", "email", "source")
SIGNUP_REQUIRED = ("email",)
SIGNUP_CSV = "email_signups.csv"
SIGNUP_HEADER = ["Timestamp", "Name", "Email", "Source"]


def is_email(value) -> bool:
    return isinstance(value, str) and _RE_EMAIL.match(value.strip()) is not None


def pick_fields(data: Dict[str, Any], allowed, required=()) -> Dict[str, Any]:
    """Copy allowed, non-empty keys; raise ValidationError for missing required ones."""
    out = {}
    for k in allowed:
        v = data.get(k)
        if isinstance(v, str):
            v = v.strip()
        if v is None or v == "":
            continue
        out[k] = v
    missing = [k for k in required if k not in out]
    if missing:
        raise ValidationError("Missing required field(s): " + ", ".join(missing))
    if "email" in out and not is_email(out["email"]):
        raise ValidationError("Invalid email address")
    return out


def check_upload_size(original_name: str, content: bytes, max_bytes: int) -> None:
    if len(content) > max_bytes:
        raise ValidationError(f"File '{original_name}' exceeds the {max_bytes} byte limit")


def discard_uploads(uploads_dir: str, refs: List[Dict[str, Any]]) -> None:
    """Remove files written for a submission that was not stored."""
    for ref in refs:
        path = contained_path(uploads_dir, ref["savedName"])
        if os.path.exists(path):
            os.remove(path)
            logger.info("discarded upload %s", ref["savedName"])


def save_upload(uploads_dir: str, original_name: str, content: bytes, mimetype: Optional[str],
                max_bytes: int, now=None) -> Dict[str, Any]:
    """Write one uploaded file and return its metadata reference."""
    now = now or utcnow()
    check_upload_size(original_name, content, max_bytes)
    base = os.path.basename((original_name or "").replace("\\", "/"))
    cleaned = _RE_FILENAME.sub("_", base).lstrip(".") or "upload"
    stem, ext = os.path.splitext(cleaned)
    prefix = f"{timestamp_key(now)}_{stem}"
    n = 0
    while True:
        saved_name = f"{prefix}-{n}{ext}" if n else f"{prefix}{ext}"
        path = contained_path(uploads_dir, saved_name)
        try:
            with open(path, "xb") as f:
                f.write(content)
            break
        except FileExistsError:
            n += 1
    return {
        "originalName": original_name,
        "savedName": saved_name,
        "size": len(content),
        "mimetype": mimetype or "application/octet-stream",
        "path": os.path.join("uploads", saved_name),
    }


class FormStore:
    """A RecordStore plus the CSV summary kept next to it."""
    def __init__(self, store: RecordStore, csv_name: str, header: List[str],
                 allowed, required, label_fn: Callable[[Dict[str, Any]], str],
                 row_fn: Callable[[Dict[str, Any]], List[Any]], defaults: Optional[Dict[str, Any]] = None):
        self.store = store
        self.csv_path = os.path.join(store.directory, csv_name)
        self.header = header
        self.allowed = allowed
        self.required = required
        self.label_fn = label_fn
        self.row_fn = row_fn
        self.defaults = defaults or {}

    def build(self, data: Dict[str, Any], now=None, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        now = now or utcnow()
        payload = dict(self.defaults)
        payload.update(pick_fields(data, self.allowed, self.required))
        if extra:
            payload.update(extra)
        payload["submittedAt"] = isoz(now)
        payload["submittedDate"] = display_datetime(now)
        return payload

    def submit(self, data: Dict[str, Any], now=None, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        now = now or utcnow()
        payload = self.build(data, now=now, extra=extra)
        record = self.store.append(payload, self.label_fn, now=now)
        csv_log.append_record(self.csv_path, self.header, self.row_fn(record))
        return record

    def list(self) -> List[Dict[str, Any]]:
        return sort_newest_first(self.store.list(), "submittedAt")

    def read(self, key: str) -> Dict[str, Any]:
        return self.store.read(key)

    def delete(self, key: str) -> None:
        self.store.delete(key)

    def summary_rows(self) -> List[dict]:
        return csv_log.read_rows(self.csv_path)


def application_store(store: RecordStore) -> FormStore:
    return FormStore(
        store, APPLICATION_CSV, APPLICATION_HEADER, APPLICATION_FIELDS, APPLICATION_REQUIRED,
        label_fn=lambda p: p.get("businessName") or "Unknown",
        row_fn=lambda r: [r.get("submittedDate"), r.get("fullName"), r.get("email"), r.get("phone"),
                          r.get("businessName"), r.get("industry"), r.get("website"), r.get("employeeCount")],
        defaults={"files": []},
    )


def contact_store(store: RecordStore) -> FormStore:
    return FormStore(
        store, CONTACT_CSV, CONTACT_HEADER, CONTACT_FIELDS, CONTACT_REQUIRED,
        label_fn=lambda p: p.get("name") or "Unknown",
        row_fn=lambda r: [r.get("submittedDate"), r.get("name"), r.get("email"), r.get("subject"), r.get("message")],
    )


def signup_store(store: RecordStore) -> FormStore:
    return FormStore(
        store, SIGNUP_CSV, SIGNUP_HEADER, SIGNUP_FIELDS, SIGNUP_REQUIRED,
        label_fn=lambda p: p.get("email") or "Unknown",
        row_fn=lambda r: [r.get("submittedDate"), r.get("name"), r.get("email"), r.get("source")],
        defaults={"source": "website"},
    )
