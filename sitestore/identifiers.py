# sitestore/identifiers.py
import os, re, datetime
from sitestore.errors import ValidationError, Forbidden

_RE_SAFE_ID = re.compile(r'^[A-Za-z0-9_-]+$')
_RE_LABEL = re.compile(r'[^a-z0-9]', re.I)


def validate(identifier) -> bool:
    """True iff identifier is a non-empty string of letters, digits, '_' or '-'."""
    if not isinstance(identifier, str):
        return False
    return _RE_SAFE_ID.fullmatch(identifier) is not None


def require_valid(identifier, what: str = "identifier") -> str:
    if not validate(identifier):
        raise ValidationError(f"Invalid {what}")
    return identifier


def sanitize_label(label, fallback: str = "Unknown") -> str:
    # "Test Company Inc" -> "test_company_inc"
    label = label if isinstance(label, str) and label.strip() else fallback
    return _RE_LABEL.sub('_', label).lower()


def timestamp_key(now: datetime.datetime) -> str:
    """
    ISO-8601 UTC instant with ':' and '.' replaced by '-',
    e.g. 2026-10-18T09-30-00-123Z
    """
    now = now.astimezone(datetime.timezone.utc)
    return now.strftime("%Y-%m-%dT%H-%M-%S-") + f"{now.microsecond // 1000:03d}Z"


def contained_path(directory: str, filename: str) -> str:
    """
    Resolve directory/filename and make sure the result is still inside
    directory (symlinks resolved). Raises Forbidden otherwise.
    """
    base = os.path.realpath(directory)
    target = os.path.realpath(os.path.join(base, filename))
    if os.path.commonpath([base, target]) != base or target == base:
        raise Forbidden("Access denied")
    return target


def safe_path(directory: str, identifier, extension: str = "", what: str = "identifier") -> str:
    require_valid(identifier, what)
    return contained_path(directory, identifier + extension)
