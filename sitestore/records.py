# sitestore/records.py
import os, json, logging
from typing import Any, Callable, Dict, List, Optional
from sitestore.config import StoreConfig
from sitestore.errors import Conflict, NotFound
from sitestore.identifiers import safe_path, sanitize_label, timestamp_key
from sitestore.timeutil import EPOCH, parse_instant, utcnow

logger = logging.getLogger(__name__)

# filled in on read from the filename; not part of the stored document
IDENTITY_FIELDS = ("id", "fileName")


def sort_newest_first(records: List[Dict[str, Any]], *fields: str) -> List[Dict[str, Any]]:
    """
    Sort records by the first present timestamp field, newest first.
    Records without a parseable timestamp go last.
    """
    fields = fields or ("submittedAt", "createdAt")

    def _key(rec):
        for f in fields:
            dt = parse_instant(rec.get(f))
            if dt is not None:
                return dt
        return EPOCH

    return sorted(records, key=_key, reverse=True)


class RecordStore:
    """
    One JSON file per record inside a single directory.
    Keys are validated identifiers; the filename is key + extension.
    """
    def __init__(self, config: StoreConfig):
        self.config = config
        self.directory = config.directory
        self.extension = config.extension

    def ensure_directory(self):
        os.makedirs(self.directory, exist_ok=True)

    def path_for(self, key: str) -> str:
        return safe_path(self.directory, key, self.extension)

    def exists(self, key: str) -> bool:
        return os.path.isfile(self.path_for(key))

    def _write(self, path: str, payload: Dict[str, Any]):
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)

    def create(self, key: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        path = self.path_for(key)
        if os.path.exists(path):
            raise Conflict(f"'{key}' already exists")
        self._write(path, payload)
        logger.info("created %s", os.path.basename(path))
        return payload

    def save(self, key: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Overwrite an existing record."""
        path = self.path_for(key)
        if not os.path.isfile(path):
            raise NotFound(f"'{key}' not found")
        self._write(path, payload)
        return payload

    def append(self, payload: Dict[str, Any], key_fn: Callable[[Dict[str, Any]], str], now=None) -> Dict[str, Any]:
        """
        Store payload under <timestamp>_<label>, label = sanitized key_fn(payload).
        Never overwrites: a numeric suffix is added if the key is taken.
        The record gets its id and fileName filled in.
        """
        now = now or utcnow()
        base = f"{timestamp_key(now)}_{sanitize_label(key_fn(payload))}"
        key, n = base, 0
        while os.path.exists(self.path_for(key)):
            n += 1
            key = f"{base}-{n}"
        record = {"id": key, "fileName": key + self.extension}
        record.update(payload)
        self._write(self.path_for(key), record)
        logger.info("saved %s", record["fileName"])
        return record

    def _load(self, path: str):
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _with_identity(self, filename: str, data):
        if not isinstance(data, dict):
            raise ValueError("record is not a JSON object")
        key = filename[: -len(self.extension)] if self.extension else filename
        data.setdefault("id", key)
        data.setdefault("fileName", filename)
        return data

    def read(self, key: str) -> Dict[str, Any]:
        path = self.path_for(key)
        if not os.path.isfile(path):
            raise NotFound(f"'{key}' not found")
        try:
            return self._with_identity(os.path.basename(path), self._load(path))
        except ValueError as e:
            logger.warning("unreadable record %s: %s", path, e)
            raise NotFound(f"'{key}' not found")

    def list(self) -> List[Dict[str, Any]]:
        """Every parseable record in the directory; unparseable files are skipped."""
        out = []
        if not os.path.isdir(self.directory):
            return out
        for name in sorted(os.listdir(self.directory)):
            if not name.endswith(self.extension):
                continue
            path = os.path.join(self.directory, name)
            if not os.path.isfile(path):
                continue
            try:
                out.append(self._with_identity(name, self._load(path)))
            except (ValueError, UnicodeDecodeError) as e:
                logger.warning("skipping unreadable record %s: %s", name, e)
        return out

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        if not os.path.isfile(path):
            raise NotFound(f"'{key}' not found")
        os.remove(path)
        logger.info("deleted %s", os.path.basename(path))

    def read_raw(self, key: str, default: Optional[Any] = None):
        """Load a file's JSON as-is (used for array-valued buckets)."""
        path = self.path_for(key)
        if not os.path.isfile(path):
            return default
        try:
            return self._load(path)
        except ValueError as e:
            logger.warning("unreadable file %s: %s", path, e)
            return default

    def write_raw(self, key: str, data) -> None:
        self._write(self.path_for(key), data)
