# sitestore/comments.py
import logging
from typing import Any, Dict, List
from sitestore.errors import ValidationError
from sitestore.records import RecordStore
from sitestore.timeutil import display_date, isoz, utcnow

logger = logging.getLogger(__name__)

MAX_NAME = 100
MAX_TEXT = 2000


class CommentStore:
    """One JSON array per post id, newest comment first. Append only."""
    def __init__(self, store: RecordStore):
        self.store = store

    def list(self, post_id: str) -> List[Dict[str, Any]]:
        data = self.store.read_raw(post_id, default=[])
        if not isinstance(data, list):
            logger.warning("comment bucket %s is not a list, ignoring", post_id)
            return []
        return [c for c in data if isinstance(c, dict)]

    def add(self, post_id: str, name: str, text: str, now=None) -> Dict[str, Any]:
        name = (name or "").strip()
        text = (text or "").strip()
        if not name or not text:
            raise ValidationError("Name and comment are required")
        if len(name) > MAX_NAME:
            raise ValidationError(f"Name must be at most {MAX_NAME} characters")
        if len(text) > MAX_TEXT:
            raise ValidationError(f"Comment must be at most {MAX_TEXT} characters")
        now = now or utcnow()
        comments = self.list(post_id)
        taken = {c.get("id") for c in comments}
        n = int(now.timestamp() * 1000)
        while str(n) in taken:
            n += 1
        comment = {
            "id": str(n),
            "name": name,
            "text": text,
            "date": display_date(now),
            "createdAt": isoz(now),
        }
        comments.insert(0, comment)
        self.store.write_raw(post_id, comments)
        logger.info("comment %s added to %s", comment["id"], post_id)
        return comment
