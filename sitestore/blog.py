# sitestore/blog.py
import re, math, logging
from typing import Any, Dict, List, Optional
from bs4 import BeautifulSoup
from sitestore.errors import InvalidState, ValidationError
from sitestore.publisher import BlogPublisher
from sitestore.records import IDENTITY_FIELDS, RecordStore, sort_newest_first
from sitestore.timeutil import isoz, utcnow

logger = logging.getLogger(__name__)

POST_FIELDS = ("title", "excerpt", "content", "category", "author", "heroImage")
DRAFT, PUBLISHED = "draft", "published"
WORDS_PER_MINUTE = 200
EXCERPT_CHARS = 160

_RE_SLUG = re.compile(r'[^a-z0-9]+')


def slugify(title: str) -> str:
    slug = _RE_SLUG.sub('-', (title or "").lower()).strip('-')
    if not slug:
        raise ValidationError("Title must contain letters or digits")
    return slug


def content_text(content: Optional[str]) -> str:
    if not content:
        return ""
    text = BeautifulSoup(content, "html.parser").get_text(" ")
    return re.sub(r'\s+', ' ', text).strip()


def read_time(content: Optional[str]) -> str:
    words = len(content_text(content).split())
    return f"{max(1, math.ceil(words / WORDS_PER_MINUTE))} min read"


def _clean(data: Dict[str, Any]) -> Dict[str, Any]:
    out = {}
    for k in POST_FIELDS:
        if k in data and data[k] is not None:
            v = data[k]
            out[k] = v.strip() if isinstance(v, str) else v
    return out


class BlogService:
    """
    Blog posts keyed by slug, with the draft/published state machine.
    A post is published iff its static page exists and the listing page
    carries its card; both are (re)written here whenever status changes.
    """
    def __init__(self, store: RecordStore, publisher: BlogPublisher):
        self.store = store
        self.publisher = publisher

    def list_posts(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        posts = self.store.list()
        if status:
            posts = [p for p in posts if p.get("status") == status]
        return sort_newest_first(posts, "createdAt")

    def published_posts(self) -> List[Dict[str, Any]]:
        return sort_newest_first(self.list_posts(PUBLISHED), "publishedAt")

    def get(self, slug: str) -> Dict[str, Any]:
        return self.store.read(slug)

    def _save(self, slug: str, post: Dict[str, Any]) -> None:
        self.store.save(slug, {k: v for k, v in post.items() if k not in IDENTITY_FIELDS})

    def _derive(self, post: Dict[str, Any]) -> Dict[str, Any]:
        post["readTime"] = read_time(post.get("content"))
        if not post.get("excerpt"):
            post["excerpt"] = content_text(post.get("content"))[:EXCERPT_CHARS]
        return post

    def create(self, data: Dict[str, Any], now=None) -> Dict[str, Any]:
        now = now or utcnow()
        fields = _clean(data)
        if not fields.get("title"):
            raise ValidationError("title is required")
        if not fields.get("content"):
            raise ValidationError("content is required")
        status = data.get("status") or DRAFT
        if status not in (DRAFT, PUBLISHED):
            raise ValidationError("status must be 'draft' or 'published'")
        slug = slugify(fields["title"])
        stamp = isoz(now)
        post = {
            "slug": slug,
            "title": fields["title"],
            "excerpt": fields.get("excerpt", ""),
            "content": fields["content"],
            "category": fields.get("category", "General"),
            "author": fields.get("author", ""),
            "heroImage": fields.get("heroImage"),
            "status": DRAFT,
            "createdAt": stamp,
            "updatedAt": stamp,
            "publishedAt": None,
        }
        self.store.create(slug, self._derive(post))
        if status == PUBLISHED:
            post = self.publish(slug, now=now)
        return post

    def update(self, slug: str, data: Dict[str, Any], now=None) -> Dict[str, Any]:
        now = now or utcnow()
        post = self.get(slug)
        fields = _clean(data)
        if "title" in fields and not fields["title"]:
            raise ValidationError("title cannot be empty")
        post.update(fields)
        post["updatedAt"] = isoz(now)
        self._save(slug, self._derive(post))
        if post.get("status") == PUBLISHED:
            self.publisher.write_page(post)
            self.upsert_listing_card(post)
        return post

    def publish(self, slug: str, now=None) -> Dict[str, Any]:
        now = now or utcnow()
        post = self.get(slug)
        if post.get("status") == PUBLISHED:
            raise InvalidState("Post is already published")
        post["status"] = PUBLISHED
        post["publishedAt"] = isoz(now)
        post["updatedAt"] = isoz(now)
        self.publisher.write_page(post)
        try:
            self._save(slug, post)
        except OSError:
            self.publisher.remove_page(slug)
            raise
        self.upsert_listing_card(post)
        logger.info("published %s", slug)
        return post

    def unpublish(self, slug: str, now=None) -> Dict[str, Any]:
        now = now or utcnow()
        post = self.get(slug)
        if post.get("status") != PUBLISHED:
            raise InvalidState("Post is not published")
        # publishedAt is kept as the last publication time
        post["status"] = DRAFT
        post["updatedAt"] = isoz(now)
        self._save(slug, post)
        self.publisher.remove_page(slug)
        self.remove_listing_card(post)
        logger.info("unpublished %s", slug)
        return post

    def delete(self, slug: str) -> None:
        post = self.get(slug)
        self.store.delete(slug)
        if post.get("status") == PUBLISHED or self.publisher.has_page(slug):
            self.publisher.remove_page(slug)
            self.remove_listing_card(post)

    def refresh_listing(self) -> None:
        self.publisher.write_listing(self.published_posts())

    def upsert_listing_card(self, post: Dict[str, Any]) -> bool:
        self.refresh_listing()
        ok = self.publisher.has_listing_card(post["slug"])
        if not ok:
            logger.warning("listing page has no card for %s after refresh", post["slug"])
        return ok

    def remove_listing_card(self, post: Dict[str, Any]) -> bool:
        self.refresh_listing()
        ok = not self.publisher.has_listing_card(post["slug"])
        if not ok:
            logger.warning("listing page still has a card for %s after refresh", post["slug"])
        return ok
