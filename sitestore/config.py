# sitestore/config.py
import os, secrets
from dataclasses import dataclass, field
from typing import List

DATA_DIRS = ("submissions", "uploads", "comments", "blog-data", "traffic", "logs")


@dataclass(frozen=True)
class StoreConfig:
    directory: str
    extension: str = ".json"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    try:
        return int(raw) if raw.strip() else default
    except ValueError:
        return default


@dataclass
class Settings:
    """
    Runtime configuration for the site backend.
    All data directories hang off site_root; nothing is created until
    ensure_dirs() is called (once, at application startup).
    """
    site_root: str
    dashboard_password: str = ""
    session_secret: str = field(default_factory=lambda: secrets.token_hex(32))
    log_level: str = "INFO"
    traffic_retention_days: int = 90
    max_upload_bytes: int = 10 * 1024 * 1024
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls):
        origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
        return cls(
            site_root=os.path.abspath(os.getenv("SITE_ROOT") or os.getcwd()),
            dashboard_password=os.getenv("DASHBOARD_PASSWORD", ""),
            session_secret=os.getenv("SESSION_SECRET") or secrets.token_hex(32),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            traffic_retention_days=_int_env("TRAFFIC_RETENTION_DAYS", 90),
            max_upload_bytes=_int_env("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
            cors_origins=origins or ["*"],
        )

    def _path(self, *parts):
        return os.path.join(self.site_root, *parts)

    @property
    def submissions_dir(self):
        return self._path("submissions")

    @property
    def emails_dir(self):
        return self._path("submissions", "emails")

    @property
    def contacts_dir(self):
        return self._path("submissions", "contacts")

    @property
    def uploads_dir(self):
        return self._path("uploads")

    @property
    def comments_dir(self):
        return self._path("comments")

    @property
    def blog_data_dir(self):
        return self._path("blog-data")

    @property
    def blog_pages_dir(self):
        return self._path("blog")

    @property
    def listing_path(self):
        return self._path("blog.html")

    @property
    def traffic_dir(self):
        return self._path("traffic")

    @property
    def visits_path(self):
        return self._path("traffic", "visits.json")

    @property
    def logs_dir(self):
        return self._path("logs")

    @property
    def error_log_path(self):
        return self._path("logs", "errors.log")

    def store_config(self, directory: str) -> StoreConfig:
        return StoreConfig(directory=directory, extension=".json")

    def ensure_dirs(self):
        for d in (
            self.site_root,
            self.submissions_dir,
            self.emails_dir,
            self.contacts_dir,
            self.uploads_dir,
            self.comments_dir,
            self.blog_data_dir,
            self.blog_pages_dir,
            self.traffic_dir,
            self.logs_dir,
        ):
            os.makedirs(d, exist_ok=True)
