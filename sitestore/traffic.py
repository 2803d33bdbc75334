# sitestore/traffic.py
import os, json, logging, datetime
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlparse, parse_qs
from sitestore.errors import ValidationError
from sitestore.fingerprint import fingerprint
from sitestore.timeutil import isoz, parse_instant, utcnow

logger = logging.getLogger(__name__)

TOP_N = 5

SEARCH_HOSTS = ("google.", "bing.", "yahoo.", "duckduckgo.", "baidu.", "yandex.", "ecosia.")
SOCIAL_HOSTS = ("facebook.", "instagram.", "twitter.", "t.co", "x.com", "linkedin.", "lnkd.in",
                "reddit.", "pinterest.", "tiktok.", "youtube.", "youtu.be")


def _host(url: str) -> Optional[str]:
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if parsed.scheme in ("http", "https") and parsed.hostname:
        return parsed.hostname.lower()
    return None


def _host_matches(host: str, patterns) -> bool:
    bare = host[4:] if host.startswith("www.") else host
    for p in patterns:
        if p.endswith("."):
            if ("." + p) in ("." + bare):
                return True
        elif bare == p or bare.endswith("." + p):
            return True
    return False


def categorize_source(referrer: Optional[str], page: Optional[str] = None, site_host: Optional[str] = None) -> str:
    """Bucket a visit into a traffic source from its page query and referrer."""
    query = parse_qs(urlparse(page or "").query)
    utm_source = (query.get("utm_source") or [""])[0].strip()
    utm_medium = (query.get("utm_medium") or [""])[0].strip().lower()
    if utm_medium == "email":
        return "Email"
    if utm_source:
        return f"Campaign: {utm_source}"
    if not referrer:
        return "Direct"
    host = _host(referrer)
    if not host:
        return "Referral"
    if site_host and host == site_host.lower().split(":")[0]:
        return "Internal"
    if "mail." in host:
        return "Email"
    if _host_matches(host, SEARCH_HOSTS):
        return "Organic Search"
    if _host_matches(host, SOCIAL_HOSTS):
        return "Social"
    return "Referral"


def referrer_label(referrer: Optional[str]) -> str:
    if not referrer:
        return "Direct"
    return _host(referrer) or referrer


def build_visit(page: str, remote_address: str, user_agent: str, referrer: Optional[str] = None,
                title: Optional[str] = None, site_host: Optional[str] = None, now=None) -> Dict[str, Any]:
    if not isinstance(page, str) or not page.strip():
        raise ValidationError("page is required")
    now = now or utcnow()
    return {
        "page": page.strip(),
        "title": (title or "").strip(),
        "referrer": (referrer or "").strip(),
        "source": categorize_source(referrer, page, site_host),
        "visitorId": fingerprint(remote_address, user_agent),
        "timestamp": isoz(now),
        "date": now.astimezone(datetime.timezone.utc).date().isoformat(),
        "userAgent": user_agent or "",
    }


class TrafficLog:
    """
    All visits in one JSON array file. Every append prunes entries older
    than the retention horizon, so the file never grows without bound.
    """
    def __init__(self, path: str, retention_days: int = 90):
        self.path = path
        self.retention_days = retention_days

    def read(self) -> List[Dict[str, Any]]:
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except ValueError as e:
            logger.warning("unreadable visit log %s: %s", self.path, e)
            return []
        if not isinstance(data, list):
            logger.warning("visit log %s is not a list, ignoring", self.path)
            return []
        return [v for v in data if isinstance(v, dict)]

    def prune(self, visits: Iterable[Dict[str, Any]], now=None) -> List[Dict[str, Any]]:
        now = now or utcnow()
        horizon = now - datetime.timedelta(days=self.retention_days)
        kept = []
        for v in visits:
            ts = parse_instant(v.get("timestamp"))
            if ts is not None and ts >= horizon:
                kept.append(v)
        return kept

    def append(self, visit: Dict[str, Any], now=None) -> Dict[str, Any]:
        now = now or utcnow()
        visits = self.read()
        visits.append(visit)
        visits = self.prune(visits, now=now)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(visits, f, ensure_ascii=False, indent=2)
        logger.debug("tracked visit to %s (%d stored)", visit.get("page"), len(visits))
        return visit


def _pct_change(current: float, previous: float) -> float:
    if not previous:
        return 0
    return round((current - previous) / previous * 100, 1)


def _headline(visits: List[Dict[str, Any]]) -> Dict[str, float]:
    page_views = len(visits)
    pages_by_visitor: Dict[str, set] = {}
    for v in visits:
        pages_by_visitor.setdefault(v.get("visitorId"), set()).add(v.get("page"))
    visitors = len(pages_by_visitor)
    bounced = sum(1 for pages in pages_by_visitor.values() if len(pages) == 1)
    return {
        "pageViews": page_views,
        "visitors": visitors,
        "bounceRate": round(bounced / visitors * 100, 1) if visitors else 0,
        "avgSession": round(page_views / visitors, 1) if visitors else 0,
    }


def _top(counter: Counter, total: int) -> List[Dict[str, Any]]:
    # Counter.most_common is a stable sort: ties keep first-seen order
    return [
        {"name": name, "count": count, "percentage": round(count / total * 100, 1) if total else 0}
        for name, count in counter.most_common(TOP_N)
    ]


def compute_stats(all_visits: Iterable[Dict[str, Any]], window_days: int = 7, now=None) -> Dict[str, Any]:
    """
    Headline metrics, daily series and top-N breakdowns for the window
    [now - window_days, now], with changes against the window before it.
    """
    if window_days < 1:
        raise ValidationError("days must be at least 1")
    now = now or utcnow()
    window = datetime.timedelta(days=window_days)
    start, prev_start = now - window, now - 2 * window

    current, previous = [], []
    for v in all_visits:
        ts = parse_instant(v.get("timestamp"))
        if ts is None:
            continue
        if start <= ts <= now:
            current.append(v)
        elif prev_start <= ts < start:
            previous.append(v)

    cur, prev = _headline(current), _headline(previous)

    today = now.astimezone(datetime.timezone.utc).date()
    daily: Dict[str, Dict[str, Any]] = {}
    for i in range(window_days - 1, -1, -1):
        d = (today - datetime.timedelta(days=i)).isoformat()
        daily[d] = {"date": d, "pageViews": 0, "visitors": set()}
    for v in current:
        day = v.get("date") or parse_instant(v.get("timestamp")).date().isoformat()
        bucket = daily.get(day)
        if bucket is None:
            continue
        bucket["pageViews"] += 1
        bucket["visitors"].add(v.get("visitorId"))

    sources, pages, referrers = Counter(), Counter(), Counter()
    for v in current:
        sources[v.get("source") or "Direct"] += 1
        pages[v.get("title") or v.get("page") or "/"] += 1
        referrers[referrer_label(v.get("referrer"))] += 1

    return {
        "period": {"days": window_days, "start": isoz(start), "end": isoz(now)},
        "pageViews": {"value": cur["pageViews"], "change": _pct_change(cur["pageViews"], prev["pageViews"])},
        "visitors": {"value": cur["visitors"], "change": _pct_change(cur["visitors"], prev["visitors"])},
        "bounceRate": {
            "value": cur["bounceRate"],
            "change": round(cur["bounceRate"] - prev["bounceRate"], 1) if prev["visitors"] else 0,
        },
        "avgSession": {
            "value": f"{cur['avgSession']:.1f} pages",
            "pages": cur["avgSession"],
            "change": _pct_change(cur["avgSession"], prev["avgSession"]),
        },
        "daily": [
            {"date": b["date"], "pageViews": b["pageViews"], "visitors": len(b["visitors"])}
            for b in daily.values()
        ],
        "sources": _top(sources, cur["pageViews"]),
        "topPages": _top(pages, cur["pageViews"]),
        "referrers": _top(referrers, cur["pageViews"]),
    }
