"""Tests for visit logging, source categorization and traffic statistics."""
import datetime
import json

import pytest

from sitestore.errors import ValidationError
from sitestore.timeutil import isoz, parse_instant
from sitestore.traffic import (
    TrafficLog,
    build_visit,
    categorize_source,
    compute_stats,
    referrer_label,
)

DAY = datetime.timedelta(days=1)


def _visit(page, who, ts, referrer=None, title=None):
    return build_visit(page, who, f"agent-{who}", referrer=referrer, title=title, now=ts)


def test_build_visit_fields(now):
    visit = build_visit("/pricing", "198.51.100.4", "UA", referrer="https://www.google.com/", title="Pricing", now=now)

    assert visit["page"] == "/pricing"
    assert visit["title"] == "Pricing"
    assert visit["source"] == "Organic Search"
    assert visit["timestamp"] == "2026-10-18T12:00:00.000Z"
    assert visit["date"] == "2026-10-18"
    assert visit["userAgent"] == "UA"
    assert visit["visitorId"]


def test_build_visit_requires_page(now):
    with pytest.raises(ValidationError):
        build_visit("", "1.1.1.1", "UA", now=now)


@pytest.mark.parametrize(
    "referrer,page,expected",
    [
        ("", "/", "Direct"),
        (None, "/", "Direct"),
        ("https://www.google.com/search?q=x", "/", "Organic Search"),
        ("https://duckduckgo.com/", "/", "Organic Search"),
        ("https://l.facebook.com/l.php", "/", "Social"),
        ("https://t.co/abc", "/", "Social"),
        ("https://mail.google.com/", "/", "Email"),
        ("https://partner.example.org/links", "/", "Referral"),
        ("android-app://com.slack", "/", "Referral"),
        ("", "/landing?utm_source=newsletter&utm_medium=email", "Email"),
        ("https://www.google.com/", "/landing?utm_source=spring", "Campaign: spring"),
    ],
)
def test_categorize_source(referrer, page, expected):
    assert categorize_source(referrer, page) == expected


def test_categorize_internal_referrer():
    assert categorize_source("https://mysite.test/about", "/contact", site_host="mysite.test:8000") == "Internal"


def test_referrer_label_normalizes_urls_to_hostname():
    assert referrer_label("https://www.google.com/search?q=x") == "www.google.com"
    assert referrer_label("not a url") == "not a url"
    assert referrer_label("") == "Direct"
    assert referrer_label(None) == "Direct"


def test_compute_stats_headline_example(now):
    day1 = now - DAY
    visits = [
        _visit("/x", "A", day1),
        _visit("/y", "A", day1 + datetime.timedelta(minutes=1)),
        _visit("/x", "A", day1 + datetime.timedelta(minutes=2)),
        _visit("/x", "B", day1 + datetime.timedelta(minutes=3)),
    ]
    assert visits[0]["visitorId"] != visits[3]["visitorId"]

    stats = compute_stats(visits, 7, now=now)

    assert stats["pageViews"]["value"] == 4
    assert stats["visitors"]["value"] == 2
    assert stats["bounceRate"]["value"] == 50
    assert stats["avgSession"]["value"] == "2.0 pages"
    assert stats["pageViews"]["change"] == 0
    assert stats["bounceRate"]["change"] == 0


def test_compute_stats_changes_against_previous_window(now):
    current = [_visit("/a", "A", now - DAY), _visit("/b", "B", now - DAY), _visit("/c", "C", now - 2 * DAY),
               _visit("/c", "C", now - 2 * DAY)]
    previous = [_visit("/a", "A", now - 10 * DAY), _visit("/a", "A", now - 9 * DAY)]
    ancient = [_visit("/a", "Z", now - 30 * DAY)]

    stats = compute_stats(current + previous + ancient, 7, now=now)

    assert stats["pageViews"] == {"value": 4, "change": 100.0}
    assert stats["visitors"] == {"value": 3, "change": 200.0}
    # every visitor saw a single distinct page in both windows
    assert stats["bounceRate"] == {"value": 100.0, "change": 0.0}
    assert stats["avgSession"]["pages"] == 1.3
    assert stats["avgSession"]["change"] == -35.0


def test_daily_buckets_are_seeded_for_every_day(now):
    stats = compute_stats([_visit("/", "A", now - 2 * DAY), _visit("/", "B", now - 2 * DAY)], 7, now=now)

    dates = [d["date"] for d in stats["daily"]]
    assert len(dates) == 7
    assert dates[0] == "2026-10-12"
    assert dates[-1] == "2026-10-18"
    by_date = {d["date"]: d for d in stats["daily"]}
    assert by_date["2026-10-16"] == {"date": "2026-10-16", "pageViews": 2, "visitors": 2}
    assert by_date["2026-10-17"]["pageViews"] == 0


def test_top_lists_prefer_titles_and_keep_first_seen_order_on_ties(now):
    t = now - DAY
    visits = [
        _visit("/b", "A", t),
        _visit("/a", "A", t),
        _visit("/b", "B", t),
        _visit("/a", "B", t),
        _visit("/", "C", t, title="Home"),
    ]

    stats = compute_stats(visits, 7, now=now)

    assert [p["name"] for p in stats["topPages"]] == ["/b", "/a", "Home"]
    assert stats["topPages"][0] == {"name": "/b", "count": 2, "percentage": 40.0}


def test_top_lists_are_capped_at_five(now):
    visits = [_visit(f"/p{i}", "A", now - DAY) for i in range(8)]

    stats = compute_stats(visits, 7, now=now)

    assert len(stats["topPages"]) == 5
    assert stats["sources"] == [{"name": "Direct", "count": 8, "percentage": 100.0}]
    assert stats["referrers"] == [{"name": "Direct", "count": 8, "percentage": 100.0}]


def test_compute_stats_empty_and_invalid_window(now):
    stats = compute_stats([], 30, now=now)

    assert stats["pageViews"]["value"] == 0
    assert stats["avgSession"]["value"] == "0.0 pages"
    assert len(stats["daily"]) == 30
    with pytest.raises(ValidationError):
        compute_stats([], 0, now=now)


def test_traffic_log_prunes_visits_older_than_horizon(tmp_path, now):
    path = tmp_path / "visits.json"
    old = [_visit("/", "A", now - 100 * DAY), _visit("/", "B", now - 89 * DAY)]
    path.write_text(json.dumps(old), encoding="utf-8")
    log = TrafficLog(str(path), retention_days=90)

    log.append(_visit("/new", "C", now), now=now)

    stored = log.read()
    assert [v["page"] for v in stored] == ["/", "/new"]
    horizon = now - 90 * DAY
    assert all(parse_instant(v["timestamp"]) >= horizon for v in stored)


def test_traffic_log_treats_corrupt_file_as_empty(tmp_path, now):
    path = tmp_path / "visits.json"
    path.write_text("[{broken", encoding="utf-8")
    log = TrafficLog(str(path))

    assert log.read() == []
    log.append(_visit("/", "A", now), now=now)
    assert len(log.read()) == 1


def test_period_bounds_are_reported(now):
    stats = compute_stats([], 7, now=now)

    assert stats["period"] == {"days": 7, "start": isoz(now - 7 * DAY), "end": isoz(now)}
