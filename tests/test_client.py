"""Tests for the dashboard API client against a fake HTTP session."""
import pytest

from app.client import DashboardClient, DashboardError


class FakeResponse:
    def __init__(self, status_code, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body


class FakeSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        return self.responses.pop(0)


def test_login_and_list_submissions():
    session = FakeSession(
        FakeResponse(200, {"success": True}),
        FakeResponse(200, {"success": True, "count": 1, "submissions": [{"id": "abc"}]}),
    )
    client = DashboardClient("http://site.test/", session=session)

    assert client.login("secret") is True
    assert client.submissions() == [{"id": "abc"}]
    assert session.calls[0][:2] == ("POST", "http://site.test/api/login")
    assert session.calls[0][2]["json"] == {"password": "secret"}
    assert session.calls[1][:2] == ("GET", "http://site.test/api/submissions")


def test_traffic_stats_passes_days():
    session = FakeSession(FakeResponse(200, {"success": True, "stats": {"pageViews": {"value": 3}}}))
    client = DashboardClient("http://site.test", session=session)

    assert client.traffic_stats(30)["pageViews"]["value"] == 3
    assert session.calls[0][2]["params"] == {"days": 30}


def test_error_envelope_raises_dashboard_error():
    session = FakeSession(FakeResponse(403, {"success": False, "message": "Authentication required"}))
    client = DashboardClient("http://site.test", session=session)

    with pytest.raises(DashboardError) as excinfo:
        client.email_signups()

    assert excinfo.value.status_code == 403
    assert excinfo.value.message == "Authentication required"


def test_non_json_error_uses_response_text():
    session = FakeSession(FakeResponse(502, None, text="Bad Gateway"))
    client = DashboardClient("http://site.test", session=session)

    with pytest.raises(DashboardError, match="Bad Gateway"):
        client.publish("launch-day")
