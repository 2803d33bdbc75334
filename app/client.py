# app/client.py
# Small HTTP client for the dashboard endpoints (used by streamlit_app.py)
import requests


class DashboardError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class DashboardClient:
    def __init__(self, base_url: str = "http://localhost:8000", session=None, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _call(self, method: str, path: str, **kwargs):
        resp = self.session.request(method, self.base_url + path, timeout=self.timeout, **kwargs)
        try:
            body = resp.json()
        except ValueError:
            body = {"success": False, "message": resp.text}
        if resp.status_code >= 400 or not body.get("success", False):
            raise DashboardError(resp.status_code, body.get("message") or "request failed")
        return body

    def login(self, password: str) -> bool:
        self._call("POST", "/api/login", json={"password": password})
        return True

    def logout(self):
        self._call("POST", "/api/logout")

    def submissions(self):
        return self._call("GET", "/api/submissions")["submissions"]

    def submission(self, submission_id: str):
        return self._call("GET", f"/api/submissions/{submission_id}")["submission"]

    def delete_submission(self, submission_id: str):
        self._call("DELETE", f"/api/submissions/{submission_id}")

    def email_signups(self):
        return self._call("GET", "/api/email-signups")["signups"]

    def traffic_stats(self, days: int = 7):
        return self._call("GET", "/api/traffic-stats", params={"days": days})["stats"]

    def blog_posts(self):
        return self._call("GET", "/api/blog-posts")["posts"]

    def publish(self, slug: str):
        return self._call("POST", f"/api/blog-posts/{slug}/publish")["post"]

    def unpublish(self, slug: str):
        return self._call("POST", f"/api/blog-posts/{slug}/unpublish")["post"]
