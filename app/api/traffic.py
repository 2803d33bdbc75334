# app/api/traffic.py
from fastapi import APIRouter, Depends, Query, Request
from app.db import Services, get_services
from app.models import VisitIn
from app.security import require_dashboard
from sitestore.traffic import build_visit, compute_stats
from sitestore.timeutil import utcnow

router = APIRouter()


def client_address(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded.strip():
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else ""


@router.post("/api/track-visit")
def track_visit(body: VisitIn, request: Request, services: Services = Depends(get_services)):
    now = utcnow()
    visit = build_visit(
        body.page,
        client_address(request),
        request.headers.get("user-agent", ""),
        referrer=body.referrer,
        title=body.title,
        site_host=request.headers.get("host"),
        now=now,
    )
    services.traffic.append(visit, now=now)
    return {"success": True}


@router.get("/api/traffic-stats", dependencies=[Depends(require_dashboard)])
def traffic_stats(days: int = Query(7, ge=1, le=365), services: Services = Depends(get_services)):
    stats = compute_stats(services.traffic.read(), days, now=utcnow())
    return {"success": True, "stats": stats}
