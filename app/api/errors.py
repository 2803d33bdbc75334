# app/api/errors.py
from fastapi import APIRouter, Depends
from app.db import Services, get_services
from app.security import require_dashboard
from sitestore.errors import NotFound
from sitestore.logging_utils import last_error as read_last_error

router = APIRouter()


@router.get("/api/last-error", dependencies=[Depends(require_dashboard)])
def last_error(services: Services = Depends(get_services)):
    entry = read_last_error(services.settings.error_log_path)
    if entry is None:
        raise NotFound("No errors logged")
    return {"success": True, "error": entry}
