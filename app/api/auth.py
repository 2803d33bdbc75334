# app/api/auth.py
import logging
from fastapi import APIRouter, Depends, Request
from app.db import Services, get_services
from app.models import LoginIn
from app.security import SESSION_KEY, check_password, is_authenticated
from sitestore.errors import Forbidden

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/login")
def login(body: LoginIn, request: Request, services: Services = Depends(get_services)):
    if not check_password(services.settings.dashboard_password, body.password):
        logger.warning("failed dashboard login")
        raise Forbidden("Invalid password")
    request.session[SESSION_KEY] = True
    return {"success": True, "message": "Logged in"}


@router.post("/api/logout")
def logout(request: Request):
    request.session.clear()
    return {"success": True, "message": "Logged out"}


@router.get("/api/auth-status")
def auth_status(request: Request):
    return {"success": True, "authenticated": is_authenticated(request)}
