# app/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware
from app.api.auth import router as auth_router
from app.api.blog import router as blog_router
from app.api.comments import router as comments_router
from app.api.errors import router as errors_router
from app.api.forms import router as forms_router
from app.api.site import router as site_router
from app.api.submissions import router as submissions_router
from app.api.traffic import router as traffic_router
from app.db import build_services
from app.security import is_authenticated, static_access_response
from sitestore.config import Settings
from sitestore.errors import StoreError
from sitestore.logging_utils import configure_logging, log_exception

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        settings.ensure_dirs()
        logger.info("serving site from %s", settings.site_root)
        yield

    app = FastAPI(title="Site Backend", lifespan=lifespan)
    app.state.settings = settings
    app.state.services = build_services(settings)

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={
            "success": False,
            "message": "Invalid request",
            "details": jsonable_encoder(exc.errors()),
        })

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"success": False, "message": str(exc.detail)},
                            headers=getattr(exc, "headers", None))

    @app.exception_handler(OSError)
    async def io_error_handler(request: Request, exc: OSError):
        err_id = log_exception(settings.error_log_path, exc, context={"method": request.method, "path": request.url.path})
        return JSONResponse(status_code=500, content={
            "success": False,
            "message": "Server error while accessing storage",
            "error": str(exc),
            "errorId": err_id,
        })

    @app.middleware("http")
    async def guard_static(request: Request, call_next):
        blocked = static_access_response(request.scope["path"], is_authenticated(request))
        if blocked is not None:
            return blocked
        return await call_next(request)

    # added after the guard so the session is decoded before it runs
    app.add_middleware(SessionMiddleware, secret_key=settings.session_secret, same_site="lax")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(site_router, prefix="")
    app.include_router(auth_router, prefix="")
    app.include_router(submissions_router, prefix="")
    app.include_router(forms_router, prefix="")
    app.include_router(traffic_router, prefix="")
    app.include_router(blog_router, prefix="")
    app.include_router(comments_router, prefix="")
    app.include_router(errors_router, prefix="")

    app.mount("/", StaticFiles(directory=settings.site_root, html=True, check_dir=False), name="site")
    return app


app = create_app()
