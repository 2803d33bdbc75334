# app/api/site.py
import os, io, zipfile
from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from app.db import Services, get_services
from app.security import require_dashboard
from sitestore.config import DATA_DIRS
from sitestore.timeutil import isoz, utcnow

router = APIRouter()

SITE_EXTENSIONS = (".html", ".css", ".js", ".png", ".jpg", ".jpeg", ".gif", ".svg",
                   ".webp", ".ico", ".txt", ".xml")


def site_files(root: str):
    """Relative paths of static site files under root, data directories excluded."""
    out = []
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = os.path.relpath(dirpath, root)
        if rel_dir == ".":
            dirnames[:] = [d for d in dirnames if d not in DATA_DIRS and not d.startswith(".")]
        else:
            dirnames[:] = [d for d in dirnames if not d.startswith(".")]
        for name in filenames:
            if name.startswith(".") or not name.lower().endswith(SITE_EXTENSIONS):
                continue
            out.append(os.path.normpath(os.path.join(rel_dir, name)))
    return sorted(out)


def build_site_zip(root: str) -> io.BytesIO:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for rel in site_files(root):
            zf.write(os.path.join(root, rel), rel.replace(os.sep, "/"))
    buf.seek(0)
    return buf


@router.get("/api/health")
def health():
    return {"success": True, "status": "Server is running", "timestamp": isoz(utcnow())}


@router.get("/api/download-site", dependencies=[Depends(require_dashboard)])
def download_site(services: Services = Depends(get_services)):
    buf = build_site_zip(services.settings.site_root)
    return StreamingResponse(
        buf,
        media_type="application/zip",
        headers={"Content-Disposition": 'attachment; filename="site.zip"'},
    )
