# app/api/submissions.py
import logging
from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError as ModelError
from app.db import Services, get_services
from app.models import ApplicationIn
from app.security import require_dashboard
from sitestore.errors import StoreError, ValidationError
from sitestore.forms import MAX_FILES, check_upload_size, discard_uploads, save_upload
from sitestore.identifiers import require_valid
from sitestore.timeutil import utcnow

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_application(request: Request, services: Services):
    """
    Accept a JSON body or a multipart form with optional 'files' parts.
    Returns the fields plus (name, content, mimetype) for each upload;
    nothing is written to disk here.
    """
    content_type = request.headers.get("content-type", "")
    uploads = []
    if "multipart/form-data" in content_type or "application/x-www-form-urlencoded" in content_type:
        form = await request.form()
        data = {}
        parts = []
        for key, value in form.multi_items():
            if hasattr(value, "filename") and hasattr(value, "read"):
                if value.filename:
                    parts.append(value)
            else:
                data[key] = value
        if len(parts) > MAX_FILES:
            raise ValidationError(f"At most {MAX_FILES} files may be uploaded")
        for part in parts:
            content = await part.read()
            check_upload_size(part.filename, content, services.settings.max_upload_bytes)
            uploads.append((part.filename, content, part.content_type))
    else:
        try:
            data = await request.json()
        except (ValueError, UnicodeDecodeError):
            raise ValidationError("Request body must be JSON or a form")
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
    try:
        fields = ApplicationIn(**data).model_dump(exclude_none=True)
    except ModelError as e:
        raise ValidationError("Invalid application: " + "; ".join(err["msg"] for err in e.errors()))
    return fields, uploads


@router.post("/api/submit-application")
async def submit_application(request: Request, services: Services = Depends(get_services)):
    now = utcnow()
    fields, uploads = await _read_application(request, services)
    # required fields are checked before any upload is written
    services.applications.build(fields, now=now)
    uploads_dir = services.settings.uploads_dir
    files = []
    try:
        for name, content, mimetype in uploads:
            files.append(save_upload(uploads_dir, name, content, mimetype,
                                     services.settings.max_upload_bytes, now=now))
        record = services.applications.submit(fields, now=now, extra={"files": files})
    except (StoreError, OSError):
        discard_uploads(uploads_dir, files)
        raise
    logger.info("received application submission %s with %d file(s)", record["id"], len(files))
    return {
        "success": True,
        "message": "Application submitted successfully!",
        "fileName": record["fileName"],
        "id": record["id"],
    }


@router.get("/api/submissions", dependencies=[Depends(require_dashboard)])
def list_submissions(services: Services = Depends(get_services)):
    subs = services.applications.list()
    return {"success": True, "count": len(subs), "submissions": subs}


@router.get("/api/submissions/{submission_id}", dependencies=[Depends(require_dashboard)])
def get_submission(submission_id: str, services: Services = Depends(get_services)):
    require_valid(submission_id, "submission id")
    return {"success": True, "submission": services.applications.read(submission_id)}


@router.delete("/api/submissions/{submission_id}", dependencies=[Depends(require_dashboard)])
def delete_submission(submission_id: str, services: Services = Depends(get_services)):
    require_valid(submission_id, "submission id")
    services.applications.delete(submission_id)
    return {"success": True, "message": "Submission deleted successfully"}
