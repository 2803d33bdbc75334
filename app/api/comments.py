# app/api/comments.py
from fastapi import APIRouter, Depends
from app.db import Services, get_services
from app.models import CommentIn
from sitestore.identifiers import require_valid

router = APIRouter()


@router.get("/api/comments/{post_id}")
def get_comments(post_id: str, services: Services = Depends(get_services)):
    require_valid(post_id, "post id")
    comments = services.comments.list(post_id)
    return {"success": True, "count": len(comments), "comments": comments}


@router.post("/api/comments/{post_id}")
def add_comment(post_id: str, body: CommentIn, services: Services = Depends(get_services)):
    require_valid(post_id, "post id")
    comment = services.comments.add(post_id, body.name, body.text)
    return {"success": True, "comment": comment}
