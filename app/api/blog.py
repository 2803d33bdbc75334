# app/api/blog.py
from typing import Optional
from fastapi import APIRouter, Depends, Query
from app.db import Services, get_services
from app.models import BlogPostIn
from app.security import require_dashboard
from sitestore.identifiers import require_valid

router = APIRouter(dependencies=[Depends(require_dashboard)])


@router.get("/api/blog-posts")
def list_posts(status: Optional[str] = Query(None), services: Services = Depends(get_services)):
    posts = services.blog.list_posts(status)
    return {"success": True, "count": len(posts), "posts": posts}


@router.post("/api/blog-posts")
def create_post(body: BlogPostIn, services: Services = Depends(get_services)):
    post = services.blog.create(body.model_dump(exclude_none=True))
    return {"success": True, "message": "Post created", "post": post}


@router.get("/api/blog-posts/{slug}")
def get_post(slug: str, services: Services = Depends(get_services)):
    require_valid(slug, "slug")
    return {"success": True, "post": services.blog.get(slug)}


@router.put("/api/blog-posts/{slug}")
def update_post(slug: str, body: BlogPostIn, services: Services = Depends(get_services)):
    require_valid(slug, "slug")
    data = body.model_dump(exclude_none=True)
    data.pop("status", None)
    post = services.blog.update(slug, data)
    return {"success": True, "message": "Post updated", "post": post}


@router.delete("/api/blog-posts/{slug}")
def delete_post(slug: str, services: Services = Depends(get_services)):
    require_valid(slug, "slug")
    services.blog.delete(slug)
    return {"success": True, "message": "Post deleted"}


@router.post("/api/blog-posts/{slug}/publish")
def publish_post(slug: str, services: Services = Depends(get_services)):
    require_valid(slug, "slug")
    post = services.blog.publish(slug)
    return {"success": True, "message": "Post published", "post": post, "url": f"/blog/{slug}.html"}


@router.post("/api/blog-posts/{slug}/unpublish")
def unpublish_post(slug: str, services: Services = Depends(get_services)):
    require_valid(slug, "slug")
    post = services.blog.unpublish(slug)
    return {"success": True, "message": "Post unpublished", "post": post}
