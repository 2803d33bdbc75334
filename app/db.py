# app/db.py
# Storage layer wiring - filesystem-based, one store per record kind
from dataclasses import dataclass
from fastapi import Request
from sitestore.blog import BlogService
from sitestore.comments import CommentStore
from sitestore.config import Settings
from sitestore.forms import FormStore, application_store, contact_store, signup_store
from sitestore.publisher import BlogPublisher
from sitestore.records import RecordStore
from sitestore.traffic import TrafficLog


@dataclass
class Services:
    settings: Settings
    applications: FormStore
    contacts: FormStore
    signups: FormStore
    comments: CommentStore
    blog: BlogService
    traffic: TrafficLog


def build_services(settings: Settings) -> Services:
    store = lambda d: RecordStore(settings.store_config(d))
    return Services(
        settings=settings,
        applications=application_store(store(settings.submissions_dir)),
        contacts=contact_store(store(settings.contacts_dir)),
        signups=signup_store(store(settings.emails_dir)),
        comments=CommentStore(store(settings.comments_dir)),
        blog=BlogService(
            store(settings.blog_data_dir),
            BlogPublisher(settings.blog_pages_dir, settings.listing_path),
        ),
        traffic=TrafficLog(settings.visits_path, settings.traffic_retention_days),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services
