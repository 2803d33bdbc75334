# app/api/forms.py
# Public contact / newsletter forms and their dashboard listings
from fastapi import APIRouter, Depends
from app.db import Services, get_services
from app.models import ContactIn, EmailSignupIn
from app.security import require_dashboard

router = APIRouter()


@router.post("/api/contact")
def contact(body: ContactIn, services: Services = Depends(get_services)):
    record = services.contacts.submit(body.model_dump(exclude_none=True))
    return {"success": True, "message": "Message sent successfully!", "id": record["id"]}


@router.post("/api/email-signup")
def email_signup(body: EmailSignupIn, services: Services = Depends(get_services)):
    record = services.signups.submit(body.model_dump(exclude_none=True))
    return {"success": True, "message": "Thanks for signing up!", "id": record["id"]}


@router.get("/api/email-signups", dependencies=[Depends(require_dashboard)])
def list_email_signups(services: Services = Depends(get_services)):
    signups = services.signups.list()
    return {"success": True, "count": len(signups), "signups": signups}


@router.get("/api/contacts", dependencies=[Depends(require_dashboard)])
def list_contacts(services: Services = Depends(get_services)):
    contacts = services.contacts.list()
    return {"success": True, "count": len(contacts), "contacts": contacts}
