# app/models.py
# Request bodies. Unknown keys are dropped, so only listed fields reach storage.
from typing import Optional, Union
from pydantic import BaseModel


class ApplicationIn(BaseModel):
    fullName: Optional[str] = None
    jobTitle: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    businessName: Optional[str] = None
    yearFounded: Optional[Union[int, str]] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    employeeCount: Optional[str] = None
    serviceInterest: Optional[str] = None
    companyDescription: Optional[str] = None
    targetCustomer: Optional[str] = None
    focusArea: Optional[str] = None
    valueProposition: Optional[str] = None
    auditGoals: Optional[str] = None
    productStatus: Optional[str] = None
    videoParticipation: Optional[str] = None
    acknowledgement: Optional[Union[bool, str]] = None


class ContactIn(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None


class EmailSignupIn(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None
    source: Optional[str] = None


class VisitIn(BaseModel):
    page: Optional[str] = None
    referrer: Optional[str] = None
    title: Optional[str] = None


class CommentIn(BaseModel):
    name: Optional[str] = None
    text: Optional[str] = None


class LoginIn(BaseModel):
    password: str = ""


class BlogPostIn(BaseModel):
    title: Optional[str] = None
    excerpt: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    author: Optional[str] = None
    heroImage: Optional[str] = None
    status: Optional[str] = None
