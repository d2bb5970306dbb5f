"""Safe JSON projections of ORM rows. Password hashes never leave this module."""
from datetime import datetime
import json

from ..models.application import Application
from ..models.job import Job
from ..models.organization import Organization
from ..models.user import User


def _iso(value):
    return value.isoformat() if isinstance(value, datetime) else value


def _json_or(value: str | None, fallback):
    if not value:
        return fallback
    try:
        return json.loads(value)
    except ValueError:
        return fallback


def user_summary(user: User | None) -> dict | None:
    if user is None:
        return None
    return {
        "id": user.id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
    }


def user_to_public(user: User, *, include_organization: bool = False) -> dict:
    payload = {
        "id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "role": user.role,
        "organization_id": user.organization_id,
        "verified": bool(user.verified),
        "created_at": _iso(user.created_at),
    }
    if include_organization:
        payload["organization"] = organization_summary(user.organization)
    return payload


def organization_summary(org: Organization | None) -> dict | None:
    if org is None:
        return None
    return {"id": org.id, "name": org.name, "slug": org.slug}


def organization_to_public(org: Organization) -> dict:
    return {
        "id": org.id,
        "name": org.name,
        "slug": org.slug,
        "plan": org.plan,
        "settings": _json_or(org.settings, {}),
        "created_at": _iso(org.created_at),
        "updated_at": _iso(org.updated_at),
    }


def job_to_public(job: Job, *, include_relations: bool = False) -> dict:
    payload = {
        "id": job.id,
        "title": job.title,
        "description": job.description,
        "location": job.location,
        "salary_range": job.salary_range,
        "requirements": _json_or(job.requirements, []),
        "visibility": job.visibility,
        "status": job.status,
        "recruiter_id": job.recruiter_id,
        "organization_id": job.organization_id,
        "created_at": _iso(job.created_at),
        "updated_at": _iso(job.updated_at),
    }
    if include_relations:
        payload["recruiter"] = user_summary(job.recruiter)
        payload["organization"] = organization_summary(job.organization)
    return payload


def application_to_public(application: Application) -> dict:
    return {
        "id": application.id,
        "job_id": application.job_id,
        "candidate_id": application.candidate_id,
        "status": application.status,
        "created_at": _iso(application.created_at),
        "updated_at": _iso(application.updated_at),
    }
