# Overview: Service-layer operations for organizations (tenants).

"""
Organization registration.

Organizations are the tenant root. Registration stores a bcrypt hash of the
password; login, tokens and OTP verification live outside this service.

- Names and emails are stored lower-cased and are globally unique
- invoice_prefix defaults to the first two characters of the name
"""

from __future__ import annotations

import bcrypt
from flask import current_app

from ..errors import ConflictError, ValidationError
from ..extensions import db
from ..models import Organization
from ..validation import ModelValidationPolicy, validate_payload, enforce_rules_organization
from .storage import commit_or_raise

MIN_PASSWORD_LENGTH = 8

ORGANIZATION_POLICY = ModelValidationPolicy(
    writable_fields={
        "name", "email", "phone", "owner_name", "invoice_prefix",
        "gstin", "address", "currency",
    },
    required_on_create={"name", "email", "phone", "owner_name"},
)


def hash_password(password: str) -> str:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    rounds = current_app.config.get("BCRYPT_ROUNDS", 12)
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(org: Organization, password: str) -> bool:
    if not password or not org.password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), org.password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def default_invoice_prefix(name: str) -> str:
    letters = "".join(ch for ch in name if ch.isalnum())
    return (letters[:2] or "IN").upper()


def _duplicate_organization() -> ConflictError:
    return ConflictError("Organization already exists with this name or email")


def register_organization(payload: dict) -> Organization:
    """
    Create a new tenant.

    Raises:
        ValidationError: missing fields, weak password, bad GSTIN/prefix
        ConflictError: name or email already registered
    """
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    payload = dict(payload)
    password = payload.pop("password", None)
    if not payload.get("invoice_prefix"):
        payload.pop("invoice_prefix", None)

    data = validate_payload(model=Organization, payload=payload, policy=ORGANIZATION_POLICY)
    data["name"] = " ".join(data["name"].split()).lower()
    data["email"] = data["email"].lower()
    if data.get("invoice_prefix"):
        data["invoice_prefix"] = data["invoice_prefix"].upper()
    else:
        data["invoice_prefix"] = default_invoice_prefix(data["name"])
    enforce_rules_organization(data)

    org = Organization(password_hash=hash_password(password), is_active=True, **data)
    db.session.add(org)
    commit_or_raise({
        (Organization, "uq_organizations_name"): _duplicate_organization,
        (Organization, "uq_organizations_email"): _duplicate_organization,
    })

    current_app.logger.info("Registered organization %s (id=%s)", org.name, org.id)
    return org
