# Overview: Flask API routes for organizations (tenants).

from flask import Blueprint, request, jsonify, g, current_app

from ..decorators import require_org
from ..errors import BillingError, error_response
from ..services import organization_service


organizations_bp = Blueprint("organizations", __name__, url_prefix="/api/organizations")


@organizations_bp.post("")
def register_organization_route():
    """
    Register a new organization.

    No tenant header: this is how a tenant comes into existence.
    """
    try:
        org = organization_service.register_organization(request.get_json(silent=True))
        return jsonify({"organization": org.to_dict()}), 201

    except BillingError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to register organization")
        return jsonify({"error": "Internal server error"}), 500


@organizations_bp.get("/me")
@require_org
def current_organization_route():
    return jsonify({"organization": g.organization.to_dict()}), 200
