# Overview: Flask API routes for customers; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, g, current_app

from ..decorators import require_org
from ..errors import BillingError, NotFound, error_response
from ..services import customer_service


customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.post("")
@require_org
def create_customer_route():
    try:
        customer = customer_service.create_customer(g.org_id, request.get_json(silent=True))
        return jsonify({"customer": customer.to_dict()}), 201

    except BillingError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create customer")
        return jsonify({"error": "Internal server error"}), 500


@customers_bp.get("")
@require_org
def list_customers_route():
    """
    List customers of the organization.

    Query params:
    - name: str (optional) - case-insensitive "contains" filter
    """
    customers = customer_service.list_customers(g.org_id, name=request.args.get("name"))
    return jsonify({
        "customers": [customer.to_dict() for customer in customers],
        "count": len(customers),
    }), 200


@customers_bp.get("/<int:customer_id>")
@require_org
def get_customer_route(customer_id: int):
    customer = customer_service.find_customer(g.org_id, customer_id)
    if customer is None:
        return error_response(NotFound("Customer not found"))
    return jsonify({"customer": customer.to_dict()}), 200
