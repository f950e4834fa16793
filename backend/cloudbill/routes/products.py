# Overview: Flask API routes for inventory products; parses input and returns JSON responses.

# backend/cloudbill/routes/products.py
"""
Inventory product routes.

MULTI-TENANT: All product operations are scoped to the caller's organization
(g.org_id, set by @require_org).
"""
from flask import Blueprint, request, jsonify, g, current_app

from ..decorators import require_org
from ..errors import BillingError, NotFound, error_response
from ..services import inventory_service


products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.post("")
@require_org
def create_product_route():
    """Create a product; derived prices are computed server-side."""
    try:
        product = inventory_service.create_product(g.org_id, request.get_json(silent=True))
        return jsonify({"product": product.to_dict()}), 201

    except BillingError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create product")
        return jsonify({"error": "Internal server error"}), 500


@products_bp.get("")
@require_org
def list_products_route():
    """
    List products of the organization.

    Query params:
    - name: str (optional) - case-insensitive "contains" filter
    """
    products = inventory_service.list_products(g.org_id, name=request.args.get("name"))
    return jsonify({
        "products": [product.to_dict() for product in products],
        "count": len(products),
    }), 200


@products_bp.get("/search")
@require_org
def find_product_route():
    """Best single match for ?name=, the same lookup invoice validation uses."""
    name = request.args.get("name", "")
    product = inventory_service.find_product_by_name(g.org_id, name)
    if product is None:
        return error_response(NotFound("Product not found", details={"name": name}))
    return jsonify({"product": product.to_dict()}), 200


@products_bp.get("/<int:product_id>")
@require_org
def get_product_route(product_id: int):
    product = inventory_service.get_product(g.org_id, product_id)
    if product is None:
        return error_response(NotFound("Product not found"))
    return jsonify({"product": product.to_dict()}), 200
