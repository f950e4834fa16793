# Overview: Flask API routes for invoices; parses input and returns JSON responses.

# backend/cloudbill/routes/invoices.py
"""
Invoice API routes.

MULTI-TENANT: Every route runs under @require_org and passes g.org_id to the
service layer; an invoice number is only ever looked up inside the caller's
organization.
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..decorators import require_org
from ..errors import BillingError, error_response
from ..services import invoice_service


invoices_bp = Blueprint("invoices", __name__, url_prefix="/api/invoices")


@invoices_bp.post("")
@require_org
def create_invoice_route():
    """
    Create an invoice after server-side validation of items and totals.

    Returns 201 with the persisted invoice (server-computed totals).
    """
    try:
        data = request.get_json(silent=True)
        invoice = invoice_service.create_invoice(g.org_id, data)
        return jsonify({"invoice": invoice.to_dict()}), 201

    except BillingError as e:
        current_app.logger.warning(
            "Invoice rejected for org %s: %s (%s)", g.org_id, e.message, e.kind
        )
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create invoice")
        return jsonify({"error": "Internal server error"}), 500


@invoices_bp.get("")
@require_org
def list_invoices_route():
    """List the organization's invoices, newest first."""
    try:
        invoices = invoice_service.list_invoices(g.org_id)
        return jsonify({
            "invoices": [invoice.to_dict() for invoice in invoices],
            "count": len(invoices),
        }), 200

    except BillingError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to list invoices")
        return jsonify({"error": "Internal server error"}), 500


@invoices_bp.get("/next-number")
@require_org
def next_invoice_number_route():
    """Suggest an invoice number from the organization's prefix."""
    return jsonify({"invoice_number": invoice_service.suggest_invoice_number(g.organization)}), 200


@invoices_bp.get("/<invoice_number>")
@require_org
def get_invoice_route(invoice_number: str):
    try:
        invoice = invoice_service.get_invoice(g.org_id, invoice_number)
        return jsonify({"invoice": invoice.to_dict()}), 200

    except BillingError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to load invoice")
        return jsonify({"error": "Internal server error"}), 500


@invoices_bp.delete("/<invoice_number>")
@require_org
def remove_invoice_route(invoice_number: str):
    try:
        invoice_service.remove_invoice(g.org_id, invoice_number)
        return jsonify({"message": "Invoice removed successfully"}), 200

    except BillingError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to remove invoice")
        return jsonify({"error": "Internal server error"}), 500
