# Overview: Request decorators for API routes.

from functools import wraps
from flask import request, g, current_app

from .errors import TenantAccessError, error_response
from .services.tenant_service import parse_org_id, validate_org_active

ORG_HEADER = "X-Organization-Id"


def require_org(f):
    """
    Establish tenant context for the request.

    MULTI-TENANT: Sets the following Flask g attributes:
    - g.org_id: The organization ID (tenant context) - REQUIRED
    - g.organization: The Organization object

    Returns 401 if the header is missing or malformed, or the organization
    does not exist or is deactivated. Credential checks happen upstream.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            org_id = parse_org_id(request.headers.get(ORG_HEADER))
            org = validate_org_active(org_id)
        except TenantAccessError as e:
            current_app.logger.warning(
                "Rejected tenant context on %s %s: %s", request.method, request.path, e.message
            )
            return error_response(e)

        g.org_id = org.id
        g.organization = org

        return f(*args, **kwargs)

    return decorated_function
