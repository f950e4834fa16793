from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Boolean, Float, Integer, Numeric, String, Text
from sqlalchemy.orm import DeclarativeMeta

from .errors import ValidationError

# Maximum unit price: 99,999,999.99
MAX_PRICE = 99_999_999.99

# Largest value a 32-bit INTEGER column holds
MAX_INTEGER = 2**31 - 1


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required for POST
    """
    writable_fields: set[str]
    required_on_create: set[str] = None  # type: ignore


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def _coerce_value(col, value: Any):
    coltype = col.type

    if value is None:
        return None

    # Integers - reject floats and decimals
    if isinstance(coltype, Integer):
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped or "." in stripped or "e" in stripped.lower():
                raise ValidationError(f"{col.key} must be an integer")
            try:
                return int(stripped)
            except ValueError:
                raise ValidationError(f"{col.key} must be an integer")
        raise ValidationError(f"{col.key} must be an integer")

    # Float before Numeric: Float is a Numeric subclass
    if isinstance(coltype, (Float, Numeric)):
        if isinstance(value, bool):
            raise ValidationError(f"{col.key} must be a number")
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str) and value.strip():
            try:
                number = float(value.strip())
            except ValueError:
                raise ValidationError(f"{col.key} must be a number")
        else:
            raise ValidationError(f"{col.key} must be a number")
        if number != number or number in (float("inf"), float("-inf")):
            raise ValidationError(f"{col.key} must be a finite number")
        return number

    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        return bool(value)

    if isinstance(coltype, (String, Text)):
        return str(value).strip()

    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create
    Returns a cleaned dict with only writable fields.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    required = policy.required_on_create or set()
    missing = sorted(f for f in required if payload.get(f) in (None, ""))
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}",
            details={"missing": missing},
        )

    cols = _columns_by_key(model)

    for k in payload.keys():
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}")
        if k not in cols:
            raise ValidationError(f"Unknown field: {k}")

    cleaned: dict = {}

    for k, raw in payload.items():
        col = cols[k]

        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null")
            cleaned[k] = None
            continue

        val = _coerce_value(col, raw)

        if isinstance(col.type, (String, Text)) and isinstance(val, str) and val == "":
            if not col.nullable:
                raise ValidationError(f"{k} cannot be blank")
            val = None

        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}")

        cleaned[k] = val

    return cleaned


def enforce_rules_product(patch: dict) -> None:
    """
    Inventory rules that are not captured by SQLAlchemy metadata alone.
    """
    for field in ("sales_price", "cost_price"):
        value = patch.get(field)
        if value is None or value <= 0:
            raise ValidationError(f"{field} must be greater than 0")
        if value > MAX_PRICE:
            raise ValidationError(f"{field} cannot exceed {MAX_PRICE:,.2f}")

    if patch.get("stock_quantity") is None or patch["stock_quantity"] < 0:
        raise ValidationError("stock_quantity must be >= 0")

    if patch.get("tax_rate") is None or patch["tax_rate"] < 0:
        raise ValidationError("tax_rate must be >= 0")

    discount = patch.get("discount")
    if discount is not None and not 0 <= discount <= 100:
        raise ValidationError("discount must be between 0 and 100")

    # 1 unit_of_measure == conversion_rate alternate_unit
    if patch.get("alternate_unit"):
        rate = patch.get("conversion_rate")
        if rate is None or rate < 0:
            raise ValidationError("Conversion rate is required for alternate unit")


def enforce_rules_customer(patch: dict) -> None:
    email = patch.get("email") or ""
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        raise ValidationError("email must be a valid email address")


def enforce_rules_organization(patch: dict) -> None:
    gstin = patch.get("gstin")
    if gstin is not None and len(gstin) != 15:
        raise ValidationError("GSTIN must be exactly 15 characters long")

    prefix = patch.get("invoice_prefix")
    if prefix is not None and not 1 <= len(prefix) <= 2:
        raise ValidationError("invoice_prefix must be 1 or 2 characters")
