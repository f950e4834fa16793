"""
Line item validation for invoice creation.

Two independent checks run against every submitted row:

1. Arithmetic: unit_price x qty must equal total_price within one cent,
   using the prices as they will be stored (LINE_PRICE_PLACES decimals).
2. Existence: the product name must match a product stocked by the
   invoice's organization (case-insensitive substring, the same lookup the
   inventory search uses).

Both are read-only. The arithmetic check needs no database, so it runs per
item first; existence runs afterwards as one batch pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..errors import ItemArithmeticMismatch, ProductNotFound, ValidationError
from ..models import InvoiceLine
from ..validation import MAX_INTEGER
from .inventory_service import find_product_by_name
from .money import round2, round_places, to_number, within_tolerance

# Line prices are validated at the precision they are stored with
LINE_PRICE_PLACES = InvoiceLine.__table__.c.unit_price.type.scale
MAX_PRODUCT_NAME_LENGTH = InvoiceLine.__table__.c.product_name.type.length
MAX_UNIT_LENGTH = InvoiceLine.__table__.c.unit.type.length


@dataclass(frozen=True)
class LineItem:
    sr_no: int
    product_name: str
    unit: str | None
    qty: float
    unit_price: float
    tax: float
    total_price: float

    @property
    def label(self) -> str:
        return self.product_name or "unknown item"

    @property
    def line_amount(self) -> float:
        return self.unit_price * self.qty

    def to_row(self) -> dict:
        return {
            "sr_no": self.sr_no,
            "product_name": self.product_name,
            "unit": self.unit,
            "qty": self.qty,
            "unit_price": self.unit_price,
            "tax": self.tax,
            "total_price": self.total_price,
        }


def parse_line_items(raw_items: Any) -> list[LineItem]:
    """Shape-check the submitted line_items list and coerce every row."""
    if not isinstance(raw_items, list):
        raise ValidationError("line_items must be an array")
    if not raw_items:
        raise ValidationError("At least one line item is required")

    items = []
    for position, raw in enumerate(raw_items, start=1):
        if not isinstance(raw, dict):
            raise ValidationError(
                f"line_items[{position - 1}] must be an object",
                details={"index": position - 1},
            )
        items.append(parse_line_item(raw, position))
    return items


def _sr_no(raw, position: int) -> int:
    if raw in (None, ""):
        return position
    number = to_number(raw)
    if not number.is_integer() or not 1 <= number <= MAX_INTEGER:
        raise ValidationError(
            f"line_items[{position - 1}].sr_no must be a positive integer",
            details={"index": position - 1, "field": "sr_no"},
        )
    return int(number)


def _text(raw, position: int, field: str, max_length: int) -> str | None:
    if raw is None:
        return None
    if not isinstance(raw, (str, int, float)) or isinstance(raw, bool):
        raise ValidationError(
            f"line_items[{position - 1}].{field} must be a string",
            details={"index": position - 1, "field": field},
        )
    text = str(raw).strip()
    if len(text) > max_length:
        raise ValidationError(
            f"line_items[{position - 1}].{field} exceeds max length {max_length}",
            details={"index": position - 1, "field": field},
        )
    return text


def _line_price(raw) -> float:
    return round_places(to_number(raw), LINE_PRICE_PLACES)


def parse_line_item(raw: dict, position: int) -> LineItem:
    return LineItem(
        sr_no=_sr_no(raw.get("sr_no"), position),
        product_name=_text(raw.get("product_name"), position, "product_name", MAX_PRODUCT_NAME_LENGTH) or "",
        unit=_text(raw.get("unit"), position, "unit", MAX_UNIT_LENGTH),
        qty=to_number(raw.get("qty")),
        unit_price=_line_price(raw.get("unit_price")),
        tax=to_number(raw.get("tax")),
        total_price=_line_price(raw.get("total_price")),
    )


def item_arithmetic_ok(item: LineItem) -> bool:
    return within_tolerance(item.line_amount, item.total_price)


def validate_line_item_arithmetic(item: LineItem) -> None:
    if not item_arithmetic_ok(item):
        raise ItemArithmeticMismatch(
            f"Item validation error - incorrect data values for {item.label}",
            details={
                "product_name": item.product_name,
                "sr_no": item.sr_no,
                "expected_total_price": round2(item.line_amount),
                "total_price": item.total_price,
            },
        )


def ensure_products_exist(org_id: int, items: list[LineItem]) -> None:
    """
    Fail on the first item whose product the organization does not stock.

    Repeated names are looked up once.
    """
    seen: set[str] = set()
    for item in items:
        key = item.product_name.lower()
        if key in seen:
            continue
        if not item.product_name or find_product_by_name(org_id, item.product_name) is None:
            raise ProductNotFound(
                f"Item {item.label} not found in inventory",
                details={"product_name": item.product_name, "sr_no": item.sr_no},
            )
        seen.add(key)
