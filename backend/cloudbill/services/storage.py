# Overview: Commit helpers that turn database failures into BillingErrors.

from __future__ import annotations

from typing import Callable

from sqlalchemy import UniqueConstraint
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import BillingError, StorageError
from ..extensions import db


def _constraint_markers(model, constraint_name: str) -> set[str]:
    """
    Strings that identify a unique constraint in driver error messages.

    PostgreSQL reports the constraint name; SQLite only reports the columns
    ("UNIQUE constraint failed: invoices.org_id, invoices.invoice_number").
    """
    table = model.__table__
    for constraint in table.constraints:
        if isinstance(constraint, UniqueConstraint) and constraint.name == constraint_name:
            columns = ", ".join(f"{table.name}.{col.name}" for col in constraint.columns)
            return {constraint_name, columns}
    raise KeyError(f"{table.name} has no unique constraint {constraint_name}")


def is_unique_violation(exc: IntegrityError, model, constraint_name: str) -> bool:
    orig = getattr(exc, "orig", None)
    diag = getattr(orig, "diag", None)
    if diag is not None and getattr(diag, "constraint_name", None) == constraint_name:
        return True
    message = str(orig if orig is not None else exc)
    return any(marker in message for marker in _constraint_markers(model, constraint_name))


def commit_or_raise(
    conflicts: dict[tuple[type, str], Callable[[], BillingError]] | None = None,
) -> None:
    """
    Commit the current session as one unit.

    conflicts maps (model, unique constraint name) to a factory for the
    error that violation means to the caller. Any other database failure
    rolls back and surfaces as StorageError; nothing is retried.
    """
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        for (model, constraint_name), make_error in (conflicts or {}).items():
            if is_unique_violation(exc, model, constraint_name):
                raise make_error() from exc
        raise StorageError("Database rejected the write", details={"reason": "integrity"}) from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageError("Database unavailable, please retry") from exc
    except Exception:
        # Unexpected driver errors still leave the session usable
        db.session.rollback()
        raise
