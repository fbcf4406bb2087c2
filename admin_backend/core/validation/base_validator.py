"""
Declarative validation.

A validator is a table of rules per operation::

    rules = {
        "create": {
            "slug": ["required", "unique:backend_roles,slug"],
            "title": ["required"],
        },
    }

Rules are strings `name[:arg1,arg2]`. Every rule except `required` is skipped
when the value is empty, and a field stops at its first failing rule.
Database-backed rules (`unique`, `exists`) resolve the table through the
declarative metadata, and `unique` leaves out the record being updated
through the explicit `exclude_id` argument.
"""
import logging
from typing import Any, Dict, List, Optional

from email_validator import EmailNotValidError, validate_email
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from admin_backend.core.models import Base, ValidationError

logger = logging.getLogger(__name__)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def _get_column(table_name: str, column_name: str):
    table = Base.metadata.tables.get(table_name)
    if table is None or column_name not in table.c:
        raise ValueError(f"Unknown validation target '{table_name}.{column_name}'")
    return table, table.c[column_name]


class AbstractValidator:
    """Evaluates the rule table of one operation against a data mapping."""

    rules: Dict[str, Dict[str, List[str]]] = {}

    async def validate(
            self,
            db: AsyncSession,
            data: Dict[str, Any],
            operation: str = "create",
            exclude_id: Optional[Any] = None,
    ) -> Dict[str, Any]:
        operation_rules = self.rules.get(operation)
        if operation_rules is None:
            raise ValueError(f"{self.__class__.__name__} has no rules for '{operation}'")

        errors: Dict[str, List[str]] = {}
        for field, field_rules in operation_rules.items():
            value = data.get(field)
            for rule in field_rules:
                name, _, raw_args = rule.partition(":")
                args = raw_args.split(",") if raw_args else []

                if name != "required" and _is_empty(value):
                    continue

                message = await self._check(db, name, field, value, args, data, exclude_id)
                if message:
                    errors.setdefault(field, []).append(message)
                    break

        if errors:
            logger.debug(f"{self.__class__.__name__} rejected '{operation}': {errors}")
            raise ValidationError(errors)

        return data

    async def _check(self, db, name, field, value, args, data, exclude_id) -> Optional[str]:
        if name == "required":
            return f"The {field} field is required." if _is_empty(value) else None

        if name == "email":
            try:
                validate_email(str(value), check_deliverability=False)
            except EmailNotValidError:
                return f"The {field} must be a valid email address."
            return None

        if name == "min":
            return f"The {field} must be at least {args[0]} characters." if len(str(value)) < int(args[0]) else None

        if name == "max":
            return f"The {field} may not be greater than {args[0]} characters." if len(str(value)) > int(args[0]) else None

        if name == "same":
            return f"The {field} and {args[0]} must match." if value != data.get(args[0]) else None

        if name == "in":
            return f"The selected {field} is invalid." if str(value) not in args else None

        if name == "unique":
            table, column = _get_column(*args)
            query = select(func.count()).select_from(table).where(column == value)
            if exclude_id is not None:
                query = query.where(table.c.id != exclude_id)
            count = await db.scalar(query)
            return f"The {field} has already been taken." if count else None

        if name == "exists":
            table, column = _get_column(*args)
            count = await db.scalar(select(func.count()).select_from(table).where(column == value))
            return f"The selected {field} is invalid." if not count else None

        raise ValueError(f"Unsupported validation rule: {name}")
