from typing import Any, Callable
from sqlalchemy.sql import operators
from sqlalchemy import select, func, and_, or_, asc, desc


OPERATOR_MAPPING: dict[str, Callable[[Any, Any], Any]] = {
    "eq": operators.eq,
    "ne": operators.ne,
    "lt": operators.lt,
    "lte": operators.le,
    "gt": operators.gt,
    "gte": operators.ge,
    "in": lambda field, value: field.in_(value),
    "contains": lambda field, value: field.contains(value, autoescape=True),
    "icontains": lambda field, value: field.icontains(value, autoescape=True),
    "istartswith": lambda field, value: field.istartswith(value, autoescape=True),
    "isnull": lambda field, value: field.is_(None) if value else field.isnot(None),
    "exact": operators.eq,  # alias for clarity
}


def apply_filters_and_sorting(query, model, filters: dict, sort: list[str] = None, logic_operator: str = "and"):
    """
    Apply `column__operator` filters and `column+` / `column-` sort fields to a select.

    Columns listed in the model's hidden set are never filtered on.
    """
    conditions = []
    logic_fn = and_ if logic_operator.lower() == "and" else or_
    hidden = set(getattr(model, "hidden_columns", ()))

    # FILTERS
    for key, value in filters.items():
        parts = key.split("__")
        field_name = parts[0]
        operator_key = parts[1] if len(parts) > 1 else "eq"

        if field_name in hidden:
            continue

        operator_func = OPERATOR_MAPPING.get(operator_key)
        if not operator_func:
            raise ValueError(f"Unsupported filter operator: {operator_key}")

        conditions.append(operator_func(_get_column(model, field_name), value))

    if conditions:
        query = query.where(logic_fn(*conditions))

    # SORTING
    if sort:
        order_by = []
        for field in sort:
            direction = asc if field[-1] == "+" else desc
            order_by.append(direction(_get_column(model, field[:-1])))

        query = query.order_by(*order_by)

    return query


def _get_column(model, field_name: str):
    if field_name not in model.column_names():
        raise ValueError(f"Unknown column '{field_name}' on {model.__name__}")
    return getattr(model, field_name)


async def paginate(session, query, page: int = 1, page_size: int = 25):
    # Get total count efficiently
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = await session.scalar(count_query) or 0

    offset = (page - 1) * page_size

    # Get paginated items
    paginated_query = query.limit(page_size).offset(offset)
    result = await session.execute(paginated_query)
    items = result.scalars().all()

    return {
        "total": total,
        "items": items,
        "page": page,
        "page_size": page_size,
    }
