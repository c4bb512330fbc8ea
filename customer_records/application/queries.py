"""Statement construction for the paginated customer listing.

Search text, limit and offset are always bound parameters. Sort column and
direction cannot be bound, so they are resolved through fixed allow-lists
and only the matching column object ever reaches the statement.
"""

import math
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import Select, func, or_, select

from customer_records.domain.errors import ValidationError
from customer_records.domain.models import Customer

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
DEFAULT_SORT = "id"
DEFAULT_ORDER = "ASC"

SORTABLE_COLUMNS = {
    "id": Customer.id,
    "first_name": Customer.first_name,
    "last_name": Customer.last_name,
    "phone_number": Customer.phone_number,
}
SORT_ORDERS = ("ASC", "DESC")
SEARCHABLE_COLUMNS = (Customer.first_name, Customer.last_name, Customer.phone_number)


@dataclass(frozen=True)
class CustomerListing:
    """Data and count statements for one page, plus the resolved parameters."""

    statement: Select
    count_statement: Select
    page: int
    limit: int
    offset: int
    sort_by: str
    order: str

    def total_pages(self, total: int) -> int:
        if self.limit <= 0:
            return 0
        return math.ceil(total / self.limit)


def _coerce_int(name: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer") from None


def resolve_sort(sort_by: Optional[str], order: Optional[str]) -> tuple[str, str]:
    """Return an allow-listed ``(column, direction)`` pair, falling back to ``id ASC``."""
    column = sort_by if sort_by in SORTABLE_COLUMNS else DEFAULT_SORT
    direction = order.upper() if isinstance(order, str) else DEFAULT_ORDER
    if direction not in SORT_ORDERS:
        direction = DEFAULT_ORDER
    return column, direction


def search_filter(search: str):
    pattern = f"%{search}%"
    return or_(*(column.ilike(pattern) for column in SEARCHABLE_COLUMNS))


def build_customer_listing(
    page: Any = DEFAULT_PAGE,
    limit: Any = DEFAULT_LIMIT,
    search: Optional[str] = None,
    sort_by: Optional[str] = DEFAULT_SORT,
    order: Optional[str] = DEFAULT_ORDER,
) -> CustomerListing:
    page = _coerce_int("page", page)
    limit = _coerce_int("limit", limit)
    offset = (page - 1) * limit

    statement = select(Customer)
    count_statement = select(func.count()).select_from(Customer)

    if isinstance(search, str) and search:
        criteria = search_filter(search)
        statement = statement.where(criteria)
        count_statement = count_statement.where(criteria)

    sort_by, order = resolve_sort(sort_by, order)
    column = SORTABLE_COLUMNS[sort_by]
    statement = statement.order_by(column.desc() if order == "DESC" else column.asc())
    statement = statement.limit(limit).offset(offset)

    return CustomerListing(
        statement=statement,
        count_statement=count_statement,
        page=page,
        limit=limit,
        offset=offset,
        sort_by=sort_by,
        order=order,
    )
