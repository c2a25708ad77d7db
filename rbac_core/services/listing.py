"""Search, sort and pagination over permissions and roles, plus select options."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, List, Optional, Sequence, Type, TypeVar, Union

from pydantic.alias_generators import to_snake
from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.orm import Session

from rbac_core.models.permission import Permission
from rbac_core.models.role import Role
from rbac_core.models.user import User
from rbac_core.schemas.common import ListQuery, OptionItem, OptionsQuery
from rbac_core.services.errors import BadRequestError, RBACErrorCode
from rbac_core.services.pagination import PaginationConfig, get_pagination_params

KeyedModel = Union[Permission, Role]
ModelT = TypeVar("ModelT", Permission, Role)

# sortBy takes the camelCase field names the responses use; snake_case also resolves.
SORTABLE_FIELDS = ("name", "key", "description", "isActive", "createdAt", "updatedAt")
_SORT_COLUMNS = {to_snake(field) for field in SORTABLE_FIELDS}


@dataclass(frozen=True)
class Page(Generic[ModelT]):
    items: List[ModelT]
    total: int
    limit: int
    offset: int


def search_clause(model: Type[KeyedModel], query: ListQuery) -> Optional[ColumnElement[bool]]:
    """Case-insensitive match of ``search_value`` against the chosen column."""

    if not query.search_value:
        return None
    column = getattr(model, query.search_field)
    if query.search_operator == "starts_with":
        return column.istartswith(query.search_value, autoescape=True)
    if query.search_operator == "ends_with":
        return column.iendswith(query.search_value, autoescape=True)
    return column.icontains(query.search_value, autoescape=True)


def apply_sorting(stmt: Select, model: Type[KeyedModel], query: ListQuery) -> Select:
    if query.sort_by is None:
        return stmt.order_by(model.created_at.asc(), model.id.asc())
    column_name = to_snake(query.sort_by)
    if column_name not in _SORT_COLUMNS:
        raise BadRequestError(
            RBACErrorCode.INVALID_SORT_FIELD,
            f"Cannot sort by '{query.sort_by}'; expected one of {', '.join(SORTABLE_FIELDS)}",
        )
    column = getattr(model, column_name)
    ordered = column.desc() if query.sort_direction == "desc" else column.asc()
    return stmt.order_by(ordered, model.id.asc())


def paginate(
    session: Session,
    model: Type[ModelT],
    query: ListQuery,
    pagination: PaginationConfig,
    *,
    filters: Sequence[ColumnElement[bool]] = (),
) -> Page[ModelT]:
    """Run a filtered, sorted and paged listing together with its total count."""

    conditions = list(filters)
    clause = search_clause(model, query)
    if clause is not None:
        conditions.append(clause)

    limit, offset = get_pagination_params(query.limit, query.offset, pagination)

    stmt = apply_sorting(select(model).where(*conditions), model, query)
    items = list(session.scalars(stmt.limit(limit).offset(offset)))
    total = session.scalar(select(func.count()).select_from(model).where(*conditions)) or 0
    return Page(items=items, total=total, limit=limit, offset=offset)


def select_user_options(session: Session, query: OptionsQuery) -> List[OptionItem]:
    """Return ``{value: id, label: email}`` pairs sorted by email.

    ``only_active`` keeps users whose email is verified.
    """

    stmt = select(User)
    if query.only_active:
        stmt = stmt.where(User.email_verified.is_(True))
    if query.search:
        stmt = stmt.where(User.email.icontains(query.search, autoescape=True))
    stmt = stmt.order_by(User.email.asc())
    if query.limit and query.limit > 0:
        stmt = stmt.limit(query.limit)
    return [OptionItem(value=user.id, label=user.email) for user in session.scalars(stmt)]


def select_options(session: Session, model: Type[KeyedModel], query: OptionsQuery) -> List[OptionItem]:
    """Return ``{value: id, label: name}`` pairs sorted by name."""

    stmt = select(model)
    if query.only_active:
        stmt = stmt.where(model.is_active.is_(True))
    if query.search:
        stmt = stmt.where(model.name.icontains(query.search, autoescape=True))
    stmt = stmt.order_by(model.name.asc(), model.id.asc())
    if query.limit and query.limit > 0:
        stmt = stmt.limit(query.limit)
    return [OptionItem(value=entity.id, label=entity.name) for entity in session.scalars(stmt)]
