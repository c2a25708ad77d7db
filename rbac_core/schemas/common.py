"""Schemas shared by the permission and role endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SearchField = Literal["name", "key"]
SearchOperator = Literal["contains", "starts_with", "ends_with"]
SortDirection = Literal["asc", "desc"]


class RBACModel(BaseModel):
    """Wire model: camelCase JSON names, snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ListQuery(RBACModel):
    """Search, sort and pagination parameters accepted by list endpoints."""

    search_value: Optional[str] = None
    search_field: SearchField = "name"
    search_operator: SearchOperator = "contains"
    limit: Union[int, str, None] = None
    offset: Union[int, str, None] = None
    sort_by: Optional[str] = None
    sort_direction: SortDirection = "asc"


class OptionsQuery(RBACModel):
    only_active: bool = True
    search: Optional[str] = None
    limit: Optional[int] = None


class KeyedEntityResponse(RBACModel):
    id: UUID
    name: str
    key: str
    description: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    created_by: Optional[str] = None
    updated_by: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class OptionItem(RBACModel):
    value: UUID = Field(..., description="Entity id.")
    label: str = Field(..., description="Entity name, or email for users.")


class OptionsResponse(RBACModel):
    options: List[OptionItem]


class SuccessResponse(RBACModel):
    success: bool
    message: str
