"""Search filter and pagination schemas."""

import math
from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from listings.models.enums import Availability, PropertyCategory
from listings.schemas.property import Property

# Any scalar is accepted; the backend decides whether a filter value is valid.
# Plain mappings of wire keys skip this model entirely.
Loose = int | float | str


class SearchFilters(BaseModel):
    """Sparse set of listing filters.

    Fields are emitted in the order the caller supplied them, which is why the
    input key order is recorded in ``field_order``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    location: Loose | None = None
    min_price: Loose | None = None
    max_price: Loose | None = None
    bedrooms: Loose | None = None
    availability: Availability | str | None = None
    category: PropertyCategory | str | None = None

    field_order: list[str] = Field(default_factory=list, exclude=True, repr=False)

    @model_validator(mode="before")
    @classmethod
    def record_field_order(cls, data: Any) -> Any:
        """Remember the order in which filter keys were given."""
        if not isinstance(data, dict) or "field_order" in data or "fieldOrder" in data:
            return data
        by_alias = {
            (field.alias or name): name
            for name, field in cls.model_fields.items()
            if name != "field_order"
        }
        order = [by_alias.get(key, key) for key in data]
        return {**data, "field_order": order}

    def items(self) -> Iterator[tuple[str, Any]]:
        """Yield ``(wire_key, value)`` for every set filter, in input order."""
        fields = type(self).model_fields
        extra = self.model_extra or {}
        seen: set[str] = set()
        names = list(self.field_order) + [
            name for name in fields if name in self.model_fields_set and name != "field_order"
        ]
        for name in names + list(extra):
            if name in seen:
                continue
            seen.add(name)
            if name in fields and name != "field_order":
                yield fields[name].alias or name, getattr(self, name)
            elif name in extra:
                yield name, extra[name]


class PaginationInfo(BaseModel):
    """Pagination metadata returned alongside a listing page."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_page: int = Field(ge=0)
    total_pages: int = Field(ge=0)
    total_items: int = Field(ge=0)
    has_next_page: bool
    has_prev_page: bool

    @model_validator(mode="before")
    @classmethod
    def derive_flags(cls, data: Any) -> Any:
        """Fill in next/prev flags when the backend leaves them out."""
        if not isinstance(data, dict):
            return data
        current = data.get("currentPage", data.get("current_page"))
        total = data.get("totalPages", data.get("total_pages"))
        if current is None or total is None:
            return data
        data = dict(data)
        if "hasNextPage" not in data and "has_next_page" not in data:
            data["hasNextPage"] = current < total
        if "hasPrevPage" not in data and "has_prev_page" not in data:
            data["hasPrevPage"] = current > 1
        return data

    @classmethod
    def compute(cls, current_page: int, total_items: int, page_size: int) -> "PaginationInfo":
        """Build consistent metadata for a page of a collection."""
        total_pages = math.ceil(total_items / page_size) if page_size > 0 else 0
        return cls(
            current_page=current_page,
            total_pages=total_pages,
            total_items=total_items,
            has_next_page=current_page < total_pages,
            has_prev_page=current_page > 1,
        )


class PropertyListResponse(BaseModel):
    """Body of ``GET /properties``."""

    properties: list[Property]
    pagination: PaginationInfo
