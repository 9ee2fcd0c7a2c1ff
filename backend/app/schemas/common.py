"""Shared pydantic building blocks."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Reads ORM objects, accepts snake_case or camelCase, dumps camelCase."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Pagination(CamelModel):
    total: int
    page: int
    limit: int
    total_pages: int
