"""
Shared API Schemas
==================

Base model for request/response DTOs. Python attributes stay snake_case;
the JSON wire format uses camelCase (``creatorId``, ``slaDeadline``, ...).
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Pydantic model serialized with camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
