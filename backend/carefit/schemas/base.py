"""
Shared pydantic configuration for the JSON surface.

Python attributes are snake_case; the wire format is camelCase.
"""

from typing import Any, Dict, Iterable
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model reading and writing camelCase JSON keys."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    def to_record(self) -> Dict[str, Any]:
        """Domain record of the fields the client actually sent."""
        return self.model_dump(by_alias=True, exclude_unset=True)


def reject_null(value: Any) -> Any:
    """Validator for fields that may be omitted but never set to null."""
    if value is None:
        raise ValueError("must not be null")
    return value


def reject_blank(value: Any) -> Any:
    if value is None:
        raise ValueError("must not be null")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
    return value


def clean_string_list(value: Any) -> Any:
    """Null becomes an empty list; blank entries are dropped."""
    if value is None:
        return []
    if isinstance(value, Iterable) and not isinstance(value, (str, bytes, dict)):
        return [item.strip() for item in value if isinstance(item, str) and item.strip()]
    return value
