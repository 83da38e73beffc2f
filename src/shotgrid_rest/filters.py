"""
Helpers for building ShotGrid filter expressions.

Filters come in two flavors, named for the shape of the JSON they produce:

- *basic* filters are an array of conditions, all of which must match:
  `basic([field("sg_status_list").is_not("omt")])`
- *complex* filters are an object with a logical operator at the root, which
  may nest further operators and conditions:
  `complex(or_(field("code").is_("AB"), field("code").is_("CD")))`

Everything here produces plain JSON values (lists and dicts), so hand-written
filters work just as well. The only validation performed locally is the
top-level shape check; the server is the authority on filter semantics.

<https://developer.shotgridsoftware.com/rest-api/#searching>
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from pydantic import BaseModel

from .errors import ShotgridInvalidFiltersError
from .models import to_json_value

MIME_FILTER_ARRAY = "application/vnd+shotgun.api3_array+json"
MIME_FILTER_HASH = "application/vnd+shotgun.api3_hash+json"


class EntityRef(BaseModel):
    """The type and primary key of an entity record, for link-field filters."""

    type: str
    id: int


def _value(value: Any) -> Any:
    return to_json_value(value)


class Field:
    """Condition factory for one field; see `field()`."""

    def __init__(self, name: str):
        self.name = name

    def _cond(self, operator: str, *values: Any) -> List[Any]:
        return [self.name, operator, *(_value(v) for v in values)]

    def is_(self, value: Any) -> List[Any]:
        return self._cond("is", value)

    def is_not(self, value: Any) -> List[Any]:
        return self._cond("is_not", value)

    def less_than(self, value: Any) -> List[Any]:
        return self._cond("less_than", value)

    def greater_than(self, value: Any) -> List[Any]:
        return self._cond("greater_than", value)

    def contains(self, value: Any) -> List[Any]:
        return self._cond("contains", value)

    def not_contains(self, value: Any) -> List[Any]:
        return self._cond("not_contains", value)

    def starts_with(self, value: str) -> List[Any]:
        return self._cond("starts_with", value)

    def ends_with(self, value: str) -> List[Any]:
        return self._cond("ends_with", value)

    def between(self, lower: Any, upper: Any) -> List[Any]:
        return self._cond("between", lower, upper)

    def not_between(self, lower: Any, upper: Any) -> List[Any]:
        return self._cond("not_between", lower, upper)

    def in_last(self, offset: int, period: str) -> List[Any]:
        return self._cond("in_last", offset, period)

    def in_next(self, offset: int, period: str) -> List[Any]:
        return self._cond("in_next", offset, period)

    def in_(self, values: Iterable[Any]) -> List[Any]:
        return [self.name, "in", [_value(v) for v in values]]

    def type_is(self, entity_type: str) -> List[Any]:
        return self._cond("type_is", entity_type)

    def type_is_not(self, entity_type: str) -> List[Any]:
        return self._cond("type_is_not", entity_type)

    def in_calendar_day(self, offset: int) -> List[Any]:
        return self._cond("in_calendar_day", offset)

    def in_calendar_week(self, offset: int) -> List[Any]:
        return self._cond("in_calendar_week", offset)

    def in_calendar_month(self, offset: int) -> List[Any]:
        return self._cond("in_calendar_month", offset)

    def name_contains(self, value: str) -> List[Any]:
        return self._cond("name_contains", value)

    def name_not_contains(self, value: str) -> List[Any]:
        return self._cond("name_not_contains", value)

    def name_starts_with(self, value: str) -> List[Any]:
        return self._cond("name_starts_with", value)

    def name_ends_with(self, value: str) -> List[Any]:
        return self._cond("name_ends_with", value)


def field(name: str) -> Field:
    return Field(name)


def _logical(operator: str, conditions: Iterable[Any]) -> Dict[str, Any]:
    return {"logical_operator": operator, "conditions": [_value(c) for c in conditions]}


def and_(*conditions: Any) -> Dict[str, Any]:
    return _logical("and", conditions)


def or_(*conditions: Any) -> Dict[str, Any]:
    return _logical("or", conditions)


def basic(conditions: Iterable[Any]) -> List[Any]:
    """Records must satisfy all of the given conditions."""
    return [_value(c) for c in conditions]


def complex(root: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Finalize a complex filter. The root must be `and_()` or `or_()`; a bare
    condition is rejected.
    """
    if not isinstance(root, Mapping) or "logical_operator" not in root:
        raise ShotgridInvalidFiltersError(
            "Invalid Filters: complex filters need a logical operator at the root."
        )
    return dict(root)


def empty() -> List[Any]:
    """No filtering at all."""
    return []


def validate_filters(filters: Any) -> Any:
    """
    Top-level shape check only: filters must be a JSON array or object.
    Returns the filters as plain JSON values.
    """
    if isinstance(filters, (list, tuple)):
        return _value(list(filters))
    if isinstance(filters, Mapping):
        return _value(dict(filters))
    raise ShotgridInvalidFiltersError()


def filters_mime(filters: Any) -> str:
    """The content type ShotGrid expects for a filter payload of this shape."""
    filters = validate_filters(filters)
    return MIME_FILTER_ARRAY if isinstance(filters, list) else MIME_FILTER_HASH


__all__ = [
    "MIME_FILTER_ARRAY",
    "MIME_FILTER_HASH",
    "EntityRef",
    "Field",
    "field",
    "and_",
    "or_",
    "basic",
    "complex",
    "empty",
    "validate_filters",
    "filters_mime",
]
