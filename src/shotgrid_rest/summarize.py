"""
Server-side aggregation over the records matched by a set of filters.

    resp = await (
        session.summarize(
            "Asset",
            filters.basic([filters.field("project").is_(project_ref)]),
            [("id", SummaryFieldType.COUNT)],
        )
        .grouping([("sg_asset_type", GroupingType.EXACT, GroupingDirection.ASC)])
        .execute()
    )

Summary fields and groupings may be given as models or as plain tuples,
`(field, type)` and `(field, type[, direction])` respectively.

<https://developer.shotgridsoftware.com/rest-api/#summarize-field-data>
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Sequence, Union

from .builder import RequestBuilder
from .filters import MIME_FILTER_ARRAY, filters_mime, validate_filters
from .models import (
    Grouping,
    SummarizeRequest,
    SummarizeResponse,
    SummaryField,
    SummaryOptions,
    to_json_value,
)

if TYPE_CHECKING:
    from .session import Session

SummaryFieldLike = Union[SummaryField, Sequence[Any]]
GroupingLike = Union[Grouping, Sequence[Any]]


def as_summary_field(value: SummaryFieldLike) -> SummaryField:
    if isinstance(value, SummaryField):
        return value
    name, kind = value
    return SummaryField(field=name, type=kind)


def as_grouping(value: GroupingLike) -> Grouping:
    if isinstance(value, Grouping):
        return value
    name, kind, *rest = value
    if rest and rest[0] is not None:
        return Grouping(field=name, type=kind, direction=rest[0])
    return Grouping(field=name, type=kind)


class SummarizeBuilder(RequestBuilder):
    def __init__(
        self,
        session: "Session",
        entity: str,
        filters: Any,
        summary_fields: Iterable[SummaryFieldLike],
    ):
        super().__init__(session)
        self.entity = entity
        self.filters = validate_filters(filters) if filters is not None else None
        self.summary_fields: List[SummaryField] = [as_summary_field(f) for f in summary_fields]
        self._grouping: Optional[List[Grouping]] = None
        self._options: Optional[SummaryOptions] = None

    def grouping(self, value: Optional[Iterable[GroupingLike]]) -> "SummarizeBuilder":
        self._grouping = [as_grouping(g) for g in value] if value is not None else None
        return self

    def include_archived_projects(self, value: Optional[bool]) -> "SummarizeBuilder":
        self._options = (
            SummaryOptions(include_archived_projects=value) if value is not None else None
        )
        return self

    def body(self) -> SummarizeRequest:
        # unset parts stay out of the body rather than going out as null
        optional = {
            "filters": self.filters,
            "grouping": self._grouping,
            "options": self._options,
        }
        return SummarizeRequest(
            summary_fields=self.summary_fields,
            **{k: v for k, v in optional.items() if v is not None},
        )

    async def execute(self, *, model: Any = SummarizeResponse) -> Any:
        self._consume()
        content_type = (
            filters_mime(self.filters) if self.filters is not None else MIME_FILTER_ARRAY
        )
        return await self._session.request(
            "POST",
            f"/entity/{self.entity}/_summarize",
            content=json.dumps(to_json_value(self.body())),
            content_type=content_type,
            model=model,
            op="summarize",
        )


__all__ = ["SummarizeBuilder", "as_summary_field", "as_grouping"]
