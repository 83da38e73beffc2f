"""
Entity search.

    builder = session.search("Project", "id,code,name", filters.basic([
        filters.field("is_demo").is_(False),
    ]))
    resp = await builder.size(10).sort("-created_at").execute(
        model=ResourceArrayResponse[Project, PaginationLinks]
    )

<https://developer.shotgridsoftware.com/rest-api/#search-all-records>
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Dict, Optional

from .builder import RequestBuilder, options_params
from .filters import filters_mime, validate_filters
from .models import ReturnOnly

if TYPE_CHECKING:
    from .session import Session


class SearchBuilder(RequestBuilder):
    def __init__(self, session: "Session", entity: str, fields: str, filters: Any):
        super().__init__(session)
        self.entity = entity
        self.fields = fields
        self.filters = validate_filters(filters)
        self._sort: Optional[str] = None
        self._size: Optional[int] = None
        self._number: Optional[int] = None
        self._return_only: Optional[ReturnOnly] = None
        self._include_archived_projects: Optional[bool] = None

    def sort(self, value: Optional[str]) -> "SearchBuilder":
        """Comma separated field names; prefix a name with `-` for descending."""
        self._sort = value
        return self

    def size(self, value: Optional[int]) -> "SearchBuilder":
        # Left unset, the server picks its own page size.
        self._size = value
        return self

    def number(self, value: Optional[int]) -> "SearchBuilder":
        self._number = value
        return self

    def return_only(self, value: Optional[ReturnOnly]) -> "SearchBuilder":
        self._return_only = value
        return self

    def include_archived_projects(self, value: Optional[bool]) -> "SearchBuilder":
        self._include_archived_projects = value
        return self

    def params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {"fields": self.fields}
        if self._number is not None:
            params["page[number]"] = self._number
        if self._size is not None:
            params["page[size]"] = self._size
        if self._sort is not None:
            params["sort"] = self._sort
        params.update(options_params(self._return_only, self._include_archived_projects))
        return params

    async def execute(self, *, model: Any = None) -> Any:
        self._consume()
        # The filters travel as raw content: the MIME type tells the server
        # which filter shape to expect.
        return await self._session.request(
            "POST",
            f"/entity/{self.entity}/_search",
            params=self.params(),
            content=json.dumps({"filters": self.filters}),
            content_type=filters_mime(self.filters),
            model=model,
            op="search",
        )


__all__ = ["SearchBuilder"]
