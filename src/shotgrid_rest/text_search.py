"""
Full-text search across several entity types at once.

Each entity type carries its own filters, but every filter in one request
must share a shape (all basic or all complex) since a single content type
describes them all.

> Text search needs a session acting as a human user
> (`authenticate_user` or `authenticate_script_as_user`).

<https://developer.shotgridsoftware.com/rest-api/#search-text-entries>
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

from .builder import RequestBuilder
from .errors import ShotgridInvalidFiltersError
from .filters import MIME_FILTER_ARRAY, filters_mime, validate_filters

if TYPE_CHECKING:
    from .session import Session


def entity_filters_mime(entity_filters: Mapping[str, Any]) -> str:
    """
    The shared content type of a map of entity filters.
    An empty map falls back to the array type.
    """
    mimes = {filters_mime(f) for f in entity_filters.values()}
    if not mimes:
        return MIME_FILTER_ARRAY
    if len(mimes) > 1:
        raise ShotgridInvalidFiltersError(
            "Invalid Filters: every entity type in a text search must use the "
            "same filter shape."
        )
    return mimes.pop()


class TextSearchBuilder(RequestBuilder):
    def __init__(
        self,
        session: "Session",
        text: Optional[str],
        entity_filters: Mapping[str, Any],
    ):
        super().__init__(session)
        self.text = text
        self.entity_filters: Dict[str, Any] = {
            entity: validate_filters(f) for entity, f in entity_filters.items()
        }
        self.content_type = entity_filters_mime(self.entity_filters)
        self._sort: Optional[str] = None
        self._size: Optional[int] = None
        self._number: Optional[int] = None

    def sort(self, value: Optional[str]) -> "TextSearchBuilder":
        self._sort = value
        return self

    def size(self, value: Optional[int]) -> "TextSearchBuilder":
        self._size = value
        return self

    def number(self, value: Optional[int]) -> "TextSearchBuilder":
        self._number = value
        return self

    def body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"entity_types": self.entity_filters}
        if self.text is not None:
            body["text"] = self.text
        page: Dict[str, Any] = {}
        if self._number is not None:
            page["number"] = self._number
        if self._size is not None:
            page["size"] = self._size
        if page:
            body["page"] = page
        if self._sort is not None:
            body["sort"] = self._sort
        return body

    async def execute(self, *, model: Any = None) -> Any:
        self._consume()
        return await self._session.request(
            "POST",
            "/entity/_text_search",
            content=json.dumps(self.body()),
            content_type=self.content_type,
            model=model,
            op="text_search",
        )


__all__ = ["TextSearchBuilder", "entity_filters_mime"]
