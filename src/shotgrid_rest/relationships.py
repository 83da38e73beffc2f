from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from .builder import RequestBuilder, options_params
from .models import ReturnOnly

if TYPE_CHECKING:
    from .session import Session


class EntityRelationshipReadBuilder(RequestBuilder):
    """
    Reads the records linked to one entity through a relationship field.
    <https://developer.shotgridsoftware.com/rest-api/#read-record-relationship>
    """

    def __init__(self, session: "Session", entity: str, entity_id: int, related_field: str):
        super().__init__(session)
        self.entity = entity
        self.entity_id = entity_id
        self.related_field = related_field
        self._return_only: Optional[ReturnOnly] = None
        self._include_archived_projects: Optional[bool] = None

    def return_only(self, value: Optional[ReturnOnly]) -> "EntityRelationshipReadBuilder":
        self._return_only = value
        return self

    def include_archived_projects(
        self, value: Optional[bool]
    ) -> "EntityRelationshipReadBuilder":
        self._include_archived_projects = value
        return self

    def params(self) -> Dict[str, Any]:
        return options_params(self._return_only, self._include_archived_projects)

    async def execute(self, *, model: Any = None) -> Any:
        self._consume()
        return await self._session.request(
            "GET",
            f"/entity/{self.entity}/{self.entity_id}/relationships/{self.related_field}",
            params=self.params() or None,
            model=model,
            op="relationship_read",
        )


__all__ = ["EntityRelationshipReadBuilder"]
