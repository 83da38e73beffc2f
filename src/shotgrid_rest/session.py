"""
Authenticated access to the ShotGrid REST API.

A `Session` is what the `ShotgridClient.authenticate_*` methods hand back: the
client plus the bearer token it was issued. Every method here performs a
single request (builders defer theirs until `execute`/`send`) and returns the
decoded payload. `model=` picks the decode target; `model=None` returns the
raw JSON value.

Tokens are not refreshed behind the caller's back. Once `expires_in` has
elapsed, call `refresh()` or authenticate again.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Optional

from .errors import ShotgridConfigError
from .filters import validate_filters
from .models import (
    AltImages,
    BatchedRequestsResponse,
    CreateFieldRequest,
    CreateUpdateFieldProperty,
    Entity,
    EntityActivityStreamResponse,
    FieldDataType,
    FieldHashResponse,
    HierarchyExpandRequest,
    HierarchyExpandResponse,
    HierarchySearchRequest,
    HierarchySearchResponse,
    SchemaEntitiesResponse,
    SchemaEntityResponse,
    SchemaFieldResponse,
    SchemaFieldsResponse,
    TokenResponse,
    UpdateFieldRequest,
    UploadInfoResponse,
)
from .relationships import EntityRelationshipReadBuilder
from .search import SearchBuilder
from .summarize import SummarizeBuilder, SummaryFieldLike
from .text_search import TextSearchBuilder
from .upload import UploadBuilder

if TYPE_CHECKING:
    from .client import ShotgridClient


def _project_params(project_id: Optional[int]) -> Optional[Dict[str, Any]]:
    return {"project_id": project_id} if project_id is not None else None


def _fields_params(key: str, fields: Optional[str]) -> Optional[Dict[str, Any]]:
    return {key: fields} if fields is not None else None


class Session:
    def __init__(
        self,
        client: "ShotgridClient",
        token: TokenResponse,
        *,
        sudo_as_login: Optional[str] = None,
    ):
        self.client = client
        self.token = token
        self.sudo_as_login = sudo_as_login

    @property
    def access_token(self) -> str:
        return self.token.access_token

    async def refresh(self) -> "Session":
        """
        Trade the refresh token for a new token pair.
        Refresh tokens are single use, so concurrent callers must coordinate.
        """
        if not self.token.refresh_token:
            raise ShotgridConfigError("Session has no refresh token.")
        self.token = await self.client.fetch_token(
            {"grant_type": "refresh", "refresh_token": self.token.refresh_token}
        )
        return self

    async def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Authenticated request to `path`, relative to `/api/v1`."""
        return await self.client.request(
            method, self.client.api_url(path), token=self.access_token, **kwargs
        )

    # --- Records ---

    async def batch(self, requests: Any, *, model: Any = BatchedRequestsResponse) -> Any:
        """
        Run several create/update/delete requests in one transaction.
        `requests` is the `{"requests": [...]}` body.
        """
        return await self.request("POST", "/entity/_batch", json=requests, model=model, op="batch")

    async def create(
        self, entity: str, data: Any, fields: Optional[str] = None, *, model: Any = None
    ) -> Any:
        """`fields` selects the fields of the new record echoed back."""
        return await self.request(
            "POST",
            f"/entity/{entity}",
            params=_fields_params("options[fields]", fields),
            json=data,
            model=model,
            op="create",
        )

    async def read(
        self, entity: str, entity_id: int, fields: Optional[str] = None, *, model: Any = None
    ) -> Any:
        return await self.request(
            "GET",
            f"/entity/{entity}/{entity_id}",
            params=_fields_params("fields", fields),
            model=model,
            op="read",
        )

    async def update(
        self,
        entity: str,
        entity_id: int,
        data: Any,
        fields: Optional[str] = None,
        *,
        model: Any = None,
    ) -> Any:
        return await self.request(
            "PUT",
            f"/entity/{entity}/{entity_id}",
            params=_fields_params("options[fields]", fields),
            json=data,
            model=model,
            op="update",
        )

    async def destroy(self, entity: str, entity_id: int) -> None:
        await self.request("DELETE", f"/entity/{entity}/{entity_id}", op="destroy")

    async def revive(self, entity: str, entity_id: int, *, model: Any = None) -> Any:
        return await self.request(
            "POST",
            f"/entity/{entity}/{entity_id}",
            params={"revive": "true"},
            model=model,
            op="revive",
        )

    # --- Builders ---

    def search(self, entity: str, fields: str, filters: Any) -> SearchBuilder:
        """
        Search `entity` records. `fields` is a comma separated list (`*` for
        all). Filters that are neither an array nor an object are rejected
        here, before any request is made.
        """
        return SearchBuilder(self, entity, fields, validate_filters(filters))

    def text_search(
        self, text: Optional[str], entity_filters: Mapping[str, Any]
    ) -> TextSearchBuilder:
        return TextSearchBuilder(self, text, entity_filters)

    def summarize(
        self,
        entity: str,
        filters: Any,
        summary_fields: Iterable[SummaryFieldLike],
    ) -> SummarizeBuilder:
        return SummarizeBuilder(self, entity, filters, summary_fields)

    def entity_relationship_read(
        self, entity: str, entity_id: int, related_field: str
    ) -> EntityRelationshipReadBuilder:
        return EntityRelationshipReadBuilder(self, entity, entity_id, related_field)

    def upload(
        self, entity: str, entity_id: int, field: Optional[str], filename: str
    ) -> UploadBuilder:
        return UploadBuilder(self, entity, entity_id, field, filename)

    # --- Activity and following ---

    async def entity_activity_stream_read(
        self, entity: str, entity_id: int, *, model: Any = EntityActivityStreamResponse
    ) -> Any:
        return await self.request(
            "GET",
            f"/entity/{entity}/{entity_id}/activity_stream",
            model=model,
            op="activity_stream",
        )

    async def entity_followers_read(
        self, entity: str, entity_id: int, *, model: Any = None
    ) -> Any:
        return await self.request(
            "GET", f"/entity/{entity}/{entity_id}/followers", model=model, op="followers"
        )

    async def entity_follow_update(
        self, user_id: int, entities: List[Entity], *, model: Any = None
    ) -> Any:
        """Make the user follow each of `entities`."""
        return await self.request(
            "POST",
            f"/entity/human_users/{user_id}/follow",
            json={"entities": entities},
            model=model,
            op="follow",
        )

    async def entity_unfollow_update(
        self, user_id: int, entity: str, entity_id: int, *, model: Any = None
    ) -> Any:
        return await self.request(
            "PUT",
            f"/entity/{entity}/{entity_id}/unfollow",
            json={"user_id": user_id},
            model=model,
            op="unfollow",
        )

    async def user_follows_read(self, user_id: int, *, model: Any = None) -> Any:
        return await self.request(
            "GET", f"/entity/human_users/{user_id}/following", model=model, op="following"
        )

    # --- Files ---

    async def entity_upload_url_read(
        self,
        entity: str,
        entity_id: int,
        filename: str,
        multipart_upload: Optional[bool] = None,
        *,
        model: Any = UploadInfoResponse,
    ) -> Any:
        """Where to send the bytes of a file linked to the record itself."""
        params = {"filename": filename}
        if multipart_upload:
            params["multipart_upload"] = "true"
        return await self.request(
            "GET",
            f"/entity/{entity}/{entity_id}/_upload",
            params=params,
            model=model,
            op="upload_url",
        )

    async def entity_field_upload_url_read(
        self,
        entity: str,
        entity_id: int,
        filename: str,
        field: str,
        multipart_upload: Optional[bool] = None,
        *,
        model: Any = UploadInfoResponse,
    ) -> Any:
        params = {"filename": filename}
        if multipart_upload:
            params["multipart_upload"] = "true"
        return await self.request(
            "GET",
            f"/entity/{entity}/{entity_id}/{field}/_upload",
            params=params,
            model=model,
            op="upload_url",
        )

    async def entity_file_field_read(
        self,
        entity: str,
        entity_id: int,
        field: str,
        alt: Optional[AltImages] = None,
        range: Optional[str] = None,
        *,
        model: Any = FieldHashResponse,
    ) -> Any:
        """
        Information about an image or attachment field.
        `range` is sent as the `Range` header, e.g. `bytes=0-1023`.
        """
        return await self.request(
            "GET",
            f"/entity/{entity}/{entity_id}/{field}",
            params={"alt": AltImages(alt).value} if alt is not None else None,
            headers={"Range": range} if range is not None else None,
            model=model,
            op="file_field_read",
        )

    async def thread_contents_read(
        self,
        note_id: int,
        entity_fields: Optional[Mapping[str, str]] = None,
        *,
        model: Any = None,
    ) -> Any:
        """
        The replies and attachments of a note.
        `entity_fields` entries are passed as query params, e.g.
        `{"entity_fields[HumanUser]": "email"}`.
        """
        return await self.request(
            "GET",
            f"/entity/notes/{note_id}/thread_contents",
            params=dict(entity_fields) if entity_fields else None,
            model=model,
            op="thread_contents",
        )

    # --- Navigation and preferences ---

    async def hierarchy_expand(
        self, request: HierarchyExpandRequest, *, model: Any = HierarchyExpandResponse
    ) -> Any:
        return await self.request(
            "POST", "/hierarchy/_expand", json=request, model=model, op="hierarchy_expand"
        )

    async def hierarchy_search(
        self, request: HierarchySearchRequest, *, model: Any = HierarchySearchResponse
    ) -> Any:
        return await self.request(
            "POST", "/hierarchy/_search", json=request, model=model, op="hierarchy_search"
        )

    async def preferences_read(self, *, model: Any = None) -> Any:
        return await self.request("GET", "/preferences", model=model, op="preferences")

    async def project_last_accessed_update(
        self, project_id: int, user_id: int, *, model: Any = None
    ) -> Any:
        return await self.request(
            "PUT",
            f"/entity/projects/{project_id}/_update_last_accessed",
            json={"user_id": user_id},
            model=model,
            op="project_last_accessed",
        )

    async def work_days_rules_read(
        self,
        start_date: str,
        end_date: str,
        project_id: Optional[int] = None,
        user_id: Optional[int] = None,
        *,
        model: Any = None,
    ) -> Any:
        """Dates are `YYYY-MM-DD`; both ends are inclusive."""
        params: Dict[str, Any] = {"start_date": start_date, "end_date": end_date}
        if project_id is not None:
            params["project_id"] = project_id
        if user_id is not None:
            params["user_id"] = user_id
        return await self.request(
            "GET", "/schedule/work_day_rules", params=params, model=model, op="work_day_rules"
        )

    # --- Schema ---

    async def schema_read(
        self, project_id: Optional[int] = None, *, model: Any = SchemaEntitiesResponse
    ) -> Any:
        return await self.request(
            "GET", "/schema", params=_project_params(project_id), model=model, op="schema_read"
        )

    async def schema_entity_read(
        self,
        project_id: Optional[int],
        entity: str,
        *,
        model: Any = SchemaEntityResponse,
    ) -> Any:
        return await self.request(
            "GET",
            f"/schema/{entity}",
            params=_project_params(project_id),
            model=model,
            op="schema_read",
        )

    async def schema_fields_read(
        self,
        project_id: Optional[int],
        entity: str,
        *,
        model: Any = SchemaFieldsResponse,
    ) -> Any:
        return await self.request(
            "GET",
            f"/schema/{entity}/fields",
            params=_project_params(project_id),
            model=model,
            op="schema_read",
        )

    async def schema_field_read(
        self,
        project_id: Optional[int],
        entity: str,
        field: str,
        *,
        model: Any = SchemaFieldResponse,
    ) -> Any:
        return await self.request(
            "GET",
            f"/schema/{entity}/fields/{field}",
            params=_project_params(project_id),
            model=model,
            op="schema_read",
        )

    async def schema_field_create(
        self,
        entity: str,
        data_type: FieldDataType,
        properties: List[CreateUpdateFieldProperty],
        *,
        model: Any = SchemaFieldResponse,
    ) -> Any:
        body = CreateFieldRequest(data_type=data_type, properties=properties)
        return await self.request(
            "POST", f"/schema/{entity}/fields", json=body, model=model, op="schema_field_create"
        )

    async def schema_field_update(
        self,
        entity: str,
        field: str,
        properties: List[CreateUpdateFieldProperty],
        project_id: Optional[int] = None,
        *,
        model: Any = SchemaFieldResponse,
    ) -> Any:
        body = UpdateFieldRequest(properties=properties)
        if project_id is not None:
            body.project_id = project_id
        return await self.request(
            "PUT",
            f"/schema/{entity}/fields/{field}",
            json=body,
            model=model,
            op="schema_field_update",
        )

    async def schema_field_delete(self, entity: str, field: str) -> None:
        await self.request("DELETE", f"/schema/{entity}/fields/{field}", op="schema_field_delete")

    async def schema_field_revive(self, entity: str, field: str) -> None:
        await self.request(
            "POST",
            f"/schema/{entity}/fields/{field}",
            params={"revive": "true"},
            op="schema_field_revive",
        )


__all__ = ["Session"]
