import pytest
import respx
from conftest import API
from httpx import Response
from shotgrid_rest.errors import ShotgridNotFoundError
from shotgrid_rest.models import PaginatedRecordResponse, ReturnOnly

URL = f"{API}/entity/Project/70/relationships/users"


@pytest.mark.asyncio
async def test_relationship_read_with_options(session):
    body = {"data": [{"id": 5, "type": "HumanUser"}], "links": {"self": "/x"}}
    async with respx.mock:
        route = respx.get(URL).mock(return_value=Response(200, json=body))

        async with session.client:
            resp = await (
                session.entity_relationship_read("Project", 70, "users")
                .return_only(ReturnOnly.ACTIVE)
                .include_archived_projects(True)
                .execute(model=PaginatedRecordResponse)
            )

    assert resp.data[0].id == 5
    assert resp.data[0].type == "HumanUser"
    params = route.calls[0].request.url.params
    assert params["options[return_only]"] == "active"
    assert params["options[include_archived_projects]"] == "true"


@pytest.mark.asyncio
async def test_relationship_read_without_options_has_no_query(session):
    async with respx.mock:
        route = respx.get(URL).mock(return_value=Response(200, json={"data": []}))

        async with session.client:
            await session.entity_relationship_read("Project", 70, "users").execute()

    assert route.calls[0].request.url.query == b""


@pytest.mark.asyncio
async def test_relationship_read_404(session):
    async with respx.mock:
        respx.get(URL).mock(return_value=Response(404, json={"errors": [{"status": 404}]}))

        async with session.client:
            with pytest.raises(ShotgridNotFoundError):
                await session.entity_relationship_read("Project", 70, "users").execute()
