import datetime
import json
from typing import Optional

import pytest
import respx
from conftest import API
from httpx import Response
from pydantic import BaseModel
from shotgrid_rest import filters
from shotgrid_rest.errors import (
    ShotgridBuilderConsumedError,
    ShotgridInvalidFiltersError,
    ShotgridServerError,
)
from shotgrid_rest.models import PaginationLinks, ResourceArrayResponse, ReturnOnly

SEARCH_URL = f"{API}/entity/Project/_search"
PROJECTS = {
    "data": [{"id": 1, "type": "Project", "attributes": {"code": "AB", "name": "Alpha"}}],
    "links": {},
}


class ProjectAttributes(BaseModel):
    code: Optional[str] = None
    name: Optional[str] = None


class Project(BaseModel):
    id: int
    type: str
    attributes: ProjectAttributes


ProjectPage = ResourceArrayResponse[Project, PaginationLinks]


@pytest.mark.asyncio
async def test_project_search_decodes_typed_page(session):
    async with respx.mock:
        route = respx.post(SEARCH_URL).mock(return_value=Response(200, json=PROJECTS))

        async with session.client:
            resp = await session.search("Project", "id,code,name", filters.empty()).execute(
                model=ProjectPage
            )

    assert len(resp.data) == 1
    assert resp.data[0].attributes.code == "AB"

    req = route.calls[0].request
    assert req.url.params["fields"] == "id,code,name"
    assert req.headers["Content-Type"] == filters.MIME_FILTER_ARRAY
    assert req.headers["Authorization"] == "Bearer mock-token"
    assert json.loads(req.content) == {"filters": []}


@pytest.mark.asyncio
async def test_complex_filters_use_hash_mime(session):
    value = filters.complex(
        filters.or_(filters.field("code").is_("AB"), filters.field("code").is_("CD"))
    )
    async with respx.mock:
        route = respx.post(SEARCH_URL).mock(return_value=Response(200, json=PROJECTS))

        async with session.client:
            await session.search("Project", "code", value).execute()

    req = route.calls[0].request
    assert req.headers["Content-Type"] == filters.MIME_FILTER_HASH
    assert json.loads(req.content) == {"filters": value}


@pytest.mark.asyncio
async def test_date_filter_values_are_encoded(session):
    value = filters.basic([filters.field("created_at").greater_than(datetime.date(2024, 1, 1))])
    async with respx.mock:
        route = respx.post(SEARCH_URL).mock(return_value=Response(200, json=PROJECTS))

        async with session.client:
            await session.search("Project", "code", value).execute()

    assert json.loads(route.calls[0].request.content) == {
        "filters": [["created_at", "greater_than", "2024-01-01"]]
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("bad", [None, "code is AB", 7])
async def test_invalid_filters_make_no_request(session, bad):
    # No routes: any request would fail as unmocked.
    async with respx.mock:
        async with session.client:
            with pytest.raises(ShotgridInvalidFiltersError):
                session.search("Project", "code", bad)

        assert respx.calls.call_count == 0


@pytest.mark.asyncio
async def test_configured_params_are_sent(session):
    async with respx.mock:
        route = respx.post(SEARCH_URL).mock(return_value=Response(200, json=PROJECTS))

        async with session.client:
            await (
                session.search("Project", "id,code", [])
                .sort("-created_at,code")
                .size(25)
                .number(3)
                .return_only(ReturnOnly.RETIRED)
                .include_archived_projects(False)
                .execute()
            )

    params = route.calls[0].request.url.params
    assert params["page[size]"] == "25"
    assert params["page[number]"] == "3"
    assert params["sort"] == "-created_at,code"
    assert params["options[return_only]"] == "retired"
    assert params["options[include_archived_projects]"] == "false"


@pytest.mark.asyncio
async def test_unset_params_are_omitted(session):
    async with respx.mock:
        route = respx.post(SEARCH_URL).mock(return_value=Response(200, json=PROJECTS))

        async with session.client:
            await session.search("Project", "code", []).size(10).size(None).execute()

    assert set(route.calls[0].request.url.params.keys()) == {"fields"}


@pytest.mark.asyncio
async def test_identically_configured_builders_yield_equal_results(session):
    async with respx.mock:
        respx.post(SEARCH_URL).mock(return_value=Response(200, json=PROJECTS))

        async with session.client:
            results = []
            for _ in range(2):
                builder = session.search("Project", "code", []).size(1).number(1)
                results.append(await builder.execute(model=ProjectPage))

    assert results[0] == results[1]


@pytest.mark.asyncio
async def test_builder_runs_once(session):
    async with respx.mock:
        route = respx.post(SEARCH_URL).mock(return_value=Response(200, json=PROJECTS))

        async with session.client:
            builder = session.search("Project", "code", [])
            await builder.execute()
            with pytest.raises(ShotgridBuilderConsumedError):
                await builder.execute()

    assert route.call_count == 1


@pytest.mark.asyncio
async def test_server_rejection_of_filters(session):
    body = {"errors": [{"status": 400, "title": "Invalid filter", "detail": "bogus field"}]}
    async with respx.mock:
        respx.post(SEARCH_URL).mock(return_value=Response(400, json=body))

        async with session.client:
            with pytest.raises(ShotgridServerError) as exc:
                await session.search("Project", "code", [["bogus", "is", 1]]).execute()

    assert exc.value.errors[0].detail == "bogus field"
