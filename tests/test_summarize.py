import json

import pytest
import respx
from conftest import API
from httpx import Response
from shotgrid_rest import filters
from shotgrid_rest.models import (
    Grouping,
    GroupingDirection,
    GroupingType,
    SummarizeResponse,
    SummaryFieldType,
)

SUMMARIZE_URL = f"{API}/entity/Asset/_summarize"
SUMMARY = {
    "data": {
        "summaries": {"id": 4},
        "groups": [
            {"group_name": "Character", "group_value": "Character", "summaries": {"id": 3}},
            {"group_name": "Prop", "group_value": "Prop", "summaries": {"id": 1}},
        ],
    },
    "links": {"self": "/api/v1/entity/assets/_summarize"},
}


@pytest.mark.asyncio
async def test_summarize_with_grouping(session):
    project = filters.EntityRef(type="Project", id=70)
    async with respx.mock:
        route = respx.post(SUMMARIZE_URL).mock(return_value=Response(200, json=SUMMARY))

        async with session.client:
            resp = await (
                session.summarize(
                    "Asset",
                    filters.basic([filters.field("project").is_(project)]),
                    [("id", SummaryFieldType.COUNT)],
                )
                .grouping([("sg_asset_type", GroupingType.EXACT, GroupingDirection.ASC)])
                .include_archived_projects(True)
                .execute()
            )

    assert isinstance(resp, SummarizeResponse)
    assert resp.data.summaries == {"id": 4}
    assert [g.group_name for g in resp.data.groups] == ["Character", "Prop"]

    req = route.calls[0].request
    assert req.headers["Content-Type"] == filters.MIME_FILTER_ARRAY
    assert json.loads(req.content) == {
        "filters": [["project", "is", {"type": "Project", "id": 70}]],
        "summary_fields": [{"field": "id", "type": "count"}],
        "grouping": [{"field": "sg_asset_type", "type": "exact", "direction": "asc"}],
        "options": {"include_archived_projects": True},
    }


@pytest.mark.asyncio
async def test_summarize_without_filters_defaults_to_array_mime(session):
    async with respx.mock:
        route = respx.post(SUMMARIZE_URL).mock(return_value=Response(200, json=SUMMARY))

        async with session.client:
            await session.summarize("Asset", None, []).execute()

    req = route.calls[0].request
    assert req.headers["Content-Type"] == filters.MIME_FILTER_ARRAY
    assert json.loads(req.content) == {"summary_fields": []}


@pytest.mark.asyncio
async def test_complex_filters_and_model_groupings(session):
    value = filters.complex(filters.or_(filters.field("code").is_("A")))
    async with respx.mock:
        route = respx.post(SUMMARIZE_URL).mock(return_value=Response(200, json=SUMMARY))

        async with session.client:
            raw = await (
                session.summarize("Asset", value, [("id", SummaryFieldType.RECORD_COUNT)])
                .grouping([Grouping(field="code", type=GroupingType.FIRST_LETTER)])
                .execute(model=None)
            )

    assert raw == SUMMARY
    req = route.calls[0].request
    assert req.headers["Content-Type"] == filters.MIME_FILTER_HASH
    assert json.loads(req.content)["grouping"] == [{"field": "code", "type": "firstletter"}]
