import datetime
import uuid
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel
from shotgrid_rest.models import (
    Entity,
    ErrorResponse,
    Grouping,
    GroupingType,
    PaginatedRecordResponse,
    ResourceMapResponse,
    ReturnOnly,
    SchemaEntityRecord,
    SelfLink,
    SummarizeRequest,
    SummaryField,
    SummaryFieldType,
    SummaryGroups,
    TokenResponse,
    UploadInfoResponse,
    to_json_value,
)


def test_record_page_parses_and_ignores_unknown_keys():
    payload = {
        "data": [
            {
                "id": 1,
                "type": "Project",
                "attributes": {"code": "AB"},
                "relationships": {"users": {"data": []}},
                "links": {"self": "/api/v1/entity/projects/1"},
            }
        ],
        "links": {"self": "/api/v1/entity/projects", "next": None},
        "meta": {"total": 1},
    }
    page = PaginatedRecordResponse.model_validate(payload)
    assert page.data[0].attributes == {"code": "AB"}
    assert page.data[0].links.self_link == "/api/v1/entity/projects/1"
    assert page.links.next is None


def test_array_envelope_data_is_optional():
    assert PaginatedRecordResponse.model_validate({}).data is None


def test_map_envelope():
    resp = ResourceMapResponse[SchemaEntityRecord, SelfLink].model_validate(
        {"data": {"Shot": {"name": {"value": "Shot", "editable": False}}}}
    )
    assert resp.data["Shot"].name.value == "Shot"
    assert resp.data["Shot"].name.editable is False


def test_token_response():
    token = TokenResponse.model_validate(
        {"token_type": "Bearer", "access_token": "a", "expires_in": 600, "refresh_token": "r"}
    )
    assert token.expires_in == 600


def test_error_response_optional_fields():
    resp = ErrorResponse.model_validate({"errors": [{"title": "only a title"}]})
    assert resp.errors[0].status is None
    assert resp.errors[0].title == "only a title"


def test_summary_groups_nest():
    groups = SummaryGroups.model_validate(
        {
            "group_name": "Character",
            "groups": [{"group_name": "hero", "summaries": {"id": 1}}],
        }
    )
    assert groups.groups[0].summaries == {"id": 1}


def test_upload_info_allows_null_data():
    resp = UploadInfoResponse.model_validate({"data": None, "links": {"upload": "/x"}})
    assert resp.data is None
    assert resp.links.upload == "/x"


def test_to_json_value_dumps_models_and_enums():
    body = SummarizeRequest(
        summary_fields=[SummaryField(field="id", type=SummaryFieldType.MAX)],
        grouping=[Grouping(field="code", type=GroupingType.FIRST_LETTER)],
    )
    assert to_json_value(body) == {
        "summary_fields": [{"field": "id", "type": "maximum"}],
        "grouping": [{"field": "code", "type": "firstletter"}],
    }
    assert to_json_value({"return_only": ReturnOnly.RETIRED, "e": [Entity(type="Shot", id=1)]}) == {
        "return_only": "retired",
        "e": [{"type": "Shot", "id": 1}],
    }


def test_self_link_alias_round_trips():
    link = SelfLink(self_link="/api/v1/entity/shots/1")
    assert to_json_value(link) == {"self": "/api/v1/entity/shots/1"}


class Note(BaseModel):
    type: str = "Note"
    subject: Optional[str] = None
    content: Optional[str] = None


def test_to_json_value_keeps_explicit_none_and_defaults():
    assert to_json_value(Note(content=None)) == {"type": "Note", "content": None}
    assert to_json_value(Note(subject="hi")) == {"type": "Note", "subject": "hi"}


def test_to_json_value_encodes_non_json_scalars():
    ref = uuid.UUID("12345678-1234-5678-1234-567812345678")
    assert to_json_value(
        {
            "day": datetime.date(2024, 1, 2),
            "at": datetime.datetime(2024, 1, 2, 3, 4, 5),
            "cost": Decimal("1.5"),
            "ref": ref,
            "ids": (1, 2),
        }
    ) == {
        "day": "2024-01-02",
        "at": "2024-01-02T03:04:05",
        "cost": "1.5",
        "ref": "12345678-1234-5678-1234-567812345678",
        "ids": [1, 2],
    }
