from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic_core import to_jsonable_python

from . import links

R = TypeVar("R")
L = TypeVar("L")


class ShotgridModel(BaseModel):
    """
    Base for every wire model.
    ShotGrid adds keys to its payloads over time, so unknown keys are ignored
    rather than rejected. Python-side names that clash with builtins (`self`)
    are aliased and can be populated by either name.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


def _dump_model(model: BaseModel) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for name, info in type(model).model_fields.items():
        value = getattr(model, name)
        # None that was never set means "not given"; an explicit None is a null
        if value is None and name not in model.model_fields_set:
            continue
        key = info.serialization_alias or info.alias or name
        out[key] = to_json_value(value)
    if model.model_extra:
        out.update(to_json_value(model.model_extra))
    return out


def to_json_value(value: Any) -> Any:
    """
    Encode a request body: models are dumped, containers are walked.
    Optional model fields left at None are omitted, while an explicit None is
    sent as null, which clears the field server-side. Other values go through
    pydantic's JSON encoding (dates, decimals, UUIDs).
    """
    if isinstance(value, BaseModel):
        return _dump_model(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: to_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_value(v) for v in value]
    return to_jsonable_python(value)


# --- Enums ---


class ReturnOnly(str, Enum):
    ACTIVE = "active"
    RETIRED = "retired"


class AltImages(str, Enum):
    ORIGINAL = "original"
    THUMBNAIL = "thumbnail"


class FieldDataType(str, Enum):
    CHECKBOX = "checkbox"
    CURRENCY = "currency"
    DATE = "date"
    DATE_TIME = "date_time"
    DURATION = "duration"
    ENTITY = "entity"
    FLOAT = "float"
    INT = "int"
    LIST = "list"
    MULTI_ENTITY = "multi_entity"
    NUMBER = "number"
    PERCENT = "percent"
    STATUS_LIST = "status_list"
    TEXT = "text"
    TIMECODE = "timecode"
    FOOTAGE = "footage"
    URL = "url"
    UUID = "uuid"
    CALCULATED = "calculated"


class SummaryFieldType(str, Enum):
    """The type of calculation to summarize."""

    RECORD_COUNT = "record_count"
    COUNT = "count"
    SUM = "sum"
    MAX = "maximum"
    MIN = "minimum"
    AVG = "average"
    EARLIEST = "earliest"
    LATEST = "latest"
    PERCENTAGE = "percentage"
    STATUS_PERCENTAGE = "status_percentage"
    STATUS_LIST = "status_list"
    CHECKED = "checked"
    UNCHECKED = "unchecked"


class GroupingType(str, Enum):
    """How to perform the grouping for a summary request."""

    EXACT = "exact"
    TENS = "tens"
    HUNDREDS = "hundreds"
    THOUSANDS = "thousands"
    TENS_OF_THOUSANDS = "tensofthousands"
    HUNDREDS_OF_THOUSANDS = "hundredsofthousands"
    MILLIONS = "millions"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    CLUSTERED_DATE = "clustered_date"
    ONE_DAY = "oneday"
    FIVE_DAYS = "fivedays"
    ENTITY_TYPE = "entitytype"
    FIRST_LETTER = "firstletter"


class GroupingDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


# --- Links ---


class SelfLink(ShotgridModel):
    self_link: Optional[str] = Field(default=None, alias="self")


class PaginationLinks(ShotgridModel):
    self_link: Optional[str] = Field(default=None, alias="self")
    next: Optional[str] = None
    prev: Optional[str] = None

    def next_page_number(self) -> Optional[int]:
        return links.page_number_from_url(self.next)


# --- Generic envelopes ---


class SingleResourceResponse(ShotgridModel, Generic[R, L]):
    """A single resource. `R` and `L` are chosen by the caller."""

    data: R
    links: Optional[L] = None


class ResourceArrayResponse(ShotgridModel, Generic[R, L]):
    """An array of resources, optionally paginated through `links`."""

    data: Optional[List[R]] = None
    links: Optional[L] = None


class ResourceMapResponse(ShotgridModel, Generic[R, L]):
    """Resources keyed by name, as returned by the schema endpoints."""

    data: Optional[Dict[str, R]] = None
    links: Optional[L] = None


# --- Records ---


class Entity(ShotgridModel):
    type: str
    id: int


class EntityIdentifier(ShotgridModel):
    record_id: Optional[int] = None
    entity: Optional[str] = None


class Record(ShotgridModel):
    id: Optional[int] = None
    type: Optional[str] = None
    attributes: Optional[Dict[str, Any]] = None
    relationships: Optional[Dict[str, Any]] = None
    links: Optional[SelfLink] = None


PaginatedRecordResponse = ResourceArrayResponse[Record, PaginationLinks]
SingleRecordResponse = SingleResourceResponse[Optional[Record], SelfLink]
FieldHashResponse = SingleResourceResponse[Optional[Dict[str, Any]], SelfLink]


class BatchedRequestsResponse(ShotgridModel):
    data: Optional[List[Optional[Record]]] = None


class FollowerRecord(ShotgridModel):
    id: Optional[int] = None
    type: Optional[str] = None
    attributes: Optional[Dict[str, Any]] = None
    links: Optional[SelfLink] = None


class FollowRecord(ShotgridModel):
    id: Optional[int] = None
    type: Optional[str] = None
    links: Optional[SelfLink] = None


# --- Auth ---


class TokenResponse(ShotgridModel):
    """Response from ShotGrid after a successful auth challenge."""

    token_type: str
    access_token: str
    expires_in: int
    refresh_token: Optional[str] = None


# --- Errors ---


class ErrorObject(ShotgridModel):
    id: Optional[str] = None
    status: Optional[int] = None
    code: Optional[int] = None
    title: Optional[str] = None
    detail: Optional[str] = None
    source: Optional[Dict[str, Any]] = None
    meta: Optional[Dict[str, Any]] = None


class ErrorResponse(ShotgridModel):
    errors: List[ErrorObject]


# --- Activity stream ---


class ActivityUpdate(ShotgridModel):
    id: Optional[int] = None
    update_type: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None
    read: Optional[bool] = None
    primary_entity: Optional[Dict[str, Any]] = None
    created_by: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None


class EntityActivityStreamData(ShotgridModel):
    entity_id: Optional[int] = None
    entity_type: Optional[str] = None
    latest_update_id: Optional[int] = None
    earliest_update_id: Optional[int] = None
    updates: Optional[List[ActivityUpdate]] = None


EntityActivityStreamResponse = SingleResourceResponse[EntityActivityStreamData, SelfLink]


# --- Hierarchy ---


class HierarchyEntityFields(ShotgridModel):
    entity: Optional[str] = None
    fields: Optional[List[str]] = None


class HierarchyExpandRequest(ShotgridModel):
    path: str
    entity_fields: Optional[List[HierarchyEntityFields]] = None
    seed_entity_field: Optional[str] = None


class HierarchyReferenceEntity(ShotgridModel):
    id: Optional[int] = None
    type: Optional[str] = None


class HierarchyExpandData(ShotgridModel):
    label: Optional[str] = None
    path: Optional[str] = None
    parent_path: Optional[str] = None
    ref: Optional[Dict[str, Any]] = None
    target_entities: Optional[Dict[str, Any]] = None
    has_children: Optional[bool] = None
    children: Optional[List[Dict[str, Any]]] = None


class HierarchyExpandResponse(ShotgridModel):
    data: Optional[HierarchyExpandData] = None


class HierarchySearchCriteria(ShotgridModel):
    """Search either by free text or by a concrete entity; set one of the two."""

    search_string: Optional[str] = None
    entity: Optional[Entity] = None


class HierarchySearchRequest(ShotgridModel):
    search_criteria: HierarchySearchCriteria
    root_path: Optional[str] = None
    seed_entity_field: Optional[str] = None


class HierarchySearchResponseData(ShotgridModel):
    label: Optional[str] = None
    incremental_path: Optional[List[str]] = None
    path_label: Optional[str] = None
    ref: Optional[HierarchyReferenceEntity] = None
    project_id: Optional[int] = None


class HierarchySearchResponse(ShotgridModel):
    data: Optional[List[HierarchySearchResponseData]] = None


# --- Schedule ---


class WorkDayRules(ShotgridModel):
    date: Optional[str] = None
    working: Optional[bool] = None
    description: Optional[str] = None
    reason: Optional[str] = None


WorkDayRulesResponse = ResourceArrayResponse[WorkDayRules, SelfLink]


# --- Schema ---


class SchemaResponseValue(ShotgridModel):
    # Can be a string or a boolean
    value: Optional[Any] = None
    editable: Optional[bool] = None


class SchemaFieldProperties(ShotgridModel):
    default_value: Optional[SchemaResponseValue] = None
    regex_validation: Optional[SchemaResponseValue] = None
    regex_validation_enabled: Optional[SchemaResponseValue] = None
    summary_default: Optional[SchemaResponseValue] = None
    valid_types: Optional[SchemaResponseValue] = None
    valid_values: Optional[SchemaResponseValue] = None


class SchemaFieldRecord(ShotgridModel):
    custom_metadata: Optional[SchemaResponseValue] = None
    data_type: Optional[SchemaResponseValue] = None
    description: Optional[SchemaResponseValue] = None
    editable: Optional[SchemaResponseValue] = None
    entity_type: Optional[SchemaResponseValue] = None
    mandatory: Optional[SchemaResponseValue] = None
    name: Optional[SchemaResponseValue] = None
    properties: Optional[SchemaFieldProperties] = None
    ui_value_displayable: Optional[SchemaResponseValue] = None
    unique: Optional[SchemaResponseValue] = None
    visible: Optional[SchemaResponseValue] = None


class SchemaEntityRecord(ShotgridModel):
    name: Optional[SchemaResponseValue] = None
    visible: Optional[SchemaResponseValue] = None


SchemaFieldResponse = SingleResourceResponse[SchemaFieldRecord, SelfLink]
SchemaFieldsResponse = SingleResourceResponse[Dict[str, SchemaFieldRecord], SelfLink]
SchemaEntityResponse = SingleResourceResponse[SchemaEntityRecord, SelfLink]
SchemaEntitiesResponse = ResourceMapResponse[SchemaEntityRecord, SelfLink]


class CreateUpdateFieldProperty(ShotgridModel):
    property_name: str
    value: str


class CreateFieldRequest(ShotgridModel):
    data_type: FieldDataType
    properties: List[CreateUpdateFieldProperty]


class UpdateFieldRequest(ShotgridModel):
    properties: List[CreateUpdateFieldProperty]
    project_id: Optional[int] = None


# --- Summarize ---


class SummaryField(ShotgridModel):
    """A concrete field on an entity plus the operation used to aggregate it."""

    field: str
    type: SummaryFieldType


class Grouping(ShotgridModel):
    """What a summary is aggregated *by*."""

    field: str
    type: GroupingType
    direction: Optional[GroupingDirection] = None


class SummaryOptions(ShotgridModel):
    include_archived_projects: Optional[bool] = None


class SummarizeRequest(ShotgridModel):
    filters: Optional[Any] = None
    summary_fields: Optional[List[SummaryField]] = None
    grouping: Optional[List[Grouping]] = None
    options: Optional[SummaryOptions] = None


class SummaryGroups(ShotgridModel):
    group_name: Optional[str] = None
    group_value: Optional[Any] = None
    groups: Optional[List[SummaryGroups]] = None
    summaries: Optional[Dict[str, Any]] = None


class SummaryData(ShotgridModel):
    summaries: Optional[Dict[str, Any]] = None
    groups: Optional[List[SummaryGroups]] = None


class SummarizeResponse(ShotgridModel):
    data: SummaryData


# --- Uploads ---


class UploadInfoData(ShotgridModel):
    timestamp: Optional[str] = None
    upload_type: Optional[str] = None
    upload_id: Optional[str] = None
    storage_service: Optional[str] = None
    original_filename: Optional[str] = None
    multipart_upload: Optional[bool] = None


class UploadInfoLinks(ShotgridModel):
    upload: Optional[str] = None
    complete_upload: Optional[str] = None
    get_next_part: Optional[str] = None


class UploadResponseData(ShotgridModel):
    upload_id: Optional[str] = None
    original_filename: Optional[str] = None


class UploadResponseLinks(ShotgridModel):
    complete_upload: Optional[str] = None


class NextUploadPartLinks(ShotgridModel):
    upload: Optional[str] = None
    get_next_part: Optional[str] = None


class NextUploadPartResponse(ShotgridModel):
    links: Optional[NextUploadPartLinks] = None


UploadInfoResponse = SingleResourceResponse[Optional[UploadInfoData], UploadInfoLinks]
UploadResponse = SingleResourceResponse[Optional[UploadResponseData], UploadResponseLinks]
