"""shotgrid_rest package exports."""

from . import filters
from .client import ShotgridClient
from .config import ShotgridConfig, create_client_from_env, load_env_config
from .errors import (
    ShotgridBuilderConsumedError,
    ShotgridClientError,
    ShotgridConfigError,
    ShotgridDecodeError,
    ShotgridInvalidFiltersError,
    ShotgridMultipartNotSupportedError,
    ShotgridNotFoundError,
    ShotgridResponseError,
    ShotgridServerError,
    ShotgridTransportError,
    ShotgridUploadError,
)
from .links import get_link, next_page_number, page_number_from_url, parse_id_from_href
from .logging import LogfmtFormatter, setup_logging
from .models import (
    AltImages,
    Entity,
    ErrorObject,
    ErrorResponse,
    FieldDataType,
    Grouping,
    GroupingDirection,
    GroupingType,
    PaginationLinks,
    Record,
    ResourceArrayResponse,
    ResourceMapResponse,
    ReturnOnly,
    SelfLink,
    ShotgridModel,
    SingleResourceResponse,
    SummaryField,
    SummaryFieldType,
    TokenResponse,
)
from .relationships import EntityRelationshipReadBuilder
from .search import SearchBuilder
from .session import Session
from .summarize import SummarizeBuilder
from .text_search import TextSearchBuilder
from .upload import UploadBuilder

__all__ = [
    # Client
    "ShotgridClient",
    "Session",
    "ShotgridConfig",
    "load_env_config",
    "create_client_from_env",
    "setup_logging",
    "LogfmtFormatter",
    # Builders
    "SearchBuilder",
    "TextSearchBuilder",
    "SummarizeBuilder",
    "EntityRelationshipReadBuilder",
    "UploadBuilder",
    "filters",
    # Exceptions
    "ShotgridClientError",
    "ShotgridConfigError",
    "ShotgridTransportError",
    "ShotgridInvalidFiltersError",
    "ShotgridBuilderConsumedError",
    "ShotgridUploadError",
    "ShotgridMultipartNotSupportedError",
    "ShotgridDecodeError",
    "ShotgridResponseError",
    "ShotgridNotFoundError",
    "ShotgridServerError",
    # Models
    "ShotgridModel",
    "SingleResourceResponse",
    "ResourceArrayResponse",
    "ResourceMapResponse",
    "PaginationLinks",
    "SelfLink",
    "Record",
    "Entity",
    "ErrorObject",
    "ErrorResponse",
    "TokenResponse",
    "ReturnOnly",
    "AltImages",
    "FieldDataType",
    "SummaryField",
    "SummaryFieldType",
    "Grouping",
    "GroupingType",
    "GroupingDirection",
    # Link utilities
    "get_link",
    "page_number_from_url",
    "next_page_number",
    "parse_id_from_href",
]
