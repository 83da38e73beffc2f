from typing import Any, Dict, Optional
from urllib.parse import parse_qs, urlsplit


def get_link(payload: Dict[str, Any], relation: str) -> Optional[str]:
    """
    Safely retrieves a link URL from the `links` dictionary of a payload.
    Example: get_link(resp_json, 'next') -> '/api/v1/entity/projects?page[number]=2'
    """
    if not payload or not isinstance(payload.get("links"), dict):
        return None
    value = payload["links"].get(relation)
    return value if isinstance(value, str) else None


def page_number_from_url(url: Optional[str]) -> Optional[int]:
    """
    Extracts the `page[number]` query parameter from a pagination link.
    Example: '/api/v1/entity/projects?page[number]=3&page[size]=10' -> 3
    """
    if not url:
        return None
    values = parse_qs(urlsplit(url).query).get("page[number]")
    if not values:
        return None
    try:
        return int(values[0])
    except ValueError:
        return None


def next_page_number(payload: Dict[str, Any]) -> Optional[int]:
    """Page number of the `next` link, or None on the last page."""
    return page_number_from_url(get_link(payload, "next"))


def parse_id_from_href(href: Optional[str]) -> Optional[int]:
    """
    Extracts the ID from a RESTful URL.
    Example: '/api/v1/entity/projects/42' -> 42
    """
    if not href:
        return None
    try:
        return int(urlsplit(href).path.strip("/").split("/")[-1])
    except (ValueError, IndexError):
        return None


__all__ = [
    "get_link",
    "page_number_from_url",
    "next_page_number",
    "parse_id_from_href",
]
