from shotgrid_rest.links import (
    get_link,
    next_page_number,
    page_number_from_url,
    parse_id_from_href,
)
from shotgrid_rest.models import PaginationLinks


def test_get_link_basic_cases():
    assert get_link({"id": 1}, "next") is None
    payload = {"links": {"self": "/api/v1/entity/projects?page[number]=1", "next": None}}
    assert get_link(payload, "self") == "/api/v1/entity/projects?page[number]=1"
    assert get_link(payload, "next") is None
    assert get_link(payload, "missing") is None
    assert get_link({"links": "nope"}, "self") is None


def test_page_number_from_url():
    assert page_number_from_url("/api/v1/entity/projects?page[number]=3&page[size]=10") == 3
    assert page_number_from_url("/api/v1/entity/projects?page%5Bnumber%5D=4") == 4
    assert page_number_from_url("/api/v1/entity/projects?page[size]=10") is None
    assert page_number_from_url("/api/v1/entity/projects?page[number]=last") is None
    assert page_number_from_url(None) is None


def test_next_page_number():
    payload = {"links": {"next": "/api/v1/entity/assets/_search?page[number]=2"}}
    assert next_page_number(payload) == 2
    assert next_page_number({"links": {}}) is None


def test_pagination_links_model_reads_next_page():
    links = PaginationLinks.model_validate(
        {"self": "/api/v1/entity/projects", "next": "/api/v1/entity/projects?page[number]=5"}
    )
    assert links.self_link == "/api/v1/entity/projects"
    assert links.next_page_number() == 5
    assert PaginationLinks().next_page_number() is None


def test_parse_id_from_href_various():
    assert parse_id_from_href("/api/v1/entity/projects/42") == 42
    assert parse_id_from_href("/api/v1/entity/projects/100/") == 100
    assert parse_id_from_href("https://mock-sg.com/api/v1/entity/shots/7?fields=code") == 7
    assert parse_id_from_href("/api/v1/entity/items/not-an-int") is None
    assert parse_id_from_href(None) is None
    assert parse_id_from_href("") is None
