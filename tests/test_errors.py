import pytest
from pydantic import BaseModel, TypeAdapter, ValidationError
from shotgrid_rest.errors import (
    ShotgridDecodeError,
    ShotgridNotFoundError,
    ShotgridServerError,
    classify_error,
    contains_errors,
    parse_error_objects,
)


def test_success_without_errors_is_not_an_error():
    assert classify_error(200, {"data": []}) is None
    assert classify_error(204, None) is None


def test_404_is_not_found_regardless_of_body():
    for body in (None, {"errors": "garbage"}, {"data": 1}):
        err = classify_error(404, body, text="nope")
        assert isinstance(err, ShotgridNotFoundError)
        assert err.status_code == 404


def test_error_item_with_404_status_is_not_found():
    body = {"errors": [{"status": 404, "detail": "Asset 7"}]}
    err = classify_error(200, body)
    assert isinstance(err, ShotgridNotFoundError)
    assert err.detail == "Asset 7"
    assert str(err) == "Entity Not Found - `Asset 7`"


def test_errors_array_is_preserved_item_for_item():
    body = {
        "errors": [
            {"id": "a", "status": 400, "code": 103, "title": "Bad filter", "source": {"filters": "x"}},
            {"id": "b", "status": 400, "code": 104, "title": "Bad sort", "meta": {"crud": True}},
        ]
    }
    err = classify_error(400, body, method="POST", url="https://mock-sg.com/api/v1/x")
    assert isinstance(err, ShotgridServerError)
    assert [e.id for e in err.errors] == ["a", "b"]
    assert [e.code for e in err.errors] == [103, 104]
    assert err.errors[0].source == {"filters": "x"}
    assert err.errors[1].meta == {"crud": True}
    assert str(err).startswith("400 POST https://mock-sg.com/api/v1/x: Server Error - ")


def test_single_error_object_is_accepted_as_list():
    err = classify_error(400, {"errors": {"status": 400, "title": "Oops"}})
    assert isinstance(err, ShotgridServerError)
    assert len(err.errors) == 1
    assert err.errors[0].title == "Oops"


def test_malformed_errors_wrap_raw_text():
    err = classify_error(400, {"errors": 42}, text='{"errors": 42}')
    assert isinstance(err, ShotgridServerError)
    assert err.errors == []
    assert err.response_text == '{"errors": 42}'


def test_errors_key_on_2xx_still_fails():
    err = classify_error(200, {"errors": []})
    assert isinstance(err, ShotgridServerError)
    assert err.status_code == 200


def test_non_2xx_without_json_wraps_text():
    err = classify_error(502, None, text="Bad Gateway")
    assert isinstance(err, ShotgridServerError)
    assert "Bad Gateway" in str(err)


def test_contains_errors():
    assert contains_errors({"errors": []})
    assert not contains_errors({"data": []})
    assert not contains_errors([{"errors": []}])


def test_parse_error_objects_missing_key():
    assert parse_error_objects({"data": 1}) is None


def test_decode_error_from_validation_error():
    class Thing(BaseModel):
        name: str
        size: int

    with pytest.raises(ValidationError) as exc:
        TypeAdapter(list[Thing]).validate_python(
            [{"name": "ok", "size": 1}, {"name": 2, "size": "big"}]
        )
    err = ShotgridDecodeError.from_validation_error(exc.value, target="list[Thing]")
    assert err.locations == ["1.name", "1.size"]
    assert "list[Thing]" in str(err)
