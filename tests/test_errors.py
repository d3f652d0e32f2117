import pytest
from pydantic import ValidationError

from errors import (
    ApiError,
    BadRequest,
    Forbidden,
    InternalError,
    NotFound,
    Unauthorized,
    construct_error,
    validation_message,
)
from schemas import UserCreate


@pytest.mark.parametrize(
    "code, cls",
    [(400, BadRequest), (401, Unauthorized), (403, Forbidden), (404, NotFound), (500, InternalError)],
)
def test_construct_error_picks_class_by_code(code, cls):
    err = construct_error("boom", code)
    assert isinstance(err, cls)
    assert err.to_dict() == {"message": "boom", "errorCode": code}


def test_construct_error_defaults_to_500():
    err = construct_error("boom")
    assert isinstance(err, InternalError)
    assert err.error_code == 500


def test_unknown_code_is_plain_api_error():
    err = construct_error("teapot", 418)
    assert type(err) is ApiError
    assert err.error_code == 418


def test_validation_message_names_the_field():
    with pytest.raises(ValidationError) as info:
        UserCreate.model_validate({"password": "x"})
    assert validation_message(info.value).startswith('"email"')
