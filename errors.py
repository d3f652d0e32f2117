from typing import Any, Dict, Optional

from pydantic import ValidationError

INTERNAL_ERROR_MESSAGE = "There was an internal error."


class ApiError(Exception):
    """Error carried from the services up to the HTTP layer.

    Every failure the API reports is rendered as ``{message, errorCode}``.
    """

    code = 500

    def __init__(self, message: str, error_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.code

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "errorCode": self.error_code}

    def __repr__(self):
        return f"{type(self).__name__}({self.message!r}, {self.error_code})"


class BadRequest(ApiError):
    code = 400


class Unauthorized(ApiError):
    code = 401


class Forbidden(ApiError):
    code = 403


class NotFound(ApiError):
    code = 404


class InternalError(ApiError):
    code = 500


_BY_CODE = {cls.code: cls for cls in (BadRequest, Unauthorized, Forbidden, NotFound, InternalError)}


def construct_error(message: str, code: int = 500) -> ApiError:
    cls = _BY_CODE.get(code, ApiError)
    return cls(message, code or 500)


def validation_message(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid payload"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    if field:
        return f'"{field}" {first["msg"]}'
    return first["msg"]
