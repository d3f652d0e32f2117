from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger

from errors import ApiError, construct_error
from security import TokenIssuer

bearer_scheme = HTTPBearer(auto_error=False)


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


async def authenticate(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> int:
    """Verify the bearer token and attach the caller's id to the request."""
    if credentials is None or not credentials.credentials:
        raise construct_error("Access token must be provided", 401)

    try:
        user_id = issuer.verify(credentials.credentials)
    except ApiError as exc:
        logger.warning(f"Rejected access token on {request.url.path}: {exc}")
        raise

    request.state.user_id = user_id
    return user_id


async def get_current_user_id(request: Request, _: int = Depends(authenticate)) -> int:
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        raise construct_error("Unauthorized", 401)
    return user_id
