from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

import auth_service
import movie_service
import user_service
from auth import get_current_user_id, get_token_issuer
from database import get_db, init_db, make_engine, make_session_factory
from errors import INTERNAL_ERROR_MESSAGE, ApiError, construct_error
from schemas import MovieListOut, MovieListQuery, MovieOut, TokenOut, UserOut
from security import TokenIssuer
from settings import Settings, configure_logging
from validators import validate_movies_query

router = APIRouter(prefix="/api")

# Helpers

def parse_id(raw: str) -> int:
    if not raw:
        raise construct_error("ID is required in params.", 400)
    try:
        return int(raw)
    except ValueError:
        raise construct_error("ID is required to be a number in params.", 400)


def error_response(message: str, code: int) -> JSONResponse:
    return JSONResponse(status_code=code, content={"message": message, "errorCode": code})

# Auth Routes

@router.post("/signup", response_model=TokenOut, status_code=201)
def signup(
    payload: Any = Body(None),
    db: Session = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    return auth_service.sign_up(db, issuer, payload)


@router.post("/signin", response_model=TokenOut, status_code=201)
def signin(
    payload: Any = Body(None),
    db: Session = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    return auth_service.sign_in(db, issuer, payload)

# User Routes

@router.get("/users/me", response_model=UserOut)
def me(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return user_service.get_user(db, user_id)


@router.get("/users/{ID}", response_model=UserOut, dependencies=[Depends(get_current_user_id)])
def get_user(ID: str, db: Session = Depends(get_db)):
    return user_service.get_user(db, parse_id(ID))


@router.put("/users/{ID}", response_model=UserOut, dependencies=[Depends(get_current_user_id)])
def update_user(ID: str, payload: Any = Body(None), db: Session = Depends(get_db)):
    return user_service.update_user(db, parse_id(ID), payload)

# Movie Routes

@router.get("/movies", response_model=MovieListOut)
def list_movies(
    user_id: int = Depends(get_current_user_id),
    query: MovieListQuery = Depends(validate_movies_query),
    db: Session = Depends(get_db),
):
    return movie_service.list_movies(db, user_id, query)


@router.get("/movies/{ID}", response_model=MovieOut)
def get_movie(ID: str, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return movie_service.get_movie(db, user_id, parse_id(ID))


@router.post("/movies", response_model=MovieOut, status_code=200)
def create_movie(
    payload: Any = Body(None),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return movie_service.create_movie(db, user_id, payload)


@router.put("/movies/{ID}", response_model=MovieOut)
def update_movie(
    ID: str,
    payload: Any = Body(None),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return movie_service.update_movie(db, user_id, parse_id(ID), payload)

# Error handlers

async def handle_api_error(request: Request, exc: ApiError):
    if exc.error_code >= 500:
        logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.error_code, content=exc.to_dict())


async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return error_response(message, 400)


async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    return error_response(str(exc.detail), exc.status_code)


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"{request.method} {request.url.path} raised an unhandled error")
    return error_response(INTERNAL_ERROR_MESSAGE, 500)

# App factory

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    engine = make_engine(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(engine)
        logger.info("Database tables are ready")
        yield
        engine.dispose()

    app = FastAPI(title="Movie Catalog API", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    app.state.token_issuer = TokenIssuer.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ApiError, handle_api_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(router)

    @app.get("/")
    def root():
        return {"message": "Movie Catalog API running"}

    return app


if __name__ == "__main__":
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
