import math
from typing import Any, Dict, Optional, Union

from loguru import logger
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from database import transaction
from director_service import create_director, find_director
from errors import INTERNAL_ERROR_MESSAGE, construct_error, validation_message
from models import Movie
from schemas import MovieCreate, MovieListOut, MovieListQuery, MovieOut, MovieUpdate, PaginationInfo

SORTABLE_COLUMNS = {
    "publishingYear": Movie.publishing_year,
    "rating": Movie.rating,
    "title": Movie.title,
}


def _validate(model, payload):
    try:
        return model.model_validate(payload or {})
    except ValidationError as exc:
        raise construct_error(validation_message(exc), 400) from exc


def _load_owned_movie(db: Session, user_id: int, movie_id: int) -> Movie:
    try:
        movie = db.get(Movie, movie_id, options=[joinedload(Movie.director)])
    except SQLAlchemyError as exc:
        logger.error(f"Could not load movie {movie_id}: {exc}")
        raise construct_error(INTERNAL_ERROR_MESSAGE, 500) from exc

    if not movie:
        raise construct_error("Movie not found.", 404)

    if movie.user_id != user_id:
        raise construct_error("Operation forbidden.", 403)

    return movie


def get_movie(db: Session, user_id: int, movie_id: int) -> MovieOut:
    return MovieOut.model_validate(_load_owned_movie(db, user_id, movie_id))


def pagination_info(count: int, limit: Optional[int] = None, offset: Optional[int] = None) -> PaginationInfo:
    if limit is None or offset is None:
        return PaginationInfo(count=count)
    return PaginationInfo(
        count=count,
        current_page=offset // limit + 1,
        total_pages=math.ceil(count / limit),
    )


def list_movies(db: Session, user_id: int, params: Union[Dict[str, Any], MovieListQuery]) -> MovieListOut:
    if not isinstance(params, MovieListQuery):
        params = _validate(MovieListQuery, params)

    query = db.query(Movie).filter(Movie.user_id == user_id)

    if params.genre:
        query = query.filter(Movie.genre.ilike(f"%{params.genre}%"))
    if params.publishing_country:
        query = query.filter(Movie.publishing_country.ilike(f"%{params.publishing_country}%"))
    if params.publishing_year is not None:
        query = query.filter(Movie.publishing_year == params.publishing_year)
    if params.rating is not None:
        low, high = params.rating
        query = query.filter(Movie.rating.between(low, high))

    try:
        count = query.count()

        if params.sorting_by and params.sorting_direction:
            column = SORTABLE_COLUMNS[params.sorting_by]
            query = query.order_by(column.asc() if params.sorting_direction == "ASC" else column.desc())
        if params.offset is not None:
            query = query.offset(params.offset)
        if params.limit is not None:
            query = query.limit(params.limit)

        movies = query.options(joinedload(Movie.director)).all()
    except SQLAlchemyError as exc:
        logger.error(f"Could not list movies for user {user_id}: {exc}")
        raise construct_error(INTERNAL_ERROR_MESSAGE, 500) from exc

    return MovieListOut(
        movies=[MovieOut.model_validate(m) for m in movies],
        pagination_info=pagination_info(count, params.limit, params.offset),
    )


def create_movie(db: Session, user_id: int, payload: Dict[str, Any]) -> MovieOut:
    data = _validate(MovieCreate, payload)

    # director lookup/creation and the movie insert commit or roll back together
    with transaction(db) as txn:
        director = None
        if data.director_full_name:
            director = find_director(txn.session, data.director_full_name)
            if not director:
                director = create_director(db, data.director_full_name, transaction=txn)

        movie = Movie(
            title=data.title,
            publishing_year=data.publishing_year,
            image_url=data.image_url,
            publishing_country=data.publishing_country,
            genre=data.genre,
            rating=data.rating,
            user_id=user_id,
            director_id=director.id if director else None,
        )
        try:
            txn.session.add(movie)
            txn.session.flush()
        except SQLAlchemyError as exc:
            logger.error(f"Could not insert movie {data.title!r} for user {user_id}: {exc}")
            raise construct_error(INTERNAL_ERROR_MESSAGE, 500) from exc

    logger.info(f"User {user_id} created movie {movie.id} ({movie.title})")
    db.refresh(movie)
    return MovieOut.model_validate(movie)


def update_movie(db: Session, user_id: int, movie_id: int, payload: Dict[str, Any]) -> MovieOut:
    movie = _load_owned_movie(db, user_id, movie_id)
    changes = _validate(MovieUpdate, payload).model_dump(exclude_unset=True)

    for field, value in changes.items():
        setattr(movie, field, value)
    try:
        db.commit()
        db.refresh(movie)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Could not update movie {movie_id}: {exc}")
        raise construct_error(INTERNAL_ERROR_MESSAGE, 500) from exc

    return MovieOut.model_validate(movie)
