import json
from typing import Any, Dict, Mapping

from fastapi import Request
from pydantic import ValidationError

from errors import construct_error, validation_message
from schemas import MovieListQuery


def parse_movies_query(params: Mapping[str, Any]) -> MovieListQuery:
    """Validate the raw ``GET /api/movies`` query string.

    ``rating`` arrives as a JSON array (``rating=[3,7]``). The first problem
    found is raised as a 400; nothing after it is checked.
    """
    query: Dict[str, Any] = dict(params)

    if query.get("rating") is not None:
        try:
            query["rating"] = json.loads(query["rating"])
        except ValueError as exc:
            raise construct_error(str(exc), 400) from exc

    try:
        validated = MovieListQuery.model_validate(query)
    except ValidationError as exc:
        raise construct_error(validation_message(exc), 400) from exc

    if (validated.sorting_by is None) != (validated.sorting_direction is None):
        raise construct_error("Both sorting params must be provided.", 400)

    return validated


# FastAPI dependency
async def validate_movies_query(request: Request) -> MovieListQuery:
    return parse_movies_query(request.query_params)
