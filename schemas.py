"""
Wire schemas for the Movie Catalog API

Request payloads, query strings and response bodies are defined below using
Pydantic models. JSON field names are camelCase (``publishingYear``,
``imageURL``); every model also accepts the Python attribute name.

Input models forbid unknown fields, so a payload can only touch the columns
its model lists (owner and director are never updatable).
"""

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

SortingDirection = Literal["ASC", "DESC"]
SortingBy = Literal["publishingYear", "rating", "title"]

Rating = Annotated[float, Field(ge=0, le=10)]
Text = Annotated[str, Field(min_length=1)]
Year = Annotated[int, Field(ge=0, le=9999)]


class InputModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    @field_validator("*")
    @classmethod
    def not_null(cls, value):
        # omitted fields keep their default; an explicit null is rejected
        if value is None:
            raise ValueError("must not be null")
        return value


class OutputModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Users

class UserCreate(InputModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    first_name: Optional[Text] = None
    last_name: Optional[Text] = None


class UserUpdate(InputModel):
    first_name: Optional[Text] = None
    last_name: Optional[Text] = None


class SignIn(InputModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserOut(OutputModel):
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TokenOut(OutputModel):
    access_token: str


# Directors

class DirectorCreate(InputModel):
    full_name: str = Field(..., min_length=1)


class DirectorOut(OutputModel):
    id: int
    full_name: str


# Movies

class MovieCreate(InputModel):
    title: str = Field(..., min_length=1)
    publishing_year: Year
    image_url: Optional[Text] = Field(None, alias="imageURL")
    publishing_country: Optional[Text] = None
    genre: Optional[Text] = None
    rating: Optional[Rating] = None
    director_full_name: Optional[str] = Field(None, min_length=1)


class MovieUpdate(InputModel):
    title: Optional[str] = Field(None, min_length=1)
    publishing_year: Optional[Year] = None
    image_url: Optional[Text] = Field(None, alias="imageURL")
    publishing_country: Optional[Text] = None
    genre: Optional[Text] = None
    rating: Optional[Rating] = None


class MovieListQuery(InputModel):
    limit: Optional[int] = Field(None, ge=1)
    offset: Optional[int] = Field(None, ge=0)
    genre: Optional[Text] = None
    publishing_year: Optional[Year] = None
    publishing_country: Optional[Text] = None
    rating: Optional[Tuple[Rating, Rating]] = None
    sorting_direction: Optional[SortingDirection] = None
    sorting_by: Optional[SortingBy] = None


class MovieOut(OutputModel):
    id: int
    title: str
    publishing_year: int
    publishing_country: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageURL")
    genre: Optional[str] = None
    rating: Optional[float] = None
    user_id: int
    director_id: Optional[int] = None
    director: Optional[DirectorOut] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PaginationInfo(OutputModel):
    count: int
    current_page: int = 0
    total_pages: int = 0


class MovieListOut(OutputModel):
    movies: List[MovieOut]
    pagination_info: PaginationInfo
