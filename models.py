from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


class User(TimestampMixin, Base):
    __tablename__ = "users"

    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    # bcrypt hash, never serialized
    password = Column(String(255), nullable=False)

    movies = relationship("Movie", back_populates="user")

    def __repr__(self):
        return f"<User {self.id} {self.email}>"


class Director(TimestampMixin, Base):
    __tablename__ = "directors"

    full_name = Column(String(255), nullable=False, unique=True, index=True)

    movies = relationship("Movie", back_populates="director")

    def __repr__(self):
        return f"<Director {self.id} {self.full_name}>"


class Movie(TimestampMixin, Base):
    __tablename__ = "movies"

    title = Column(String(255), nullable=False)
    publishing_year = Column(Integer, nullable=False)
    publishing_country = Column(String(255), nullable=True)
    image_url = Column(String(2048), nullable=True, unique=True)
    genre = Column(String(255), nullable=True)
    rating = Column(Float, nullable=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    director_id = Column(Integer, ForeignKey("directors.id"), nullable=True)

    user = relationship("User", back_populates="movies")
    director = relationship("Director", back_populates="movies")

    def __repr__(self):
        return f"<Movie {self.id} {self.title}>"
