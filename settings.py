import os
import sys
from dataclasses import dataclass, field
from typing import Optional, Tuple

from dotenv import load_dotenv
from loguru import logger

DEFAULT_DATABASE_URL = "sqlite:///./movie_catalog.db"


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, loaded once at startup and read-only after."""

    database_url: str = DEFAULT_DATABASE_URL
    jwt_secret_key: str = "supersecretkey"
    jwt_algorithm: str = "HS256"
    access_token_expire_hours: int = 10
    cors_origins: Tuple[str, ...] = field(default=("*",))
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        load_dotenv(env_file)

        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            database_url=_database_url_from_env(),
            jwt_secret_key=os.getenv("JWT_SECRET_KEY", cls.jwt_secret_key),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", cls.jwt_algorithm),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            host=os.getenv("HOST", cls.host),
            port=int(os.getenv("PORT", cls.port)),
        )


def _database_url_from_env() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    name = os.getenv("DB_NAME")
    if not name:
        return DEFAULT_DATABASE_URL

    user = os.getenv("DB_USERNAME", "postgres")
    password = os.getenv("DB_PASSWORD", "")
    host = os.getenv("DB_HOST", "localhost")
    port = os.getenv("DB_PORT", "5432")
    return f"postgresql+psycopg2://{user}:{password}@{host}:{port}/{name}"


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)
