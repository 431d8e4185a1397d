import os
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import BaseModel

DEFAULT_MONGODB_URI = "mongodb://localhost:27017/taskplanner"
DEFAULT_DB_NAME = "taskplanner"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000


class Settings(BaseModel):
    """Runtime configuration, built once at startup and passed to the app factory."""

    mongodb_uri: str = DEFAULT_MONGODB_URI
    db_name: str = DEFAULT_DB_NAME
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()

        mongodb_uri = os.getenv("MONGODB_URI") or DEFAULT_MONGODB_URI
        return cls(
            mongodb_uri=mongodb_uri,
            db_name=os.getenv("DB_NAME") or db_name_from_uri(mongodb_uri),
            host=os.getenv("HOST", DEFAULT_HOST),
            port=os.getenv("PORT") or DEFAULT_PORT,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def db_name_from_uri(uri: str) -> str:
    # mongodb://host:27017/taskplanner -> taskplanner
    path = urlparse(uri).path.lstrip("/")
    return path or DEFAULT_DB_NAME
