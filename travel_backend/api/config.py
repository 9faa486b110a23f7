import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite:///./travel_notes.db"
DEFAULT_PORT = 8080
DEFAULT_MAP_URL = "https://cartes.io/api/maps/74f11ac6-0ec6-4c21-bd14-7682ace99846"
DEFAULT_MARKERS_URL = f"{DEFAULT_MAP_URL}/markers"

LOG_FORMAT = "%(asctime)s %(levelname)-5s %(name)s %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the API process."""

    database_url: str = DEFAULT_DATABASE_URL
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    map_url: str = DEFAULT_MAP_URL
    markers_url: str = DEFAULT_MARKERS_URL
    # None disables GET /home.
    weather_url: Optional[str] = None
    http_timeout: float = 10.0


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def _number(name: str, default, cast):
    raw = os.getenv(name, str(default))
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


# PUBLIC_INTERFACE
def load_settings() -> Settings:
    """
    Reads settings from the environment, after loading a local .env file if present.
    """
    load_dotenv()
    return Settings(
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_number("PORT", DEFAULT_PORT, int),
        cors_origins=_split_origins(os.getenv("CORS_ORIGINS", "*")) or ["*"],
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        map_url=os.getenv("MAP_URL", DEFAULT_MAP_URL),
        markers_url=os.getenv("MARKERS_URL", DEFAULT_MARKERS_URL),
        weather_url=os.getenv("WEATHER_URL") or None,
        http_timeout=_number("HTTP_TIMEOUT", 10.0, float),
    )


# PUBLIC_INTERFACE
def configure_logging(level: str = "INFO"):
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
