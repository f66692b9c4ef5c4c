from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from platformdirs import user_data_dir

load_dotenv()

APP_NAME = "Space Planner"
APP_AUTHOR = "SpacePlanner"
DEFAULT_DATA_DIR = Path(user_data_dir(APP_NAME, APP_AUTHOR))


@dataclass(frozen=True)
class StorageSettings:
    data_dir: Path
    data_file: Path
    fallback_file: Path


@dataclass(frozen=True)
class ServerSettings:
    host: str
    port: int
    cors_origins: tuple[str, ...]
    environment: str

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@dataclass(frozen=True)
class PlannerSettings:
    horizon_days: int
    default_start_time: str
    default_end_time: str
    timezone: str
    summary_prefix: str
    event_description: str
    prodid: str


@dataclass(frozen=True)
class AppSettings:
    storage: StorageSettings
    server: ServerSettings
    planner: PlannerSettings


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _origins_from_env(name: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


def build_settings(data_dir: Optional[Path] = None) -> AppSettings:
    """Assemble settings from the environment, optionally pinning the data directory."""

    root = data_dir or Path(os.getenv("SPACE_PLANNER_DATA_DIR", str(DEFAULT_DATA_DIR)))
    storage = StorageSettings(
        data_dir=root,
        data_file=root / os.getenv("SPACE_PLANNER_DATA_FILE", "planner-data.json"),
        fallback_file=root / os.getenv("SPACE_PLANNER_FALLBACK_FILE", "planner-data.local.json"),
    )

    server = ServerSettings(
        host=os.getenv("SPACE_PLANNER_HOST", "0.0.0.0"),
        port=_int_from_env("PORT", 3000),
        cors_origins=_origins_from_env("SPACE_PLANNER_CORS_ORIGINS", "*"),
        environment=os.getenv("SPACE_PLANNER_ENV", "development"),
    )

    planner = PlannerSettings(
        horizon_days=_int_from_env("SPACE_PLANNER_HORIZON_DAYS", 365),
        default_start_time=os.getenv("SPACE_PLANNER_DEFAULT_START", "19:00"),
        default_end_time=os.getenv("SPACE_PLANNER_DEFAULT_END", "21:00"),
        timezone=os.getenv("SPACE_PLANNER_TIMEZONE", "UTC"),
        summary_prefix=os.getenv("SPACE_PLANNER_SUMMARY_PREFIX", "Plans"),
        event_description=os.getenv("SPACE_PLANNER_EVENT_DESCRIPTION", "Planned through Space Planner"),
        prodid=os.getenv("SPACE_PLANNER_PRODID", "-//Space Planner//EN"),
    )

    return AppSettings(storage=storage, server=server, planner=planner)


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return build_settings()
