"""Configuration — config.yaml for tunables, environment for hosts and secrets.

The YAML file is read once per process. ``load_settings`` merges it with the
environment (populated from ``.env`` by python-dotenv) into a ``Settings``
object that the app resolves at startup and hands to the services.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

logger = logging.getLogger(__name__)

# Path to the root of the project (where config.yaml lives)
BASE_DIR = Path(__file__).resolve().parent.parent.parent
CONFIG_PATH = BASE_DIR / "config.yaml"

DEFAULT_STORE_HOST = "btulehndzikuesmrzmhd.supabase.co"
DEFAULT_TRANSLATE_URL = "https://libretranslate.de"


class Config:
    def __init__(self, data: dict):
        self.project = data.get("project") or {}
        self.server = data.get("server") or {}
        self.cors = data.get("cors") or {}
        self.logging = data.get("logging") or {}
        self.store = data.get("store") or {}
        self.translation = data.get("translation") or {}
        self.upstream = data.get("upstream") or {}
        self.puzzles = data.get("puzzles") or {}
        self.rate_limit = data.get("rate_limit") or {}


def config_path() -> Path:
    """Return the config file path, honouring INTEGRALFORME_CONFIG."""
    override = os.getenv("INTEGRALFORME_CONFIG")
    return Path(override) if override else CONFIG_PATH


@lru_cache()
def load_config() -> Config:
    """Load configuration from YAML file. Cached for performance.

    A missing project file (e.g. a wheel install without the repo checkout)
    falls back to built-in defaults. A missing INTEGRALFORME_CONFIG target
    is an error.
    """
    path = config_path()
    if not path.exists():
        if os.getenv("INTEGRALFORME_CONFIG"):
            raise FileNotFoundError(f"Configuration file not found at {path}")
        logger.warning("No config file at %s; using built-in defaults.", path)
        return Config({})

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return Config(data or {})


class Settings(BaseModel):
    """Everything the services need, resolved once at process start."""

    store_host: str = Field(default=DEFAULT_STORE_HOST, description="Puzzle store hostname")
    store_api_key: Optional[str] = Field(
        default=None, description="Anon key for the puzzle store (SUPABASE_ANON_KEY)"
    )
    credentials_file: Optional[Path] = Field(
        default=None,
        description="Development fallback file scanned for a bearer token",
    )
    translate_url: str = Field(default=DEFAULT_TRANSLATE_URL)
    translate_api_key: Optional[str] = None
    default_source: str = "en"
    default_target: str = "pt"
    timeout_seconds: float = 15.0
    default_day: int = 108


def _env(name: str) -> Optional[str]:
    """Read an environment variable, treating empty values as unset."""
    value = os.getenv(name)
    return value.strip() if value and value.strip() else None


def load_settings(config: Optional[Config] = None) -> Settings:
    """Merge config.yaml with environment overrides into ``Settings``."""
    config = config or load_config()

    credentials_file = config.store.get("credentials_file")
    if credentials_file:
        credentials_file = Path(credentials_file)
        if not credentials_file.is_absolute():
            credentials_file = BASE_DIR / credentials_file

    return Settings(
        store_host=_env("SUPABASE_HOST") or config.store.get("host") or DEFAULT_STORE_HOST,
        store_api_key=_env("SUPABASE_ANON_KEY"),
        credentials_file=credentials_file or None,
        translate_url=_env("LIBRETRANSLATE_URL")
        or config.translation.get("url")
        or DEFAULT_TRANSLATE_URL,
        translate_api_key=_env("LIBRETRANSLATE_API_KEY"),
        default_source=config.translation.get("default_source", "en"),
        default_target=config.translation.get("default_target", "pt"),
        timeout_seconds=config.upstream.get("timeout_seconds", 15),
        default_day=config.puzzles.get("default_day", 108),
    )
