from enum import Enum
from pathlib import Path

from pydantic_settings import BaseSettings


ASSETS_DIR = Path(__file__).parent / "app" / "assets"


class Env(Enum):
    local = "local"
    dev = "dev"
    prod = "prod"


class Config(BaseSettings):
    env: Env = Env.local
    assets_dir: Path = ASSETS_DIR
    html_dir: Path = ASSETS_DIR / "html"
    uploads_dir: Path = ASSETS_DIR / "img" / "uploads"
    db_url: str = "sqlite+aiosqlite:///foodie.db"
    storage_namespace: str = "foodie"
    log_level: str = "INFO"
