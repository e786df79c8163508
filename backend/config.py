from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# DB SQLite su file nella root del progetto
DEFAULT_DB_PATH = Path(__file__).resolve().parents[1] / "bizdesk.sqlite"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    app_name: str
    database_url: str
    sql_echo: bool
    log_level: str
    seed_on_startup: bool


def load_settings() -> Settings:
    """Legge la configurazione da variabili d'ambiente (o da .env)."""
    return Settings(
        app_name=os.getenv("BIZDESK_APP_NAME", "Business Desk API"),
        database_url=os.getenv("BIZDESK_DATABASE_URL", f"sqlite:///{DEFAULT_DB_PATH}"),
        sql_echo=_flag("BIZDESK_SQL_ECHO"),
        log_level=os.getenv("BIZDESK_LOG_LEVEL", "INFO").upper(),
        seed_on_startup=_flag("BIZDESK_SEED_ON_STARTUP"),
    )


def configure_logging(level: str = "INFO") -> None:
    """Configura il root logger una sola volta; se esiste già un handler aggiorna solo il livello."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root_logger.setLevel(level)
