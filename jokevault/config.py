"""
Runtime settings.

The connection string comes from the JOKEVAULT_DATABASE_URL environment
variable, or from ConnectionStrings.DefaultConnection in appsettings.json,
or falls back to a local SQLite file.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_DATABASE_URL = "sqlite:///data/jokes.db"
DEFAULT_API_URL = "https://api.chucknorris.io"
APPSETTINGS_FILE = "appsettings.json"

TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    api_url: str = DEFAULT_API_URL
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    log_to_file: bool = True
    sql_echo: bool = False
    dedupe_explicit: bool = False


def _flag(value: Optional[str], default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in TRUTHY


def read_appsettings_connection(path: Path) -> Optional[str]:
    """
    Read ConnectionStrings.DefaultConnection from an appsettings.json file.

    Args:
        path: Path to the JSON settings file

    Returns:
        The connection string, or None if the file or key is missing

    Raises:
        ValueError: If the file exists but is not valid JSON
    """
    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        return None
    conn = (data.get("ConnectionStrings") or {}).get("DefaultConnection")
    return conn or None


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    appsettings_path: Optional[Path] = None,
) -> Settings:
    """
    Build Settings from the environment.

    Args:
        environ: Environment mapping (default: os.environ)
        appsettings_path: appsettings.json location (default: ./appsettings.json)

    Returns:
        Settings instance
    """
    env = os.environ if environ is None else environ
    if appsettings_path is None:
        appsettings_path = Path.cwd() / APPSETTINGS_FILE

    database_url = (
        env.get("JOKEVAULT_DATABASE_URL")
        or read_appsettings_connection(appsettings_path)
        or DEFAULT_DATABASE_URL
    )

    return Settings(
        database_url=database_url,
        api_url=env.get("JOKEVAULT_API_URL") or DEFAULT_API_URL,
        log_level=(env.get("JOKEVAULT_LOG_LEVEL") or "INFO").upper(),
        log_dir=Path(env.get("JOKEVAULT_LOG_DIR") or "logs"),
        log_to_file=_flag(env.get("JOKEVAULT_LOG_TO_FILE"), True),
        sql_echo=_flag(env.get("JOKEVAULT_SQL_ECHO"), False),
        dedupe_explicit=_flag(env.get("JOKEVAULT_DEDUPE_EXPLICIT"), False),
    )
