import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

_TRUTHY = {"1", "true", "yes", "on"}


def load_env() -> None:
    """Load .env from project root if present."""
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path)


@dataclass(frozen=True)
class Settings:
    db_path: Path
    log_level: str
    log_dir: Path
    resume_dir: Path
    resume_base_url: str
    optimistic_locking: bool


def get_settings(db_path: Optional[str] = None) -> Settings:
    """
    Read runtime settings from the environment.

    Args:
        db_path: Overrides HIREFUNNEL_DB_PATH (e.g. from a --db flag)
    """
    resume_dir = Path(os.getenv("HIREFUNNEL_RESUME_DIR", "data/resumes"))
    base_url = os.getenv("HIREFUNNEL_RESUME_BASE_URL") or resume_dir.resolve().as_uri()
    return Settings(
        db_path=Path(db_path or os.getenv("HIREFUNNEL_DB_PATH", "data/candidates.db")),
        log_level=os.getenv("HIREFUNNEL_LOG_LEVEL", "INFO"),
        log_dir=Path(os.getenv("HIREFUNNEL_LOG_DIR", "logs")),
        resume_dir=resume_dir,
        resume_base_url=base_url.rstrip("/"),
        optimistic_locking=os.getenv("HIREFUNNEL_OPTIMISTIC_LOCKING", "").strip().lower() in _TRUTHY,
    )
