import os
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(ROOT_DIR / ".env")


def _start_day(raw: str) -> str:
    value = (raw or "").strip().capitalize()
    return value if value in ("Sunday", "Monday") else "Monday"


class Settings:
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./habitflow.db")
    AUTO_CREATE_SCHEMA: bool = os.getenv("AUTO_CREATE_SCHEMA", "1") == "1"
    DEFAULT_START_DAY_OF_WEEK: str = _start_day(os.getenv("DEFAULT_START_DAY_OF_WEEK", "Monday"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    CORS_ORIGINS: list[str] = [
        item.strip()
        for item in os.getenv("CORS_ORIGINS", "*").split(",")
        if item.strip()
    ]


settings = Settings()
