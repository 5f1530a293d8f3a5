# backend/config.py
from __future__ import annotations
from pathlib import Path
import logging
import os
from dotenv import load_dotenv

# Load exactly backend/.env (do NOT call load_dotenv() without a path)
ENV_FILE = Path(__file__).with_name(".env")
load_dotenv(ENV_FILE, override=False)


class Settings:
    """Read from the environment at construction; build a new one to pick up changes."""

    def __init__(self) -> None:
        self.SERVICE_NAME: str = os.getenv("SERVICE_NAME", "transit-footprint")
        self.MONGO_URI: str = os.getenv("MONGO_URI", "")
        self.MONGO_DB: str = os.getenv("MONGO_DB", "transit_footprint")
        self.ADMIN_API_KEY: str = os.getenv("ADMIN_API_KEY", "")
        self.DEMO_USER: str = os.getenv("DEMO_USER", "demo")
        self.DEMO_API_KEY: str = os.getenv("DEMO_API_KEY", "secret-demo-key")
        self.SUGGESTION_THRESHOLD_KG: float = float(
            os.getenv("SUGGESTION_THRESHOLD_KG", "20.0")
        )
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.CORS_ALLOW_ORIGINS: list[str] = [
            o.strip()
            for o in os.getenv("CORS_ALLOW_ORIGINS", "http://localhost:3000").split(",")
            if o.strip()
        ]


def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=level or get_settings().LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
