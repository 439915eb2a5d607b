"""
Configuration for the 30-day challenge app.

Values come from environment variables, with a .env file in the working
directory loaded first.
"""

import logging
import os
import sys
from dataclasses import dataclass

from dotenv import load_dotenv

STORAGE_BACKENDS = ("file", "sqlite", "memory")


@dataclass
class Config:
    SECRET_KEY: str = "your-secret-key-change-this-in-production"
    STORAGE_BACKEND: str = "file"
    DATA_FILE: str = "challenge_data.json"
    DATABASE_URL: str = "sqlite:///challenge.db"
    LOG_LEVEL: str = "INFO"
    HOST: str = "127.0.0.1"
    PORT: int = 5000
    TESTING: bool = False

    def __post_init__(self):
        self.STORAGE_BACKEND = self.STORAGE_BACKEND.lower()
        if self.STORAGE_BACKEND not in STORAGE_BACKENDS:
            raise ValueError(
                f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}, "
                f"got {self.STORAGE_BACKEND!r}"
            )
        self.LOG_LEVEL = self.LOG_LEVEL.upper()

    @classmethod
    def from_env(cls, dotenv_path=None) -> "Config":
        load_dotenv(dotenv_path)
        defaults = cls()
        return cls(
            SECRET_KEY=os.environ.get('SECRET_KEY', defaults.SECRET_KEY),
            STORAGE_BACKEND=os.environ.get('STORAGE_BACKEND', defaults.STORAGE_BACKEND),
            DATA_FILE=os.environ.get('DATA_FILE', defaults.DATA_FILE),
            DATABASE_URL=os.environ.get('DATABASE_URL', defaults.DATABASE_URL),
            LOG_LEVEL=os.environ.get('LOG_LEVEL', defaults.LOG_LEVEL),
            HOST=os.environ.get('HOST', defaults.HOST),
            PORT=int(os.environ.get('PORT', defaults.PORT)),
        )


def configure_logging(level: str = "INFO"):
    """Root logging setup, called once at startup."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    return logging.getLogger(__name__)
