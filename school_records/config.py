"""Application settings and validation."""

import os
from pathlib import Path

BASE = Path(__file__).resolve().parent.parent
DEFAULT_DB_URL = f"sqlite:///{BASE / 'school.db'}"


class Settings:
    ENV: str
    DATABASE_URL: str
    DB_ECHO: bool
    LOG_LEVEL: str
    ALLOW_SQLITE: bool
    STUDENT_MIN_AGE: int
    STUDENT_MAX_AGE: int

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.DATABASE_URL = os.getenv("DATABASE_URL", DEFAULT_DB_URL)
        self.DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.ALLOW_SQLITE = os.getenv("ALLOW_SQLITE", "false").lower() == "true"
        self.STUDENT_MIN_AGE = int(os.getenv("STUDENT_MIN_AGE", "1"))
        self.STUDENT_MAX_AGE = int(os.getenv("STUDENT_MAX_AGE", "150"))
        self._validate()

    def _validate(self):
        if self.ENV != "dev" and not self.ALLOW_SQLITE and self.DATABASE_URL == DEFAULT_DB_URL:
            raise RuntimeError("DATABASE_URL must be set to a real database in non-dev environments")
        if self.STUDENT_MIN_AGE > self.STUDENT_MAX_AGE:
            raise RuntimeError("STUDENT_MIN_AGE must not exceed STUDENT_MAX_AGE")


settings = Settings()
