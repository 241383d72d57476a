"""Backend settings (single source of truth).

Loads `backend/.env` (if present) and exposes plain constants. The analysis
knobs are collected into `AnalysisSettings` by `core.schemas`.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

_env_path = Path(__file__).resolve().parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)


APP_TITLE = "Submission Integrity Analyzer"
APP_VERSION = "1.0.0"


def _split_csv(value: str) -> List[str]:
    parts = [p.strip() for p in value.split(",")]
    return [p for p in parts if p]


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "y")


# CORS
_CORS_RAW = os.getenv(
    "CORS_ALLOW_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173",
).strip()
CORS_ALLOW_ORIGINS: List[str] = ["*"] if _CORS_RAW == "*" else _split_csv(_CORS_RAW)


# Database
DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./integrity.db")


# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


# Analysis
# Similarity above this value (strictly) marks a peer as a suspected partner.
PLAGIARISM_THRESHOLD: int = int(os.getenv("PLAGIARISM_THRESHOLD", "60"))
# Average word length above this value puts a text in the mid AI band.
AI_WORD_LENGTH_THRESHOLD: float = float(os.getenv("AI_WORD_LENGTH_THRESHOLD", "6.5"))
# Only the opening tokens of each submission are compared.
TOKEN_WINDOW: int = int(os.getenv("TOKEN_WINDOW", "100"))
MAX_PLAGIARISM_PARTNERS: int = int(os.getenv("MAX_PLAGIARISM_PARTNERS", "3"))
# Library default: every result carries the whole assignment matrix.
EMBED_SIMILARITY_MATRIX: bool = _env_bool("EMBED_SIMILARITY_MATRIX", "true")
# The API stores the matrix once per assignment and results point at it.
STORE_MATRIX_BY_ASSIGNMENT: bool = _env_bool("STORE_MATRIX_BY_ASSIGNMENT", "true")
