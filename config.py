# config.py
import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# --- Environment loading ---
load_dotenv()

# --- Settings ---
TASKS_FILE = Path(os.getenv("TASKS_FILE", "backend/data/tasks.json"))
FRONTEND_DIR = Path(os.getenv("FRONTEND_DIR", "frontend"))
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8080"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE") or None


def cors_origins() -> List[str]:
    """Comma separated CORS_ORIGINS, '*' when unset."""
    raw = os.getenv("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
