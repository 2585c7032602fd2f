import os
from pathlib import Path
from typing import List

_PACKAGE_DIR = Path(__file__).resolve().parent.parent

class Settings:
    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))
    CORS_ORIGINS: List[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Front-end bundle
    STATIC_DIR: str = os.getenv("STATIC_DIR", str(_PACKAGE_DIR / "static"))

    # History
    DATABASE_PATH: str = os.getenv("DATABASE_PATH", "data/history.sqlite")
    HISTORY_LIMIT: int = int(os.getenv("HISTORY_LIMIT", "20"))

    # Outbound fetch
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "10"))
    MAX_REDIRECTS: int = int(os.getenv("MAX_REDIRECTS", "5"))
    USER_AGENT: str = os.getenv("USER_AGENT", "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36")

settings = Settings()
