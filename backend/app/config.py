import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

APP_DIR = Path(__file__).resolve().parent
DEFAULT_FRONTEND_INDEX = APP_DIR / "static" / "index.html"
DEFAULT_MAX_BODY_BYTES = 10 * 1024 * 1024  # 10mb, same limit as the JSON body parser


class Settings(BaseModel):
    openai_api_key: Optional[str] = None
    model: str = "gpt-4o"
    max_tokens: int = 2000
    temperature: float = 0.1
    request_timeout: float = 60.0
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES
    cors_origins: List[str] = ["*"]
    frontend_index: Path = DEFAULT_FRONTEND_INDEX
    log_level: str = "INFO"

    @property
    def openai_configured(self) -> bool:
        return bool(self.openai_api_key and self.openai_api_key.strip())


def _split_origins(raw: Optional[str]) -> List[str]:
    if not raw:
        return ["*"]
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


def load_settings() -> Settings:
    """Read settings from the environment (and a .env file, if any)."""
    load_dotenv()
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        model=os.getenv("OPENAI_MODEL", "gpt-4o"),
        max_tokens=int(os.getenv("OPENAI_MAX_TOKENS", "2000")),
        temperature=float(os.getenv("OPENAI_TEMPERATURE", "0.1")),
        request_timeout=float(os.getenv("OPENAI_TIMEOUT", "60")),
        max_body_bytes=int(os.getenv("MAX_BODY_BYTES", str(DEFAULT_MAX_BODY_BYTES))),
        cors_origins=_split_origins(os.getenv("CORS_ORIGINS")),
        frontend_index=Path(os.getenv("FRONTEND_INDEX", str(DEFAULT_FRONTEND_INDEX))),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
