from __future__ import annotations

import contextlib
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from ..domain.errors import ConfigurationError

DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_PINECONE_CONTROL_URL = "https://api.pinecone.io"


def parse_dotenv(dotenv_path: Path) -> Dict[str, str]:
    """Parse a simple .env file (KEY=VALUE per line, '#' comments, quotes stripped)."""
    env: Dict[str, str] = {}
    if dotenv_path.exists():
        with contextlib.suppress(OSError):
            for raw in dotenv_path.read_text(encoding="utf-8", errors="ignore").splitlines():
                s = raw.strip()
                if not s or s.startswith("#") or "=" not in s:
                    continue
                k, v = s.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k:
                    env[k] = v
    return env


def _int(raw: Optional[str], default: int) -> int:
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def _float(raw: Optional[str], default: float) -> float:
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Runtime configuration, built once at startup and handed to each adapter."""
    gemini_api_key: Optional[str] = None
    pinecone_api_key: Optional[str] = None
    pinecone_index: str = "learn"
    pinecone_index_host: Optional[str] = None
    pinecone_namespace: str = ""
    pinecone_control_url: str = DEFAULT_PINECONE_CONTROL_URL
    gemini_base_url: str = DEFAULT_GEMINI_BASE_URL
    embed_model: str = "text-embedding-004"
    embed_dim: int = 768
    generation_model: str = "gemini-2.0-flash"
    top_k: int = 2
    http_timeout: float = 15.0
    log_level: str = "INFO"

    def require_gemini(self) -> str:
        if not self.gemini_api_key:
            raise ConfigurationError("GEMINI_API_KEY is not set in environment or .env")
        return self.gemini_api_key

    def require_pinecone(self) -> str:
        if not self.pinecone_api_key:
            raise ConfigurationError("PINECONE_API_KEY is not set in environment or .env")
        return self.pinecone_api_key


def load_settings(environ: Optional[Mapping[str, str]] = None, dotenv_path: Path = Path(".env")) -> Settings:
    """Build ``Settings`` from process env, falling back to ``.env`` in CWD.

    Keys are not validated here; adapters call ``require_*`` so commands that
    never touch a service do not need its credentials.
    """
    env = os.environ if environ is None else environ
    local = parse_dotenv(dotenv_path)

    def get(key: str) -> Optional[str]:
        v = env.get(key)
        if v is not None and v.strip():
            return v.strip()
        v2 = local.get(key)
        return v2.strip() if v2 is not None and v2.strip() else None

    defaults = Settings()
    return Settings(
        gemini_api_key=get("GEMINI_API_KEY"),
        pinecone_api_key=get("PINECONE_API_KEY"),
        pinecone_index=get("PINECONE_INDEX") or defaults.pinecone_index,
        pinecone_index_host=get("PINECONE_INDEX_HOST"),
        pinecone_namespace=get("PINECONE_NAMESPACE") or "",
        pinecone_control_url=(get("PINECONE_CONTROL_URL") or defaults.pinecone_control_url).rstrip("/"),
        gemini_base_url=(get("GEMINI_BASE_URL") or defaults.gemini_base_url).rstrip("/"),
        embed_model=get("EMBED_MODEL") or defaults.embed_model,
        embed_dim=_int(get("EMBED_DIM"), defaults.embed_dim),
        generation_model=get("GENERATION_MODEL") or defaults.generation_model,
        top_k=_int(get("RAG_TOP_K"), defaults.top_k),
        http_timeout=_float(get("RAG_HTTP_TIMEOUT"), defaults.http_timeout),
        log_level=(get("RAG_LOG_LEVEL") or defaults.log_level).upper(),
    )
