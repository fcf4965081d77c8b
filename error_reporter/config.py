"""Service configuration loaded from environment variables."""

import os
from dataclasses import dataclass

DEFAULT_ENRICHMENT_URL = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "gemini-2.0-flash:generateContent"
)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Config:
    host: str = "0.0.0.0"
    port: int = 3000
    enrichment_url: str = DEFAULT_ENRICHMENT_URL
    enrichment_api_key: str = ""
    enrichment_timeout_seconds: float = 30.0
    recommendation_word_limit: int = 60
    log_dir: str = "."
    log_filename: str = "error.log"
    fsync_writes: bool = False
    rate_limit_enabled: bool = True
    rate_limit_max_requests: int = 100
    rate_limit_window_seconds: int = 60
    cors_origins: str = "*"
    app_log_level: str = "INFO"

    @property
    def log_path(self) -> str:
        return os.path.join(self.log_dir, self.log_filename)


def load_config() -> Config:
    """Build Config from environment variables with sensible defaults."""
    return Config(
        host=os.environ.get("HOST", Config.host),
        port=int(os.environ.get("PORT", Config.port)),
        enrichment_url=os.environ.get("GEMINI_API_URL", Config.enrichment_url),
        enrichment_api_key=os.environ.get("GEMINI_API_KEY", "").strip(),
        enrichment_timeout_seconds=max(0.0, float(
            os.environ.get("ENRICHMENT_TIMEOUT_SECONDS", Config.enrichment_timeout_seconds)
        )),
        recommendation_word_limit=int(
            os.environ.get("RECOMMENDATION_WORD_LIMIT", Config.recommendation_word_limit)
        ),
        log_dir=os.environ.get("LOG_DIR", Config.log_dir),
        log_filename=os.environ.get("LOG_FILENAME", Config.log_filename),
        fsync_writes=_parse_bool(os.environ.get("FSYNC_WRITES", "false")),
        rate_limit_enabled=_parse_bool(
            os.environ.get("RATE_LIMIT_ENABLED", "true")
        ),
        rate_limit_max_requests=int(
            os.environ.get("RATE_LIMIT_MAX_REQUESTS", Config.rate_limit_max_requests)
        ),
        rate_limit_window_seconds=int(
            os.environ.get("RATE_LIMIT_WINDOW_SECONDS", Config.rate_limit_window_seconds)
        ),
        cors_origins=os.environ.get("CORS_ORIGINS", Config.cors_origins),
        app_log_level=os.environ.get("APP_LOG_LEVEL", Config.app_log_level).upper(),
    )
