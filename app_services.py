from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from prompt_client import DEFAULT_IMAGE_API_URL, DEFAULT_QUOTE_API_URL, ContentFetcher
from prompt_generator import QUOTE_PAIRING_SPLIT, QUOTE_PAIRINGS
from session_store import SessionStore
from similarity_game import SimilarityGameService

logger = logging.getLogger(__name__)

DEV_CORS_ORIGIN = "http://localhost:3000"
PROD_CORS_ORIGIN = "https://mindspring.surge.sh"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "t", "yes", "y"}


@dataclass
class AppServiceConfig:
    environment: str = "production"
    image_api_url: str = DEFAULT_IMAGE_API_URL
    quote_api_url: str = DEFAULT_QUOTE_API_URL
    quote_api_key: str = ""
    upstream_timeout_seconds: float = 10.0
    upstream_retries: int = 0
    generation_timeout_seconds: float = 30.0
    quote_pairing: str = QUOTE_PAIRING_SPLIT
    session_ttl_seconds: float = 0.0
    debug_dump_enabled: bool = False
    cors_origin: str = ""
    log_file: str = ""

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def effective_cors_origin(self) -> str:
        if self.cors_origin:
            return self.cors_origin
        return DEV_CORS_ORIGIN if self.is_development else PROD_CORS_ORIGIN

    @classmethod
    def from_env(cls) -> "AppServiceConfig":
        return cls(
            environment=os.getenv("ENVIRONMENT", "production").strip().lower(),
            image_api_url=os.getenv("IMAGE_API_URL", DEFAULT_IMAGE_API_URL),
            quote_api_url=os.getenv("QUOTE_API_URL", DEFAULT_QUOTE_API_URL),
            quote_api_key=os.getenv("QUOTE_API_KEY", "").strip(),
            upstream_timeout_seconds=float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "10")),
            upstream_retries=int(os.getenv("UPSTREAM_RETRIES", "0")),
            generation_timeout_seconds=float(os.getenv("GENERATION_TIMEOUT_SECONDS", "30")),
            quote_pairing=os.getenv("QUOTE_PAIRING", QUOTE_PAIRING_SPLIT).strip().lower(),
            session_ttl_seconds=float(os.getenv("SESSION_TTL_SECONDS", "0")),
            debug_dump_enabled=_env_flag("DEBUG_DUMP_ENABLED"),
            cors_origin=os.getenv("CORS_ORIGIN", "").strip(),
            log_file=os.getenv("LOG_FILE", "").strip(),
        )


class AppServices:
    def __init__(self, config: AppServiceConfig, fetcher=None, store: SessionStore | None = None):
        self.config = config
        self.store = store or SessionStore()
        self.fetcher = fetcher or ContentFetcher(
            image_api_url=config.image_api_url,
            quote_api_url=config.quote_api_url,
            quote_api_key=config.quote_api_key,
            timeout=config.upstream_timeout_seconds,
            retries=config.upstream_retries,
        )
        pairing = config.quote_pairing
        if pairing not in QUOTE_PAIRINGS:
            pairing = QUOTE_PAIRING_SPLIT
        self.game_service = SimilarityGameService(
            store=self.store,
            fetcher=self.fetcher,
            generation_timeout=config.generation_timeout_seconds,
            quote_pairing=pairing,
            stale_session_seconds=config.session_ttl_seconds,
        )

    def validate_runtime_config(self) -> list[str]:
        cfg = self.config
        warnings = []
        if not cfg.quote_api_key:
            warnings.append("QUOTE_API_KEY is empty; the quote provider will reject requests.")
        if cfg.quote_pairing not in QUOTE_PAIRINGS:
            warnings.append(
                f"QUOTE_PAIRING={cfg.quote_pairing!r} is not one of {', '.join(QUOTE_PAIRINGS)}; "
                f"using {QUOTE_PAIRING_SPLIT!r}."
            )
        if cfg.upstream_timeout_seconds <= 0:
            warnings.append("UPSTREAM_TIMEOUT_SECONDS must be positive.")
        if cfg.generation_timeout_seconds <= 0:
            warnings.append("GENERATION_TIMEOUT_SECONDS must be positive.")
        if cfg.upstream_retries < 0:
            warnings.append("UPSTREAM_RETRIES cannot be negative.")
        if cfg.debug_dump_enabled and not cfg.is_development:
            warnings.append(
                "DEBUG_DUMP_ENABLED exposes every session outside development."
            )
        return warnings

    def log_runtime_config_warnings(self) -> None:
        for warning in self.validate_runtime_config():
            logger.warning("Config: %s", warning)
