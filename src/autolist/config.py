"""Scheduler configuration via pydantic-settings (.env + AUTOLIST_* env vars)."""

import sys
from pathlib import Path

from loguru import logger
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import (
    BOT_MAX_CONCURRENCY,
    BOT_THROTTLE_MS,
    DEFAULT_POLL_INTERVAL_MS,
    USER_MAX_CONCURRENCY,
    USER_THROTTLE_MS,
)

log = logger.bind(component="config")


class AutoListConfig(BaseSettings):
    """All AutoList configuration with layered resolution:
    .env file < environment variables < constructor kwargs.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="AUTOLIST_",
        extra="ignore",
    )

    # -- Remote endpoints --
    widar_url: str = "https://tools.wmflabs.org/widar/index.php"
    wikidata_api_url: str = "https://www.wikidata.org/w/api.php"
    tool_hashtag: str = "petscan"
    request_timeout: float = 30.0

    # -- Source wiki for item creation --
    wiki: str = "enwiki"

    # -- Scheduling --
    bot_mode: bool = False
    concurrency: int | None = None  # None = account default
    throttle_ms: int | None = None  # None = account default
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS

    # -- Behavior --
    dry_run: bool = False
    verbose: bool = False
    log_level: str = "INFO"
    log_dir: Path = Path.home() / ".cache" / "autolist" / "logs"

    @property
    def max_concurrency(self) -> int:
        return BOT_MAX_CONCURRENCY if self.bot_mode else USER_MAX_CONCURRENCY

    @property
    def effective_concurrency(self) -> int:
        """Concurrent commands per run, bounded by the account type.

        Out-of-range values are ignored and the account maximum is used.
        """
        limit = self.max_concurrency
        if self.concurrency is None:
            return limit
        if self.concurrency < 1 or self.concurrency > limit:
            log.warning(
                f"Ignoring concurrency={self.concurrency} (allowed 1-{limit})"
            )
            return limit
        return self.concurrency

    @property
    def effective_throttle_ms(self) -> int:
        """Minimum gap in ms between a completion and the next dispatch."""
        if self.throttle_ms is not None and self.throttle_ms >= 0:
            return self.throttle_ms
        return BOT_THROTTLE_MS if self.bot_mode else USER_THROTTLE_MS

    def setup_logging(self) -> None:
        """Send logs to stderr at ``log_level`` and to a rotating debug file.

        Records carry a ``component`` extra; modules bind their own, and
        anything logged without one gets an empty column.
        """
        self.log_dir.mkdir(parents=True, exist_ok=True)
        line = "{time:YYYY-MM-DDTHH:mm:ssZ} | {level:<8} | {extra[component]:<12} | {message}"
        logger.configure(
            handlers=[
                {"sink": sys.stderr, "format": line, "level": self.log_level.upper()},
                {
                    "sink": self.log_dir / "autolist.log",
                    "format": line,
                    "level": "DEBUG",
                    "rotation": "10 MB",
                    "retention": "30 days",
                },
            ],
            extra={"component": ""},
        )
