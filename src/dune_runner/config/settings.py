from dataclasses import dataclass

from dune_runner.config.env import get_env_float, get_env_str
from dune_runner.constants import (
    BASE_URL,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    POLL_FREQUENCY_SECONDS,
    THREE_MONTHS_IN_HOURS,
)


@dataclass(frozen=True)
class DuneConfig:
    """Configuration required for Dune API access."""

    api_key: str
    base_url: str = BASE_URL
    poll_interval_seconds: float = POLL_FREQUENCY_SECONDS
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    max_age_hours: float = THREE_MONTHS_IN_HOURS

    @classmethod
    def from_env(cls) -> "DuneConfig":
        """Load Dune config from environment variables."""
        api_key = get_env_str("DUNE_API_KEY")
        if not api_key:
            raise ValueError(
                "Dune client missing required config: DUNE_API_KEY. "
                "Set DUNE_API_KEY to a valid API key."
            )
        base_url = get_env_str("DUNE_API_BASE_URL", BASE_URL)
        poll_interval_seconds = get_env_float("DUNE_POLL_INTERVAL_SECS", POLL_FREQUENCY_SECONDS)
        request_timeout_seconds = get_env_float(
            "DUNE_REQUEST_TIMEOUT_SECS", DEFAULT_REQUEST_TIMEOUT_SECONDS
        )
        max_age_hours = get_env_float("DUNE_MAX_AGE_HOURS", THREE_MONTHS_IN_HOURS)

        if poll_interval_seconds <= 0:
            raise ValueError("DUNE_POLL_INTERVAL_SECS must be greater than zero.")

        return cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            poll_interval_seconds=poll_interval_seconds,
            request_timeout_seconds=request_timeout_seconds,
            max_age_hours=max_age_hours,
        )
