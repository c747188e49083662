"""12-factor configuration adapter using environment variables and TOML config."""

import logging
from pathlib import Path
from typing import Any

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]  # Fallback for older Python

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tcdd_routes.adapters.tcdd_api.constants import TCDD_BASE_URL, TCDD_CDN_URL, TCDD_UNIT_ID
from tcdd_routes.domain.models.search_options import SearchMode, SearchOptions

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "config.example.toml"

# TOML table -> settings it may override
TOML_OVERRIDES = {
    "api": (
        "tcdd_unit_id",
        "tcdd_api_base_url",
        "tcdd_cdn_url",
        "tcdd_api_timeout",
        "sleep_ms_between_calls",
        "max_concurrent_requests",
        "station_cache_ttl_seconds",
    ),
    "search": (
        "search_mode",
        "max_connections",
        "min_transfer_minutes",
        "max_transfer_minutes",
        "transfer_overhead_minutes",
        "hub_fanout_limit",
        "max_partial_chains",
        "result_limit",
        "show_sold_out",
        "stream_poll_interval_seconds",
        "timezone",
    ),
}


def _normalize_search_mode(value: str) -> str:
    modes = [mode.value for mode in SearchMode]
    if value.lower() not in modes:
        raise ValueError(f"search_mode must be one of {', '.join(modes)}")
    return value.lower()


def _check_transfer_window(min_minutes: int, max_minutes: int) -> None:
    if min_minutes < 0 or min_minutes > max_minutes:
        raise ValueError("min_transfer_minutes must be between 0 and max_transfer_minutes")


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # TCDD API configuration
    tcdd_auth_token: str | None = Field(
        default=None,
        description="Authorization header value copied from a logged-in booking-site session",
    )
    tcdd_unit_id: str = Field(default=TCDD_UNIT_ID, description="Value of the unit-id header")
    tcdd_api_base_url: str = Field(default=TCDD_BASE_URL, description="Transaction API base URL")
    tcdd_cdn_url: str = Field(default=TCDD_CDN_URL, description="Station feed base URL")
    tcdd_api_timeout: float = Field(default=20.0, description="Timeout for TCDD API requests in seconds")
    sleep_ms_between_calls: int = Field(
        default=0,
        description="Sleep time in milliseconds between API calls to avoid rate limiting",
    )
    max_concurrent_requests: int = Field(
        default=4, description="Maximum number of availability queries in flight"
    )
    station_cache_ttl_seconds: float | None = Field(
        default=3600.0,
        description="Seconds the station list stays cached (unset: process lifetime)",
    )

    # Search configuration
    search_mode: str = Field(
        default=SearchMode.DIRECT_ONLY.value,
        description="Eager search scope: 'direct', 'same-train' or 'full'",
    )
    max_connections: int = Field(default=1, description="Maximum number of train changes")
    min_transfer_minutes: int = Field(default=45, description="Shortest allowed change time")
    max_transfer_minutes: int = Field(default=480, description="Longest allowed change time")
    transfer_overhead_minutes: int = Field(
        default=45, description="Minutes added to a connected route's duration per change"
    )
    hub_fanout_limit: int = Field(default=8, description="Transfer candidates explored per step")
    max_partial_chains: int = Field(default=20, description="Partial itineraries kept per step")
    result_limit: int | None = Field(default=None, description="Cap on returned routes (unset: all)")
    show_sold_out: bool = Field(default=False, description="Keep trains without free seats")
    stream_poll_interval_seconds: float = Field(
        default=0.05, description="Idle sleep of the alternatives stream consumer"
    )
    timezone: str = Field(
        default="Europe/Istanbul",
        description="Timezone train times are shown in (IANA timezone name)",
    )

    # TOML config file path
    config_file: str | None = Field(
        default=DEFAULT_CONFIG_FILE,
        description="Path to TOML configuration file with [api], [search] and [routing] tables",
    )

    @field_validator("search_mode")
    @classmethod
    def validate_search_mode(cls, v: str) -> str:
        """Validate search mode is one of 'direct', 'same-train' or 'full'."""
        return _normalize_search_mode(v)

    @field_validator("max_concurrent_requests", "hub_fanout_limit", "max_partial_chains")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate limits are at least 1."""
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @model_validator(mode="after")
    def validate_transfer_window(self) -> "AppConfig":
        """Validate the transfer window is not inverted."""
        _check_transfer_window(self.min_transfer_minutes, self.max_transfer_minutes)
        return self

    def _load_toml_data(self) -> dict[str, Any]:
        """Load and parse the TOML file, updating API and search settings."""
        if not self.config_file:
            return {}

        config_path = Path(self.config_file)
        if not config_path.exists():
            if self.config_file != DEFAULT_CONFIG_FILE:
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            logger.debug(f"No {DEFAULT_CONFIG_FILE} found, using defaults")
            return {}

        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)

        overrides: dict[str, Any] = {}
        for table, fields in TOML_OVERRIDES.items():
            section = toml_data.get(table, {})
            if not isinstance(section, dict):
                raise ValueError(f"TOML config '{table}' must be a table")
            overrides.update({name: section[name] for name in fields if name in section})

        if overrides:
            # Field and model validators run on the merged values; ValidationError is a ValueError
            validated = type(self).model_validate({**self.model_dump(), **overrides})
            for name in overrides:
                setattr(self, name, getattr(validated, name))
        return toml_data

    def load_toml(self) -> dict[str, Any]:
        """Apply the TOML overrides and return the raw TOML data."""
        return self._load_toml_data()

    def search_options(self) -> SearchOptions:
        """Build the route search tunables from the settings."""
        return SearchOptions(
            mode=SearchMode(self.search_mode),
            max_connections=self.max_connections,
            min_transfer_minutes=self.min_transfer_minutes,
            max_transfer_minutes=self.max_transfer_minutes,
            transfer_overhead_minutes=self.transfer_overhead_minutes,
            hub_fanout_limit=self.hub_fanout_limit,
            max_partial_chains=self.max_partial_chains,
            result_limit=self.result_limit,
        )
