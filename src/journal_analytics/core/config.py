"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.

The product-tuned constants of the analytics engine (trading-hours window,
stop safety margin, alert thresholds) live here rather than as literals in
the computation modules.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from .enums import LogFormat
from .errors import ConfigError


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class HourlyConfig(BaseModel):
    start_hour: int = Field(default=9, ge=0, le=23)  # inclusive
    end_hour: int = Field(default=17, ge=0, le=23)  # inclusive
    stop_safety_margin: float = Field(default=1.4, gt=0)  # +40% on avg loss
    margin_per_contract: float = Field(default=150.0, ge=0)

    @model_validator(mode="after")
    def _check_window(self) -> "HourlyConfig":
        if self.start_hour > self.end_hour:
            raise ValueError(
                f"start_hour ({self.start_hour}) must not exceed "
                f"end_hour ({self.end_hour})"
            )
        return self


class MonthlyConfig(BaseModel):
    capital_base: float = 10_000.0  # Notional starting capital per year


class AlertConfig(BaseModel):
    drawdown_window_days: int = Field(default=30, ge=1)
    drawdown_high_pct: float = 8.0  # strictly above => high
    drawdown_medium_pct: float = 5.0  # strictly above => medium
    losses_high: int = Field(default=5, ge=1)  # at or above => high
    losses_medium: int = Field(default=3, ge=1)  # at or above => medium
    strategy_min_trades: int = Field(default=10, ge=1)
    strategy_poor_win_rate: float = 40.0  # strictly below => medium
    strategy_good_win_rate: float = 70.0  # strictly above (and net > 0) => low

    @model_validator(mode="after")
    def _check_ordering(self) -> "AlertConfig":
        if self.drawdown_medium_pct > self.drawdown_high_pct:
            raise ValueError("drawdown_medium_pct must not exceed drawdown_high_pct")
        if self.losses_medium > self.losses_high:
            raise ValueError("losses_medium must not exceed losses_high")
        if self.strategy_poor_win_rate > self.strategy_good_win_rate:
            raise ValueError(
                "strategy_poor_win_rate must not exceed strategy_good_win_rate"
            )
        return self


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.JSON


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level analytics settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    hourly: HourlyConfig = Field(default_factory=HourlyConfig)
    monthly: MonthlyConfig = Field(default_factory=MonthlyConfig)
    alerts: AlertConfig = Field(default_factory=AlertConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "JOURNAL_", "env_nested_delimiter": "__"}

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Config file values arrive as init kwargs; the environment wins over them.
        return env_settings, init_settings, dotenv_settings, file_secret_settings


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Precedence, lowest first: field defaults, the TOML file, ``JOURNAL_*``
    environment variables, *overrides*.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.

    Raises:
        ConfigError: if the file is missing or the values fail validation.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        import tomli

        with open(path, "rb") as f:
            try:
                data = tomli.load(f)
            except tomli.TOMLDecodeError as exc:
                raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    try:
        settings = Settings(**data)
        if not overrides:
            return settings
        # Explicit overrides rank above the environment: validate without env sources
        merged = settings.model_dump()
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = {**merged[key], **value}
            else:
                merged[key] = value
        return Settings.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
