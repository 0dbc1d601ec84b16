import os
import sys
from functools import lru_cache
from typing import Optional

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .models import Sort, SortColumn, SortDirection


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    worldbank_base_url: str = Field(default="https://api.worldbank.org/v2", alias="WORLDBANK_BASE_URL")
    http_timeout: float = Field(default=30.0, alias="HTTP_TIMEOUT")
    worldbank_page_size: int = Field(default=20000, alias="WORLDBANK_PAGE_SIZE")
    include_aggregates: bool = Field(
        default=False,
        alias="INCLUDE_AGGREGATES",
        description="Treat World Bank aggregates (World, income groups, ...) as countries",
    )

    # ISO 3166 reference table used for flag codes
    enable_iso_code_lookup: bool = Field(default=True, alias="ENABLE_ISO_CODE_LOOKUP")
    iso_codes_url: str = Field(
        default="https://raw.githubusercontent.com/lukes/ISO-3166-Countries-with-Regional-Codes/master/all/all.csv",
        alias="ISO_CODES_URL",
    )

    report_cache_enabled: bool = Field(default=True, alias="REPORT_CACHE_ENABLED")
    report_cache_ttl: int = Field(default=300, alias="REPORT_CACHE_TTL")  # 5 minutes

    suggestion_limit: int = Field(default=10, alias="SUGGESTION_LIMIT")
    default_sort_column: Optional[str] = Field(default=None, alias="DEFAULT_SORT_COLUMN")
    default_sort_direction: Optional[str] = Field(default=None, alias="DEFAULT_SORT_DIRECTION")

    rate_limit: str = Field(default="120/minute", alias="RATE_LIMIT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,  # Treat empty strings as not set
    )

    @field_validator("default_sort_column")
    @classmethod
    def validate_sort_column(cls, v):
        if v is not None and SortColumn.try_parse(v) is None:
            raise ValueError(
                f"DEFAULT_SORT_COLUMN must be one of {[c.value for c in SortColumn]}, got {v!r}"
            )
        return v

    @field_validator("default_sort_direction")
    @classmethod
    def validate_sort_direction(cls, v):
        if v is not None and SortDirection.try_parse(v) is None:
            raise ValueError(
                f"DEFAULT_SORT_DIRECTION must be one of {[d.value for d in SortDirection]}, got {v!r}"
            )
        return v

    @model_validator(mode="after")
    def validate_positive_limits(self):
        """Reject limits that would make the search or cache meaningless."""
        if self.suggestion_limit <= 0:
            raise ValueError("SUGGESTION_LIMIT must be positive")
        if self.report_cache_ttl <= 0:
            raise ValueError("REPORT_CACHE_TTL must be positive")
        return self

    @property
    def default_sort(self) -> Optional[Sort]:
        """Sort applied when a request carries no valid sort; None keeps provider order."""
        column = SortColumn.try_parse(self.default_sort_column)
        direction = SortDirection.try_parse(self.default_sort_direction)
        if column is None or direction is None:
            return None
        return column, direction

    @property
    def dev_mode(self) -> bool:
        """Check if running in development/test mode."""
        in_test = "pytest" in sys.modules or os.getenv("TEST") == "true"
        in_dev = self.environment == "development"
        return in_test or in_dev


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid energy-stats configuration",
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e
