from pydantic_settings import BaseSettings
from pydantic import model_validator
from functools import lru_cache


class Settings(BaseSettings):
    app_env: str = "development"
    cache_ttl: int = 900
    average_window_days: int = 7
    default_mode: str = "daily-transition"
    summary_placeholder: str = "-"
    date_format: str = "%Y-%m-%d"
    date_range_separator: str = " ~ "
    case_unit: str = "cases"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @model_validator(mode="after")
    def _normalize_series_options(self):
        """Accept DEFAULT_MODE=DAILY_CUMULATIVE style values from the environment.

        Mode identifiers are lower-case and hyphenated; env files tend to use
        upper-case with underscores, so both spellings map to the same mode.
        """
        self.default_mode = self.default_mode.strip().lower().replace("_", "-")
        if self.average_window_days < 1:
            raise ValueError("average_window_days must be at least 1")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
