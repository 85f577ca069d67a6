from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "DayPlanr"
    debug: bool = True
    database_url: str = Field("sqlite:///./dayplanr.db", validation_alias="DATABASE_URL")
    locale: str = "en"
    default_focus_block_minutes: int = 52
    default_short_break_minutes: int = 10
    default_buffer_minutes: int = 5
    calendar_prodid: str = "-//DayPlanr//EN"
    calendar_uid_domain: str = "dayplanr"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
