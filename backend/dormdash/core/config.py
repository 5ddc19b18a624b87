from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Dorm Dash"
    app_env: str = "dev"
    database_url: str = "sqlite:///./dormdash.db"

    session_cookie_name: str = "dormdash_session"
    session_expire_minutes: int = 60 * 24 * 7  # 7 days
    session_cookie_secure: bool = False

    # only addresses with this suffix may register
    email_domain: str = "@students.towson.edu"

    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
