from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    user_timezone: str = "UTC"
    log_level: str = "INFO"
    data_dir: str = "~/.smart-tasks"

    # Sentry error tracking
    sentry_dsn: str = ""
    sentry_environment: str = "production"

    @property
    def has_sentry(self) -> bool:
        return bool(self.sentry_dsn)

    @property
    def tasks_path(self) -> Path:
        return Path(self.data_dir).expanduser() / "tasks.json"


settings = Settings()
