from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WebhookSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = Field(..., alias="DATABASE_URL")
    webhook_secret: str = Field("", alias="GORGIAS_WEBHOOK_SECRET")
    agent_message_filter_enabled: bool = Field(False, alias="AGENT_MESSAGE_FILTER_ENABLED")
    log_level: str = Field("INFO", alias="LOG_LEVEL")


_settings: WebhookSettings | None = None


def get_settings() -> WebhookSettings:
    global _settings
    if _settings is None:
        _settings = WebhookSettings()  # type: ignore[call-arg]
    return _settings
