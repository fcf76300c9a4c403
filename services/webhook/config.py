from services.webhook.settings import get_settings

_settings = get_settings()

DATABASE_URL = _settings.database_url
WEBHOOK_SECRET = _settings.webhook_secret
AGENT_MESSAGE_FILTER_ENABLED = _settings.agent_message_filter_enabled
LOG_LEVEL = _settings.log_level
