from aiassistant.service.assistant import AIAssistantService
from aiassistant.service.cache import assistant_cache
from aiassistant.service.config import Config


@assistant_cache
def get_assistant_service() -> AIAssistantService:
    """FastAPI dependency to get the process-wide AIAssistantService."""
    config = Config.config()
    return AIAssistantService(config.get_assistant_secrets(), **config.get_poll_settings())
