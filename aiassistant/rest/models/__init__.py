# Export all models for easy importing
from .chat import ChatRequest, ChatResponse
from .errors import ErrorResponse
from .health import HealthResponse

__all__ = [
    # Chat models
    "ChatRequest", "ChatResponse",

    # Error models
    "ErrorResponse",

    # Health models
    "HealthResponse",
]
