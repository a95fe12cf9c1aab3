"""API routes for the gateway."""

from .chat import CHAT_COMPLETION_PATHS, chat_completions
from .models import MODEL_LIST_PATHS, list_models
from .status import service_status

__all__ = [
    "CHAT_COMPLETION_PATHS",
    "MODEL_LIST_PATHS",
    "chat_completions",
    "list_models",
    "service_status",
]
