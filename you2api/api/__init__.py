"""API module for the gateway."""

from fastapi import FastAPI

from .routes import (
    CHAT_COMPLETION_PATHS,
    MODEL_LIST_PATHS,
    chat_completions,
    list_models,
    service_status,
)

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def register_routes(app: FastAPI) -> None:
    """Register gateway routes on ``app``. The status catch-all goes last."""
    for path in CHAT_COMPLETION_PATHS:
        app.api_route(path, methods=["GET", "POST", "OPTIONS"])(chat_completions)
    for path in MODEL_LIST_PATHS:
        app.api_route(path, methods=["GET", "OPTIONS"])(list_models)
    app.api_route("/{full_path:path}", methods=ALL_METHODS, include_in_schema=False)(service_status)


__all__ = [
    "chat_completions",
    "list_models",
    "register_routes",
    "service_status",
]
