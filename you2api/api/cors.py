"""Permissive CORS headers attached to gateway responses."""

from typing import Mapping

from fastapi import Response

CHAT_CORS_HEADERS: Mapping[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "*",
}

MODELS_CORS_HEADERS: Mapping[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "*",
}


def preflight_response(cors_headers: Mapping[str, str]) -> Response:
    """Empty 200 answer to an ``OPTIONS`` request."""
    return Response(status_code=200, headers=dict(cors_headers))
