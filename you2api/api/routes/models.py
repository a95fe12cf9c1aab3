"""Models listing endpoint - OpenAI compatible."""

import logging
import time

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from ...core import get_gateway
from ...types import ModelList
from ..cors import MODELS_CORS_HEADERS, preflight_response

logger = logging.getLogger("you2api")

MODEL_LIST_PATHS = ("/v1/models", "/api/v1/models")
MODEL_OWNER = "organization-owner"


def build_model_list(model_ids: list[str], created: int) -> ModelList:
    """Build the OpenAI-style model list payload."""
    return {
        "object": "list",
        "data": [
            {
                "id": model_id,
                "object": "model",
                "created": created,
                "owned_by": MODEL_OWNER,
            }
            for model_id in model_ids
        ],
    }


async def list_models(request: Request) -> Response:
    """List the client-facing model ids in OpenAI API format.

    GET /v1/models
    """
    if request.method == "OPTIONS":
        return preflight_response(MODELS_CORS_HEADERS)

    logger.info("Received models list request")
    models = get_gateway().models
    payload = build_model_list(models.client_models(), int(time.time()))
    return JSONResponse(payload, headers=dict(MODELS_CORS_HEADERS))
