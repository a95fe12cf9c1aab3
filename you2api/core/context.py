"""Per-request context threaded through query building and response assembly."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

from .history import ProjectedHistory
from .models import ModelMapping


@dataclass(frozen=True)
class RequestContext:
    """Everything one chat request carries from parsing to the final payload.

    Attributes:
        requested_model: Model id exactly as the client sent it.
        upstream_model: Resolved ``selectedAiModel`` value.
        client_model: Model id reported back to the client.
        history: Projected upstream history for the request.
        session_token: Bearer token forwarded as the upstream session cookie.
        stream: Whether the client asked for an event stream.
        completion_id: Shared by every payload of this response.
        created: Unix timestamp shared by every payload of this response.
    """

    requested_model: str
    upstream_model: str
    client_model: str
    history: ProjectedHistory
    session_token: str
    stream: bool
    completion_id: str
    created: int

    @classmethod
    def build(
        cls,
        *,
        models: ModelMapping,
        requested_model: Optional[str],
        history: ProjectedHistory,
        session_token: str,
        stream: bool,
        now: Optional[float] = None,
    ) -> "RequestContext":
        created = int(now if now is not None else time.time())
        upstream_model, client_model = models.resolve_or_default(requested_model)
        return cls(
            requested_model=requested_model or "",
            upstream_model=upstream_model,
            client_model=client_model,
            history=history,
            session_token=session_token,
            stream=stream,
            completion_id=f"chatcmpl-{created}",
            created=created,
        )
