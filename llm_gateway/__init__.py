from __future__ import annotations  # Re-export llm_gateway public API

from .llm_gateway import (
    AiUnavailableError,
    HttpClient,
    HttpResponse,
    LlmGatewayError,
    complete,
    completion_from_routes,
    generate,
)

__all__ = [
    "AiUnavailableError",
    "HttpClient",
    "HttpResponse",
    "LlmGatewayError",
    "complete",
    "completion_from_routes",
    "generate",
]
