"""AI completion route configuration loaded from JSON."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Literal

from pydantic import BaseModel, Field


class LlmRoute(BaseModel):
    """Completion provider endpoint configuration."""

    name: str
    provider: Literal["openai", "gemini"] = "openai"
    base_url: str
    endpoint: str
    model: str
    timeout_s: float = Field(default=60.0, ge=0.1)
    connect_timeout_s: float = Field(default=30.0, ge=0.1)
    write_timeout_s: float = Field(default=30.0, ge=0.1)
    api_key_env: str | None = None
    extra_headers: Dict[str, str] = Field(default_factory=dict)
    sequential: bool = False
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2000, ge=1)


class AppConfig(BaseModel):
    """Application configuration root."""

    llm_routes: Dict[str, LlmRoute]
    completion_routes: List[str] = Field(min_length=1)


def load_config(path: Path) -> AppConfig:
    """Load configuration from disk."""

    data = path.read_text(encoding="utf-8")
    return AppConfig.model_validate_json(data)


def resolve_routes(cfg: AppConfig) -> List[LlmRoute]:
    """Return completion routes in failover order."""

    resolved: List[LlmRoute] = []
    for route_id in cfg.completion_routes:
        if route_id not in cfg.llm_routes:
            raise KeyError(f"Route '{route_id}' missing for completion")
        resolved.append(cfg.llm_routes[route_id])
    return resolved


def load_completion_routes(path: Path) -> List[LlmRoute]:
    """Load configuration and resolve the completion failover chain."""

    return resolve_routes(load_config(path))
