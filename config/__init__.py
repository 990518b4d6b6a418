"""Configuration package for interview engine services."""
from .llm import AppConfig, LlmRoute, load_completion_routes, load_config, resolve_routes
from .registry import COMPLETION_KEY, bind_model, get_model, is_bound
from .settings import Settings, settings

__all__ = [
    "AppConfig",
    "LlmRoute",
    "load_completion_routes",
    "load_config",
    "resolve_routes",
    "COMPLETION_KEY",
    "bind_model",
    "get_model",
    "is_bound",
    "Settings",
    "settings",
]
