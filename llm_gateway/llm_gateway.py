from __future__ import annotations  # AI completion gateway module

import logging
import os
import threading
from typing import Any, Callable, Dict, Optional, Protocol, Sequence, Tuple

import httpx

from config import LlmRoute


logger = logging.getLogger(__name__)  # Module logger setup


_MODEL_LOCKS: Dict[str, threading.Lock] = {}
_MODEL_LOCKS_GUARD = threading.Lock()


class HttpClient(Protocol):  # Minimal HTTP client protocol
    def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: Any) -> "HttpResponse": ...


class HttpResponse(Protocol):  # Minimal HTTP response protocol
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...

    @property
    def text(self) -> str: ...


class LlmGatewayError(RuntimeError):  # Base gateway error
    pass


class AiUnavailableError(LlmGatewayError):  # Every configured provider failed
    pass


def _lock_for(cfg: LlmRoute) -> threading.Lock:
    key = cfg.name or f"{cfg.base_url}{cfg.endpoint}"
    with _MODEL_LOCKS_GUARD:
        lock = _MODEL_LOCKS.get(key)
        if lock is None:
            lock = threading.Lock()
            _MODEL_LOCKS[key] = lock
    return lock


def generate(
    prompt: str,
    *,
    routes: Sequence[LlmRoute],
    client: Optional[HttpClient] = None,
) -> str:  # Try each route in order and return the first completion text
    if not routes:
        raise AiUnavailableError("No AI completion routes configured")
    last_error: Optional[Exception] = None
    for index, route in enumerate(routes):
        try:
            return complete(prompt, cfg=route, client=client)
        except LlmGatewayError as exc:
            last_error = exc
            if index + 1 < len(routes):
                logger.warning(
                    "AI route %s failed, falling back to %s: %s",
                    route.name,
                    routes[index + 1].name,
                    exc,
                )
    logger.error("All AI routes failed: %s", last_error)
    raise AiUnavailableError("All AI services are currently unavailable") from last_error


def complete(
    prompt: str,
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
) -> str:  # Invoke a single configured route and return raw text
    def _execute() -> str:
        preview = _preview(prompt)
        logger.info(
            "LLM request send route=%s provider=%s model=%s preview=%s",
            cfg.name,
            cfg.provider,
            cfg.model,
            preview,
        )
        payload, headers = _build_request(prompt, cfg)
        timeout = httpx.Timeout(
            cfg.timeout_s,
            connect=cfg.connect_timeout_s,
            write=cfg.write_timeout_s,
        )
        try:
            response, close_cb = _post(f"{cfg.base_url}{cfg.endpoint}", payload, headers, timeout, client)
        except Exception as exc:  # noqa: BLE001
            logger.error("LLM transport failure route=%s: %s", cfg.name, exc)
            raise LlmGatewayError("LLM transport failed") from exc
        try:
            if response.status_code >= 400:
                logger.error("LLM error status route=%s: %s", cfg.name, response.status_code)
                raise LlmGatewayError(f"LLM returned status {response.status_code}")
            try:
                data = response.json()
            except Exception as exc:  # noqa: BLE001
                logger.error("Invalid JSON payload from LLM route=%s: %s", cfg.name, exc)
                raise LlmGatewayError("LLM payload was not JSON") from exc
            content = _extract_content(data, cfg.provider)
        finally:
            _close_safely(close_cb)
        logger.info("LLM request done route=%s model=%s chars=%d", cfg.name, cfg.model, len(content))
        return content

    if cfg.sequential:
        with _lock_for(cfg):
            return _execute()
    return _execute()


def completion_from_routes(
    routes: Sequence[LlmRoute],
    *,
    client: Optional[HttpClient] = None,
) -> Callable[[str], str]:  # Bind routes into a prompt -> text callable
    bound = list(routes)

    def _generate(prompt: str) -> str:
        return generate(prompt, routes=bound, client=client)

    return _generate


def _build_request(prompt: str, cfg: LlmRoute) -> Tuple[Dict[str, Any], Dict[str, str]]:  # Provider-specific body and headers
    headers = {"Content-Type": "application/json"}
    api_key = os.getenv(cfg.api_key_env) if cfg.api_key_env else None
    if cfg.provider == "gemini":
        payload: Dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": cfg.temperature,
                "maxOutputTokens": cfg.max_tokens,
            },
        }
        if api_key:
            headers["x-goog-api-key"] = api_key
    else:
        payload = {
            "model": cfg.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": cfg.temperature,
            "max_tokens": cfg.max_tokens,
        }
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
    headers.update(cfg.extra_headers)
    return payload, headers


def _post(url: str, payload: Dict[str, Any], headers: Dict[str, str], timeout: Any, client: Optional[HttpClient]) -> Tuple[HttpResponse, Optional[Callable[[], None]]]:  # Dispatch HTTP request
    if client is not None:
        response = client.post(url, json=payload, headers=headers, timeout=timeout)
        return response, None
    http_client = httpx.Client(timeout=timeout)
    try:
        response = http_client.post(url, json=payload, headers=headers)
    except Exception:
        http_client.close()
        raise
    return response, http_client.close


def _close_safely(close_cb: Optional[Callable[[], None]]) -> None:  # Close HTTP client callback when provided
    if close_cb is not None:
        close_cb()


def _preview(prompt: str) -> str:  # Build preview string for logging
    for line in prompt.splitlines():
        text = line.strip()
        if text:
            return text if len(text) <= 120 else text[:117] + "..."
    return ""


def _extract_content(data: Any, provider: str) -> str:  # Extract completion text from provider response
    if isinstance(data, dict):
        if provider == "gemini":
            candidates = data.get("candidates")
            if isinstance(candidates, list) and candidates and isinstance(candidates[0], dict):
                content = candidates[0].get("content")
                parts = content.get("parts") if isinstance(content, dict) else None
                if isinstance(parts, list) and parts and isinstance(parts[0], dict):
                    text = parts[0].get("text")
                    if isinstance(text, str):
                        return text
        choices = data.get("choices")
        if isinstance(choices, list) and choices:
            message = choices[0].get("message") if isinstance(choices[0], dict) else None
            content = message.get("content") if isinstance(message, dict) else None
            if isinstance(content, str):
                return content
        if isinstance(data.get("content"), str):
            return data["content"]
    raise LlmGatewayError("LLM response missing content")
