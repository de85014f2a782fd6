import json
import logging
from typing import Any, AsyncIterator, Dict, Optional

import requests
from anyio import to_thread

from .config import get_connect_timeout, get_llm_config

logger = logging.getLogger(__name__)


class LlmError(RuntimeError):
    pass


def _resolve_api_base(provider: str, api_base: Optional[str]) -> str:
    if api_base:
        return api_base.rstrip("/")
    if provider == "gemini":
        return "https://generativelanguage.googleapis.com/v1beta/openai"
    if provider == "deepseek":
        return "https://api.deepseek.com/v1"
    if provider == "openai":
        return "https://api.openai.com/v1"
    raise LlmError(f"Unknown provider: {provider}")


def _open_stream(url: str, headers: Dict[str, str], payload: Dict[str, Any], connect_timeout: float) -> requests.Response:
    # (connect, read): the read side stays unbounded while the model is generating.
    resp = requests.post(
        url,
        headers=headers,
        data=json.dumps(payload),
        stream=True,
        timeout=(connect_timeout, None),
    )
    try:
        resp.raise_for_status()
    except Exception:
        resp.close()
        raise
    return resp


def _delta_text(event: Dict[str, Any]) -> str:
    choices = event.get("choices") or [{}]
    delta = choices[0].get("delta") or {}
    return delta.get("content") or ""


async def stream_chat(prompt: str, model: Optional[str] = None) -> AsyncIterator[str]:
    """
    Stream an OpenAI-compatible chat completion.
    Yields the assistant text fragments as they arrive, with no regard for line boundaries.
    """
    cfg = get_llm_config()
    if not cfg["api_key"]:
        raise LlmError("LLM_API_KEY is not set")

    api_base = _resolve_api_base(cfg["provider"], cfg["api_base"])
    url = f"{api_base}/chat/completions"
    headers = {
        "Authorization": f"Bearer {cfg['api_key']}",
        "Content-Type": "application/json",
        "Accept": "text/event-stream",
    }
    payload = {
        "model": model or cfg["model"],
        "messages": [{"role": "user", "content": prompt}],
        "stream": True,
    }

    try:
        resp = await to_thread.run_sync(_open_stream, url, headers, payload, get_connect_timeout())
    except Exception as exc:
        raise LlmError(f"LLM request failed: {exc}") from exc
    logger.debug("llm.stream.open model=%s status=%s", payload["model"], resp.status_code)

    try:
        # Raw bytes: lines end at \r or \n only, JSON strings may hold a bare U+2028.
        lines = resp.iter_lines()
        while True:
            try:
                line = await to_thread.run_sync(next, lines, None)
            except Exception as exc:
                raise LlmError(f"LLM stream interrupted: {exc}") from exc
            if line is None:
                break
            line = line.decode("utf-8", errors="replace")
            if not line.startswith("data:"):
                continue
            data = line[5:].strip()
            if data == "[DONE]":
                break
            try:
                event = json.loads(data)
            except ValueError as exc:
                raise LlmError(f"LLM stream sent an undecodable event: {data[:200]!r}") from exc
            if not isinstance(event, dict):
                continue
            if event.get("error"):
                raise LlmError(f"LLM stream reported an error: {event['error']}")
            text = _delta_text(event)
            if text:
                yield text
    finally:
        resp.close()
