"""Local Ollama client — JSON-biased, low-temperature chat completion.

The analysis requestor MUST use ``call_ollama_json()``. This ensures:
  - Base URL, model, temperature and timeout are read from env.
  - JSON output is requested via ``format: "json"``.
  - A single call with no retry; failures raise ``LLMProviderError``.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional

import httpx

from ..config import (
    get_ollama_base_url,
    get_ollama_model,
    get_ollama_temperature,
    get_ollama_timeout,
)
from .errors import LLMProviderError

logger = logging.getLogger(__name__)


def build_payload(*, model: str, prompt: str, temperature: float) -> Dict[str, Any]:
    """Build an Ollama ``/api/chat`` payload with JSON output enforced."""
    return {
        "model": model,
        "messages": [{"role": "user", "content": prompt}],
        "format": "json",
        "stream": False,
        "options": {"temperature": temperature},
    }


def extract_content(data: Dict[str, Any]) -> str:
    """Pull ``message.content`` out of a chat response as a string."""
    message = data.get("message") if isinstance(data, dict) else None
    if not isinstance(message, dict) or "content" not in message:
        raise LLMProviderError("Ollama response has no message content")
    content = message["content"]
    if isinstance(content, str):
        return content
    return json.dumps(content)


async def call_ollama_json(
    prompt: str,
    *,
    model: Optional[str] = None,
    base_url: Optional[str] = None,
) -> str:
    """Send *prompt* to the local model and return the raw reply text.

    Parameters
    ----------
    prompt : str
        Fully composed prompt (instructions + sources + JSON shape).
    model : str, optional
        Override model name (default: from env).
    base_url : str, optional
        Override Ollama base URL (default: from env).
    """
    if model is None:
        model = get_ollama_model()
    if base_url is None:
        base_url = get_ollama_base_url()

    payload = build_payload(
        model=model,
        prompt=prompt,
        temperature=get_ollama_temperature(),
    )

    print(f"🧠 [OLLAMA] Calling {model} at {base_url} ({len(prompt)} prompt chars)")
    t0 = time.time()
    try:
        async with httpx.AsyncClient(timeout=get_ollama_timeout()) as client:
            response = await client.post(f"{base_url}/api/chat", json=payload)
    except httpx.HTTPError as exc:
        logger.error("Ollama request failed: %s", exc)
        raise LLMProviderError(f"Ollama request failed: {exc}") from exc

    duration = time.time() - t0
    print(f"📦 [OLLAMA] HTTP {response.status_code} ({duration:.1f}s)")

    if response.status_code != 200:
        raise LLMProviderError(
            f"Ollama returned HTTP {response.status_code}: {response.text[:400]}"
        )

    try:
        data = response.json()
    except ValueError as exc:
        raise LLMProviderError("Ollama returned a non-JSON body") from exc

    content = extract_content(data)
    print(f"🧠 [OLLAMA] Raw output length: {len(content)} chars")
    return content
