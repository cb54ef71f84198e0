from __future__ import annotations
import time
from typing import Any, Dict

import httpx

from .types import GenerateRequest, ProviderResponse, ProviderSpec

OPENAI_BASE_URL = "https://api.openai.com/v1"


class OpenAIAdapter:
    """Chat completions API. Perplexity speaks the same dialect under its own base URL."""

    def __init__(self, timeout: float = 60.0, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.timeout = timeout
        self.transport = transport

    async def generate(self, spec: ProviderSpec, req: GenerateRequest) -> ProviderResponse:
        t0 = time.perf_counter()
        base_url = (spec.base_url or OPENAI_BASE_URL).rstrip("/")
        url = f"{base_url}/chat/completions"
        payload: Dict[str, Any] = {
            "model": req.model,
            "messages": [{"role": "user", "content": req.prompt}],
            "max_tokens": req.max_output_tokens,
        }
        headers = {
            "Authorization": f"Bearer {spec.credential}",
            "Content-Type": "application/json",
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                r = await client.post(url, json=payload, headers=headers)
                latency_ms = int((time.perf_counter() - t0) * 1000)
                if r.status_code != 200:
                    return ProviderResponse(False, "", latency_ms, {"status": r.status_code}, error=r.text)
                data = r.json()
                content = (
                    (data.get("choices") or [{}])[0]
                    .get("message", {})
                    .get("content")
                )
                if not isinstance(content, str):
                    return ProviderResponse(False, "", latency_ms, {}, error="no message content in completion")
                meta = {
                    "model": data.get("model"),
                    "usage": data.get("usage"),
                }
                return ProviderResponse(True, content, latency_ms, meta)
            except Exception as e:
                latency_ms = int((time.perf_counter() - t0) * 1000)
                return ProviderResponse(False, "", latency_ms, {}, error=str(e) or type(e).__name__)
