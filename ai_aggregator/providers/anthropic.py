from __future__ import annotations
import time
from typing import Any, Dict

import httpx

from .types import GenerateRequest, ProviderResponse, ProviderSpec

ANTHROPIC_BASE_URL = "https://api.anthropic.com/v1"
ANTHROPIC_VERSION = "2023-06-01"


class AnthropicAdapter:
    def __init__(self, timeout: float = 60.0, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.timeout = timeout
        self.transport = transport

    async def generate(self, spec: ProviderSpec, req: GenerateRequest) -> ProviderResponse:
        t0 = time.perf_counter()
        url = f"{(spec.base_url or ANTHROPIC_BASE_URL).rstrip('/')}/messages"
        payload: Dict[str, Any] = {
            "model": req.model,
            "max_tokens": req.max_output_tokens,
            "messages": [{"role": "user", "content": req.prompt}],
        }
        headers = {
            "x-api-key": spec.credential or "",
            "anthropic-version": ANTHROPIC_VERSION,
            "Content-Type": "application/json",
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                r = await client.post(url, json=payload, headers=headers)
                latency_ms = int((time.perf_counter() - t0) * 1000)
                if r.status_code != 200:
                    return ProviderResponse(False, "", latency_ms, {"status": r.status_code}, error=r.text)
                data = r.json()
                blocks = data.get("content")
                if not isinstance(blocks, list):
                    return ProviderResponse(False, "", latency_ms, {}, error="no content blocks in message")
                text = "".join(
                    b.get("text", "") for b in blocks if isinstance(b, dict) and b.get("type") == "text"
                )
                meta = {
                    "model": data.get("model"),
                    "usage": data.get("usage"),
                    "stop_reason": data.get("stop_reason"),
                }
                return ProviderResponse(True, text, latency_ms, meta)
            except Exception as e:
                latency_ms = int((time.perf_counter() - t0) * 1000)
                return ProviderResponse(False, "", latency_ms, {}, error=str(e) or type(e).__name__)
