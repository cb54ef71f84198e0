from __future__ import annotations
import time

import httpx

from .types import GenerateRequest, ProviderResponse, ProviderSpec

GEMINI_API = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent?key={key}"


class GeminiAdapter:
    def __init__(self, timeout: float = 60.0, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.timeout = timeout
        self.transport = transport

    async def generate(self, spec: ProviderSpec, req: GenerateRequest) -> ProviderResponse:
        t0 = time.perf_counter()
        url = GEMINI_API.format(model=req.model, key=spec.credential)
        payload = {
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": req.prompt}]
                }
            ],
            "generationConfig": {"maxOutputTokens": req.max_output_tokens},
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                r = await client.post(url, json=payload)
                latency_ms = int((time.perf_counter() - t0) * 1000)
                if r.status_code != 200:
                    return ProviderResponse(False, "", latency_ms, {"status": r.status_code}, error=r.text)
                data = r.json()
                candidates = data.get("candidates") or []
                if not candidates:
                    return ProviderResponse(False, "", latency_ms, {}, error="no candidates returned")
                parts = (candidates[0].get("content") or {}).get("parts") or []
                text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))
                return ProviderResponse(True, text, latency_ms, {"candidates": len(candidates)})
            except Exception as e:
                latency_ms = int((time.perf_counter() - t0) * 1000)
                return ProviderResponse(False, "", latency_ms, {}, error=str(e) or type(e).__name__)
