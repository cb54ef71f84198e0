from __future__ import annotations
from typing import TYPE_CHECKING, Dict, Tuple

import httpx

from .anthropic import AnthropicAdapter
from .gemini import GeminiAdapter
from .openai import OpenAIAdapter
from .simulated import SimulatedAdapter
from .types import GenerateRequest, ProviderAdapter, ProviderResponse, ProviderSpec

if TYPE_CHECKING:
    from ..config import Settings


class ProviderRegistry:
    """Strategy table from provider kind to backend adapter."""

    def __init__(
        self,
        timeout: float = 60.0,
        simulated_delay_ms: Tuple[int, int] = (1000, 3000),
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        openai = OpenAIAdapter(timeout=timeout, transport=transport)
        self._adapters: Dict[str, ProviderAdapter] = {
            "openai": openai,
            "perplexity": openai,
            "anthropic": AnthropicAdapter(timeout=timeout, transport=transport),
            "gemini": GeminiAdapter(timeout=timeout, transport=transport),
        }
        self.simulated = SimulatedAdapter(delay_ms=simulated_delay_ms)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProviderRegistry":
        return cls(timeout=settings.request_timeout_s, simulated_delay_ms=settings.simulated_delay_ms)

    def register(self, kind: str, adapter: ProviderAdapter) -> None:
        self._adapters[kind] = adapter

    def get(self, kind: str) -> ProviderAdapter:
        try:
            return self._adapters[kind]
        except KeyError:
            raise KeyError(f"Unknown provider kind: {kind}") from None

    def adapter_for(self, spec: ProviderSpec) -> ProviderAdapter:
        if not spec.has_credential:
            return self.simulated
        return self.get(spec.kind)

    async def generate(self, spec: ProviderSpec, req: GenerateRequest) -> ProviderResponse:
        return await self.adapter_for(spec).generate(spec, req)
