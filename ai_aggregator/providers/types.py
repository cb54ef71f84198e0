from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

DEMO_KEY = "demo-key"


@dataclass(frozen=True)
class ProviderSpec:
    name: str
    kind: str  # openai | anthropic | gemini | perplexity
    model: str
    credential: Optional[str] = field(default=None, repr=False)
    base_url: Optional[str] = None

    @property
    def has_credential(self) -> bool:
        # the placeholder key counts as no key at all
        return bool(self.credential) and self.credential != DEMO_KEY


@dataclass
class GenerateRequest:
    model: str
    prompt: str
    max_output_tokens: int = 500


@dataclass
class ProviderResponse:
    ok: bool
    content: str
    latency_ms: int
    provider_meta: Dict[str, Any]
    error: Optional[str] = None


class ProviderAdapter(Protocol):
    async def generate(self, spec: ProviderSpec, req: GenerateRequest) -> ProviderResponse: ...
