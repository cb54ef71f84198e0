from __future__ import annotations
import asyncio
import random
from typing import Callable, Dict, Tuple

from .types import GenerateRequest, ProviderResponse, ProviderSpec

DEMO_RESPONSES: Dict[str, str] = {
    "ChatGPT": (
        "This is a demo response from ChatGPT. In a real deployment this would be the actual answer from "
        "OpenAI's GPT model, contextual and relevant to your prompt: \"{prompt}\".\n\n"
        "ChatGPT typically provides detailed, conversational responses with good reasoning capabilities."
    ),
    "Claude": (
        "This is a demo response from Claude (Anthropic). Claude is known for being helpful, harmless, and honest. "
        "For your prompt \"{prompt}\", Claude would provide a thoughtful and well-structured response.\n\n"
        "Claude often excels at analysis, writing, and following complex instructions with high accuracy."
    ),
    "Gemini": (
        "This is a demo response from Google's Gemini, a model that can handle multimodal inputs. "
        "For \"{prompt}\", Gemini would draw on its training to provide comprehensive insights.\n\n"
        "Gemini is particularly strong at reasoning, coding, and creative tasks."
    ),
    "Perplexity": (
        "This is a demo response from Perplexity AI, which specializes in search-grounded answers with citations. "
        "For your query \"{prompt}\", Perplexity would provide up-to-date information with source references.\n\n"
        "Perplexity focuses on current information and factual accuracy."
    ),
}

GENERIC_DEMO_RESPONSE = "Demo response from {name}. A configured backend would answer your prompt: \"{prompt}\"."


def demo_text(provider: str, prompt: str) -> str:
    template = DEMO_RESPONSES.get(provider)
    if template is None:
        return GENERIC_DEMO_RESPONSE.format(name=provider, prompt=prompt)
    return template.format(prompt=prompt)


class SimulatedAdapter:
    """Stand-in for providers without a credential.

    Sleeps for a random delay in ``[min_ms, max_ms)`` to look like a network call,
    then answers with a canned text that names the provider and quotes the prompt.
    """

    def __init__(self, delay_ms: Tuple[int, int] = (1000, 3000), rng: Callable[[], float] = random.random) -> None:
        self.delay_ms = delay_ms
        self.rng = rng

    def _delay_ms(self) -> int:
        lo, hi = self.delay_ms
        if hi <= lo:
            return lo
        # rng() < 1.0, so the draw stays below hi
        return min(hi - 1, lo + int(self.rng() * (hi - lo)))

    async def generate(self, spec: ProviderSpec, req: GenerateRequest) -> ProviderResponse:
        delay_ms = self._delay_ms()
        await asyncio.sleep(delay_ms / 1000.0)
        # report the emulated latency, not scheduler overshoot
        return ProviderResponse(True, demo_text(spec.name, req.prompt), delay_ms, {"simulated": True})
