"""Client side of the aggregator: one submit, one request, one card per provider."""

from __future__ import annotations
import enum
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import httpx

from .config import DEFAULT_ORDER
from .schemas import ResponseValidator

logger = logging.getLogger(__name__)

TRANSPORT_ERROR = "Failed to get response"
NEUTRAL_COLOR = "#94a3b8"


class ClientState(str, enum.Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SHOWING_RESULTS = "showing_results"
    SHOWING_TRANSPORT_ERROR = "showing_transport_error"


@dataclass(frozen=True)
class ProviderDisplay:
    name: str
    color: str


PROVIDER_DISPLAY: Dict[str, ProviderDisplay] = {
    "ChatGPT": ProviderDisplay("ChatGPT", "#22c55e"),
    "Claude": ProviderDisplay("Claude", "#f97316"),
    "Gemini": ProviderDisplay("Gemini", "#3b82f6"),
    "Perplexity": ProviderDisplay("Perplexity", "#a855f7"),
}


def display_for(name: str) -> ProviderDisplay:
    return PROVIDER_DISPLAY.get(name) or ProviderDisplay(name, NEUTRAL_COLOR)


@dataclass
class Card:
    provider: str
    response: str
    response_time: int
    color: str
    error: Optional[str] = None


class TransportError(Exception):
    """The aggregate request itself failed, as opposed to a single provider."""


class AggregatorClient:
    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        providers: Optional[Sequence[str]] = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 120.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.providers: List[str] = list(providers or DEFAULT_ORDER)
        self.transport = transport
        self.timeout = timeout
        self.state = ClientState.IDLE
        self.cards: List[Card] = []
        self._validator = ResponseValidator()

    @property
    def busy(self) -> bool:
        return self.state is ClientState.SUBMITTING

    def can_submit(self, prompt: str) -> bool:
        return not self.busy and bool((prompt or "").strip())

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    async def fetch_providers(self) -> List[str]:
        async with self._client() as client:
            r = await client.get("/api/providers")
            r.raise_for_status()
            self.providers = [p["name"] for p in r.json()]
        return self.providers

    async def _post(self, prompt: str) -> dict:
        async with self._client() as client:
            try:
                r = await client.post("/api/aggregate", json={"prompt": prompt})
            except httpx.HTTPError as e:
                raise TransportError(str(e) or type(e).__name__) from e
        if r.status_code < 200 or r.status_code >= 300:
            raise TransportError(f"aggregate request returned {r.status_code}")
        try:
            data = r.json()
        except ValueError as e:
            raise TransportError("aggregate response is not JSON") from e
        errors = self._validator.validate("aggregate_response", data)
        if errors:
            raise TransportError("malformed aggregate response: " + "; ".join(errors))
        return data

    def _error_cards(self) -> List[Card]:
        return [
            Card(provider=name, response="", response_time=0, color=display_for(name).color, error=TRANSPORT_ERROR)
            for name in self.providers
        ]

    async def submit(self, prompt: str) -> Optional[List[Card]]:
        """Send ``prompt`` once and return the cards to show.

        Returns ``None`` without sending anything when the prompt is blank or
        a previous submit is still outstanding.
        """
        if not self.can_submit(prompt):
            return None
        self.state = ClientState.SUBMITTING
        self.cards = []
        try:
            data = await self._post(prompt)
        except TransportError as e:
            logger.error("Error: %s", e)
            self.cards = self._error_cards()
            self.state = ClientState.SHOWING_TRANSPORT_ERROR
            return self.cards
        except BaseException:
            self.state = ClientState.IDLE
            raise
        self.cards = [
            Card(
                provider=r["provider"],
                response=r["response"],
                response_time=r["responseTime"],
                color=display_for(r["provider"]).color,
                error=r.get("error"),
            )
            for r in data["responses"]
        ]
        self.state = ClientState.SHOWING_RESULTS
        return self.cards
