"""Fan a prompt out to every configured provider and collect one result per provider."""

from __future__ import annotations
import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Sequence

from .errors import PromptRequiredError
from .providers.registry import ProviderRegistry
from .providers.types import GenerateRequest, ProviderSpec
from .schemas import AggregateResponse, ProviderResult

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _elapsed_ms(t0: float) -> int:
    return max(0, int((time.perf_counter() - t0) * 1000))


def failure_message(name: str) -> str:
    return f"Failed to get response from {name}"


def validate_prompt(prompt: Any) -> str:
    if not isinstance(prompt, str) or prompt == "":
        raise PromptRequiredError()
    return prompt


async def _run_provider(
    spec: ProviderSpec,
    prompt: str,
    registry: ProviderRegistry,
    max_output_tokens: int,
) -> ProviderResult:
    t0 = time.perf_counter()
    req = GenerateRequest(model=spec.model, prompt=prompt, max_output_tokens=max_output_tokens)
    try:
        resp = await registry.generate(spec, req)
        if not resp.ok:
            logger.warning("Error with %s: %s", spec.name, resp.error)
            return ProviderResult(provider=spec.name, error=failure_message(spec.name), response_time=_elapsed_ms(t0))
        if resp.provider_meta.get("simulated"):
            # simulated latency is the drawn delay and stays inside its configured range
            response_time = max(0, int(resp.latency_ms))
        else:
            response_time = _elapsed_ms(t0)
        return ProviderResult(provider=spec.name, response=resp.content, response_time=response_time)
    except Exception as e:
        # adapters report failures as values; anything raised here, or a malformed
        # result, is unexpected but still stays with this provider
        logger.warning("Error with %s: %s", spec.name, e, exc_info=True)
        return ProviderResult(provider=spec.name, error=failure_message(spec.name), response_time=_elapsed_ms(t0))


async def aggregate(
    prompt: Any,
    providers: Sequence[ProviderSpec],
    registry: ProviderRegistry | None = None,
    max_output_tokens: int = 500,
) -> AggregateResponse:
    """Ask every provider concurrently and wait for all of them.

    ``responses`` keeps the order of ``providers`` whatever order the calls
    finish in. A provider that fails shows up with an ``error`` and an empty
    ``response``; it never takes the others down with it.
    """
    prompt = validate_prompt(prompt)
    registry = registry or ProviderRegistry()
    t0 = time.perf_counter()
    tasks = [
        asyncio.create_task(
            _run_provider(spec, prompt, registry, max_output_tokens),
            name=f"generate_{spec.name}",
        )
        for spec in providers
    ]
    # gather returns results positionally, so declaration order survives
    results = list(await asyncio.gather(*tasks))
    failures = sum(1 for r in results if r.failed)
    logger.info(
        "Aggregated %d responses (%d failed) in %d ms", len(results), failures, _elapsed_ms(t0)
    )
    return AggregateResponse(success=True, responses=results, timestamp=_now_iso())
