import pytest

from ai_aggregator.aggregate import aggregate
from ai_aggregator.providers.registry import ProviderRegistry
from ai_aggregator.providers.simulated import SimulatedAdapter, demo_text
from ai_aggregator.providers.types import GenerateRequest, ProviderSpec


class ExplodingAdapter:
    def __init__(self):
        self.calls = 0

    async def generate(self, spec, req):
        self.calls += 1
        raise AssertionError("real backend must not be called without a credential")


def test_demo_text_names_provider_and_quotes_prompt():
    for name in ["ChatGPT", "Claude", "Gemini", "Perplexity"]:
        text = demo_text(name, "Explain gravity")
        assert name in text
        assert '"Explain gravity"' in text
        assert "demo" in text.lower()


def test_demo_text_for_unknown_provider():
    text = demo_text("Mistral", "hello")
    assert text.startswith("Demo response from Mistral")
    assert '"hello"' in text


def test_demo_key_counts_as_missing_credential():
    assert not ProviderSpec("ChatGPT", "openai", "m", credential="demo-key").has_credential
    assert not ProviderSpec("ChatGPT", "openai", "m", credential="").has_credential
    assert not ProviderSpec("ChatGPT", "openai", "m").has_credential
    assert ProviderSpec("ChatGPT", "openai", "m", credential="sk-real").has_credential


def test_credential_is_not_in_repr():
    assert "sk-secret" not in repr(ProviderSpec("ChatGPT", "openai", "m", credential="sk-secret"))


def test_delay_stays_in_configured_range():
    lo = SimulatedAdapter(delay_ms=(1000, 3000), rng=lambda: 0.0)
    hi = SimulatedAdapter(delay_ms=(1000, 3000), rng=lambda: 0.999999)
    fixed = SimulatedAdapter(delay_ms=(50, 50), rng=lambda: 0.7)
    assert lo._delay_ms() == 1000
    assert hi._delay_ms() == 2999
    assert fixed._delay_ms() == 50


@pytest.mark.asyncio
async def test_simulated_adapter_answers():
    adapter = SimulatedAdapter(delay_ms=(0, 1))
    resp = await adapter.generate(ProviderSpec("Claude", "anthropic", "m"), GenerateRequest("m", "why?"))
    assert resp.ok
    assert '"why?"' in resp.content
    assert resp.provider_meta == {"simulated": True}


@pytest.mark.asyncio
async def test_all_providers_without_credentials_are_simulated():
    registry = ProviderRegistry(simulated_delay_ms=(1000, 3000))
    registry.simulated.rng = lambda: 0.05
    real = ExplodingAdapter()
    for kind in ["openai", "anthropic", "gemini", "perplexity"]:
        registry.register(kind, real)
    specs = [
        ProviderSpec("ChatGPT", "openai", "gpt-4o-mini"),
        ProviderSpec("Claude", "anthropic", "claude-3-haiku-20240307", credential="demo-key"),
        ProviderSpec("Gemini", "gemini", "gemini-1.5-flash"),
        ProviderSpec("Perplexity", "perplexity", "sonar"),
    ]
    out = await aggregate("Explain gravity", specs, registry=registry)
    assert real.calls == 0
    assert [r.provider for r in out.responses] == ["ChatGPT", "Claude", "Gemini", "Perplexity"]
    for r in out.responses:
        assert r.error is None
        assert "Explain gravity" in r.response
        assert 1000 <= r.response_time < 3000


@pytest.mark.asyncio
async def test_simulated_and_real_branches_mix():
    registry = ProviderRegistry(simulated_delay_ms=(0, 1))

    class Live:
        async def generate(self, spec, req):
            from ai_aggregator.providers.types import ProviderResponse
            return ProviderResponse(True, "live answer", 1, {})

    registry.register("openai", Live())
    specs = [ProviderSpec("ChatGPT", "openai", "m", credential="sk"), ProviderSpec("Claude", "anthropic", "m")]
    out = await aggregate("q", specs, registry=registry)
    assert out.responses[0].response == "live answer"
    assert out.responses[1].response.startswith("This is a demo response from Claude")


@pytest.mark.asyncio
async def test_top_of_delay_range_still_reports_below_max():
    registry = ProviderRegistry(simulated_delay_ms=(1000, 3000))
    registry.simulated.rng = lambda: 0.99999
    specs = [ProviderSpec(n, "openai", "m") for n in ["ChatGPT", "Claude", "Gemini", "Perplexity"]]
    out = await aggregate("Explain gravity", specs, registry=registry)
    times = [r.response_time for r in out.responses]
    assert all(1000 <= t < 3000 for t in times), times
