from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigError
from .providers.types import ProviderSpec

PERPLEXITY_BASE_URL = "https://api.perplexity.ai"

# name -> (kind, credential env vars in lookup order, model env var, default model, base url)
PROVIDER_TABLE: Dict[str, Tuple[str, Tuple[str, ...], str, str, Optional[str]]] = {
    "ChatGPT": ("openai", ("OPENAI_API_KEY",), "OPENAI_MODEL", "gpt-4o-mini", None),
    "Claude": ("anthropic", ("ANTHROPIC_API_KEY",), "ANTHROPIC_MODEL", "claude-3-haiku-20240307", None),
    "Gemini": (
        "gemini",
        ("GOOGLE_GENERATIVE_AI_API_KEY", "GOOGLE_API_KEY"),
        "GEMINI_MODEL",
        "gemini-1.5-flash",
        None,
    ),
    "Perplexity": (
        "perplexity",
        ("PERPLEXITY_API_KEY",),
        "PERPLEXITY_MODEL",
        "llama-3.1-sonar-small-32k-online",
        PERPLEXITY_BASE_URL,
    ),
}

DEFAULT_ORDER = ("ChatGPT", "Claude", "Gemini", "Perplexity")


@dataclass(frozen=True)
class Settings:
    providers: Tuple[ProviderSpec, ...]
    max_output_tokens: int = 500
    simulated_delay_ms: Tuple[int, int] = (1000, 3000)
    request_timeout_s: float = 60.0
    log_level: str = "INFO"
    cors_origins: Tuple[str, ...] = ("*",)

    @property
    def provider_names(self) -> list[str]:
        return [p.name for p in self.providers]


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ConfigError(f"{key} must not be negative")
    return value


def _float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{key} must be positive")
    return value


def _first(env: Mapping[str, str], keys: Tuple[str, ...]) -> Optional[str]:
    for k in keys:
        v = (env.get(k) or "").strip()
        if v:
            return v
    return None


def build_provider_specs(env: Mapping[str, str]) -> Tuple[ProviderSpec, ...]:
    raw_order = (env.get("AGGREGATOR_PROVIDERS") or "").strip()
    if raw_order:
        order = [n.strip() for n in raw_order.split(",") if n.strip()]
    else:
        order = list(DEFAULT_ORDER)
    unknown = [n for n in order if n not in PROVIDER_TABLE]
    if unknown:
        raise ConfigError(f"Unknown provider(s) in AGGREGATOR_PROVIDERS: {', '.join(unknown)}")
    if len(set(order)) != len(order):
        raise ConfigError("AGGREGATOR_PROVIDERS lists a provider more than once")
    if not order:
        raise ConfigError("AGGREGATOR_PROVIDERS must name at least one provider")
    specs = []
    for name in order:
        kind, key_vars, model_var, default_model, base_url = PROVIDER_TABLE[name]
        specs.append(
            ProviderSpec(
                name=name,
                kind=kind,
                model=(env.get(model_var) or "").strip() or default_model,
                credential=_first(env, key_vars),
                base_url=base_url,
            )
        )
    return tuple(specs)


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings once at startup.

    With no explicit mapping, a ``.env`` file found from the working directory is
    loaded first (existing variables win) and ``os.environ`` is used.
    """
    if env is None:
        dotenv_path = find_dotenv(usecwd=True)
        if dotenv_path:
            load_dotenv(dotenv_path, override=False)
        env = os.environ
    lo = _int(env, "SIMULATED_DELAY_MIN_MS", 1000)
    hi = _int(env, "SIMULATED_DELAY_MAX_MS", 3000)
    if lo > hi:
        raise ConfigError("SIMULATED_DELAY_MIN_MS must not exceed SIMULATED_DELAY_MAX_MS")
    max_tokens = _int(env, "MAX_OUTPUT_TOKENS", 500)
    if max_tokens == 0:
        raise ConfigError("MAX_OUTPUT_TOKENS must be positive")
    origins = tuple(o.strip() for o in (env.get("CORS_ORIGINS") or "*").split(",") if o.strip())
    return Settings(
        providers=build_provider_specs(env),
        max_output_tokens=max_tokens,
        simulated_delay_ms=(lo, hi),
        request_timeout_s=_float(env, "REQUEST_TIMEOUT_S", 60.0),
        log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        cors_origins=origins or ("*",),
    )
