from .registry import ProviderRegistry
from .types import GenerateRequest, ProviderResponse, ProviderSpec

__all__ = ["ProviderRegistry", "GenerateRequest", "ProviderResponse", "ProviderSpec"]
