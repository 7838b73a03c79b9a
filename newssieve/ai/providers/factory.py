"""Provider registry and factory for the text oracles."""

from typing import Dict, List, Type

from ...config.settings import AIProvider
from .base import TextOracle
from .gemini_provider import GeminiProvider
from .groq_provider import GroqProvider
from .openai_compatible import CerebrasProvider, DeepSeekProvider


_PROVIDER_REGISTRY: Dict[AIProvider, Type[TextOracle]] = {
    AIProvider.GROQ: GroqProvider,
    AIProvider.GEMINI: GeminiProvider,
    AIProvider.DEEPSEEK: DeepSeekProvider,
    AIProvider.CEREBRAS: CerebrasProvider,
}


def available_providers() -> List[str]:
    """Return the registered provider names."""
    return sorted(provider.value for provider in _PROVIDER_REGISTRY)


def create_provider(provider, model_name: str, settings) -> TextOracle:
    """Build an oracle from settings.

    Args:
        provider: Provider name or AIProvider
        model_name: Model to request
        settings: Application settings holding credentials and limits

    Returns:
        Ready-to-use oracle

    Raises:
        ConfigurationError: If the provider's API key is not configured
        ValueError: If the provider is unknown
    """
    try:
        provider = AIProvider(provider)
    except ValueError:
        supported = ", ".join(available_providers())
        raise ValueError(f"Unsupported provider: {provider}. Supported: {supported}")

    api_key = settings.ai.require_api_key(provider)
    builder = _PROVIDER_REGISTRY[provider]
    return builder(
        api_key,
        model_name,
        temperature=settings.ai.temperature,
        max_tokens=settings.ai.max_tokens,
        timeout=settings.processing.ai_request_timeout,
    )
