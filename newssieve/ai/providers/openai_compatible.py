"""
OpenAI-Compatible Text Oracles
==============================

DeepSeek and Cerebras expose the OpenAI chat API; both are driven through
the ``openai`` SDK with a provider-specific ``base_url``.
"""

import openai

from .base import SYSTEM_PROMPT, TextOracle
from ...utils.exceptions import AIError, ErrorCode
from ...utils.logging import get_logger_for_component


class OpenAICompatibleProvider(TextOracle):
    """Chat completions against an OpenAI-style endpoint."""

    provider_name = "openai_compatible"
    base_url = None

    def __init__(self, api_key: str, model_name: str, **kwargs):
        super().__init__(api_key, model_name, **kwargs)
        self.client = openai.OpenAI(
            api_key=api_key, base_url=self.base_url, timeout=self.timeout, max_retries=0
        )
        self.logger = get_logger_for_component(f"{self.provider_name}_provider")

    def _complete(self, prompt: str):
        try:
            response = self.client.chat.completions.create(
                model=self.model_name,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
            return response.choices[0].message.content

        except openai.RateLimitError as e:
            raise AIError(
                f"{self.provider_name} rate limit exceeded: {e}",
                provider=self.provider_name,
                error_code=ErrorCode.AI_RATE_LIMIT,
            ) from e

        except openai.APIConnectionError as e:
            raise AIError(
                f"Connection to {self.provider_name} failed: {e}",
                provider=self.provider_name,
                error_code=ErrorCode.AI_CONNECTION_ERROR,
            ) from e

        except openai.APIStatusError as e:
            code = ErrorCode.AI_INVALID_CREDENTIALS if e.status_code == 401 else ErrorCode.AI_API_ERROR
            raise AIError(
                f"{self.provider_name} API error: {e.status_code} - {e.message}",
                provider=self.provider_name,
                error_code=code,
            ) from e


class DeepSeekProvider(OpenAICompatibleProvider):
    provider_name = "deepseek"
    base_url = "https://api.deepseek.com"

    def __init__(self, api_key: str, model_name: str = "deepseek-chat", **kwargs):
        super().__init__(api_key, model_name, **kwargs)


class CerebrasProvider(OpenAICompatibleProvider):
    provider_name = "cerebras"
    base_url = "https://api.cerebras.ai/v1"

    def __init__(self, api_key: str, model_name: str = "qwen-3-32b", **kwargs):
        super().__init__(api_key, model_name, **kwargs)
