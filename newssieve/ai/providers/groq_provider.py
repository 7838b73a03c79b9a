"""
Groq Text Oracle
================

Default oracle for both classification and summarization.
"""

import groq
from groq import Groq

from .base import SYSTEM_PROMPT, TextOracle
from ...utils.exceptions import AIError, ErrorCode
from ...utils.logging import get_logger_for_component


class GroqProvider(TextOracle):
    """Groq chat completions."""

    provider_name = "groq"

    def __init__(self, api_key: str, model_name: str = "qwen/qwen3-32b", **kwargs):
        super().__init__(api_key, model_name, **kwargs)
        self.client = Groq(api_key=api_key, timeout=self.timeout, max_retries=0)
        self.logger = get_logger_for_component("groq_provider")

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

        except groq.RateLimitError as e:
            self.logger.warning(f"Groq rate limit exceeded: {e}")
            raise AIError(
                f"Groq rate limit exceeded: {e}",
                provider=self.provider_name,
                error_code=ErrorCode.AI_RATE_LIMIT,
            ) from e

        except groq.APIConnectionError as e:
            self.logger.error(f"Groq connection error: {e}")
            raise AIError(
                f"Connection to Groq failed: {e}",
                provider=self.provider_name,
                error_code=ErrorCode.AI_CONNECTION_ERROR,
            ) from e

        except groq.APIStatusError as e:
            self.logger.error(f"Groq API error: {e.status_code} - {e.message}")
            code = ErrorCode.AI_INVALID_CREDENTIALS if e.status_code == 401 else ErrorCode.AI_API_ERROR
            raise AIError(
                f"Groq API error: {e.status_code} - {e.message}",
                provider=self.provider_name,
                error_code=code,
            ) from e
