"""
Google Gemini Text Oracle
=========================

Gemini through the ``google-generativeai`` SDK.
"""

import google.generativeai as genai
from google.generativeai.types import HarmCategory, HarmBlockThreshold

from .base import SYSTEM_PROMPT, TextOracle
from ...utils.exceptions import AIError, ErrorCode
from ...utils.logging import get_logger_for_component


class GeminiProvider(TextOracle):
    """Gemini generate_content calls."""

    provider_name = "gemini"

    def __init__(self, api_key: str, model_name: str = "gemini-2.0-flash", **kwargs):
        super().__init__(api_key, model_name, **kwargs)
        genai.configure(api_key=api_key)
        # News about conflict and crime must not be blocked before classification
        self.model = genai.GenerativeModel(
            model_name=model_name,
            system_instruction=SYSTEM_PROMPT,
            safety_settings={
                HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_NONE,
                HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_NONE,
                HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_NONE,
                HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_NONE,
            },
        )
        self.logger = get_logger_for_component("gemini_provider")

    def _complete(self, prompt: str):
        try:
            response = self.model.generate_content(
                prompt,
                generation_config=genai.types.GenerationConfig(
                    temperature=self.temperature,
                    max_output_tokens=self.max_tokens,
                ),
                request_options={"timeout": self.timeout},
            )
        except Exception as e:
            message = str(e).lower()
            if "quota" in message or "rate limit" in message:
                code = ErrorCode.AI_RATE_LIMIT
            elif "api key" in message or "authentication" in message:
                code = ErrorCode.AI_INVALID_CREDENTIALS
            else:
                code = ErrorCode.AI_API_ERROR
            self.logger.error(f"Gemini API error: {e}")
            raise AIError(f"Gemini API error: {e}", provider=self.provider_name, error_code=code) from e

        try:
            return response.text
        except ValueError as e:
            # Raised when the candidate was blocked or carries no text part
            raise AIError(
                f"Gemini response blocked or empty: {e}",
                provider=self.provider_name,
                error_code=ErrorCode.AI_EMPTY_RESPONSE,
            ) from e
