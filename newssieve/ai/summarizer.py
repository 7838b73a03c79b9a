"""
News Summarizer
===============

Condenses over-length article bodies. On any failure the original content
is returned unchanged so the pipeline keeps moving.
"""

from typing import Callable, Optional

from ..config.settings import get_settings
from ..utils.logging import get_logger_for_component
from .providers import TextOracle, create_provider, strip_reasoning


SUMMARY_PROMPT = """Summarize the following news article in no more than {budget} characters.

Requirements:
1. Keep the core facts: who, what, when, where and the key numbers.
2. Do not add opinions, commentary or analysis.
3. Do not mention reporters, producers, authors, editors or sources of the text.
4. Output the summary directly, without any heading or prefix.

Article:
"""


class NewsSummarizer:
    """Oracle-backed condensation with pass-through on failure."""

    def __init__(
        self,
        oracle: Optional[TextOracle] = None,
        oracle_factory: Optional[Callable[[], TextOracle]] = None,
        settings=None,
    ):
        self.settings = settings or get_settings()
        self._oracle = oracle
        self._oracle_factory = oracle_factory or (
            lambda: create_provider(
                self.settings.ai.summarization_provider,
                self.settings.ai.summarization_model,
                self.settings,
            )
        )
        self.logger = get_logger_for_component("summarizer")

    def build_prompt(self, content: str) -> str:
        return SUMMARY_PROMPT.format(budget=self.settings.ai.summary_char_budget) + content

    def summarize(self, content: str) -> str:
        """
        Condense ``content``.

        Args:
            content: Resolved article body

        Returns:
            The summary, or ``content`` itself if the oracle fails
        """
        try:
            if self._oracle is None:
                self._oracle = self._oracle_factory()
            summary = strip_reasoning(self._oracle.ask(self.build_prompt(content)))
        except Exception as e:
            self.logger.warning(f"Summarization failed, keeping original content: {e}")
            return content

        if not summary:
            self.logger.warning("Summarizer returned only reasoning markup, keeping original content")
            return content

        self.logger.debug(f"Summarized {len(content)} -> {len(summary)} chars")
        return summary
