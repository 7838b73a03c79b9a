"""
News Classifier
===============

Decides from the title alone whether a news item is kept, and labels it
with a category. The oracle must answer ``flag,category``; anything else,
and any oracle failure, yields a discard with the failure category.
"""

from typing import Callable, Optional

from ..config.settings import get_settings
from ..models import CATEGORY_VOCABULARY, FAILURE_CATEGORY, Classification
from ..utils.exceptions import ClassificationError
from ..utils.logging import get_logger_for_component
from .providers import TextOracle, create_provider, strip_reasoning


CLASSIFICATION_PROMPT = """You are a news filter. Classify the news title below and decide whether it should be kept.

Step 1. Choose exactly one category from this list:
politics, finance, military, tech, society, entertainment, sports, weather, other

Step 2. Decide the flag by following these rules in order:
- If the category is sports, military or entertainment: flag = 0.
- Else if the category is politics:
    - If the story is purely internal politics of Japan, Korea or Taiwan with no link to other nations: flag = 0.
    - Else if the story concerns disciplinary action against a domestic public official or state-enterprise executive for corruption: flag = 0.
    - Otherwise: flag = 1.
- Else if the category is tech:
    - If the story is primarily about a single consumer product or software release: flag = 0.
    - Otherwise: flag = 1.
- Otherwise: flag = 1.

Output format: reply with a single line "flag,category" and nothing else, for example "1,politics" or "0,sports".
If you cannot decide, reply "0,other".

News title: """


def parse_classification(response_text: str) -> Classification:
    """
    Parse an oracle reply into a Classification.

    The flag must be exactly ``0`` or ``1``. The category is everything after
    the first comma, so it may itself contain commas.

    Raises:
        ClassificationError: If the reply does not follow the contract
    """
    text = strip_reasoning(response_text)
    if "," not in text:
        raise ClassificationError("Classification reply has no comma", response_text=text)

    flag, category = text.split(",", 1)
    flag = flag.strip()
    category = category.strip()

    if flag not in ("0", "1"):
        raise ClassificationError(f"Invalid classification flag: {flag!r}", response_text=text)
    if not category or category == FAILURE_CATEGORY:
        raise ClassificationError("Missing classification category", response_text=text)

    return Classification(keep=flag == "1", category=category)


class NewsClassifier:
    """Title classifier with a fail-closed policy."""

    def __init__(
        self,
        oracle: Optional[TextOracle] = None,
        oracle_factory: Optional[Callable[[], TextOracle]] = None,
        settings=None,
    ):
        """
        Args:
            oracle: Ready oracle (tests, custom providers)
            oracle_factory: Builds the oracle on first use; defaults to the
                configured classification provider
            settings: Application settings
        """
        self.settings = settings or get_settings()
        self._oracle = oracle
        self._oracle_factory = oracle_factory or (
            lambda: create_provider(
                self.settings.ai.classification_provider,
                self.settings.ai.classification_model,
                self.settings,
            )
        )
        self.logger = get_logger_for_component("classifier")

    def build_prompt(self, title: str) -> str:
        return CLASSIFICATION_PROMPT + title

    def classify(self, title: str) -> Classification:
        """
        Classify a news title.

        Args:
            title: Item title

        Returns:
            Classification; ``Classification.failed()`` on any error
        """
        try:
            if self._oracle is None:
                self._oracle = self._oracle_factory()
            reply = self._oracle.ask(self.build_prompt(title))
            result = parse_classification(reply)
        except Exception as e:
            self.logger.warning(f"Classification failed for '{title}': {e}")
            return Classification.failed()

        if result.category not in CATEGORY_VOCABULARY:
            self.logger.warning(
                f"Category '{result.category}' for '{title}' is outside the known vocabulary"
            )
        self.logger.debug(f"Classified '{title}' as {result.category} (keep={result.keep})")
        return result
