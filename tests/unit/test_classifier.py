"""
Unit Tests for News Classification
==================================

Tests for the ``flag,category`` reply contract and the fail-closed policy.
"""

import pytest

from newssieve.ai.classifier import CLASSIFICATION_PROMPT, NewsClassifier, parse_classification
from newssieve.models import FAILURE_CATEGORY, Classification
from newssieve.utils.exceptions import AIError, ClassificationError, ConfigurationError

from conftest import FakeOracle


class TestParseClassification:
    """Test reply parsing."""

    def test_keep_reply(self):
        assert parse_classification("1,finance") == Classification(keep=True, category="finance")

    def test_discard_reply(self):
        assert parse_classification("0,sports") == Classification(keep=False, category="sports")

    def test_whitespace_is_trimmed(self):
        assert parse_classification("  1 , tech \n") == Classification(keep=True, category="tech")

    def test_reasoning_block_is_stripped(self):
        reply = "<think>The title mentions interest rates, so finance.</think>\n1,finance"

        assert parse_classification(reply) == Classification(keep=True, category="finance")

    def test_category_may_contain_commas(self):
        result = parse_classification("1,politics, economy")

        assert result.category == "politics, economy"

    @pytest.mark.parametrize("reply", ["maybe", "", "yes,finance", "2,tech", ",other", "1,", "1,classification failed"])
    def test_malformed_replies_raise(self, reply):
        with pytest.raises(ClassificationError):
            parse_classification(reply)


class TestNewsClassifier:
    """Test classifier behaviour around the oracle."""

    @pytest.fixture(autouse=True)
    def _settings(self, settings):
        self.settings = settings

    def test_classify_keeps_item(self):
        oracle = FakeOracle(["1,finance"])
        classifier = NewsClassifier(oracle=oracle, settings=self.settings)

        result = classifier.classify("Central bank cuts rates")

        assert result.keep is True
        assert result.category == "finance"
        assert oracle.prompts == [CLASSIFICATION_PROMPT + "Central bank cuts rates"]

    def test_classify_discards_item(self):
        classifier = NewsClassifier(oracle=FakeOracle(["0,sports"]), settings=self.settings)

        result = classifier.classify("Local team wins the cup")

        assert result == Classification(keep=False, category="sports")

    def test_malformed_reply_fails_closed(self):
        classifier = NewsClassifier(oracle=FakeOracle(["maybe"]), settings=self.settings)

        result = classifier.classify("Anything")

        assert result.keep is False
        assert result.category == FAILURE_CATEGORY

    def test_oracle_error_fails_closed(self):
        oracle = FakeOracle([AIError("rate limited", provider="fake")])
        classifier = NewsClassifier(oracle=oracle, settings=self.settings)

        assert classifier.classify("Anything") == Classification.failed()

    def test_missing_credential_fails_closed(self):
        def factory():
            raise ConfigurationError("Missing API key for groq")

        classifier = NewsClassifier(oracle_factory=factory, settings=self.settings)

        assert classifier.classify("Anything") == Classification.failed()

    def test_oracle_built_once(self):
        built = []

        def factory():
            oracle = FakeOracle(lambda prompt: "1,tech")
            built.append(oracle)
            return oracle

        classifier = NewsClassifier(oracle_factory=factory, settings=self.settings)
        classifier.classify("First")
        classifier.classify("Second")

        assert len(built) == 1
        assert len(built[0].prompts) == 2

    def test_unknown_category_is_kept_as_reported(self):
        classifier = NewsClassifier(oracle=FakeOracle(["1,science"]), settings=self.settings)

        assert classifier.classify("New exoplanet found") == Classification(keep=True, category="science")


class TestClassificationModel:

    def test_kept_item_cannot_carry_failure_category(self):
        with pytest.raises(ValueError):
            Classification(keep=True, category=FAILURE_CATEGORY)

    def test_prompt_lists_every_category(self):
        for category in ("politics", "finance", "military", "tech", "society",
                         "entertainment", "sports", "weather", "other"):
            assert category in CLASSIFICATION_PROMPT
