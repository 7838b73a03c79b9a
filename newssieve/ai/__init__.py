"""
NewsSieve AI Module
===================

Title classification and article summarization on top of text oracles.
"""

from .classifier import NewsClassifier, parse_classification
from .summarizer import NewsSummarizer

__all__ = ["NewsClassifier", "NewsSummarizer", "parse_classification"]
