"""
NewsSieve - Feed Ingestion and AI Filtering
===========================================

Pulls items from RSS/Atom feeds, keeps the newsworthy ones according to an
AI classifier, condenses long articles and stores them as text records.

Main Components:
- Ingestion: HTTP transport, feed parsing, HTML cleaning
- Processing: content resolution, footer scrubbing, length gate, orchestration
- AI: title classification and summarization over Groq/Gemini/DeepSeek/Cerebras
- Storage: idempotent file-based record persistence
"""

__version__ = "1.0.0"
__author__ = "NewsSieve Development Team"
__description__ = "Feed ingestion and AI filtering pipeline"

from .config.settings import get_settings
from .utils.logging import configure_application_logging, get_logger_for_component
from .utils.exceptions import NewsSieveError

__all__ = [
    "get_settings",
    "configure_application_logging",
    "get_logger_for_component",
    "NewsSieveError",
]
