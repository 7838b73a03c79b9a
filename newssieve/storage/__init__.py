"""
NewsSieve Storage Layer
=======================

File-based collection store and the news record repository.
"""

from .collection_store import FileCollectionStore
from .news_repository import NewsRepository

__all__ = ["FileCollectionStore", "NewsRepository"]
