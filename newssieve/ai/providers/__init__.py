"""
AI Providers Module
===================

Text oracles and the factory that builds them from settings.
"""

from .base import TextOracle, strip_reasoning
from .factory import create_provider

__all__ = [
    "TextOracle",
    "strip_reasoning",
    "create_provider",
]
