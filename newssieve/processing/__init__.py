"""
NewsSieve Processing Module
===========================

Content resolution, footer scrubbing, the length gate and the batch
orchestrator.
"""

from .pipeline import NewsPipeline

__all__ = ["NewsPipeline"]
