"""
Length Gate
===========

Applies the min/max content-length policy after classification.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..config.settings import get_settings
from ..models import Classification


class GateAction(str, Enum):
    DISCARD_CLASSIFIED = "discard_classified"
    DISCARD_TOO_SHORT = "discard_too_short"
    KEEP = "keep"


@dataclass(frozen=True)
class GateDecision:
    action: GateAction
    body: str = ""
    is_condensed: bool = False

    @property
    def keep(self) -> bool:
        return self.action == GateAction.KEEP


class LengthGate:
    """Discard, keep as-is, or keep condensed."""

    def __init__(self, summarizer, min_length: Optional[int] = None,
                 max_length: Optional[int] = None, settings=None):
        settings = settings or get_settings()
        self.summarizer = summarizer
        self.min_length = settings.content.min_content_length if min_length is None else min_length
        self.max_length = settings.content.max_content_length if max_length is None else max_length

    def apply(self, body: str, classification: Classification) -> GateDecision:
        """
        Decide what happens to a resolved body.

        Bodies longer than ``max_length`` are summarized and flagged as
        condensed, whether or not the summarizer succeeded. The minimum
        length check applies to the final body.
        """
        if not classification.keep:
            return GateDecision(GateAction.DISCARD_CLASSIFIED)

        if len(body) > self.max_length:
            final_body, is_condensed = self.summarizer.summarize(body), True
        else:
            final_body, is_condensed = body, False

        if len(final_body) < self.min_length:
            return GateDecision(GateAction.DISCARD_TOO_SHORT, final_body, is_condensed)

        return GateDecision(GateAction.KEEP, final_body, is_condensed)
