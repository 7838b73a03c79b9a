"""
Footer Scrubber
===============

Removes bylines, credits and disclaimers from the tail of an article.
Only the last ``window_lines`` lines are inspected; everything above them,
including the line immediately before the window, is returned untouched.
"""

from typing import Iterable, Optional

from ..config.settings import get_settings


# Lines containing any of these are dropped (reporter, producer, author,
# "for reference only", "all rights reserved")
BOILERPLATE_MARKERS = (
    "记者",
    "监制",
    "作者",
    "仅供参考",
    "版权所有",
    "reporter:",
    "producer:",
    "author:",
    "for reference only",
    "all rights reserved",
)

# End-of-article tokens stripped from their line
END_MARKERS = ("(完)", "（完）", "(END)")


class FooterScrubber:
    """Trailing-window boilerplate remover."""

    def __init__(
        self,
        window_lines: Optional[int] = None,
        markers: Iterable[str] = BOILERPLATE_MARKERS,
        end_markers: Iterable[str] = END_MARKERS,
    ):
        if window_lines is None:
            window_lines = get_settings().content.footer_window_lines
        self.window_lines = window_lines
        self.markers = tuple(m.lower() for m in markers)
        self.end_markers = tuple(end_markers)

    def scrub(self, text: str) -> str:
        """
        Scrub the trailing window of ``text``.

        Args:
            text: Cleaned article text

        Returns:
            Text with boilerplate lines removed, trimmed
        """
        if not text:
            return ""

        lines = text.split("\n")
        split_at = max(len(lines) - self.window_lines, 0)
        head, tail = lines[:split_at], lines[split_at:]

        kept = []
        for line in tail:
            if self._is_boilerplate(line):
                continue
            for token in self.end_markers:
                line = line.replace(token, "")
            kept.append(line.strip())

        return "\n".join(head + kept).strip()

    def _is_boilerplate(self, line: str) -> bool:
        lowered = line.lower()
        return any(marker in lowered for marker in self.markers)
