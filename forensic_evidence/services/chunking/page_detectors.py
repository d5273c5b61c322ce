"""Page boundary detection for OCR text.

OCR pipelines mark page breaks in several ways. Each detector recognises one
convention and returns the page bodies it finds. Detectors are tried in
priority order and the first one that matches anywhere in the text is used
for the whole document.
"""

import re
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from forensic_evidence.services.chunking.models import PageSpan
from forensic_evidence.utils.logging import get_logger

LOGGER = get_logger(__name__)


class PageBoundaryDetector(ABC):
    """Strategy for recognising one page-break convention."""

    name: str = "detector"

    @abstractmethod
    def detect(self, text: str) -> Optional[List[PageSpan]]:
        """Return page bodies, or None when the convention is absent.

        Args:
            text: Full document text

        Returns:
            Ordered page spans, or None if no boundary of this kind exists
        """


class NumberedMarkerDetector(PageBoundaryDetector):
    """Marker lines carrying a page number, e.g. ``--- PAGE 3 ---``.

    Marker text belongs to no page. A non-blank preamble before the first
    marker becomes page 1. Page numbers follow the markers while they keep
    increasing; otherwise the previous page number plus one is used.
    """

    def __init__(self, name: str, pattern: str):
        self.name = name
        self.pattern = re.compile(pattern, re.IGNORECASE | re.MULTILINE)

    def detect(self, text: str) -> Optional[List[PageSpan]]:
        matches = list(self.pattern.finditer(text))
        if not matches:
            return None

        spans: List[PageSpan] = []
        previous_page = 0

        preamble_end = matches[0].start()
        if text[:preamble_end].strip():
            spans.append(PageSpan(page_number=1, start=0, end=preamble_end))
            previous_page = 1

        for i, match in enumerate(matches):
            marker_page = int(match.group(1))
            page_number = marker_page if marker_page > previous_page else previous_page + 1
            end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
            spans.append(PageSpan(page_number=page_number, start=match.end(), end=end))
            previous_page = page_number

        return spans


class SeparatorDetector(PageBoundaryDetector):
    """Unnumbered separators such as form feeds; pages are numbered by position."""

    def __init__(self, name: str, pattern: str):
        self.name = name
        self.pattern = re.compile(pattern, re.MULTILINE)

    def detect(self, text: str) -> Optional[List[PageSpan]]:
        matches = list(self.pattern.finditer(text))
        if not matches:
            return None

        spans: List[PageSpan] = []
        start = 0
        for match in matches:
            spans.append(PageSpan(page_number=len(spans) + 1, start=start, end=match.start()))
            start = match.end()

        # A separator terminating the last page does not open a new one
        if text[start:].strip():
            spans.append(PageSpan(page_number=len(spans) + 1, start=start, end=len(text)))

        return spans


DEFAULT_DETECTORS: Tuple[PageBoundaryDetector, ...] = (
    NumberedMarkerDetector("dashed_page_marker", r"^[ \t]*---[ \t]*PAGE[ \t]*(\d+)[ \t]*---[ \t]*$"),
    NumberedMarkerDetector("bracketed_page_marker", r"^[ \t]*\[PAGE[ \t]*(\d+)\][ \t]*$"),
    NumberedMarkerDetector("equals_page_marker", r"^[ \t]*={3,}[ \t]*(\d+)[ \t]*={3,}[ \t]*$"),
    SeparatorDetector("form_feed", r"\f"),
    SeparatorDetector("dash_rule", r"^[ \t]*-{20,}[ \t]*$"),
)


def split_into_pages(
    text: str,
    detectors: Sequence[PageBoundaryDetector] = DEFAULT_DETECTORS,
) -> Tuple[List[PageSpan], Optional[str]]:
    """Split text into page bodies using the first detector that matches.

    Args:
        text: Full document text
        detectors: Detectors in priority order

    Returns:
        Tuple of (page spans, name of the detector used or None)
    """
    for detector in detectors:
        spans = detector.detect(text)
        if spans:
            LOGGER.debug(f"Detected {len(spans)} pages with {detector.name}")
            return spans, detector.name

    return [PageSpan(page_number=1, start=0, end=len(text))], None
