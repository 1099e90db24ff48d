"""
Secret region extraction.

Secret blocks are delimited by marker comments:

    //START_SECRET
    pred hidden { ... }
    //END_SECRET

Markers pair positionally: the k-th start marker pairs with the k-th end
marker in scan order, regardless of nesting. A start marker without a
following end marker extends to end-of-text, so unmatched markers never
produce a malformed region.
"""

import re

from alloyshare.models.secret import SecretRegion, SecretSplit

DEFAULT_START_MARKER = "//START_SECRET"
DEFAULT_END_MARKER = "//END_SECRET"


class SecretExtractor:
    """
    Finds and strips secret regions of Alloy source text.

    Pure: no state besides the configured markers.
    """

    def __init__(
        self,
        start_marker: str = DEFAULT_START_MARKER,
        end_marker: str = DEFAULT_END_MARKER,
    ):
        """
        Initialize extractor.

        Args:
            start_marker: Text opening a secret region
            end_marker: Text closing a secret region
        """
        if not start_marker or not end_marker:
            raise ValueError("Secret markers cannot be empty")
        self.start_marker = start_marker
        self.end_marker = end_marker
        self._start_re = re.compile(re.escape(start_marker))
        self._end_re = re.compile(re.escape(end_marker))

    def find_regions(self, text: str) -> list[SecretRegion]:
        """
        List secret regions in scan order.

        Args:
            text: Raw source text

        Returns:
            Half-open [start, end) ranges; `end` is the offset of the paired
            end marker, or len(text) when it is missing or precedes the start
        """
        starts = [match.start() for match in self._start_re.finditer(text)]
        ends = [match.start() for match in self._end_re.finditer(text)]

        regions = []
        for k, start in enumerate(starts):
            end = ends[k] if k < len(ends) else None
            if end is not None and end > start:
                regions.append(SecretRegion(start=start, end=end, closed=True))
            else:
                regions.append(SecretRegion(start=start, end=len(text), closed=False))
        return regions

    def contains_secret(self, text: str) -> bool:
        """True iff at least one start marker exists."""
        return self._start_re.search(text) is not None

    def extract(self, text: str) -> SecretSplit:
        """
        Split text into its public part and its secrets.

        Each region is removed together with its closing marker. Overlapping
        regions (from nested markers) are merged before removal.

        Args:
            text: Raw source text

        Returns:
            SecretSplit with the redacted text and the removed blocks in order
        """
        spans = []
        for region in self.find_regions(text):
            end = region.end
            if region.closed:
                end = min(len(text), end + len(self.end_marker))
            spans.append((region.start, end))

        merged: list[list[int]] = []
        for start, end in sorted(spans):
            if merged and start <= merged[-1][1]:
                merged[-1][1] = max(merged[-1][1], end)
            else:
                merged.append([start, end])

        public_parts = []
        secrets = []
        cursor = 0
        for start, end in merged:
            public_parts.append(text[cursor:start])
            secrets.append(text[start:end])
            cursor = end
        public_parts.append(text[cursor:])

        return SecretSplit(public_text="".join(public_parts), secrets=secrets)


_default_extractor = SecretExtractor()


def find_secret_regions(text: str) -> list[SecretRegion]:
    """Secret regions of `text` using the default markers."""
    return _default_extractor.find_regions(text)


def contains_secret(text: str) -> bool:
    """Whether `text` holds a secret start marker (default markers)."""
    return _default_extractor.contains_secret(text)


def extract_secrets(text: str) -> SecretSplit:
    """Public text and secrets of `text` using the default markers."""
    return _default_extractor.extract(text)
