"""
Greedy word wrapping.

License: MIT
"""

from dataclasses import dataclass
from typing import List as ListType

from consent_pdf.measure import TextMeasurer


@dataclass(frozen=True)
class Line:
    """One wrapped line of text."""
    text: str
    width: float
    oversized: bool = False  # a single token wider than the content width


class LineWrapper:
    """
    Packs words into lines that fit a content width.

    Words are never broken. A word wider than the content width is placed
    alone on its own line and the line is flagged ``oversized``.
    """

    def __init__(self, measurer: TextMeasurer):
        self.measurer = measurer

    def wrap(self, text: str, font: str, size: float, max_width: float) -> ListType[Line]:
        """
        Wrap text into lines no wider than max_width.

        Args:
            text: Text to wrap; any run of whitespace separates words
            font: Font weight ("regular" or "bold")
            size: Font size in points
            max_width: Available width in points

        Returns:
            Wrapped lines in reading order (empty for blank text)
        """
        lines: ListType[Line] = []
        buffer = ""

        for token in text.split():
            candidate = f"{buffer} {token}" if buffer else token
            if buffer and self.measurer.measure(candidate, font, size) > max_width:
                lines.append(self._seal(buffer, font, size, max_width))
                buffer = token
            else:
                buffer = candidate

        if buffer:
            lines.append(self._seal(buffer, font, size, max_width))

        return lines

    def _seal(self, text: str, font: str, size: float, max_width: float) -> Line:
        width = self.measurer.measure(text, font, size)
        return Line(text=text, width=width, oversized=width > max_width)
