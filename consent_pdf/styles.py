"""
Style tokens and design configuration for consent documents.

This module defines the design tokens used by the consent layout: font
faces, sizes, colors, spacing and page geometry. All tokens are frozen so
they can be shared between concurrent renders.

License: MIT
"""

from dataclasses import astuple, dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class FontConfig:
    """Built-in font faces (two weights only)."""
    regular: str = "Helvetica"
    bold: str = "Helvetica-Bold"


@dataclass(frozen=True)
class FontSizes:
    """Font sizes in points."""
    title: int = 16
    subtitle: int = 11
    heading: int = 11
    body: int = 10
    small: int = 8


@dataclass(frozen=True)
class Colors:
    """Color palette in RGB tuples (0-1 range for ReportLab)."""

    # Brand
    brand_teal: Tuple[float, float, float] = (0.0, 0.412, 0.424)  # #00696C

    # Text
    text_primary: Tuple[float, float, float] = (0.169, 0.169, 0.169)  # #2B2B2B
    text_muted: Tuple[float, float, float] = (0.416, 0.416, 0.416)  # #6A6A6A

    # Lines
    line_light: Tuple[float, float, float] = (0.839, 0.827, 0.808)  # #D6D3CE
    line_strong: Tuple[float, float, float] = (0.169, 0.169, 0.169)  # #2B2B2B


@dataclass(frozen=True)
class Spacing:
    """Spacing values in points."""
    leading: int = 4  # added to the font size to get the line height

    section_gap: int = 16
    paragraph_gap: int = 10
    clause_title_gap: int = 2
    label_width: int = 150
    signature_gap: int = 6
    rule_height: int = 6


@dataclass(frozen=True)
class PageConfig:
    """Page size configurations in points (1 pt = 1/72 inch)."""

    # A4: 210 x 297 mm
    a4_width: float = 595.27
    a4_height: float = 841.89

    # LETTER: 8.5 x 11 inches
    letter_width: float = 612.0
    letter_height: float = 792.0

    default_margin_mm: float = 20.0
    footer_offset_mm: float = 10.0

    @staticmethod
    def mm_to_points(mm: float) -> float:
        """Convert millimeters to points."""
        return mm * 2.83465

    def size_for(self, page_size: str) -> Tuple[float, float]:
        """Return (width, height) for a named page size."""
        if page_size == "LETTER":
            return self.letter_width, self.letter_height
        return self.a4_width, self.a4_height


# Signature box, in millimeters
SIGNATURE_BOX: Dict[str, float] = {
    "width_mm": 70.0,
    "height_mm": 28.0,
}

FALLBACK_SIGNATURE_TEXT = "[Firma no disponible]"

FONT_WEIGHTS = ("regular", "bold")


# Global style instances (read-only singletons)
fonts = FontConfig()
font_sizes = FontSizes()
colors = Colors()
spacing = Spacing()
page_config = PageConfig()

ALLOWED_FONT_SIZES = frozenset(astuple(font_sizes))


def line_height(size: float) -> float:
    """Vertical space taken by one line of text at the given size."""
    return size + spacing.leading
