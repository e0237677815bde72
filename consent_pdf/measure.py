"""
Font loading and text measurement.

Fonts are resolved once and shared read-only between renders. Measurement
is a pure function of (text, weight, size) backed by ReportLab's font
metrics.

License: MIT
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import FrozenSet, Optional

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from consent_pdf.config import settings
from consent_pdf.errors import ConfigurationError, RenderIOError
from consent_pdf.styles import ALLOWED_FONT_SIZES, FONT_WEIGHTS, fonts

logger = logging.getLogger(__name__)

CUSTOM_REGULAR_NAME = "ConsentSans"
CUSTOM_BOLD_NAME = "ConsentSans-Bold"


@dataclass(frozen=True)
class FontSet:
    """Resolved face names for the two supported weights."""
    regular: str
    bold: str

    def face(self, weight: str) -> str:
        """Return the registered face name for a weight."""
        if weight not in FONT_WEIGHTS:
            raise ConfigurationError(f"Unsupported font weight '{weight}'")
        return getattr(self, weight)


def _register_ttf(name: str, path: str) -> str:
    try:
        pdfmetrics.registerFont(TTFont(name, path))
    except Exception as e:
        raise RenderIOError(f"Could not load font '{path}': {e}") from e
    logger.info(f"Registered font {name} from {path}")
    return name


def _resolve(name: str) -> str:
    try:
        pdfmetrics.getFont(name)
    except Exception as e:
        raise RenderIOError(f"Font '{name}' is not available: {e}") from e
    return name


def load_fonts(regular_path: Optional[str] = None, bold_path: Optional[str] = None) -> FontSet:
    """
    Load the regular and bold faces.

    Args:
        regular_path: Optional TrueType file for the regular weight
        bold_path: Optional TrueType file for the bold weight

    Returns:
        FontSet with face names usable by ReportLab

    Raises:
        RenderIOError: If a face cannot be registered or resolved
    """
    regular = _register_ttf(CUSTOM_REGULAR_NAME, regular_path) if regular_path else fonts.regular
    if bold_path:
        bold = _register_ttf(CUSTOM_BOLD_NAME, bold_path)
    elif regular_path:
        bold = regular
    else:
        bold = fonts.bold
    return FontSet(regular=_resolve(regular), bold=_resolve(bold))


@lru_cache(maxsize=None)
def default_fonts() -> FontSet:
    """Fonts configured for this process, loaded on first use."""
    return load_fonts(settings.font_regular_path, settings.font_bold_path)


class TextMeasurer:
    """Measures text runs for a fixed font set and size set."""

    def __init__(self, font_set: FontSet, sizes: FrozenSet[float] = ALLOWED_FONT_SIZES):
        self.font_set = font_set
        self.sizes = sizes

    def measure(self, text: str, font: str, size: float) -> float:
        """
        Return the rendered width of a text run in points.

        Raises:
            ConfigurationError: If the weight or size is not part of the template
        """
        if size not in self.sizes:
            raise ConfigurationError(f"Unsupported font size {size}")
        return pdfmetrics.stringWidth(text, self.font_set.face(font), size)
