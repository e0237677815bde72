"""Typed exceptions raised while laying out and rendering consent documents.

License: MIT
"""


class ConsentPdfError(Exception):
    """Base class for consent document errors."""


class ConfigurationError(ConsentPdfError):
    """Raised when the template asks for a font weight or size that is not loaded."""


class RenderIOError(ConsentPdfError):
    """Raised when font or resource initialization fails."""


class ImageDecodeError(ConsentPdfError, ValueError):
    """Raised when a signature data URI cannot be decoded into a PNG image."""


class LayoutError(ConsentPdfError):
    """Raised when the page flow is used after it has been finished."""
