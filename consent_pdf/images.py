"""
Signature image decoding.

A signature arrives as ``data:image/png;base64,<payload>``. Anything that
cannot be decoded into a PNG is replaced by a fallback text line: the
written record of consent is the primary artifact, the image is
supplementary.

License: MIT
"""

import base64
import binascii
import io
import logging
import re
from dataclasses import dataclass
from typing import Tuple, Union

from reportlab.lib.utils import ImageReader

from consent_pdf.errors import ImageDecodeError
from consent_pdf.styles import FALLBACK_SIGNATURE_TEXT

logger = logging.getLogger(__name__)

DATA_URI_PATTERN = re.compile(r"^data:image/png;base64,(?P<payload>.*)$", re.DOTALL)
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@dataclass(frozen=True)
class EmbeddedImage:
    """Decoded PNG bytes scaled to fit the target box."""
    data: bytes
    width: float
    height: float


@dataclass(frozen=True)
class Fallback:
    """Placeholder used when the signature cannot be decoded."""
    reason: str
    text: str = FALLBACK_SIGNATURE_TEXT


def decode_signature(data_uri: str) -> Tuple[bytes, int, int]:
    """
    Decode a PNG data URI.

    Args:
        data_uri: String of the form ``data:image/png;base64,<payload>``

    Returns:
        Tuple of (png_bytes, pixel_width, pixel_height)

    Raises:
        ImageDecodeError: If the URI, the base64 payload or the PNG is invalid
    """
    match = DATA_URI_PATTERN.match((data_uri or "").strip())
    if not match:
        raise ImageDecodeError("not a PNG data URI")

    payload = re.sub(r"\s+", "", match.group("payload"))
    if not payload:
        raise ImageDecodeError("empty payload")

    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"invalid base64: {e}") from e

    if not raw.startswith(PNG_SIGNATURE):
        raise ImageDecodeError("payload is not a PNG image")

    try:
        reader = ImageReader(io.BytesIO(raw))
        width, height = reader.getSize()
        # Force a full decode so truncated pixel data fails here, not in the PDF writer
        reader.getRGBData()
    except Exception as e:
        raise ImageDecodeError(f"unreadable PNG: {e}") from e

    if width <= 0 or height <= 0:
        raise ImageDecodeError("image has no pixels")

    return raw, width, height


class ImageEmbedder:
    """Turns signature data URIs into embeddable images or fallbacks."""

    def embed(self, data_uri: str, target_width: float,
              target_height: float) -> Union[EmbeddedImage, Fallback]:
        """
        Decode the signature and fit it inside the target box.

        Decoding problems never propagate; they produce a Fallback.
        """
        try:
            raw, px_width, px_height = decode_signature(data_uri)
        except ImageDecodeError as e:
            logger.warning(f"Signature image unavailable, using fallback: {e}")
            return Fallback(reason=str(e))

        scale = min(target_width / px_width, target_height / px_height)
        return EmbeddedImage(data=raw, width=px_width * scale, height=px_height * scale)
