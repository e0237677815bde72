"""
Informed consent PDF generation.

License: MIT
"""

from consent_pdf.models import ConsentRecord
from consent_pdf.renderer import ConsentRenderer, render_consent

__all__ = ["ConsentRecord", "ConsentRenderer", "render_consent"]
__version__ = "1.0.0"
