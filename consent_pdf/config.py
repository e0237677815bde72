"""
Service configuration loaded from the environment.

Operational values (practice name, sender address, notification recipient,
SMTP credentials, storage location) live here so the rendering core never
hardcodes them. Every key can be set with a ``CONSENT_`` prefixed variable.

License: MIT
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Document settings
    practice_name: str = "Caminos del Ser"
    page_size: Literal["A4", "LETTER"] = "A4"
    margin_mm: float = 20.0

    # Optional TrueType faces (defaults to the built-in Helvetica pair)
    font_regular_path: Optional[str] = None
    font_bold_path: Optional[str] = None

    # Persistence
    storage_dir: Path = Path("/tmp/consent-records")

    # Email settings
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_from: str = "CInformado <noreply@example.com>"
    practitioner_email: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="CONSENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
