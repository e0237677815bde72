"""
Pydantic models for consent records.

These models define the schema of a signed consent submission and validate
it before it reaches the renderer. Legacy field names are mapped onto the
canonical schema by ``consent_pdf.legacy`` before validation.

License: MIT
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, computed_field, model_validator

from consent_pdf.legacy import normalize_legacy_fields

MAJORITY_AGE = 18

GUARDIAN_FIELDS = ("guardian_name", "guardian_id", "guardian_relation")


class Guardian(BaseModel):
    """Legal representative of a minor."""
    model_config = ConfigDict(frozen=True)

    name: str
    id_number: str
    relation: str


class Demographics(BaseModel):
    """Demographic answers of the consent form."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    full_name: str = Field(..., min_length=1, description="Full name of the subject")
    id_number: str = Field(..., min_length=1, description="Identification number")
    id_type: str = Field(..., min_length=1, description="Identification document type")
    age: int = Field(..., ge=0, le=130, description="Age in years")
    email: EmailStr = Field(..., description="Contact email")
    phone: Optional[str] = Field(default=None, description="Contact phone")
    address: Optional[str] = Field(default=None, description="Street address")
    city: Optional[str] = Field(default=None, description="City")
    department: Optional[str] = Field(default=None, description="Department or state")
    country: Optional[str] = Field(default=None, description="Country")
    emergency_contact_name: Optional[str] = Field(default=None, description="Emergency contact")
    emergency_contact_phone: Optional[str] = Field(default=None, description="Emergency contact phone")
    guardian_name: Optional[str] = Field(default=None, description="Guardian name (minors only)")
    guardian_id: Optional[str] = Field(default=None, description="Guardian identification (minors only)")
    guardian_relation: Optional[str] = Field(default=None, description="Guardian relationship (minors only)")

    @model_validator(mode="after")
    def require_guardian_for_minors(self):
        """Guardian fields are mandatory when the subject is under age."""
        if self.age < MAJORITY_AGE:
            missing = [name for name in GUARDIAN_FIELDS if not getattr(self, name)]
            if missing:
                raise ValueError(f"Guardian fields required for minors: {', '.join(missing)}")
        return self


class ConsentRecord(BaseModel):
    """One signed consent submission."""
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "demographics": {
                    "full_name": "Laura Gómez",
                    "id_number": "1020304050",
                    "id_type": "CC",
                    "age": 34,
                    "email": "laura@example.com",
                    "city": "Medellín",
                },
                "signature_data_uri": "data:image/png;base64,iVBORw0KGgo...",
                "submitted_at": "2025-03-14T10:30:00Z",
            }
        },
    )

    demographics: Demographics
    signature_data_uri: str = Field(..., min_length=1, description="PNG signature as a data URI")
    submitted_at: datetime = Field(..., description="Submission timestamp (ISO-8601)")

    @model_validator(mode="before")
    @classmethod
    def map_legacy_fields(cls, data):
        return normalize_legacy_fields(data)

    @computed_field
    @property
    def is_minor(self) -> bool:
        return self.demographics.age < MAJORITY_AGE

    @property
    def guardian(self) -> Optional[Guardian]:
        """Guardian of a minor subject; always None for adults."""
        if not self.is_minor:
            return None
        d = self.demographics
        return Guardian(name=d.guardian_name, id_number=d.guardian_id, relation=d.guardian_relation)