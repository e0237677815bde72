"""
Field name mapping for consent payloads.

Earlier revisions of the intake form sent the same concepts under different
names (Spanish names, camelCase names, a split first/last name). This is
the only place that knows about them: everything downstream sees the
canonical snake_case schema.

License: MIT
"""

from typing import Any, Dict

RECORD_FIELDS: Dict[str, str] = {
    "demograficos": "demographics",
    "signatureDataUri": "signature_data_uri",
    "firmaDigital": "signature_data_uri",
    "firma": "signature_data_uri",
    "submittedAtIso": "submitted_at",
    "submittedAt": "submitted_at",
    "fecha": "submitted_at",
}

DEMOGRAPHIC_FIELDS: Dict[str, str] = {
    "fullName": "full_name",
    "nombre": "full_name",
    "nombreCompleto": "full_name",
    "idNumber": "id_number",
    "cedula": "id_number",
    "numeroDocumento": "id_number",
    "documento": "id_number",
    "idType": "id_type",
    "tipoDocumento": "id_type",
    "edad": "age",
    "correo": "email",
    "telefono": "phone",
    "celular": "phone",
    "direccion": "address",
    "ciudad": "city",
    "departamento": "department",
    "pais": "country",
    "emergencyContactName": "emergency_contact_name",
    "contactoEmergencia": "emergency_contact_name",
    "emergencyContactPhone": "emergency_contact_phone",
    "telefonoEmergencia": "emergency_contact_phone",
    "guardianName": "guardian_name",
    "nombreAcudiente": "guardian_name",
    "guardianId": "guardian_id",
    "documentoAcudiente": "guardian_id",
    "guardianRelation": "guardian_relation",
    "parentescoAcudiente": "guardian_relation",
}

# (first, last) pairs joined into full_name
SPLIT_NAME_FIELDS = (
    ("nombres", "apellidos"),
    ("firstName", "lastName"),
)


def _rename(data: Dict[str, Any], mapping: Dict[str, str]) -> Dict[str, Any]:
    renamed: Dict[str, Any] = {}
    # Canonical names are copied first so they win over legacy ones
    for key, value in data.items():
        if key not in mapping:
            renamed[key] = value
    for key, value in data.items():
        if key in mapping:
            renamed.setdefault(mapping[key], value)
    return renamed


def _join_split_name(data: Dict[str, Any]) -> Dict[str, Any]:
    if data.get("full_name"):
        return data
    for first_key, last_key in SPLIT_NAME_FIELDS:
        parts = [str(data.get(key) or "").strip() for key in (first_key, last_key)]
        if any(parts):
            data = {k: v for k, v in data.items() if k not in (first_key, last_key)}
            data["full_name"] = " ".join(part for part in parts if part)
            return data
    return data


def normalize_legacy_fields(payload: Any) -> Any:
    """
    Map legacy and camelCase field names onto the canonical schema.

    Args:
        payload: Raw consent payload (non-dict values are returned untouched)

    Returns:
        A new dict using canonical names; the input is not modified
    """
    if not isinstance(payload, dict):
        return payload

    record = _rename(payload, RECORD_FIELDS)
    demographics = record.get("demographics")
    if isinstance(demographics, dict):
        record["demographics"] = _join_split_name(_rename(demographics, DEMOGRAPHIC_FIELDS))
    return record
