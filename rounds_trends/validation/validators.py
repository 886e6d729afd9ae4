# rounds_trends/validation/validators.py
from typing import Any, Dict, Union

from pydantic import BaseModel, ConfigDict, TypeAdapter, field_validator

from rounds_trends.commons.types import PatientRecord, Settings

_JSON_OBJECT = TypeAdapter(Dict[str, Any])


class RecordEnvelope(BaseModel):
    """Algunos exportes envuelven al paciente: {"patient": {...}}."""

    model_config = ConfigDict(extra="ignore")

    patient: PatientRecord

    @field_validator("patient", mode="before")
    @classmethod
    def _not_empty(cls, v: Any):
        if not v:
            raise ValueError("El registro del paciente está vacío")
        return v


def validate_patient_record_or_raise(payload: Union[str, bytes, Dict[str, Any]]) -> PatientRecord:
    """Construye el modelo y levanta ValidationError si algo falta/está mal.

    Accepts raw JSON text or an already-decoded dict, bare or wrapped
    in ``{"patient": {...}}``.
    """
    if isinstance(payload, (str, bytes)):
        data = _JSON_OBJECT.validate_json(payload)
    else:
        data = _JSON_OBJECT.validate_python(payload)

    if "patient" in data and "vitals" not in data and "labs" not in data:
        return RecordEnvelope.model_validate(data).patient
    return PatientRecord.model_validate(data)


def validate_settings_or_raise(cfg: Dict[str, Any]) -> Settings:
    return Settings.model_validate(cfg or {})
