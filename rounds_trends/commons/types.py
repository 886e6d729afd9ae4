from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class VitalSign(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    timestamp_label: str = Field("", alias="date")
    bp: Optional[str] = ""  # "sys/dia"
    hr: Optional[int] = None
    rr: Optional[int] = None
    temp: Optional[float] = None
    o2: Optional[int] = None


class LabResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    timestamp_label: str = Field("", alias="date")
    values: Optional[str] = ""  # texto libre: "Na 138, Cr 1.1, WBC 9.5"


class PatientRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = ""
    name: str = ""
    vitals: List[VitalSign] = []
    labs: List[LabResult] = []


class SparklineCfg(BaseModel):
    width: float = 120
    height: float = 40
    margin: float = 5

    @field_validator("width", "height")
    @classmethod
    def _positive(cls, v: float):
        if v <= 0:
            raise ValueError(f"Canvas inválido: {v} debe ser > 0")
        return v

    @model_validator(mode="after")
    def _fits_margin(self):
        if self.height <= 2 * self.margin:
            raise ValueError(
                f"Canvas inválido: height {self.height} <= 2 * margin {self.margin}"
            )
        return self


class DisplayCfg(BaseModel):
    placeholder: str = "--"


class VitalsCfg(BaseModel):
    cards: List[Literal["sbp", "dbp", "hr", "rr", "temp", "spo2"]] = [
        "sbp",
        "hr",
        "temp",
        "spo2",
    ]


class FileTransportCfg(BaseModel):
    filename_glob: str = "*.json"
    svg_pattern: str = "{stem}_{key}.svg"


class TransportCfg(BaseModel):
    type: Literal["file"] = "file"
    file: FileTransportCfg = Field(default_factory=FileTransportCfg)


class PathsCfg(BaseModel):
    logs_root: str = "logs"
    inbox: str = "data/inbox"
    outbox: str = "data/outbox"
    archive: str = "data/archive"
    error: str = "data/error"


class Settings(BaseModel):
    app: Dict[str, Any] = {}
    paths: PathsCfg = Field(default_factory=PathsCfg)
    sparkline: SparklineCfg = Field(default_factory=SparklineCfg)
    display: DisplayCfg = Field(default_factory=DisplayCfg)
    vitals: VitalsCfg = Field(default_factory=VitalsCfg)
    transport: TransportCfg = Field(default_factory=TransportCfg)
