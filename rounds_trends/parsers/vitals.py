from typing import Callable, Dict, List, Optional, Sequence

from rounds_trends.commons.types import VitalSign

from .base import _bp_token, format_number, parse_positive_int
from .models import Quantity

VITAL_QUANTITIES: Dict[str, Quantity] = {
    "sbp": Quantity(key="sbp", label="SBP", unit="mmHg", color="#ef4444"),
    "dbp": Quantity(key="dbp", label="DBP", unit="mmHg", color="#b91c1c"),
    "hr": Quantity(key="hr", label="HR", unit="bpm", color="#3b82f6"),
    "rr": Quantity(key="rr", label="RR", unit="/min", color="#6366f1"),
    "temp": Quantity(key="temp", label="Temp", unit="°C", color="#f97316"),
    "spo2": Quantity(key="spo2", label="SpO2", unit="%", color="#06b6d4"),
}


def _systolic(v: VitalSign) -> Optional[float]:
    num = parse_positive_int(_bp_token(v.bp, 0))
    return float(num) if num is not None else None


def _diastolic(v: VitalSign) -> Optional[float]:
    num = parse_positive_int(_bp_token(v.bp, 1))
    return float(num) if num is not None else None


def _typed(field: str) -> Callable[[VitalSign], Optional[float]]:
    # hr/rr/o2/temp ya vienen tipados: se incluyen tal cual (también 0)
    def read(v: VitalSign) -> Optional[float]:
        value = getattr(v, field)
        return float(value) if value is not None else None

    return read


_READERS: Dict[str, Callable[[VitalSign], Optional[float]]] = {
    "sbp": _systolic,
    "dbp": _diastolic,
    "hr": _typed("hr"),
    "rr": _typed("rr"),
    "temp": _typed("temp"),
    "spo2": _typed("o2"),
}


def extract_vital_series(vitals: Sequence[VitalSign], key: str) -> List[float]:
    """Serie numérica de una magnitud vital, en orden de ingreso.

    Samples where the quantity is absent or unparsable are skipped.
    """
    read = _READERS[key]
    series: List[float] = []
    for v in vitals:
        value = read(v)
        if value is not None:
            series.append(value)
    return series


def latest_vital_value(vitals: Sequence[VitalSign], key: str, placeholder: str = "--") -> str:
    """Valor a mostrar, leído SOLO del último registro (no de la serie)."""
    if not vitals:
        return placeholder
    last = vitals[-1]
    if key in ("sbp", "dbp"):
        token = _bp_token(last.bp, 0 if key == "sbp" else 1)
        return token or placeholder
    field = "o2" if key == "spo2" else key
    value = getattr(last, field)
    return format_number(value) if value is not None else placeholder
