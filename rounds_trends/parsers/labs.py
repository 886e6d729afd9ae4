import re
from typing import Dict, List, Optional, Pattern, Sequence

from rounds_trends.commons.types import LabResult

from .base import parse_float
from .models import Quantity


def _matcher(*labels: str) -> Pattern:
    # etiqueta, separador opcional (':' o '='), número decimal (grupo 1)
    alts = "|".join(labels)
    return re.compile(rf"(?:{alts})\s*[:=]?\s*(\d+\.?\d*)", re.IGNORECASE)


LAB_QUANTITIES: Dict[str, Quantity] = {
    "creatinine": Quantity(key="creatinine", label="Creatinine", unit="mg/dL", color="#8b5cf6"),
    "hemoglobin": Quantity(key="hemoglobin", label="Hemoglobin", unit="g/dL", color="#ec4899"),
    "wbc": Quantity(key="wbc", label="WBC", unit="K/uL", color="#10b981"),
    "sodium": Quantity(key="sodium", label="Sodium", unit="mEq/L", color="#f59e0b"),
}

# Para agregar un analito: una entrada aquí y otra en LAB_QUANTITIES
LAB_MATCHERS: Dict[str, Pattern] = {
    "creatinine": _matcher("Cr", "Creatinine", "Creat"),
    "hemoglobin": _matcher("Hb", "Hgb", "Hemoglobin"),
    "wbc": _matcher("WBC", "Leukocytes"),
    "sodium": _matcher("Na", "Sodium"),
}


def _first_match(text: str, key: str) -> Optional[str]:
    m = LAB_MATCHERS[key].search(text or "")
    return m.group(1) if m else None


def extract_lab_series(labs: Sequence[LabResult], key: str) -> List[float]:
    """Scan each lab text and keep the first value reported for ``key``.

    A sample without a match contributes nothing: no zero, no gap marker.
    """
    series: List[float] = []
    for lab in labs:
        value = parse_float(_first_match(lab.values, key))
        if value is not None:
            series.append(value)
    return series


def latest_lab_value(labs: Sequence[LabResult], key: str, placeholder: str = "--") -> str:
    if not labs:
        return placeholder
    return _first_match(labs[-1].values, key) or placeholder
