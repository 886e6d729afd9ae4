# ===============================
# File: rounds_trends/parsers/models.py
# ===============================
from dataclasses import dataclass, field
from typing import List, Literal, Optional, Tuple, Union

Point = Tuple[float, float]
TrendDirection = Literal["rising", "falling", "flat"]


@dataclass(frozen=True)
class InsufficientData:
    label: str = "Insufficient Data"


INSUFFICIENT_DATA = InsufficientData()


@dataclass(frozen=True)
class Sparkline:
    width: float
    height: float
    points: List[Point]
    marker: Point  # último punto (medición más reciente)


@dataclass
class Quantity:
    key: str
    label: str
    unit: str
    color: str


@dataclass
class TrendCard:
    key: str
    label: str
    unit: str
    color: str
    value: str  # último valor crudo o placeholder "--"
    series: List[float]
    direction: TrendDirection
    sparkline: Union[Sparkline, InsufficientData] = INSUFFICIENT_DATA


@dataclass
class TrendPanel:
    kind: Literal["vitals", "labs"]
    cards: List[TrendCard] = field(default_factory=list)
    placeholder: Optional[str] = None
