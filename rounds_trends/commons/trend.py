from typing import Sequence

from rounds_trends.parsers.models import TrendDirection


def classify_trend(series: Sequence[float]) -> TrendDirection:
    """Dirección del último cambio: compara solo los dos últimos puntos."""
    if len(series) < 2:
        return "flat"
    last, prev = series[-1], series[-2]
    if last > prev:
        return "rising"
    if last < prev:
        return "falling"
    return "flat"
