import re
from typing import List, Optional

from rounds_trends.commons.logger import logger

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _split_bp(bp: Optional[str]) -> List[str]:
    return bp.split("/") if bp else []


def _bp_token(bp: Optional[str], idx: int) -> Optional[str]:
    """Token crudo de la presión ('120/80' -> idx 0 '120', idx 1 '80')."""
    parts = _split_bp(bp)
    return parts[idx] if len(parts) > idx else None


def parse_positive_int(token: Optional[str]) -> Optional[int]:
    """Lee el entero inicial de un token ('120', ' 120', '120mmHg').

    Returns None for unparsable or non-positive tokens.
    """
    if not token:
        return None
    m = _LEADING_INT.match(token)
    if not m:
        return None
    num = int(m.group(1))
    return num if num > 0 else None


def parse_float(token: Optional[str]) -> Optional[float]:
    if token is None:
        return None
    try:
        return float(token)
    except ValueError as ex:
        logger.debug(f"Valor decimal inválido {token!r}: {ex}")
        return None


def format_number(value: float) -> str:
    # 37.0 -> "37", 98.6 -> "98.6"
    num = float(value)
    if num.is_integer():
        return str(int(num))
    return str(num)
