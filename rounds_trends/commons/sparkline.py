"""
Sparkline renderer.

Maps a numeric series onto a small fixed canvas (default 120 x 40):
points evenly spaced on x, values scaled into [height - margin, margin]
on y (SVG coordinates, so larger values sit nearer the top).
"""

from typing import Sequence, Union

from rounds_trends.parsers.models import INSUFFICIENT_DATA, InsufficientData, Point, Sparkline

DEFAULT_WIDTH = 120
DEFAULT_HEIGHT = 40
DEFAULT_MARGIN = 5


def render_sparkline(
    series: Sequence[float],
    width: float = DEFAULT_WIDTH,
    height: float = DEFAULT_HEIGHT,
    margin: float = DEFAULT_MARGIN,
) -> Union[Sparkline, InsufficientData]:
    n = len(series)
    if n < 2:
        return INSUFFICIENT_DATA

    lo = min(series)
    hi = max(series)
    span = (hi - lo) or 1  # serie plana: todos los puntos al margen inferior
    band = height - 2 * margin

    points = [
        (i / (n - 1) * width, height - ((v - lo) / span) * band - margin)
        for i, v in enumerate(series)
    ]
    return Sparkline(width=width, height=height, points=points, marker=points[-1])


def _fmt(v: float) -> str:
    return f"{v:.2f}".rstrip("0").rstrip(".")


def _fmt_point(p: Point) -> str:
    return f"{_fmt(p[0])},{_fmt(p[1])}"


def points_attr(spark: Sparkline) -> str:
    """Atributo ``points`` de un <polyline> SVG."""
    return " ".join(_fmt_point(p) for p in spark.points)


def to_svg(spark: Sparkline, color: str = "#334155") -> str:
    cx, cy = spark.marker
    w, h = _fmt(spark.width), _fmt(spark.height)
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="100%" height="{h}" '
        f'viewBox="0 0 {w} {h}">'
        f'<polyline points="{points_attr(spark)}" fill="none" stroke="{color}" '
        'stroke-width="2" stroke-linecap="round" stroke-linejoin="round"/>'
        f'<circle cx="{_fmt(cx)}" cy="{_fmt(cy)}" r="3" fill="{color}"/>'
        "</svg>"
    )
