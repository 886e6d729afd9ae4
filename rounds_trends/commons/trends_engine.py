from dataclasses import asdict
from typing import Any, Dict, List, Tuple

import yaml

from rounds_trends.commons.logger import logger
from rounds_trends.commons.sparkline import render_sparkline, to_svg
from rounds_trends.commons.trend import classify_trend
from rounds_trends.commons.types import PatientRecord
from rounds_trends.parsers.labs import LAB_QUANTITIES, extract_lab_series, latest_lab_value
from rounds_trends.parsers.models import Quantity, Sparkline, TrendCard, TrendPanel
from rounds_trends.parsers.vitals import VITAL_QUANTITIES, extract_vital_series, latest_vital_value
from rounds_trends.validation.validators import validate_settings_or_raise

NO_VITAL_DATA = "No vitals recorded yet."
NO_LAB_DATA = "No lab data to trend."
NO_STANDARD_LABS = "No standard labs (Cr, Hb, WBC, Na) detected in text to graph."


class TrendsEngine:
    """Engine facade that loads config and builds trend panels per patient.

    Every call recomputes series, trends and sparklines from the record.
    """

    def __init__(self, config_path_or_obj: Any = None):
        # Soportar rutas o dict ya cargado
        if isinstance(config_path_or_obj, str):
            with open(config_path_or_obj, "r", encoding="utf-8") as f:
                cfg = yaml.safe_load(f) or {}
        elif isinstance(config_path_or_obj, dict):
            cfg = config_path_or_obj
        else:
            cfg = {}

        self.settings = validate_settings_or_raise(cfg)
        self.canvas = self.settings.sparkline
        self.placeholder = self.settings.display.placeholder
        self.vital_keys = list(self.settings.vitals.cards)

    def _card(self, q: Quantity, value: str, series: List[float]) -> TrendCard:
        return TrendCard(
            key=q.key,
            label=q.label,
            unit=q.unit,
            color=q.color,
            value=value,
            series=series,
            direction=classify_trend(series),
            sparkline=render_sparkline(
                series,
                width=self.canvas.width,
                height=self.canvas.height,
                margin=self.canvas.margin,
            ),
        )

    def vital_panel(self, record: PatientRecord) -> TrendPanel:
        if not record.vitals:
            return TrendPanel(kind="vitals", placeholder=NO_VITAL_DATA)

        panel = TrendPanel(kind="vitals")
        for key in self.vital_keys:
            # Serie y "valor actual" se calculan por separado
            series = extract_vital_series(record.vitals, key)
            value = latest_vital_value(record.vitals, key, self.placeholder)
            panel.cards.append(self._card(VITAL_QUANTITIES[key], value, series))
        return panel

    def lab_panel(self, record: PatientRecord) -> TrendPanel:
        if not record.labs:
            return TrendPanel(kind="labs", placeholder=NO_LAB_DATA)

        panel = TrendPanel(kind="labs")
        for key, q in LAB_QUANTITIES.items():
            series = extract_lab_series(record.labs, key)
            if not series:
                continue
            value = latest_lab_value(record.labs, key, self.placeholder)
            panel.cards.append(self._card(q, value, series))

        if not panel.cards:
            panel.placeholder = NO_STANDARD_LABS
        return panel

    def build_report(self, record: PatientRecord) -> Dict:
        vitals = self.vital_panel(record)
        labs = self.lab_panel(record)
        logger.debug(
            f"Paciente {record.id or record.name or '?'}: "
            f"{len(vitals.cards)} tarjetas vitales, {len(labs.cards)} de laboratorio"
        )
        return {
            "patient": {"id": record.id, "name": record.name},
            "vitals": asdict(vitals),
            "labs": asdict(labs),
        }

    def render_svg(self, record: PatientRecord) -> List[Tuple[str, str]]:
        out = []
        for panel in (self.vital_panel(record), self.lab_panel(record)):
            for card in panel.cards:
                if isinstance(card.sparkline, Sparkline):
                    out.append((card.key, to_svg(card.sparkline, card.color)))
        return out
