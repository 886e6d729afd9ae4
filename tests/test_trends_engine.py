"""
test_trends_engine.py

Unit tests for the trends engine facade.

Covers:
- Vitals and labs panels (cards, placeholders, latest values).
- Config loading (dict / YAML path) and validation.
- Patient record validation.
"""

import json

import pytest
import yaml
from pydantic import ValidationError

from rounds_trends.commons.trends_engine import NO_LAB_DATA, NO_STANDARD_LABS, NO_VITAL_DATA, TrendsEngine
from rounds_trends.parsers.models import INSUFFICIENT_DATA, Sparkline
from rounds_trends.validation.validators import validate_patient_record_or_raise

PATIENT = {
    "id": "P001",
    "name": "Ramesh K",
    "ward": "MALE MEDICAL WARD",
    "todos": [{"id": "t1", "text": "Repeat RFT", "completed": False}],
    "vitals": [
        {"date": "D1", "bp": "150/90", "hr": 110, "rr": 24, "temp": 38.6, "o2": 92},
        {"date": "D2", "bp": "138/84", "hr": 96, "rr": 20, "temp": 37.9, "o2": 95},
        {"date": "D3", "bp": "126/78", "hr": 84, "rr": 18, "temp": 37.0, "o2": 97},
    ],
    "labs": [
        {"date": "D1", "values": "Na 128, Cr 2.4, WBC 16.2, Hb 9.1"},
        {"date": "D2", "values": "Na 131, Cr 1.9"},
        {"date": "D3", "values": "Na 134, WBC 11.0"},
    ],
}


def make_engine(cfg=None):
    return TrendsEngine(cfg or {})


def make_record(**overrides):
    data = dict(PATIENT)
    data.update(overrides)
    return validate_patient_record_or_raise(data)


def cards_by_key(panel):
    return {c.key: c for c in panel.cards}


# ----------------- Panel de vitales -----------------
def test_vital_panel_default_cards():
    panel = make_engine().vital_panel(make_record())
    assert panel.kind == "vitals"
    assert [c.key for c in panel.cards] == ["sbp", "hr", "temp", "spo2"]
    cards = cards_by_key(panel)
    assert cards["sbp"].series == [150.0, 138.0, 126.0]
    assert cards["sbp"].value == "126"
    assert cards["sbp"].direction == "falling"
    assert cards["spo2"].direction == "rising"
    assert cards["temp"].value == "37"
    assert cards["hr"].unit == "bpm"
    assert isinstance(cards["hr"].sparkline, Sparkline)


def test_vital_panel_without_vitals():
    panel = make_engine().vital_panel(make_record(vitals=[]))
    assert panel.cards == []
    assert panel.placeholder == NO_VITAL_DATA


def test_vital_panel_single_sample_keeps_cards():
    panel = make_engine().vital_panel(make_record(vitals=[{"date": "D1", "bp": "0/0", "hr": 80}]))
    assert panel.placeholder is None
    cards = cards_by_key(panel)
    assert cards["sbp"].series == []
    assert cards["sbp"].value == "0"
    assert cards["temp"].value == "--"
    for card in panel.cards:
        assert card.direction == "flat"
        assert card.sparkline == INSUFFICIENT_DATA


def test_vital_panel_configurable_cards():
    engine = make_engine({"vitals": {"cards": ["dbp", "rr"]}})
    cards = cards_by_key(engine.vital_panel(make_record()))
    assert list(cards) == ["dbp", "rr"]
    assert cards["dbp"].series == [90.0, 84.0, 78.0]
    assert cards["rr"].value == "18"


def test_unknown_vital_card_rejected():
    with pytest.raises(ValidationError):
        make_engine({"vitals": {"cards": ["sbp", "map"]}})


# ----------------- Panel de laboratorio -----------------
def test_lab_panel_cards_only_for_present_quantities():
    panel = make_engine().lab_panel(make_record())
    cards = cards_by_key(panel)
    assert list(cards) == ["creatinine", "hemoglobin", "wbc", "sodium"]
    assert panel.placeholder is None
    assert cards["sodium"].series == [128.0, 131.0, 134.0]
    assert cards["sodium"].value == "134"
    assert cards["sodium"].direction == "rising"
    assert cards["creatinine"].series == [2.4, 1.9]
    assert cards["creatinine"].direction == "falling"


def test_lab_latest_value_can_disagree_with_series():
    cards = cards_by_key(make_engine().lab_panel(make_record()))
    # D3 no reporta Cr ni Hb
    assert cards["creatinine"].value == "--"
    assert cards["hemoglobin"].series == [9.1]
    assert cards["hemoglobin"].value == "--"
    assert cards["hemoglobin"].sparkline == INSUFFICIENT_DATA


def test_lab_panel_without_labs():
    panel = make_engine().lab_panel(make_record(labs=[]))
    assert panel.cards == []
    assert panel.placeholder == NO_LAB_DATA


def test_lab_panel_without_standard_labs():
    panel = make_engine().lab_panel(make_record(labs=[{"date": "D1", "values": "K 4.2, CRP 30"}]))
    assert panel.cards == []
    assert panel.placeholder == NO_STANDARD_LABS


# ----------------- Reporte / SVG -----------------
def test_build_report_is_json_serializable():
    report = make_engine().build_report(make_record())
    assert report["patient"] == {"id": "P001", "name": "Ramesh K"}
    data = json.loads(json.dumps(report))
    sbp = data["vitals"]["cards"][0]
    assert sbp["key"] == "sbp"
    assert sbp["sparkline"]["marker"] == [120, 35]  # 126 es el mínimo
    hb = [c for c in data["labs"]["cards"] if c["key"] == "hemoglobin"][0]
    assert hb["sparkline"] == {"label": "Insufficient Data"}


def test_render_svg_skips_insufficient_cards():
    keys = [k for k, _ in make_engine().render_svg(make_record())]
    assert keys == ["sbp", "hr", "temp", "spo2", "creatinine", "wbc", "sodium"]


# ----------------- Configuración -----------------
def test_engine_from_yaml_path(tmp_path):
    cfg = {"sparkline": {"width": 60, "height": 20, "margin": 2}, "display": {"placeholder": "n/a"}}
    p = tmp_path / "settings.yaml"
    p.write_text(yaml.safe_dump(cfg), encoding="utf-8")
    engine = TrendsEngine(str(p))
    panel = engine.vital_panel(make_record())
    assert panel.cards[0].sparkline.points[0] == (0.0, 2.0)
    assert panel.cards[0].sparkline.points[-1] == (60.0, 18.0)
    assert engine.lab_panel(make_record()).cards[0].value == "n/a"


def test_canvas_too_small_rejected():
    with pytest.raises(ValidationError):
        make_engine({"sparkline": {"height": 8}})
    with pytest.raises(ValidationError):
        make_engine({"sparkline": {"width": 0}})


# ----------------- Validación del registro -----------------
def test_record_from_json_text():
    record = validate_patient_record_or_raise(json.dumps(PATIENT))
    assert record.id == "P001"
    assert record.vitals[0].timestamp_label == "D1"
    assert record.labs[2].values == "Na 134, WBC 11.0"


def test_record_wrapped_in_envelope():
    record = validate_patient_record_or_raise({"patient": PATIENT})
    assert record.name == "Ramesh K"
    assert len(record.vitals) == 3


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        "[1, 2]",
        '{"vitals": [{"hr": "fast"}]}',
        '{"labs": "Na 138"}',
        '{"patient": {}}',
    ],
)
def test_invalid_record_raises_validationerror(payload):
    with pytest.raises(ValidationError):
        validate_patient_record_or_raise(payload)
