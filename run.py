import json
import os
import sys
from pathlib import Path

import typer
import yaml
from pydantic import ValidationError

from rounds_trends.commons.logger import setup_logging
from rounds_trends.commons.trends_engine import TrendsEngine
from rounds_trends.helpers.file_transport import FileSender
from rounds_trends.services.trends_service import TrendsService
from rounds_trends.validation.validators import validate_patient_record_or_raise

app = typer.Typer(add_completion=False, help="Rounds Trends Service")

DEFAULT_CFG = "rounds_trends/configs/settings.yaml"


def resource_path(relative_path: str) -> str:
    """Devuelve la ruta absoluta a un recurso, ya sea ejecutando como .exe o en desarrollo"""
    if hasattr(sys, "_MEIPASS"):
        base_path = sys._MEIPASS
    else:
        base_path = os.path.dirname(os.path.abspath(__file__))
    return os.path.join(base_path, relative_path)


def load_cfg(path: str = DEFAULT_CFG) -> dict:
    config_path = path if os.path.isabs(path) else resource_path(path)
    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _bootstrap(config: str):
    engine = TrendsEngine(load_cfg(config))
    settings = engine.settings
    logger = setup_logging(
        settings.paths.logs_root,
        os.getenv("LOG_LEVEL", "INFO"),
        app_name=settings.app.get("name", "rounds_trends"),
    )
    return settings, logger, engine


def _read_record(record_file: Path, logger):
    try:
        return validate_patient_record_or_raise(record_file.read_text(encoding="utf-8"))
    except ValidationError as ve:
        logger.error(f"Registro inválido {record_file}: {ve}")
        raise typer.Exit(code=1)


@app.command()
def report(
    record_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON del paciente"),
    config: str = typer.Option(DEFAULT_CFG, help="settings.yaml"),
):
    """Imprime el reporte de tendencias (vitales y laboratorios) en JSON."""
    settings, logger, engine = _bootstrap(config)
    record = _read_record(record_file, logger)
    typer.echo(json.dumps(engine.build_report(record), ensure_ascii=False, indent=2))


@app.command()
def svg(
    record_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON del paciente"),
    out: Path = typer.Option(Path("."), help="carpeta destino de los SVG"),
    config: str = typer.Option(DEFAULT_CFG, help="settings.yaml"),
):
    """Escribe un SVG por cada tarjeta con datos suficientes."""
    settings, logger, engine = _bootstrap(config)
    record = _read_record(record_file, logger)
    sender = FileSender(str(out), settings.transport.file.svg_pattern)
    written = [sender.send_svg(record_file.stem, key, doc) for key, doc in engine.render_svg(record)]
    logger.info(f"{len(written)} sparkline(s) escritos en {out}")
    for p in written:
        typer.echo(p)


@app.command()
def results(config: str = typer.Option(DEFAULT_CFG, help="settings.yaml")):
    """Procesa los registros pendientes del inbox y termina."""
    settings, logger, engine = _bootstrap(config)
    logger.info("Iniciando lectura de registros pendientes por procesar")
    svc = TrendsService(engine, settings.paths.model_dump(), settings.transport.file.svg_pattern)
    done = svc.process_backlog(settings.transport.file.filename_glob)
    typer.echo(f"{done} registro(s) procesado(s)")


@app.command()
def watch(config: str = typer.Option(DEFAULT_CFG, help="settings.yaml")):
    """Procesa el backlog y se queda escuchando la carpeta inbox."""
    settings, logger, engine = _bootstrap(config)
    svc = TrendsService(engine, settings.paths.model_dump(), settings.transport.file.svg_pattern)
    try:
        svc.run_file_mode(settings.transport.file.filename_glob)
    except KeyboardInterrupt:
        logger.info("Detenido por el usuario")


if __name__ == "__main__":
    app()
