# rounds_trends/services/trends_service.py
import os
import re
import shutil
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from rounds_trends.commons.logger import logger
from rounds_trends.commons.trends_engine import TrendsEngine
from rounds_trends.helpers.file_transport import FileSender, FileWatcher
from rounds_trends.validation.validators import validate_patient_record_or_raise


def generate_report_filename(
    source: str,
    patient: str = "unknown",
    origin: str = "file",  # file | watch | manual
    extension: str = "json",
) -> str:
    """
    Genera nombre de archivo para outbox, con timestamp y origen.
    Ej:
    - FILE:  20250821-170605-123456_P001_file_ward3.json
    """
    if not isinstance(source, str):
        raise TypeError(f"Invalid type for source: expected str, got {type(source).__name__}")

    ts = datetime.now().strftime("%Y%m%d-%H%M%S-%f")  # Para orden natural
    base_name = os.path.splitext(os.path.basename(source))[0] or "record"
    safe_base = re.sub(r"[^a-zA-Z0-9_\-]", "_", base_name)
    safe_patient = re.sub(r"[^a-zA-Z0-9_\-]", "_", patient or "unknown")
    return f"{ts}_{safe_patient}_{origin}_{safe_base}.{extension}"


class TrendsService:
    def __init__(self, engine: TrendsEngine, paths, svg_pattern: str = "{stem}_{key}.svg"):
        self.engine = engine
        self.paths = paths
        self.sender = FileSender(paths["outbox"], svg_pattern)
        Path(paths["archive"]).mkdir(parents=True, exist_ok=True)
        Path(paths["error"]).mkdir(parents=True, exist_ok=True)

    def _to_error(self, text: str, src: Optional[str], origin: str) -> Path:
        if src:
            err_name = Path(src).name
        else:
            err_name = generate_report_filename("", origin=origin, extension="err.json")
        errp = Path(self.paths["error"]) / err_name
        errp.write_text(text, encoding="utf-8")
        # En modo watch el archivo puede estar a medio escribir: se deja en inbox
        # para que el siguiente evento lo reprocese.
        if src and origin != "watch" and Path(src).exists():
            Path(src).unlink()
        return errp

    def process_text(self, text: str, src: Optional[str] = None, origin: str = "file") -> Optional[str]:
        """Valida, calcula tendencias y escribe reporte + SVGs. Retorna la ruta del reporte."""
        try:
            record = validate_patient_record_or_raise(text)
            report = self.engine.build_report(record)
            filename = generate_report_filename(src or "", record.id or record.name, origin=origin)
            out_json = self.sender.send_report(filename, report)

            stem = Path(filename).stem
            for key, svg in self.engine.render_svg(record):
                self.sender.send_svg(stem, key, svg)
            logger.info(f"Tendencias generadas: {out_json}")

            # mueve el registro procesado a archive/records/
            if src and Path(src).exists():
                dst_dir = Path(self.paths["archive"]) / "records"
                dst_dir.mkdir(parents=True, exist_ok=True)
                shutil.move(src, dst_dir / Path(src).name)
                stale = Path(self.paths["error"]) / Path(src).name
                if stale.exists():
                    stale.unlink()
            return out_json

        except ValidationError as ve:
            # Registro mal formado: a error/ sin tumbar el servicio
            errp = self._to_error(text, src, origin)
            logger.error(f"Validación falló para {errp.name}: {ve}")
            return None
        except Exception as ex:
            errp = self._to_error(text, src, origin)
            logger.exception(f"Error procesando registro: {ex}. Movido a {errp}")
            return None

    def process_backlog(self, glob_pat: str) -> int:
        inbox = Path(self.paths["inbox"])
        files = sorted(inbox.glob(glob_pat))
        if not files:
            return 0
        logger.info(f"Backlog detectado: {len(files)} archivo(s) en {inbox}")
        done = 0
        for f in files:
            try:
                text = f.read_text(encoding="utf-8")
            except OSError as e:
                logger.warning(f"No se pudo leer {f}: {e}")
                continue
            if self.process_text(text, str(f)):
                done += 1
        return done

    def make_watcher(self, glob_pat: str) -> FileWatcher:
        return FileWatcher(
            self.paths["inbox"], glob_pat, lambda text, src: self.process_text(text, src, origin="watch")
        )

    def run_file_mode(self, glob_pat: str, stop_event: Optional[threading.Event] = None):
        # 1) Procesar backlog existente
        self.process_backlog(glob_pat)

        # 2) Arrancar watcher para nuevos archivos
        watcher = self.make_watcher(glob_pat)
        watcher.start()
        logger.info("Escuchando carpeta de registros...")
        stop_event = stop_event or threading.Event()
        try:
            stop_event.wait()
        finally:
            watcher.stop()
