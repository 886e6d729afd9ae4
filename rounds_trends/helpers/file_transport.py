import json
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from watchdog.events import PatternMatchingEventHandler
from watchdog.observers import Observer


class FileSender:
    """Escribe reportes (JSON) y sparklines (SVG) en la carpeta de salida."""

    def __init__(self, outbox: str, svg_pattern: str = "{stem}_{key}.svg"):
        self.outbox = Path(outbox)
        self.outbox.mkdir(parents=True, exist_ok=True)
        self.svg_pattern = svg_pattern

    def send_report(self, filename: str, report: Dict[str, Any]) -> str:
        p = self.outbox / filename
        p.write_text(json.dumps(report, ensure_ascii=False, indent=2), encoding="utf-8")
        return str(p)

    def send_svg(self, stem: str, key: str, svg: str) -> str:
        p = self.outbox / self.svg_pattern.format(stem=stem, key=key)
        p.write_text(svg, encoding="utf-8")
        return str(p)


class FileWatcher:
    """Watchdog consumer: entrega (texto, ruta) de cada registro de paciente listo para procesar.

    Files that vanish or are still empty are skipped; the writer's next
    ``modified`` event delivers the finished record.
    """

    def __init__(self, inbox: str, glob: str, on_message: Callable[[str, str], Any], retries: int = 10):
        self.inbox = Path(inbox)
        self.inbox.mkdir(parents=True, exist_ok=True)
        self.on_message = on_message
        self.retries = retries
        self.handler = PatternMatchingEventHandler(patterns=[glob], ignore_directories=True)
        self.handler.on_created = lambda e: self._submit(Path(e.src_path))
        self.handler.on_modified = lambda e: self._submit(Path(e.src_path))
        self.handler.on_moved = lambda e: self._submit(Path(e.dest_path))
        self.observer = Observer()

    def _read_record(self, path: Path) -> Optional[str]:
        for _ in range(self.retries):
            try:
                return path.read_text(encoding="utf-8")
            except FileNotFoundError:
                return None  # ya archivado por un evento anterior
            except OSError:
                time.sleep(0.05)
        return path.read_text(encoding="utf-8")

    def _submit(self, path: Path):
        if not path.exists():
            return
        text = self._read_record(path)
        if text is None or not text.strip():
            return  # creado pero aún sin contenido
        self.on_message(text, str(path))

    def start(self):
        self.observer.schedule(self.handler, str(self.inbox), recursive=False)
        self.observer.start()

    def stop(self):
        self.observer.stop()
        self.observer.join()
