import sys
from datetime import datetime
from pathlib import Path

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function} - {message}"


def setup_logging(root: str, level: str = "INFO", app_name: str = "rounds_trends", console: bool = True):
    """Carpeta por día (<root>/YYYY/MM/DD/<app_name>.log) + consola opcional."""
    logdir = Path(root) / datetime.now().strftime("%Y/%m/%d")
    logdir.mkdir(parents=True, exist_ok=True)
    logfile = logdir / f"{app_name}.log"
    logger.remove()
    logger.add(
        str(logfile),
        format=LOG_FORMAT,
        rotation="00:00",
        retention="14 days",
        level=level.upper(),
        backtrace=True,
        diagnose=False,
    )
    if console:
        logger.add(sys.stderr, format=LOG_FORMAT, level=level.upper())
    logger.debug(f"Logging inicializado en {logfile}")
    return logger
