import logging
from pathlib import Path

from app.config import AppConfig

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _file_handler(path: Path, formatter: logging.Formatter) -> logging.FileHandler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(formatter)
    return handler


def configure_logging(config: AppConfig) -> None:
    """
    Console plus ``<LOG_DIR>/app.log`` on the root logger. With ``SQL_LOG`` on,
    SQLAlchemy statements also go to ``<LOG_DIR>/sql.log``.

    Safe to call more than once; handlers are only attached the first time.
    """
    root = logging.getLogger()
    root.setLevel(config.LOG_LEVEL.upper())
    if getattr(root, "_app_configured", False):
        return

    formatter = logging.Formatter(LOG_FORMAT)
    log_dir = Path(config.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)
    root.addHandler(_file_handler(log_dir / "app.log", formatter))

    if config.SQL_LOG:
        sql_logger = logging.getLogger("sqlalchemy.engine")
        sql_logger.setLevel(logging.INFO)
        sql_logger.addHandler(_file_handler(log_dir / "sql.log", formatter))
        sql_logger.propagate = False

    root._app_configured = True
