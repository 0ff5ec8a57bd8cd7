"""
Logging setup for the Job Match API

Console and rotating-file handlers configured through dictConfig. Every
application logger lives under the "jobmatch." namespace.
"""
import functools
import logging
import logging.config
import os
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional

LOG_FORMATS = {
    "simple": "%(levelname)s - %(name)s - %(message)s",
    "detailed": "%(asctime)s | %(levelname)-8s | %(name)-32s | %(funcName)-22s:%(lineno)-4d | %(message)s",
}

# level, console, file, format per ENVIRONMENT value; None level means LOG_LEVEL
ENVIRONMENT_PROFILES = {
    "production": (None, True, True, "detailed"),
    "development": ("DEBUG", True, True, "detailed"),
    "testing": ("WARNING", True, False, "simple"),
}

# Driver chatter that drowns out request logs at DEBUG
QUIET_LOGGERS = ("pymongo", "motor", "multipart")


def _rotating_file(filename: Path, level: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "detailed",
        "filename": str(filename),
        "maxBytes": 10 * 1024 * 1024,
        "backupCount": 5,
        "encoding": "utf8",
    }


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    enable_console: bool = True,
    enable_file: bool = True,
    format_style: str = "detailed"
) -> None:
    """
    Apply the logging configuration for the whole process.

    Args:
        level: Root level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Main log file; defaults to $LOG_DIR/job_match_<date>.log
        enable_console: Log to stdout
        enable_file: Log to rotating files, plus a separate errors-only file
        format_style: 'simple' or 'detailed'
    """
    log_dir = Path(os.getenv("LOG_DIR", "logs"))
    stamp = datetime.now().strftime('%Y%m%d')
    if enable_file:
        log_dir.mkdir(parents=True, exist_ok=True)
    log_file = Path(log_file) if log_file else log_dir / f"job_match_{stamp}.log"

    handlers: Dict[str, Any] = {}
    if enable_console:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": format_style if format_style in LOG_FORMATS else "detailed",
            "stream": "ext://sys.stdout",
        }
    if enable_file:
        handlers["file"] = _rotating_file(log_file, level)
        handlers["error_file"] = _rotating_file(log_dir / f"job_match_errors_{stamp}.log", "ERROR")

    server_handlers = [name for name in handlers if name != "error_file"]
    config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            name: {"format": fmt, "datefmt": "%Y-%m-%d %H:%M:%S"} for name, fmt in LOG_FORMATS.items()
        },
        "handlers": handlers,
        "loggers": {
            "": {"level": level, "handlers": list(handlers), "propagate": False},
            "uvicorn": {"level": "INFO", "handlers": server_handlers, "propagate": False},
            "uvicorn.access": {"level": "INFO", "handlers": server_handlers, "propagate": False},
        },
    }
    for name in QUIET_LOGGERS:
        config["loggers"][name] = {"level": "WARNING"}

    logging.config.dictConfig(config)

    logger = get_logger("logging")
    logger.info(f"Logging configured - Level: {level}, Console: {enable_console}, File: {enable_file}")
    if enable_file:
        logger.info(f"Log file: {log_file}")


def configure_for_environment() -> None:
    """Pick a logging profile from ENVIRONMENT (production, development, testing)."""
    environment = os.getenv("ENVIRONMENT", "development").lower()
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    if environment not in ENVIRONMENT_PROFILES:
        setup_logging(level=log_level)
        return

    level, console, to_file, style = ENVIRONMENT_PROFILES[environment]
    setup_logging(
        level=level or log_level,
        enable_console=console,
        enable_file=to_file,
        format_style=style,
    )


def get_logger(name: str) -> logging.Logger:
    if name.startswith("jobmatch."):
        return logging.getLogger(name)
    return logging.getLogger(f"jobmatch.{name}")


def log_api_call(operation: str):
    """Log start, duration and failure of an async endpoint."""
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            logger = get_logger(f"api.{func.__module__}")
            start_time = time.time()
            logger.info(f"API {operation} started - {func.__name__}")

            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                elapsed = time.time() - start_time
                logger.error(f"API {operation} failed after {elapsed:.3f}s: {e}",
                             extra={"execution_time": elapsed, "error": str(e)})
                raise

            elapsed = time.time() - start_time
            logger.info(f"API {operation} completed in {elapsed:.3f}s", extra={"execution_time": elapsed})
            return result

        return wrapper
    return decorator


class PerformanceMonitor:
    """Times a block (a resume parse, a ranking pass) and logs the duration.

    Blocks slower than threshold_ms are logged as warnings. The measured time
    is kept on ``elapsed_ms`` after the block exits.
    """

    def __init__(self, operation_name: str, logger: logging.Logger = None, threshold_ms: float = 1000):
        self.operation_name = operation_name
        self.logger = logger or get_logger("performance")
        self.threshold_ms = threshold_ms
        self.start_time = None
        self.elapsed_ms = None

    def __enter__(self):
        self.start_time = time.time()
        self.logger.debug(f"Starting {self.operation_name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = (time.time() - self.start_time) * 1000

        if exc_type is not None:
            self.logger.error(f"{self.operation_name} failed after {self.elapsed_ms:.2f}ms: {exc_val}")
        elif self.elapsed_ms > self.threshold_ms:
            self.logger.warning(
                f"{self.operation_name} took {self.elapsed_ms:.2f}ms (threshold {self.threshold_ms}ms)"
            )
        else:
            self.logger.info(f"{self.operation_name} completed in {self.elapsed_ms:.2f}ms")
        return False
