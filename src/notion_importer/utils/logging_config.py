"""
Logging configuration for Notion Importer.

Provides the level and format enumerations used by the configuration file,
a JSON formatter for machine-readable import logs and a LoggingManager that
wires console and file handlers onto the root logger.
"""

import json
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler


class LogLevel(Enum):
    """Log level enumeration."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        """Level for a case-insensitive name such as ``"info"``."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown log level: {name}")


class LogFormat(Enum):
    """Log format types."""
    STANDARD = "standard"
    JSON = "json"
    DETAILED = "detailed"


# LogRecord attributes that are not user-supplied extra fields
_STANDARD_ATTRS = frozenset({
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'exc_info', 'exc_text',
    'stack_info', 'message', 'taskName',
})


class JSONFormatter(logging.Formatter):
    """Formats records as one JSON object per line, including extra fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for attr_name, attr_value in record.__dict__.items():
            if attr_name.startswith('_') or attr_name in _STANDARD_ATTRS:
                continue
            log_data[attr_name] = attr_value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str, ensure_ascii=False, separators=(',', ':'))


class LoggingManager:
    """
    Configures the root logger for an import run.

    The console handler is a RichHandler for the standard and detailed
    formats and a plain stream handler emitting JSON for the JSON format.
    """

    def __init__(
        self,
        log_level: LogLevel = LogLevel.WARNING,
        log_format: LogFormat = LogFormat.STANDARD,
        log_file: Optional[Path] = None,
        enable_console: bool = True,
        console: Optional[Console] = None
    ):
        self.log_level = log_level
        self.log_format = log_format
        self.log_file = log_file
        self.enable_console = enable_console
        self.console = console
        self._setup_root_logger()

    def _setup_root_logger(self) -> None:
        root_logger = logging.getLogger()
        root_logger.setLevel(self.log_level.value)
        root_logger.handlers.clear()

        if self.enable_console:
            console_handler = self._create_console_handler()
            console_handler.setLevel(self.log_level.value)
            root_logger.addHandler(console_handler)

        if self.log_file:
            file_handler = logging.FileHandler(self.log_file, encoding='utf-8')
            file_handler.setLevel(self.log_level.value)
            file_handler.setFormatter(self._create_formatter())
            root_logger.addHandler(file_handler)

    def _create_console_handler(self) -> logging.Handler:
        if self.log_format is LogFormat.JSON:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            return handler

        handler = RichHandler(
            console=self.console,
            show_time=True,
            show_path=self.log_format is LogFormat.DETAILED,
            markup=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        return handler

    def _create_formatter(self) -> logging.Formatter:
        if self.log_format is LogFormat.JSON:
            return JSONFormatter()
        if self.log_format is LogFormat.DETAILED:
            return logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s'
            )
        return logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
