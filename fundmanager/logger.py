"""
Logging setup for the fund manager.

Console lines look like

    14:02:11 | INFO  | db     repository         | Created Member 3f9a1c0de

with the level and HTTP status colored when stdout is a terminal. Files get
the same layout with a full date and no colors.
"""
import logging
import sys
from datetime import datetime
from typing import Dict, Optional, Tuple

RESET = "\033[0m"

PALETTE = {
    "dim": "\033[2m",
    "red": "\033[91m",
    "green": "\033[92m",
    "yellow": "\033[93m",
    "blue": "\033[94m",
    "cyan": "\033[96m",
    "bold_red": "\033[1m\033[91m",
}

LEVEL_STYLES: Dict[int, Tuple[str, str]] = {
    logging.DEBUG: ("dim", "DEBUG"),
    logging.INFO: ("cyan", "INFO "),
    logging.WARNING: ("yellow", "WARN "),
    logging.ERROR: ("red", "ERROR"),
    logging.CRITICAL: ("bold_red", "CRIT "),
}

# Logger-name prefix -> tag; the longest matching prefix wins
COMPONENT_TAGS = {
    "main": "app",
    "api": "api",
    "auth": "auth",
    "fundmanager.access": "http",
    "fundmanager.db": "db",
    "fundmanager.repository": "db",
    "fundmanager.client": "client",
    "fundmanager.cli": "cli",
    "fundmanager": "core",
    "uvicorn": "server",
}

# Third-party loggers and the lowest level worth showing from them
NOISY_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "sqlalchemy": logging.WARNING,
    "passlib": logging.ERROR,
    "uvicorn.access": logging.WARNING,
}


def component_tag(logger_name: str) -> str:
    best = ""
    for prefix in COMPONENT_TAGS:
        if (logger_name == prefix or logger_name.startswith(prefix + ".")) and len(prefix) > len(best):
            best = prefix
    return COMPONENT_TAGS.get(best, "-")


def _paint(text: str, style: str) -> str:
    return f"{PALETTE[style]}{text}{RESET}"


def _status_style(status_code: int) -> str:
    if status_code >= 500:
        return "red"
    if status_code >= 400:
        return "yellow"
    return "green"


class FundFormatter(logging.Formatter):
    """
    `time | LEVEL | tag module | message` formatter.

    Records carrying a `status_code` attribute (the access log) get the code
    colored by class.
    """

    def __init__(self, use_colors: bool = True, date_format: str = "%H:%M:%S"):
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()
        self.date_format = date_format

    def format(self, record: logging.LogRecord) -> str:
        style, level_text = LEVEL_STYLES.get(record.levelno, ("dim", record.levelname[:5]))
        timestamp = datetime.fromtimestamp(record.created).strftime(self.date_format)
        module = record.name.rsplit(".", 1)[-1] or "root"
        source = f"{component_tag(record.name):6} {module:18}"
        message = record.getMessage()

        status_code = getattr(record, "status_code", None)
        if self.use_colors:
            timestamp = _paint(timestamp, "dim")
            level_text = _paint(level_text, style)
            source = _paint(source, "blue")
            if status_code is not None:
                message = message.replace(str(status_code), _paint(str(status_code), _status_style(status_code)), 1)

        line = f"{timestamp} | {level_text} | {source} | {message}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    use_colors: bool = True
) -> None:
    """
    Configure the root logger.

    Args:
        level: Logging level name; unknown names fall back to INFO
        log_file: Optional path that receives an uncolored copy of every line
        use_colors: Whether to use ANSI colors on the console
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    handlers = [logging.StreamHandler(sys.stdout)]
    handlers[0].setFormatter(FundFormatter(use_colors=use_colors))
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(FundFormatter(use_colors=False, date_format="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(numeric_level)
        root_logger.addHandler(handler)

    for name, floor in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(max(floor, numeric_level))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_request(
    logger: logging.Logger,
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
) -> None:
    """One access-log line per finished request; 4xx warn and 5xx error."""
    if status_code >= 500:
        level = logging.ERROR
    elif status_code >= 400:
        level = logging.WARNING
    else:
        level = logging.INFO
    logger.log(
        level,
        f"{method:6} {path} {status_code} ({duration_ms:.0f}ms)",
        extra={"status_code": status_code},
    )
