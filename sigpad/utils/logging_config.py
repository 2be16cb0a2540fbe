"""Logging setup shared by hosts embedding SignaturePad and the dev scripts.

Library modules only do ``logger = get_logger(__name__)``. Handlers are the
host's business: a kiosk app, a form backend or scripts/preview_signature.py
calls setup_logging() once at startup.

Features:
    - stderr console handler, optionally ANSI-colored
    - File handler, plain or rotating (by size or by time)
    - Human-readable or JSON-lines records
    - Context fields (app, session, signer, ...) appended to every record
    - Python warnings and uncaught exceptions routed into logging

Record layout:
    Human: 2026-03-02T09:14:55.120Z | DEBUG    | app=kiosk session=a1b2 | Stroke ended (curves=12)
    JSON:  {"t": "2026-03-02T09:14:55.120+00:00", "lvl": "DEBUG", "name": "...", "msg": "...", "app": "kiosk"}

setup_logging() can be called again (e.g. after the host reloads its
settings); handlers from the previous call are closed and replaced.
"""

import contextvars
import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

_context_var = contextvars.ContextVar('sigpad_log_context', default={})

_configured = False

_LEVEL_COLORS = {
    'DEBUG': '\033[36m',
    'INFO': '\033[32m',
    'WARNING': '\033[33m',
    'ERROR': '\033[31m',
    'CRITICAL': '\033[35m',
}
_RESET = '\033[0m'


class ContextFormatter(logging.Formatter):
    """Render records with the current push_context() fields attached.

    Parameters
    ----------
    fmt_mode : str
        "human" (pipe-separated line) or "json" (one JSON object per line)
    use_color : bool
        Color the level name; ignored unless stderr is a terminal
    tz : str
        "UTC" or "local" timestamps
    """

    def __init__(self, fmt_mode: str = "human", use_color: bool = True, tz: str = "UTC"):
        super().__init__()
        renderers = {"human": self._render_human, "json": self._render_json}
        if fmt_mode not in renderers:
            raise ValueError(f"Unknown format mode: {fmt_mode}. Use 'human' or 'json'.")
        self.fmt_mode = fmt_mode
        self._render = renderers[fmt_mode]
        self.use_color = use_color and sys.stderr.isatty()
        self.tz = tz

    def format(self, record: logging.LogRecord) -> str:
        return self._render(record, self._timestamp(record), _context_var.get())

    def _timestamp(self, record: logging.LogRecord) -> datetime:
        if self.tz == "UTC":
            return datetime.fromtimestamp(record.created, tz=timezone.utc)
        return datetime.fromtimestamp(record.created)

    def _render_json(self, record: logging.LogRecord, ts: datetime, context: dict) -> str:
        payload = {
            't': ts.isoformat(),
            'lvl': record.levelname,
            'name': record.name,
            'pid': os.getpid(),
            'msg': record.getMessage(),
            **context,
        }
        if record.exc_info:
            payload['exc'] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)

    def _render_human(self, record: logging.LogRecord, ts: datetime, context: dict) -> str:
        level = f"{record.levelname:8s}"
        if self.use_color:
            level = f"{_LEVEL_COLORS.get(record.levelname, '')}{level}{_RESET}"

        fields = [ts.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z', level]
        if context:
            fields.append(' '.join(f"{k}={v}" for k, v in context.items()))
        fields.append(record.getMessage())

        line = ' | '.join(fields)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    *,
    json: bool = False,
    color: bool = True,
    to_stderr: bool = True,
    rotate: Optional[Dict[str, Any]] = None,
    tz: str = "UTC",
    capture_warnings: bool = True,
    quiet_libs: Optional[List[str]] = None,
    context: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Install handlers on the root logger.

    Parameters
    ----------
    log_level : str
        Root level name ("DEBUG" ... "CRITICAL")
    log_file : str, optional
        Also log to this file (parent dirs are created)
    json : bool
        JSON-lines format for the file handler; the console stays human
    color : bool
        Colored console level names
    to_stderr : bool
        Attach the console handler
    rotate : dict, optional
        File rotation, one of:
        - {"mode": "size", "max_bytes": 5_000_000, "backup_count": 3}
        - {"mode": "time", "when": "D", "interval": 1, "backup_count": 7}
    tz : str
        "UTC" (default) or "local"
    capture_warnings : bool
        Route warnings.warn() into the "py.warnings" logger
    quiet_libs : list[str], optional
        Loggers to raise to WARNING (e.g. ["PIL"])
    context : dict, optional
        Fields pushed with push_context() right away

    Returns
    -------
    dict
        {"handlers": [...]} in the order they were attached

    Raises
    ------
    ValueError
        Unknown rotation mode
    """
    global _configured

    root = logging.getLogger()
    if _configured:
        _detach_handlers(root)
    root.setLevel(getattr(logging, log_level.upper()))

    handlers: List[logging.Handler] = []
    if to_stderr:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(ContextFormatter("human", color, tz))
        handlers.append(console)
    if log_file:
        handlers.append(_create_file_handler(log_file, rotate, json, tz))

    for handler in handlers:
        root.addHandler(handler)

    if context:
        push_context(**context)
    for lib in quiet_libs or []:
        logging.getLogger(lib).setLevel(logging.WARNING)
    if capture_warnings:
        route_warnings()

    _configured = True
    return {'handlers': handlers}


def _detach_handlers(root: logging.Logger) -> None:
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


def _size_rotating(path: str, opts: Dict[str, Any]) -> logging.Handler:
    return logging.handlers.RotatingFileHandler(
        path,
        maxBytes=opts.get('max_bytes', 5_000_000),
        backupCount=opts.get('backup_count', 3)
    )


def _time_rotating(path: str, opts: Dict[str, Any]) -> logging.Handler:
    return logging.handlers.TimedRotatingFileHandler(
        path,
        when=opts.get('when', 'D'),
        interval=opts.get('interval', 1),
        backupCount=opts.get('backup_count', 7)
    )


_ROTATION_BUILDERS: Dict[str, Callable[[str, Dict[str, Any]], logging.Handler]] = {
    'size': _size_rotating,
    'time': _time_rotating,
}


def _create_file_handler(
    log_file: str,
    rotate: Optional[Dict[str, Any]],
    json_format: bool,
    tz: str
) -> logging.Handler:
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    if rotate:
        mode = rotate.get('mode', 'size')
        builder = _ROTATION_BUILDERS.get(mode)
        if builder is None:
            raise ValueError(f"Unknown rotation mode: {mode}. Use 'size' or 'time'.")
        handler = builder(log_file, rotate)
    else:
        handler = logging.FileHandler(log_file)

    handler.setFormatter(ContextFormatter("json" if json_format else "human", use_color=False, tz=tz))
    return handler


def get_logger(name: str) -> logging.Logger:
    """Module logger; pass __name__."""
    return logging.getLogger(name)


def push_context(**fields) -> None:
    """Attach fields to every subsequent record in this context.

    Examples
    --------
    >>> push_context(app="kiosk", session="a1b2")
    >>> logger.info("Pad cleared")  # → "... | app=kiosk session=a1b2 | Pad cleared"
    """
    _context_var.set({**_context_var.get(), **fields})


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Drop the named fields, or all of them when keys is None."""
    if keys is None:
        _context_var.set({})
        return
    _context_var.set({k: v for k, v in _context_var.get().items() if k not in keys})


def get_context() -> Dict[str, Any]:
    """Copy of the fields currently attached to records."""
    return dict(_context_var.get())


def install_excepthook() -> None:
    """Send uncaught exceptions (except Ctrl+C) to the log as CRITICAL."""
    def _log_uncaught(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logging.getLogger(__name__).critical(
            "Uncaught exception",
            exc_info=(exc_type, exc_value, exc_traceback)
        )

    sys.excepthook = _log_uncaught


def route_warnings() -> None:
    """Capture warnings.warn() output as WARNING records."""
    logging.captureWarnings(True)
    logging.getLogger('py.warnings').setLevel(logging.WARNING)
