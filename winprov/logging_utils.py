from __future__ import annotations

import logging
import os
from pathlib import Path

DEFAULT_LOG_PATH = str(Path(os.environ.get("ProgramData", ".")) / "winprov" / "winprov.log")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_HANDLER_MARK = "_winprov_handler"


def _open_log_file(log_path: str) -> logging.FileHandler:
    # Unelevated shells usually cannot write under ProgramData.
    try:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        return logging.FileHandler(Path.cwd() / "winprov.log", encoding="utf-8")


def configure_logging(log_path: str = DEFAULT_LOG_PATH, *, verbose: bool = False, console: bool = True) -> None:
    """Send winprov logs to a file and the console.

    The console always shows INFO and up. The file gets the same unless
    verbose is set, in which case it also receives DEBUG records (command
    output, ignored protection toggle errors).
    """

    root = logging.getLogger()
    if any(getattr(h, _HANDLER_MARK, False) for h in root.handlers):
        return

    root.setLevel(logging.DEBUG)
    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")

    handlers: list[logging.Handler] = [_open_log_file(log_path)]
    handlers[0].setLevel(logging.DEBUG if verbose else logging.INFO)
    if console:
        stream = logging.StreamHandler()
        stream.setLevel(logging.INFO)
        handlers.append(stream)

    for h in handlers:
        h.setFormatter(fmt)
        setattr(h, _HANDLER_MARK, True)
        root.addHandler(h)
