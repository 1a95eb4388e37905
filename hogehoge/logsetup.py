"""Compact coloured log output and environment-driven log filtering."""

from __future__ import annotations

import logging
import os
import sys
import time

ENV_VAR = "HOGEHOGE_LOG"

_RESET = "\x1b[0m"
_DIM = "\x1b[2m"
_BOLD_ITALIC = "\x1b[1;3m"

_DEFAULT_DIRECTIVES = {
    "freya_core": logging.WARNING,
    "freya_winit": logging.WARNING,
    "torin": logging.WARNING,
    "lofty": logging.INFO,
}

_LEVEL_NAMES = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": 5,
    "off": logging.CRITICAL + 10,
}


def _level_marker(levelno: int) -> str:
    if levelno >= logging.ERROR:
        colour, letter = "31", "E"
    elif levelno >= logging.WARNING:
        colour, letter = "33", "!"
    elif levelno >= logging.INFO:
        colour, letter = "32", "*"
    elif levelno >= logging.DEBUG:
        colour, letter = "34", "D"
    else:
        colour, letter = "35", "T"
    return f"\x1b[{colour}m{letter}{_RESET}"


class EventFormatter(logging.Formatter):
    """Formats records as elapsed time, level marker, logger name and message."""

    def __init__(self, start_time: float | None = None) -> None:
        super().__init__()
        self.start_time = time.time() if start_time is None else start_time

    def format(self, record: logging.LogRecord) -> str:
        elapsed = max(0.0, record.created - self.start_time)
        secs = int(elapsed)
        millis = int((elapsed - secs) * 1000)
        text = (
            f"{_DIM}{secs:06}.{millis:03}{_RESET}"
            f" [{_level_marker(record.levelno)}] "
            f"{_BOLD_ITALIC}{record.name}{_RESET} "
            f"{record.getMessage()}"
        )
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


def _parse_level(name: str) -> int:
    try:
        return _LEVEL_NAMES[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Failed to build filter: unknown level {name!r}") from None


def _parse_directives(spec: str) -> tuple[int, dict[str, int]]:
    default = logging.INFO
    targets: dict[str, int] = {}
    for part in filter(None, (p.strip() for p in spec.split(","))):
        if "=" in part:
            target, level = part.split("=", 1)
            targets[target.strip()] = _parse_level(level)
        else:
            default = _parse_level(part)
    return default, targets


def init() -> logging.Handler:
    """Install the formatter on the root logger, filtered by the environment."""
    default, targets = _parse_directives(os.environ.get(ENV_VAR, ""))
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(EventFormatter())
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(default)
    for target, level in {**targets, **_DEFAULT_DIRECTIVES}.items():
        logging.getLogger(target).setLevel(level)
    return handler