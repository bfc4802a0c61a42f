#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-17 14:21:09 krylon>
#
# /data/code/python/pyipscan/common.py
# created on 09. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the PyIPScan network scanner. It is distributed under the
# terms of the GNU General Public License 3. See the file LICENSE for details
# or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
pyipscan.common

(c) 2026 Benjamin Walkenhorst
"""

import logging
import logging.handlers
import os
import pathlib
import re
import sys
from datetime import timedelta
from threading import Lock
from typing import Final, Optional

AppName: Final[str] = "PyIPScan"
AppVersion: Final[str] = "0.1.0"

log_level_tty: int = logging.WARNING

duration_pat: Final[re.Pattern] = re.compile(r"^(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)?$")

duration_units: Final[dict[str, float]] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(s: str) -> Optional[timedelta]:
    """Attempt to parse <s> as a duration like 1s, 250ms or 1.5 (seconds)."""
    m = duration_pat.match(s.strip())
    if m is None:
        return None

    unit: Final[str] = m[2] or "s"
    return timedelta(seconds=float(m[1]) * duration_units[unit])


class ScanError(Exception):
    """Base class for application-specific Exceptions."""


class Path:
    """Holds the paths of folders and files used by the application"""

    __base: str

    def __init__(self, root: str = os.path.expanduser(f"~/.{AppName.lower()}.d")) -> None:  # noqa
        self.__base = root

    def base(self, folder: str = "") -> pathlib.Path:
        """
        Return the base directory for application specific files.

        If path is a non-empty string, set the base directory to its value.
        """
        if folder != "":
            self.__base = folder
        return pathlib.Path(self.__base)

    @property
    def log(self) -> pathlib.Path:
        """Return the path to the log file"""
        return pathlib.Path(os.path.join(self.__base, f"{AppName.lower()}.log"))


path: Path = Path(os.path.expanduser(f"~/.{AppName.lower()}.d"))

_lock: Final[Lock] = Lock()  # pylint: disable-msg=C0103
_cache: Final[dict[str, logging.Logger]] = {}  # pylint: disable-msg=C0103
_console: Final[list[logging.Handler]] = []  # pylint: disable-msg=C0103


def set_basedir(folder: str) -> None:
    """Set the base dir to the speficied path."""
    path.base(str(folder))
    init_app()


def init_app() -> None:
    """Initialize the application environment"""
    os.makedirs(path.base(), exist_ok=True)


def set_log_level(level: int) -> None:
    """Set the level of console output, for existing loggers as well as future ones."""
    global log_level_tty  # pylint: disable-msg=W0603
    with _lock:
        log_level_tty = level
        for h in _console:
            h.setLevel(level)


def get_logger(name: str, terminal: bool = True) -> logging.Logger:
    """Create and return a logger with the given name"""
    with _lock:
        init_app()

        if name in _cache:
            return _cache[name]

        log_format = "%(asctime)s (%(name)-16s / line %(lineno)-4d) " + \
            "- %(levelname)-8s %(message)s"
        max_log_size = 4 * 2**20  # 4 MiB
        max_log_count = 10

        log_obj = logging.getLogger(f"{AppName.lower()}.{name}")
        log_obj.setLevel(logging.DEBUG)
        log_obj.propagate = False
        log_file_handler = logging.handlers.RotatingFileHandler(path.log,
                                                                'a',
                                                                max_log_size,
                                                                max_log_count)

        log_fmt = logging.Formatter(log_format)
        log_file_handler.setFormatter(log_fmt)
        log_obj.addHandler(log_file_handler)

        # stdout belongs to the report.
        if terminal:
            log_console_handler = logging.StreamHandler(sys.stderr)
            log_console_handler.setFormatter(log_fmt)
            log_console_handler.setLevel(log_level_tty)
            log_obj.addHandler(log_console_handler)
            _console.append(log_console_handler)

        _cache[name] = log_obj
        return log_obj


# Local Variables: #
# python-indent: 4 #
# End: #
