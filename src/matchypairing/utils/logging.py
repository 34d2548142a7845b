"""Logging utilities."""

# Matchy Pairing
# Copyright (C) 2025  Matchy Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.


import logging
import os
import sys
import tempfile
from logging.handlers import RotatingFileHandler
from typing import Optional

from matchypairing.constants import DEFAULT_LOG_LEVEL, LOG_FILE_NAME, LOG_FOLDER_NAME

# the logger format used
LOG_FMT = "LVL: %(levelname)s | FILE PATH: %(pathname)s | FUN: %(funcName)s | msg: %(message)s | ln#:%(lineno)d"


def _log_level() -> int:
    """Level from MATCHY_LOG_LEVEL, INFO when unset or unknown."""
    name = os.environ.get("MATCHY_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _log_folder() -> Optional[str]:
    """Pick a writable per-user folder for the log file.

    Returns
    -------
    Optional[str]
        the folder, or None when nothing writable was found
    """
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        base = os.path.join(appdata, LOG_FOLDER_NAME) if appdata else None
    else:
        state_home = os.environ.get("XDG_STATE_HOME") or os.path.join(
            os.path.expanduser("~"), ".local", "state"
        )
        base = os.path.join(state_home, "matchy-pairing")

    for folder in (base, os.path.join(tempfile.gettempdir(), "matchy-pairing")):
        if not folder:
            continue
        folder = os.path.join(folder, "logs")
        try:
            os.makedirs(folder, exist_ok=True)
        except OSError:
            continue
        return folder
    return None


# --- Logging Setup ---
def setup_logger(logger_name: str) -> logging.Logger:
    """Set up logger for a python module.

    Sets up file handler and console handler

    Parameters
    ----------
    logger_name : str
        The name for the logger, __name__ is idiomatic

    Returns
    -------
    logging.Logger
        the created logger
    """
    lgr = logging.getLogger(name=logger_name)
    level = _log_level()
    lgr.setLevel(level)
    # Remove any existing handlers on this logger to avoid duplicates
    for _h in list(lgr.handlers):
        lgr.removeHandler(_h)
    log_formatter = logging.Formatter(LOG_FMT)

    # File Handler, skipped when no folder can be created
    file_handler = None
    log_folder = _log_folder()
    if log_folder:
        log_path = os.path.join(log_folder, LOG_FILE_NAME)
        # Use RotatingFileHandler to prevent unbounded log growth
        try:
            file_handler = RotatingFileHandler(
                log_path, maxBytes=5 * 1024 * 1024, backupCount=5, encoding="utf-8"
            )
            file_handler.setFormatter(log_formatter)
        except OSError:
            file_handler = None

    # Console Handler, stderr so CLI output on stdout stays clean
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(log_formatter)
    console_handler.setLevel(level)
    lgr.addHandler(console_handler)
    if file_handler:
        lgr.addHandler(file_handler)
    lgr.debug("logger %s initialized", logger_name)
    return lgr
