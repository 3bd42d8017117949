"""Pre-flight checks: required tools on PATH and the deploy user."""

from __future__ import annotations

import getpass
import logging
import os
import shutil
from typing import Iterable

from modules.utils import log


def check_command(name: str) -> bool:
    if shutil.which(name) is None:
        logging.error("Command '%s' not found. Please install it first.", name)
        return False
    return True


def current_user() -> str:
    user = os.environ.get("USER")
    if user:
        return user
    return getpass.getuser()


def check_user(expected: str) -> bool:
    user = current_user()
    if user != expected:
        logging.error("This script must be run as the %s user (got %s)", expected, user)
        return False
    return True


def run_preflight(commands: Iterable[str], user: str = "") -> bool:
    logging.info("PREFLIGHT START")
    if user:
        if not check_user(user):
            return False
    for name in commands:
        if not check_command(name):
            return False
    log("PASS: Preflight checks passed")
    return True
