"""systemd units and background processes.

Only starts/stops things; readiness is a fixed wait, not a health check.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from pathlib import Path

from modules.utils import run_cmd, log, status_warn


def systemctl(action: str, unit: str) -> bool:
    try:
        run_cmd(["sudo", "systemctl", action, unit])
        log(f"PASS: systemctl {action} {unit}")
        return True
    except (subprocess.CalledProcessError, OSError) as err:
        logging.error("systemctl %s %s failed: %s", action, unit, err)
        return False


def is_active(unit: str) -> bool:
    try:
        proc = subprocess.run(
            ["systemctl", "is-active", "--quiet", unit], text=True, check=False
        )
    except OSError as err:
        logging.error("systemctl is-active %s failed: %s", unit, err)
        return False
    return proc.returncode == 0


def check_service(unit: str) -> bool:
    if is_active(unit):
        return True
    status_warn(f"Service '{unit}' is not running. Starting it...")
    if not systemctl("start", unit):
        logging.error("Failed to start service '%s'", unit)
        return False
    return True


def start_and_enable(unit: str) -> bool:
    if not systemctl("start", unit):
        return False
    if not systemctl("enable", unit):
        return False
    return True


def stop_existing(pattern: str, pause: float = 0) -> None:
    # pkill exits 1 when nothing matched; that is fine
    try:
        proc = subprocess.run(["sudo", "pkill", "-f", pattern], text=True, check=False)
        log(f"pkill -f {pattern} exit={proc.returncode}")
    except OSError as err:
        status_warn(f"Could not stop existing processes: {err}")
    if pause:
        time.sleep(pause)


def start_background(argv: list[str], cwd: str | Path, log_file: str | Path) -> subprocess.Popen:
    """Start a detached process with stdout/stderr appended to log_file."""
    log_path = Path(cwd) / log_file
    with open(log_path, "ab") as out:
        proc = subprocess.Popen(
            argv,
            cwd=str(cwd),
            stdout=out,
            stderr=subprocess.STDOUT,
            stdin=subprocess.DEVNULL,
            start_new_session=True,
            env=os.environ.copy(),
        )
    log(f"PASS: started {' '.join(argv)} pid={proc.pid} log={log_path}")
    return proc


def wait_for_startup(seconds: float) -> None:
    log(f"Waiting {seconds}s for services to start")
    time.sleep(seconds)
