"""Install the bench CLI, the bench virtualenv and app packages."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path

from config import PYTHON_BIN, VENV_DIR
from modules.utils import run_cmd, log

BENCH_PACKAGE = "frappe-bench"
PATH_EXPORT = 'export PATH=$HOME/.local/bin:$PATH'


def local_bin() -> Path:
    return Path.home() / ".local" / "bin"


def ensure_local_bin_on_path(bashrc: Path | None = None) -> bool:
    """Put ~/.local/bin on PATH now and for future login shells.

    Returns True when anything changed.
    """
    bin_dir = str(local_bin())
    parts = os.environ.get("PATH", "").split(os.pathsep)
    if bin_dir in parts:
        return False
    os.environ["PATH"] = os.pathsep.join([bin_dir] + [p for p in parts if p])
    rc = bashrc or (Path.home() / ".bashrc")
    existing = rc.read_text() if rc.exists() else ""
    if PATH_EXPORT not in existing:
        with rc.open("a", encoding="utf-8") as fh:
            fh.write(f"{PATH_EXPORT}\n")
        log(f"PASS: Added ~/.local/bin to PATH in {rc}")
    return True


def ensure_bench_cli() -> bool:
    if shutil.which("bench") is not None:
        log("bench already on PATH")
        return True
    try:
        run_cmd(["pip3", "install", BENCH_PACKAGE])
    except (subprocess.CalledProcessError, OSError) as err:
        logging.error("pip3 install %s failed: %s", BENCH_PACKAGE, err)
        return False
    ensure_local_bin_on_path()
    return True


def setup_virtualenv(bench_dir: str | Path) -> bool:
    root = Path(bench_dir)
    venv = root / VENV_DIR
    pip = str(venv / "bin" / "pip")
    try:
        if not venv.is_dir():
            run_cmd([PYTHON_BIN, "-m", "venv", VENV_DIR], cwd=root)
        run_cmd([pip, "install", "--upgrade", "pip"], cwd=root)
        run_cmd([pip, "install", BENCH_PACKAGE], cwd=root)
    except (subprocess.CalledProcessError, OSError) as err:
        logging.error("Could not prepare virtualenv in %s: %s", venv, err)
        return False
    log(f"PASS: virtualenv ready at {venv}")
    return True


def install_apps_editable(bench_dir: str | Path, apps: list[str]) -> bool:
    root = Path(bench_dir)
    pip = str(root / VENV_DIR / "bin" / "pip")
    for app in apps:
        app_dir = root / "apps" / app
        try:
            run_cmd([pip, "install", "-e", "."], cwd=app_dir)
        except (subprocess.CalledProcessError, OSError) as err:
            logging.error("pip install -e %s failed: %s", app_dir, err)
            return False
        log(f"PASS: installed app {app}")
    return True
