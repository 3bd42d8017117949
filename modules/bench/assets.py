"""Frontend builds: per-app npm projects and the framework asset build."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from config import MODE_INIT
from modules.utils import run_cmd, log
from .cli import bench_cmd


def build_app_frontend(bench_dir: str | Path, app: str) -> bool:
    frontend = Path(bench_dir) / "apps" / app / "frontend"
    if not (frontend / "package.json").is_file():
        log(f"SKIP: no frontend package.json for {app}")
        return True
    try:
        run_cmd(["npm", "install"], cwd=frontend)
        run_cmd(["npm", "run", "build"], cwd=frontend)
    except (subprocess.CalledProcessError, OSError) as err:
        logging.error("frontend build for %s failed: %s", app, err)
        return False
    log(f"PASS: built {app} frontend")
    return True


def build_assets(bench_dir: str | Path, site: str, mode: str) -> bool:
    if mode == MODE_INIT:
        return bench_cmd(bench_dir, ["build"], mode)
    return bench_cmd(bench_dir, ["build", "--site", site], mode)
