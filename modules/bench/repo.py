"""Get a bench onto disk: git clone of a prepared repo, or bench init."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from config import INSTALL_ROOT
from modules.utils import run_cmd, log, status_fail


def _is_safe_install_dir(path: Path, root: str) -> bool:
    try:
        resolved = path.resolve()
        base = Path(root).resolve()
    except OSError:
        return False
    return resolved != base and resolved.is_relative_to(base)


def remove_install_dir(path: str | Path, root: str = INSTALL_ROOT) -> bool:
    target = Path(path)
    if not target.exists():
        return True
    if not _is_safe_install_dir(target, root):
        status_fail(f"unsafe remove path {target}")
        return False
    log(f"Removing existing installation {target}")
    try:
        run_cmd(["rm", "-rf", str(target)])
    except (subprocess.CalledProcessError, OSError):
        status_fail(f"could not remove install dir {target}")
        return False
    return True


def clone_repository(url: str, dest: str | Path) -> bool:
    try:
        run_cmd(["git", "clone", url, str(dest)])
    except (subprocess.CalledProcessError, OSError) as err:
        logging.error("git clone %s failed: %s", url, err)
        return False
    log(f"PASS: cloned {url} into {dest}")
    return True


def init_bench(dest: str | Path, branch: str) -> bool:
    try:
        run_cmd(["bench", "init", "--frappe-branch", branch, str(dest)])
    except (subprocess.CalledProcessError, OSError) as err:
        logging.error("bench init failed: %s", err)
        return False
    log(f"PASS: bench initialized at {dest} ({branch})")
    return True
