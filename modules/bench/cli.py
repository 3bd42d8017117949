# cli.py
# Invariants:
# - All bench access goes through these wrappers; callers pass bare subcommands.
# - clone mode drives the framework through the bench venv interpreter
#   (python -m frappe.utils.bench); init mode uses the bench CLI on PATH.
# - Logs: one PASS/FAIL per call; console stays minimal; file logs keep details.
# - Displayed commands in logs always start with "bench", secrets masked.

from __future__ import annotations

import logging
import os
import subprocess
import time
from pathlib import Path
from typing import Tuple

from config import MODE_INIT, VENV_DIR
from modules.utils import log

BENCH_TIMEOUT = int(os.environ.get("BENCH_TIMEOUT", "3600"))  # seconds
SECRET_FLAGS = ("--admin-password", "--mariadb-root-password", "--db-password")


def venv_python(bench_dir: str | Path) -> Path:
    return Path(bench_dir) / VENV_DIR / "bin" / "python"


def bench_argv(bench_dir: str | Path, mode: str) -> list[str]:
    if mode == MODE_INIT:
        return ["bench"]
    return [str(venv_python(bench_dir)), "-m", "frappe.utils.bench"]


def _fmt_cmd_for_log(args: list[str]) -> str:
    out: list[str] = ["bench"]
    hide_next = False
    for a in args:
        if hide_next:
            out.append("***")
            hide_next = False
            continue
        if a in SECRET_FLAGS:
            hide_next = True
        elif a.startswith("set-admin-password"):
            hide_next = True
        out.append(a)
    return " ".join(out)


def _bench_run(
    bench_dir: str | Path, args: list[str], mode: str, timeout: int = BENCH_TIMEOUT
) -> Tuple[bool, str, str, int]:
    argv = bench_argv(bench_dir, mode) + list(args)
    shown = _fmt_cmd_for_log(list(args))
    t0 = time.monotonic()
    try:
        proc = subprocess.run(
            argv,
            cwd=str(bench_dir),
            text=True,
            capture_output=True,
            timeout=timeout,
            env=os.environ.copy(),
            encoding="utf-8",
            errors="replace",
        )
    except subprocess.TimeoutExpired:
        dt = time.monotonic() - t0
        logging.error("%s timeout after %.1fs", shown, dt)
        return False, "", f"timeout after {dt:.1f}s", 124
    except OSError as err:
        logging.error("%s could not start: %s", shown, err)
        return False, "", str(err), 127

    dt = time.monotonic() - t0
    ok = proc.returncode == 0
    if ok:
        log(f"PASS: {shown} ({dt:.1f}s)")
    else:
        logging.error(
            "%s exit=%s\nSTDERR: %s",
            shown,
            proc.returncode,
            (proc.stderr or "").strip(),
        )
    return ok, (proc.stdout or ""), (proc.stderr or ""), proc.returncode


def bench_cmd(bench_dir: str | Path, args: list[str], mode: str, timeout: int = BENCH_TIMEOUT) -> bool:
    ok, _, _, _ = _bench_run(bench_dir, args, mode, timeout=timeout)
    return ok


def site_args(site: str, mode: str, subcommand: list[str]) -> list[str]:
    """Place the site selector where each entry point expects it."""
    if mode == MODE_INIT:
        return ["--site", site] + subcommand
    return subcommand + ["--site", site]
