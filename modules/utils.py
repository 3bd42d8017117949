"""Utility helpers kept dependency-free.

- init_logging: configure console + file logging with run-id.
- status_pass/status_warn/status_fail: concise console status lines (with run-id).
- run_cmd: thin wrapper over subprocess.run with check + text enabled.
- try_cmd: run_cmd variant that reports failure as a warning and returns False.
- log: debug-level logger for normal status lines (file-oriented).
- db_ident: normalized identifier for DB/user names.
- generate_password/generate_encryption_key: random secrets for site configs.
- apply_placeholders: literal placeholder substitution.
"""

import base64
import logging
import os
from logging.handlers import RotatingFileHandler
import secrets
import subprocess
from pathlib import Path
from typing import List


_RUN_ID = ""
RID_ENV = "BENCHLOCAL_RID"


def _gen_run_id() -> str:
    try:
        import uuid

        return uuid.uuid4().hex[:8]
    except Exception:
        return "00000000"


def init_logging(run_id: str | None = None) -> str:
    """Initialize logging with console + rotating file handlers.

    - Console: minimal, intended for terse status only.
    - File: DEBUG+, rich format, written to log/benchlocal-<rid>.log
    Returns the run-id used.
    """
    global _RUN_ID
    if _RUN_ID:
        return _RUN_ID

    rid = run_id or os.environ.get(RID_ENV) or _gen_run_id()
    _RUN_ID = rid

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Project root = parent of 'modules'
    try:
        root_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
        log_dir = os.path.join(root_dir, "log")
        os.makedirs(log_dir, exist_ok=True)
        logfile = os.path.join(log_dir, f"benchlocal-{rid}.log")
    except OSError:
        logfile = os.path.abspath(f"benchlocal-{rid}.log")

    # Quiet any pre-existing console handlers
    for h in root.handlers:
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler):
            h.setLevel(logging.CRITICAL)

    has_file = False
    for h in root.handlers:
        if isinstance(h, RotatingFileHandler) and getattr(h, "baseFilename", "").endswith(
            os.path.basename(logfile)
        ):
            has_file = True
            break
    if not has_file:
        fh = RotatingFileHandler(logfile, maxBytes=5 * 1024 * 1024, backupCount=3)
        fh.setLevel(logging.DEBUG)
        ffmt = logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
        fh.setFormatter(ffmt)
        root.addHandler(fh)

    # Add a super-quiet console handler if none exist
    if not any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in root.handlers
    ):
        ch = logging.StreamHandler()
        ch.setLevel(logging.CRITICAL)
        cfmt = logging.Formatter("%(levelname)s: %(message)s")
        ch.setFormatter(cfmt)
        root.addHandler(ch)

    logging.debug("Logging initialized. run_id=%s file=%s", rid, logfile)
    os.environ[RID_ENV] = rid
    return rid


def _rid() -> str:
    return _RUN_ID or os.environ.get(RID_ENV, "--------")


def status_pass(msg: str) -> None:
    print(f"PASS: {msg} [{_rid()}]")


def status_warn(msg: str) -> None:
    logging.warning(msg)
    print(f"WARN: {msg} [{_rid()}]")


def status_fail(msg: str) -> None:
    print(f"FAIL: {msg} [{_rid()}]", flush=True)


def run_cmd(args: List[str], cwd: str | Path | None = None, env: dict | None = None) -> None:
    logging.debug("RUN: %s (cwd=%s)", " ".join(args), cwd or ".")
    subprocess.run(args, check=True, text=True, cwd=cwd, env=env)


def try_cmd(args: List[str], warning: str, cwd: str | Path | None = None) -> bool:
    """Run a guarded command; on failure emit a warning and return False."""
    try:
        run_cmd(args, cwd=cwd)
        return True
    except (subprocess.CalledProcessError, OSError) as err:
        logging.debug("guarded command failed: %s", err)
        status_warn(warning)
        return False


def log(msg: str) -> None:
    # File-oriented normal progress; stays out of console noise.
    logging.debug(msg)


def db_ident(domain: str) -> str:
    parts: list[str] = []
    for char in domain:
        if char.isalnum():
            parts.append(char)
            continue
        parts.append("_")
    identifier = "".join(parts)
    return identifier


def require(condition: bool, message: str, level: str = "info") -> bool:
    if condition:
        return True

    if level == "error":
        logging.error(f"SKIP: {message}")
    elif level == "warning":
        logging.warning(f"SKIP: {message}")
    else:
        log(f"SKIP: {message}")

    return False


def generate_password(length: int = 16) -> str:
    # base64 of 32 random bytes with "=+/" stripped, then truncated
    raw = base64.b64encode(secrets.token_bytes(32)).decode("ascii")
    cleaned = raw.translate(str.maketrans("", "", "=+/"))
    while len(cleaned) < length:
        more = base64.b64encode(secrets.token_bytes(32)).decode("ascii")
        cleaned += more.translate(str.maketrans("", "", "=+/"))
    return cleaned[:length]


def generate_encryption_key() -> str:
    return base64.b64encode(secrets.token_bytes(32)).decode("ascii")


def apply_placeholders(text: str, mapping: dict[str, str] | None = None) -> str:
    if not mapping:
        return text

    updated = text
    for key, value in mapping.items():
        updated = updated.replace(key, value)

    return updated
