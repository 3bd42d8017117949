"""Redis service and bench-local redis instances."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from modules.services import start_and_enable, check_service
from modules.utils import run_cmd, log

REDIS_UNIT = "redis-server"


def start_redis_service() -> bool:
    if not start_and_enable(REDIS_UNIT):
        return False
    return check_service(REDIS_UNIT)


def start_redis_with_config(conf: str | Path) -> bool:
    conf_path = Path(conf)
    if not conf_path.exists():
        log(f"SKIP: redis conf not found: {conf_path}")
        return False
    try:
        run_cmd(["redis-server", str(conf_path), "--daemonize", "yes"])
    except (subprocess.CalledProcessError, OSError) as err:
        logging.error("redis-server %s failed: %s", conf_path, err)
        return False
    log(f"PASS: redis-server started with {conf_path.name}")
    return True


def start_bench_redis(bench_dir: str | Path) -> bool:
    """Start the cache and queue instances that have a rendered conf.

    A missing conf is skipped; a conf that fails to start is fatal.
    """
    for name in ("redis_cache.conf", "redis_queue.conf"):
        conf = Path(bench_dir) / "config" / name
        if not conf.exists():
            continue
        if not start_redis_with_config(conf):
            return False
    return True
