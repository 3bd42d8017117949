"""Run single bench stages against an existing bench directory."""

from __future__ import annotations

import sys

from config import (
    APPS,
    ADMIN_PASSWORD,
    BRANDING_RULES,
    DB_ROOT_PASSWORD,
    FRAPPE_USER,
    FRONTEND_APP,
    MODE_CLONE,
)
from modules.utils import init_logging, status_fail, status_pass
from .assets import build_app_frontend, build_assets
from .branding import apply_branding
from .installer import install_apps_editable, setup_virtualenv
from .site import create_site_clone_mode
from .templater import setup_configs

USAGE = "usage: configs|venv|apps|site|assets|brand <bench_dir> [site]"


def main() -> int:
    init_logging(None)
    argv = sys.argv[1:]
    if len(argv) < 2:
        status_fail(USAGE)
        return 1
    cmd, bench_dir = argv[0], argv[1]
    site = argv[2] if len(argv) > 2 else None
    if cmd in ("configs", "site", "assets") and not site:
        status_fail("missing site")
        return 1
    if cmd == "configs":
        setup_configs(bench_dir, site)
        return 0
    if cmd == "venv":
        return 0 if setup_virtualenv(bench_dir) else 1
    if cmd == "apps":
        return 0 if install_apps_editable(bench_dir, APPS) else 1
    if cmd == "site":
        db_name = create_site_clone_mode(
            bench_dir, site, DB_ROOT_PASSWORD, FRAPPE_USER, ADMIN_PASSWORD, APPS
        )
        return 0 if db_name else 1
    if cmd == "assets":
        if not build_app_frontend(bench_dir, FRONTEND_APP):
            return 1
        return 0 if build_assets(bench_dir, site, MODE_CLONE) else 1
    if cmd == "brand":
        touched = apply_branding(bench_dir, BRANDING_RULES)
        status_pass(f"branding applied to {touched} file(s)")
        return 0
    status_fail("unknown subcommand")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
