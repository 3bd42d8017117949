#!/usr/bin/env python3
"""CLI to provision a local Frappe/ERPNext/HRMS bench.

Inputs: mode, site and install dir via CLI flags (defaults from config).
Side effects: installs system packages, configures MariaDB and Redis,
installs the bench CLI, clones or initialises a bench, renders configs,
creates the site, builds assets, starts services in the background and
checks the web server. Stops at the first failing stage.
"""
import logging
import os
import subprocess
import sys
from dataclasses import dataclass, field
from typing import Callable

from config import (
    ADMIN_PASSWORD,
    APPS,
    BENCH_LOG,
    BRANDING_RULES,
    DB_ROOT_PASSWORD,
    DEPLOY_USER,
    FRAPPE_BRANCH,
    FRAPPE_PASSWORD,
    FRAPPE_USER,
    FRONTEND_APP,
    INSTALL_DIR,
    KILL_PATTERN,
    MODE_CLONE,
    MODE_INIT,
    REPO_URL,
    REQUIRED_COMMANDS,
    SITE_NAME,
    STARTUP_WAIT,
    STOP_WAIT,
    VERIFY_PATHS,
    WEB_PORT,
)
from modules import cache, mariadb, packages, preflight, services, verify
from modules.bench import assets, branding, installer, repo, site as bench_site, templater
from modules.bench.cli import bench_argv
from modules.utils import init_logging, log, status_fail, status_pass, RID_ENV

# ─── CONFIG ──────────────────────────────────────────────────────────────
FLAG_DEPLOY = "--deploy"
FLAG_MODE = "--mode"
FLAG_SITE = "--site"
FLAG_DIR = "--dir"
FLAG_SKIP = "--skip"
FLAG_NO_USER_CHECK = "--no-user-check"
MODES = (MODE_CLONE, MODE_INIT)


@dataclass
class Deployment:
    mode: str = MODE_CLONE
    site: str = SITE_NAME
    install_dir: str = INSTALL_DIR
    user: str = DEPLOY_USER
    skip: set[str] = field(default_factory=set)
    db_name: str = ""


# ─── Orchestration Steps ───────────────────────────────────────────────
def step_preflight(dep: Deployment) -> bool:
    return preflight.run_preflight(REQUIRED_COMMANDS, dep.user)


def step_packages(dep: Deployment) -> bool:
    return packages.install_system_packages(dep.mode)


def step_mariadb(dep: Deployment) -> bool:
    if not mariadb.start_mariadb():
        return False
    mariadb.configure_server(DB_ROOT_PASSWORD)
    mariadb.ensure_app_user(DB_ROOT_PASSWORD, FRAPPE_USER, FRAPPE_PASSWORD)
    return True


def step_redis(dep: Deployment) -> bool:
    return cache.start_redis_service()


def step_bench_cli(dep: Deployment) -> bool:
    return installer.ensure_bench_cli()


def step_repo(dep: Deployment) -> bool:
    if not repo.remove_install_dir(dep.install_dir):
        return False
    if dep.mode == MODE_INIT:
        return repo.init_bench(dep.install_dir, FRAPPE_BRANCH)
    return repo.clone_repository(REPO_URL, dep.install_dir)


def step_configs(dep: Deployment) -> bool:
    if dep.mode == MODE_INIT:
        log("SKIP: bench init writes its own configs")
        return True
    report = templater.setup_configs(dep.install_dir, dep.site)
    log(f"configs generated={len(report.generated)} missing={len(report.missing)}")
    return True


def step_venv(dep: Deployment) -> bool:
    if dep.mode == MODE_INIT:
        return True
    if not installer.setup_virtualenv(dep.install_dir):
        return False
    return installer.install_apps_editable(dep.install_dir, APPS)


def step_site(dep: Deployment) -> bool:
    if dep.mode == MODE_INIT:
        db_name = bench_site.create_site_init_mode(
            dep.install_dir, dep.site, DB_ROOT_PASSWORD, ADMIN_PASSWORD
        )
    else:
        db_name = bench_site.create_site_clone_mode(
            dep.install_dir,
            dep.site,
            DB_ROOT_PASSWORD,
            FRAPPE_USER,
            ADMIN_PASSWORD,
            APPS,
        )
    if not db_name:
        return False
    dep.db_name = db_name
    return True


def step_branding(dep: Deployment) -> bool:
    touched = branding.apply_branding(dep.install_dir, BRANDING_RULES)
    log(f"branding touched {touched} file(s)")
    return True


def step_assets(dep: Deployment) -> bool:
    if dep.mode == MODE_CLONE:
        if not assets.build_app_frontend(dep.install_dir, FRONTEND_APP):
            return False
    return assets.build_assets(dep.install_dir, dep.site, dep.mode)


def step_services(dep: Deployment) -> bool:
    services.stop_existing(KILL_PATTERN, pause=STOP_WAIT)
    if dep.mode == MODE_CLONE:
        if not cache.start_bench_redis(dep.install_dir):
            return False
    try:
        services.start_background(
            bench_argv(dep.install_dir, dep.mode) + ["start"], dep.install_dir, BENCH_LOG
        )
    except OSError as err:
        status_fail(f"could not start bench: {err}")
        return False
    services.wait_for_startup(STARTUP_WAIT)
    return True


def step_verify(dep: Deployment) -> bool:
    verify.verify_deployment(dep.site, WEB_PORT, VERIFY_PATHS)
    return True


STAGES: list[tuple[str, Callable[[Deployment], bool]]] = [
    ("preflight", step_preflight),
    ("packages", step_packages),
    ("mariadb", step_mariadb),
    ("redis", step_redis),
    ("bench-cli", step_bench_cli),
    ("repo", step_repo),
    ("configs", step_configs),
    ("venv", step_venv),
    ("site", step_site),
    ("branding", step_branding),
    ("assets", step_assets),
    ("services", step_services),
    ("verify", step_verify),
]


def deploy(dep: Deployment) -> bool:
    for name, step in STAGES:
        if name in dep.skip:
            log(f"SKIP: stage {name}")
            continue
        log(f"STAGE: {name}")
        try:
            ok = step(dep)
        except (subprocess.CalledProcessError, OSError) as err:
            logging.error("stage %s raised: %s", name, err)
            ok = False
        if not ok:
            status_fail(f"{name} failed; see log")
            return False
        status_pass(name)
    return True


def print_summary(dep: Deployment) -> None:
    base = verify.site_url(dep.site, WEB_PORT)
    runner = " ".join(bench_argv(dep.install_dir, dep.mode))
    lines = [
        "",
        "=" * 42,
        "Deployment Complete!",
        "=" * 42,
        "",
        "Access Information:",
        f"   Main Application: {base}",
        f"   HRMS Frontend: {base}/hrms",
        "",
        "Login Credentials:",
        "   Username: Administrator",
        f"   Password: {ADMIN_PASSWORD}",
        "",
        "Installation Details:",
        f"   Directory: {dep.install_dir}",
        f"   Site Name: {dep.site}",
        f"   Database: {dep.db_name or '-'}",
        f"   Logs: {os.path.join(dep.install_dir, BENCH_LOG)}",
        "",
        "Management Commands:",
        f"   Stop: cd {dep.install_dir} && {runner} stop",
        f"   Start: cd {dep.install_dir} && {runner} start",
        f"   Restart: cd {dep.install_dir} && {runner} restart",
        "=" * 42,
    ]
    print("\n".join(lines))


# ─── CLI ──────────────────────────────────────────────────────────────
def parse_args(argv: list[str]) -> Deployment | None:
    if FLAG_DEPLOY not in argv:
        return None
    dep = Deployment()
    for a in argv:
        if a.startswith(f"{FLAG_MODE}="):
            dep.mode = a.split("=", 1)[1]
        elif a.startswith(f"{FLAG_SITE}="):
            dep.site = a.split("=", 1)[1]
        elif a.startswith(f"{FLAG_DIR}="):
            dep.install_dir = a.split("=", 1)[1]
        elif a.startswith(f"{FLAG_SKIP}="):
            dep.skip = {s.strip() for s in a.split("=", 1)[1].split(",") if s.strip()}
        elif a == FLAG_NO_USER_CHECK:
            dep.user = ""
    return dep


def main(argv: list[str]) -> int:
    rid = init_logging(None)
    dep = parse_args(argv)
    if dep is None:
        status_fail(
            "usage: --deploy [--mode=clone|init] [--site=NAME] [--dir=PATH] "
            "[--skip=STAGE,...] [--no-user-check]"
        )
        return 1
    if dep.mode not in MODES:
        status_fail(f"unknown mode {dep.mode}")
        return 1
    unknown = dep.skip - {name for name, _ in STAGES}
    if unknown:
        status_fail(f"unknown stage(s): {', '.join(sorted(unknown))}")
        return 1
    # Ensure subprocs inherit run-id
    os.environ[RID_ENV] = rid
    print(f"Repository: {REPO_URL}")
    print(f"Install Directory: {dep.install_dir}")
    print(f"Site Name: {dep.site}")
    if not deploy(dep):
        return 1
    print_summary(dep)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
