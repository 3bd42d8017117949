"""Site creation: site_config.json, database, app install, admin password."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from config import HOSTS_FILE, LOCALHOST_IP, MODE_CLONE, MODE_INIT
from modules import dns
from modules.mariadb import ensure_site_database
from modules.utils import db_ident, generate_encryption_key, generate_password, log
from .cli import bench_cmd, site_args

DB_TYPE = "mariadb"
DB_HOST = "localhost"
DB_PORT = 3306
EMPLOYEE_SELF_SERVICE_LIMIT = 40


def site_db_name(site: str) -> str:
    return f"{db_ident(site)}_db"


def site_dir(bench_dir: str | Path, site: str) -> Path:
    return Path(bench_dir) / "sites" / site


def build_site_config(db_name: str, db_password: str, encryption_key: str) -> dict:
    return {
        "db_name": db_name,
        "db_password": db_password,
        "db_type": DB_TYPE,
        "db_host": DB_HOST,
        "db_port": DB_PORT,
        "auto_update": False,
        "encryption_key": encryption_key,
        "user_type_doctype_limit": {
            "employee_self_service": EMPLOYEE_SELF_SERVICE_LIMIT,
        },
    }


def write_site_config(bench_dir: str | Path, site: str, data: dict) -> Path:
    target = site_dir(bench_dir, site) / "site_config.json"
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(data, indent=1) + "\n", encoding="utf-8")
    log(f"PASS: wrote {target}")
    return target


def install_site_apps(bench_dir: str | Path, site: str, apps: list[str], mode: str) -> bool:
    for app in apps:
        if not bench_cmd(bench_dir, site_args(site, mode, ["install-app", app]), mode):
            logging.error("install-app %s failed for %s", app, site)
            return False
    return True


def set_admin_password(bench_dir: str | Path, site: str, password: str, mode: str) -> bool:
    return bench_cmd(bench_dir, site_args(site, mode, ["set-admin-password", password]), mode)


def create_site_clone_mode(
    bench_dir: str | Path,
    site: str,
    root_password: str,
    db_user: str,
    admin_password: str,
    apps: list[str],
    hosts_file: str = HOSTS_FILE,
) -> str | None:
    """Prepare and install a site in a cloned bench.

    Returns the database name, or None on failure.
    """
    if not dns.add_host(LOCALHOST_IP, site, hosts_file=hosts_file):
        return None
    db_name = site_db_name(site)
    config = build_site_config(db_name, generate_password(), generate_encryption_key())
    write_site_config(bench_dir, site, config)
    if not ensure_site_database(root_password, db_name, db_user):
        return None
    if not install_site_apps(bench_dir, site, apps, MODE_CLONE):
        return None
    if not set_admin_password(bench_dir, site, admin_password, MODE_CLONE):
        return None
    log(f"PASS: site {site} created (db {db_name})")
    return db_name


def create_site_init_mode(
    bench_dir: str | Path,
    site: str,
    root_password: str,
    admin_password: str,
    extra_app: str = "hrms",
) -> str | None:
    db_name = site_db_name(site)
    new_site = [
        "new-site",
        site,
        "--db-name",
        db_name,
        "--mariadb-root-password",
        root_password,
        "--admin-password",
        admin_password,
        "--install-app",
        "erpnext",
    ]
    if not bench_cmd(bench_dir, new_site, MODE_INIT):
        return None
    if not bench_cmd(bench_dir, ["get-app", extra_app], MODE_INIT):
        return None
    if not install_site_apps(bench_dir, site, [extra_app], MODE_INIT):
        return None
    log(f"PASS: site {site} created (db {db_name})")
    return db_name
