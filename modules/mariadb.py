"""MariaDB helpers used by the deployment pipeline."""

from __future__ import annotations

import logging
import re
import subprocess

from modules.services import start_and_enable
from modules.utils import log, status_warn

IDENTIFIED_BY = re.compile(r"IDENTIFIED BY '[^']*'")

SERVER_SETTINGS = [
    "SET GLOBAL innodb_file_per_table=1;",
    "SET GLOBAL character_set_server=utf8mb4;",
    "SET GLOBAL collation_server=utf8mb4_unicode_ci;",
]


def _mysql_argv(sql: str, root_password: str | None) -> list[str]:
    argv = ["sudo", "mysql"]
    if root_password:
        argv += ["-u", "root", f"-p{root_password}"]
    return argv + ["-e", sql]


def _mysql_try(sql: str, root_password: str | None = None) -> tuple[int, str, str]:
    try:
        proc = subprocess.run(
            _mysql_argv(sql, root_password), text=True, capture_output=True, check=True
        )
        return proc.returncode, (proc.stdout or ""), (proc.stderr or "")
    except subprocess.CalledProcessError as exc:
        return exc.returncode, (exc.stdout or ""), (exc.stderr or "")
    except OSError as exc:
        return 127, "", str(exc)


def _mask(text: str, root_password: str | None) -> str:
    text = IDENTIFIED_BY.sub("IDENTIFIED BY '***'", text)
    if root_password:
        text = text.replace(root_password, "***")
    return text


def run_mysql(sql: str, root_password: str | None = None) -> bool:
    rc, out, err = _mysql_try(sql, root_password)
    msg = f"SQL: {sql}\nEXIT: {rc}\nSTDOUT: {(out or '').strip()}\nSTDERR: {(err or '').strip()}"
    msg = _mask(msg, root_password)
    if rc == 0:
        log(f"PASS: {msg}")
        return True
    logging.error(msg)
    return False


def _run_guarded(sql: str, warning: str, root_password: str | None = None) -> bool:
    if run_mysql(sql, root_password):
        return True
    status_warn(warning)
    return False


def _mysql_query(sql: str, root_password: str | None = None) -> tuple[int, str, str]:
    rc, out, err = _mysql_try(sql, root_password)
    return rc, (out or "").strip(), (err or "").strip()


def start_mariadb() -> bool:
    return start_and_enable("mariadb")


def configure_server(root_password: str) -> None:
    for sql in SERVER_SETTINGS:
        name = sql.split()[2].split("=")[0]
        _run_guarded(sql, f"Could not set {name}")
    _run_guarded(
        f"ALTER USER 'root'@'localhost' IDENTIFIED BY '{root_password}';",
        "Could not set root password",
    )


def ensure_app_user(root_password: str, user: str, password: str) -> None:
    _run_guarded(
        f"CREATE USER IF NOT EXISTS '{user}'@'localhost' IDENTIFIED BY '{password}';",
        f"Could not create {user} user",
        root_password,
    )
    _run_guarded(
        f"GRANT ALL PRIVILEGES ON *.* TO '{user}'@'localhost' WITH GRANT OPTION;",
        "Could not grant privileges",
        root_password,
    )
    _run_guarded("FLUSH PRIVILEGES;", "Could not flush privileges", root_password)


def ensure_site_database(root_password: str, db_name: str, user: str) -> bool:
    if not run_mysql(f"CREATE DATABASE IF NOT EXISTS `{db_name}`;", root_password):
        return False
    if not run_mysql(
        f"GRANT ALL PRIVILEGES ON `{db_name}`.* TO '{user}'@'localhost';", root_password
    ):
        return False
    return True


def database_exists(dbname: str, root_password: str | None = None) -> bool:
    sql = (
        "SELECT SCHEMA_NAME FROM INFORMATION_SCHEMA.SCHEMATA "
        f"WHERE SCHEMA_NAME='{dbname}';"
    )
    rc, out, _ = _mysql_query(sql, root_password)
    if rc != 0:
        return False
    return bool(out)


def user_exists(dbuser: str, root_password: str | None = None) -> bool:
    sql = (
        "SELECT 1 FROM mysql.user "
        f"WHERE user='{dbuser}' AND host='localhost';"
    )
    rc, out, _ = _mysql_query(sql, root_password)
    if rc != 0:
        return False
    return bool(out)
