"""System package installation through apt, dpkg and npm."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from config import (
    SYSTEM_PACKAGES,
    MINIMAL_PACKAGES,
    WKHTMLTOPDF_URL,
    DOWNLOAD_DIR,
    MODE_INIT,
)
from modules.utils import run_cmd, log


def apt_update() -> bool:
    try:
        run_cmd(["sudo", "apt-get", "update", "-qq"])
        return True
    except (subprocess.CalledProcessError, OSError) as err:
        logging.error("apt-get update failed: %s", err)
        return False


def apt_install(packages: list[str]) -> bool:
    if not packages:
        return True
    try:
        run_cmd(["sudo", "apt-get", "install", "-y"] + list(packages))
        log(f"PASS: apt installed {len(packages)} packages")
        return True
    except (subprocess.CalledProcessError, OSError) as err:
        logging.error("apt-get install failed: %s packages=%s", err, packages)
        return False


def _download(url: str, dest: Path) -> bool:
    """Fetch url into dest unless a non-empty copy is already there."""
    if dest.exists() and dest.stat().st_size > 0:
        log(f"Using cached {dest}")
        return True
    part = dest.with_name(dest.name + ".part")
    try:
        run_cmd(["wget", "-q", "-O", str(part), url])
        os.replace(part, dest)
    except (subprocess.CalledProcessError, OSError) as err:
        logging.error("Could not download %s: %s", url, err)
        if part.exists():
            part.unlink()
        return False
    return True


def install_wkhtmltopdf(url: str = WKHTMLTOPDF_URL, cache_dir: str | None = None) -> bool:
    deb = Path(cache_dir or DOWNLOAD_DIR) / url.rsplit("/", 1)[-1]
    if not _download(url, deb):
        return False
    try:
        run_cmd(["sudo", "dpkg", "-i", str(deb)])
        log("PASS: wkhtmltopdf installed")
        return True
    except (subprocess.CalledProcessError, OSError):
        log("dpkg -i failed; resolving dependencies with apt-get -f")
    try:
        run_cmd(["sudo", "apt-get", "install", "-f", "-y"])
        return True
    except (subprocess.CalledProcessError, OSError) as err:
        logging.error("apt-get install -f failed: %s", err)
        return False


def install_yarn() -> bool:
    try:
        run_cmd(["sudo", "npm", "install", "-g", "yarn"])
        return True
    except (subprocess.CalledProcessError, OSError) as err:
        logging.error("npm install -g yarn failed: %s", err)
        return False


def install_system_packages(mode: str) -> bool:
    if not apt_update():
        return False
    if mode == MODE_INIT:
        return apt_install(MINIMAL_PACKAGES)
    if not apt_install(SYSTEM_PACKAGES):
        return False
    if not install_wkhtmltopdf():
        return False
    if not install_yarn():
        return False
    return True
