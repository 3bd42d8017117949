"""Shared configuration constants for benchlocal.

Centralizes paths, credentials and package lists used by modules.
A few values can be overridden from the environment.
"""

import os

REPO_URL = "https://github.com/AkhileshMishra/HRDL8.git"
INSTALL_ROOT = "/home/ubuntu"
INSTALL_DIR = os.environ.get("BENCHLOCAL_INSTALL_DIR", f"{INSTALL_ROOT}/hrdl8-deployment")
SITE_NAME = os.environ.get("BENCHLOCAL_SITE", "hrdl8.local")
DEPLOY_USER = "ubuntu"
DB_ROOT_PASSWORD = os.environ.get("BENCHLOCAL_DB_ROOT_PASSWORD", "admin123")
ADMIN_PASSWORD = os.environ.get("BENCHLOCAL_ADMIN_PASSWORD", "admin123")
FRAPPE_USER = "frappe"
FRAPPE_PASSWORD = "frappe123"
FRAPPE_BRANCH = "version-15"
HOSTS_FILE = "/etc/hosts"
LOCALHOST_IP = "127.0.0.1"
WEB_PORT = 8000
PYTHON_BIN = "python3.11"
VENV_DIR = "env"
BENCH_LOG = "bench.log"

STARTUP_WAIT = int(os.environ.get("BENCHLOCAL_STARTUP_WAIT", "15"))  # seconds
STOP_WAIT = 3  # seconds
HTTP_TIMEOUT = int(os.environ.get("BENCHLOCAL_HTTP_TIMEOUT", "10"))  # seconds

REQUIRED_COMMANDS = ["git", "python3", "pip3", "mysql", "redis-server"]

SYSTEM_PACKAGES = [
    "python3.11",
    "python3.11-dev",
    "python3.11-venv",
    "python3-pip",
    "nodejs",
    "npm",
    "mariadb-server",
    "mariadb-client",
    "redis-server",
    "libffi-dev",
    "liblcms2-dev",
    "libldap2-dev",
    "libmariadb-dev",
    "libsasl2-dev",
    "libtiff5-dev",
    "libwebp-dev",
    "python3-dev",
    "python3-setuptools",
    "build-essential",
    "git",
    "curl",
    "wget",
    "supervisor",
    "nginx",
]
# bench init pulls the rest itself
MINIMAL_PACKAGES = [
    "git",
    "python3-venv",
    "python3-pip",
    "curl",
    "wget",
    "mariadb-server",
    "redis-server",
]

WKHTMLTOPDF_URL = (
    "https://github.com/wkhtmltopdf/packaging/releases/download/"
    "0.12.6.1-2/wkhtmltox_0.12.6.1-2.jammy_amd64.deb"
)
DOWNLOAD_DIR = "/tmp"

APPS = ["frappe", "erpnext", "hrms"]
FRONTEND_APP = "hrms"
VERIFY_PATHS = ["", "/hrms"]
# bracketed first letters keep pkill from matching its own sudo wrapper
KILL_PATTERN = "[b]ench start|[f]rappe|[r]edis-server"

# (relative path, old text, new text)
BRANDING_RULES = [
    ("apps/frappe/frappe/www/login.html", "Login to Frappe", "Login to HRDL8_MAIN"),
    ("apps/hrms/hrms/public/js/login.js", "Login to Frappe HR", "Login to HRDL8"),
]

MODE_CLONE = "clone"
MODE_INIT = "init"
