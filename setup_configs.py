#!/usr/bin/env python3
"""Generate bench configuration files from templates with correct paths.

Usage: setup_configs.py [SITE] [DB_PASSWORD] [ENCRYPTION_KEY]
The bench directory is the current working directory. Missing templates
are reported and skipped; the exit code stays 0.
"""
import os
import sys

from config import SITE_NAME
from modules.bench.templater import setup_configs
from modules.utils import init_logging


def main(argv: list[str]) -> int:
    init_logging(None)
    site = argv[0] if len(argv) > 0 and argv[0] else SITE_NAME
    db_password = argv[1] if len(argv) > 1 and argv[1] else None
    encryption_key = argv[2] if len(argv) > 2 and argv[2] else None

    bench_dir = os.getcwd()
    print(f"Setting up configurations for: {bench_dir}")
    print(f"Default site: {site}")
    report = setup_configs(bench_dir, site, db_password, encryption_key)
    print("Configuration setup complete!")
    print(f"Database password: {report.db_password}")
    print(f"Encryption key: {report.encryption_key}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
