#!/usr/bin/env python3
"""Manage benchlocal entries in /etc/hosts safely and atomically.

Inputs: domain via CLI, optional --remove flag. On add, uses
LOCALHOST_IP from config. Only lines with "# benchlocal" are managed.
Other lines and comments are preserved intact. A domain that already
resolves through an unmanaged line is left alone.
"""
import os
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import List, Tuple

from config import HOSTS_FILE, LOCALHOST_IP
from modules.utils import log, run_cmd

TAG = "# benchlocal"


def _read_hosts(hosts_file: str) -> Tuple[List[str], int, int, int]:
    path = Path(hosts_file)
    if not path.exists():
        uid = os.getuid()
        gid = os.getgid()
        mode = 0o644
        return [], mode, uid, gid
    data = path.read_text()
    st = path.stat()
    lines = data.splitlines(keepends=True)
    return lines, st.st_mode, st.st_uid, st.st_gid


def _write_hosts_atomic(
    hosts_file: str, lines: List[str], mode: int, uid: int, gid: int
) -> bool:
    path = Path(hosts_file)
    dir_path = path.parent
    writable = os.access(str(dir_path), os.W_OK)
    tmp_dir = str(dir_path) if writable else None
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(mode="w", delete=False, dir=tmp_dir) as tmp:
            tmp.writelines(lines)
            tmp.flush()
            os.fsync(tmp.fileno())
            tmp_path = tmp.name
        if not writable:
            # /etc is root-owned; let sudo put the file in place
            run_cmd(["sudo", "install", "-m", oct(mode & 0o777)[2:], tmp_path, str(path)])
            return True
        os.chmod(tmp_path, mode)
        if os.geteuid() == 0:
            os.chown(tmp_path, uid, gid)
        os.replace(tmp_path, str(path))
        return True
    except (OSError, subprocess.CalledProcessError) as err:
        print(
            f"FAIL: Could not write hosts file: {err}",
            file=sys.stderr,
        )
        return False
    finally:
        if tmp_path and os.path.exists(tmp_path):
            os.unlink(tmp_path)


def _names(line: str) -> List[str]:
    body = line.split("#", 1)[0].split()
    return body[1:]


def add_host(ip: str, domain: str, hosts_file: str = HOSTS_FILE) -> bool:
    lines, mode, uid, gid = _read_hosts(hosts_file)
    desired = f"{ip} {domain} {TAG}\n"

    kept = []
    removed = 0
    for line in lines:
        managed = TAG in line
        if managed and domain in _names(line):
            removed += 1
            continue
        if not managed and domain in _names(line):
            log(f"INFO: {domain} already mapped in {hosts_file}")
            return True
        kept.append(line)

    if removed == 1 and desired in lines:
        return True

    if kept and not kept[-1].endswith("\n"):
        kept[-1] = kept[-1] + "\n"
    kept.append(desired)
    ok = _write_hosts_atomic(hosts_file, kept, mode, uid, gid)
    if not ok:
        return False
    log(f"PASS: Added {domain} to hosts file")
    return True


def remove_host(domain: str, hosts_file: str = HOSTS_FILE) -> bool:
    lines, mode, uid, gid = _read_hosts(hosts_file)

    kept = []
    removed = 0
    for line in lines:
        if TAG in line and domain in _names(line):
            removed += 1
            continue
        kept.append(line)

    if removed == 0:
        return True

    ok = _write_hosts_atomic(hosts_file, kept, mode, uid, gid)
    if not ok:
        return False
    log(f"PASS: Removed {domain} from hosts file")
    return True


def main() -> int:
    if len(sys.argv) < 2:
        print("FAIL: Missing domain", file=sys.stderr)
        return 1
    domain = sys.argv[1]
    do_remove = "--remove" in sys.argv
    if do_remove:
        ok = remove_host(domain)
        return 0 if ok else 1
    ok = add_host(LOCALHOST_IP, domain)
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
