"""Login page text customisation applied to app sources in the bench."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from modules.utils import log, require


def apply_replacements(path: Path, old: str, new: str) -> bool:
    if not require(path.is_file(), f"branding target not found: {path}"):
        return False
    text = path.read_text(encoding="utf-8")
    if old not in text:
        log(f"INFO: '{old}' not present in {path}")
        return True
    path.write_text(text.replace(old, new), encoding="utf-8")
    log(f"PASS: Customized {path}")
    return True


def apply_branding(bench_dir: str | Path, rules: Iterable[tuple[str, str, str]]) -> int:
    """Apply each (relative path, old, new) rule; returns files touched."""
    root = Path(bench_dir)
    touched = 0
    for rel, old, new in rules:
        if apply_replacements(root / rel, old, new):
            touched += 1
    return touched
