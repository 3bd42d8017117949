"""Render bench configuration files from their *.template siblings.

Each target is produced by literal placeholder substitution; a missing
template is reported and skipped so the rest of the run continues.
Rendering is deterministic: same inputs, same bytes.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from modules.utils import (
    apply_placeholders,
    generate_encryption_key,
    generate_password,
    log,
    status_pass,
    status_warn,
)

BENCH_DIR_KEY = "{{BENCH_DIR}}"
DEFAULT_SITE_KEY = "{{DEFAULT_SITE}}"
TEMPLATE_SUFFIX = ".template"
CURRENT_SITE_FILE = "sites/currentsite.txt"
DEPLOY_TEMPLATE = "sites/site_config_deploy.json.template"
SITE_TEMPLATE = "sites/site_config.json.template"

# relative to the bench dir
RENDERED_TEMPLATES = [
    "config/redis_cache.conf.template",
    "config/redis_queue.conf.template",
    "sites/common_site_config.json.template",
]


@dataclass
class TemplateReport:
    bench_dir: Path
    site: str
    db_password: str
    encryption_key: str
    generated: list[Path] = field(default_factory=list)
    missing: list[Path] = field(default_factory=list)


def target_for(template: Path) -> Path:
    return template.with_name(template.name[: -len(TEMPLATE_SUFFIX)])


def render_template(src: Path, dst: Path, mapping: dict[str, str]) -> bool:
    if not src.is_file():
        status_warn(f"Template {src.name} not found")
        return False
    text = src.read_text(encoding="utf-8")
    dst.parent.mkdir(parents=True, exist_ok=True)
    dst.write_text(apply_placeholders(text, mapping), encoding="utf-8")
    status_pass(f"Generated {dst.name}")
    return True


def _copy_template(src: Path, dst: Path) -> bool:
    if not src.is_file():
        status_warn(f"Template {src.name} not found")
        return False
    shutil.copyfile(src, dst)
    status_pass("Prepared site configuration template for deployment")
    return True


def ensure_layout(bench_dir: Path, site: str) -> None:
    (bench_dir / "config" / "pids").mkdir(parents=True, exist_ok=True)
    (bench_dir / "sites" / site).mkdir(parents=True, exist_ok=True)


def setup_configs(
    bench_dir: str | Path,
    site: str,
    db_password: str | None = None,
    encryption_key: str | None = None,
) -> TemplateReport:
    root = Path(bench_dir).resolve()
    report = TemplateReport(
        bench_dir=root,
        site=site,
        db_password=db_password or generate_password(),
        encryption_key=encryption_key or generate_encryption_key(),
    )
    log(f"Setting up configurations for: {root} (site {site})")
    ensure_layout(root, site)

    values = {BENCH_DIR_KEY: str(root), DEFAULT_SITE_KEY: site}
    for rel in RENDERED_TEMPLATES:
        src = root / rel
        dst = target_for(src)
        if render_template(src, dst, values):
            report.generated.append(dst)
        else:
            report.missing.append(src)

    src = root / SITE_TEMPLATE
    dst = root / DEPLOY_TEMPLATE
    if _copy_template(src, dst):
        report.generated.append(dst)
    else:
        report.missing.append(src)

    current = root / CURRENT_SITE_FILE
    current.write_text(f"{site}\n", encoding="utf-8")
    status_pass(f"Set default site to: {site}")

    if report.missing:
        logging.warning("Missing templates: %s", [str(p) for p in report.missing])
    return report
