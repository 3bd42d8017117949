from pathlib import Path

import pytest

import setup_configs as setup_configs_cli
from modules.bench import templater


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


@pytest.fixture
def bench(tmp_path):
    root = tmp_path / "bench"
    _write(
        root / "config" / "redis_cache.conf.template",
        "dbfilename redis_cache.rdb\ndir {{BENCH_DIR}}/config/pids\npidfile {{BENCH_DIR}}/config/pids/redis_cache.pid\n",
    )
    _write(
        root / "config" / "redis_queue.conf.template",
        "dir {{BENCH_DIR}}/config/pids\nport 11000\n",
    )
    _write(
        root / "sites" / "common_site_config.json.template",
        '{\n "default_site": "{{DEFAULT_SITE}}",\n "redis_cache": "redis://127.0.0.1:13000"\n}\n',
    )
    _write(root / "sites" / "site_config.json.template", '{"db_name": "{{DB_NAME}}"}\n')
    return root


def test_present_templates_are_rendered_with_placeholders_replaced(bench):
    report = templater.setup_configs(bench, "hrdl8.local", "pw", "key")
    root = bench.resolve()

    cache = (root / "config" / "redis_cache.conf").read_text()
    assert "{{BENCH_DIR}}" not in cache
    assert f"dir {root}/config/pids" in cache

    common = (root / "sites" / "common_site_config.json").read_text()
    assert '"default_site": "hrdl8.local"' in common
    assert "{{DEFAULT_SITE}}" not in common

    assert report.missing == []
    assert len(report.generated) == 4


def test_site_template_copied_verbatim_for_deployment(bench):
    templater.setup_configs(bench, "hrdl8.local", "pw", "key")
    deploy = bench / "sites" / "site_config_deploy.json.template"
    assert deploy.read_text() == '{"db_name": "{{DB_NAME}}"}\n'


def test_layout_and_current_site_written(bench):
    templater.setup_configs(bench, "demo.local", "pw", "key")
    assert (bench / "config" / "pids").is_dir()
    assert (bench / "sites" / "demo.local").is_dir()
    assert (bench / "sites" / "currentsite.txt").read_text() == "demo.local\n"


def test_missing_templates_warn_and_continue(tmp_path, capsys):
    root = tmp_path / "empty"
    root.mkdir()
    _write(root / "config" / "redis_queue.conf.template", "dir {{BENCH_DIR}}\n")

    report = templater.setup_configs(root, "hrdl8.local", "pw", "key")

    assert [p.name for p in report.generated] == ["redis_queue.conf"]
    assert len(report.missing) == 3
    assert not (root / "config" / "redis_cache.conf").exists()
    assert (root / "sites" / "currentsite.txt").exists()
    out = capsys.readouterr().out
    assert "WARN: Template redis_cache.conf.template not found" in out


def test_rerun_is_byte_identical(bench):
    templater.setup_configs(bench, "hrdl8.local", "pw", "key")
    names = [
        "config/redis_cache.conf",
        "config/redis_queue.conf",
        "sites/common_site_config.json",
        "sites/site_config_deploy.json.template",
        "sites/currentsite.txt",
    ]
    first = {n: (bench / n).read_bytes() for n in names}
    templater.setup_configs(bench, "hrdl8.local", "other", "other")
    second = {n: (bench / n).read_bytes() for n in names}
    assert first == second


def test_secrets_generated_when_not_supplied(bench):
    report = templater.setup_configs(bench, "hrdl8.local")
    assert len(report.db_password) == 16
    assert len(report.encryption_key) == 44


def test_render_template_replaces_every_key(tmp_path):
    src = tmp_path / "x.conf.template"
    src.write_text("{{BENCH_DIR}} {{DEFAULT_SITE}} {{BENCH_DIR}}")
    dst = templater.target_for(src)
    assert dst.name == "x.conf"
    ok = templater.render_template(src, dst, {"{{BENCH_DIR}}": "/b", "{{DEFAULT_SITE}}": "s"})
    assert ok is True
    assert dst.read_text() == "/b s /b"


def test_cli_uses_cwd_and_positional_args(bench, monkeypatch, capsys):
    monkeypatch.setattr(setup_configs_cli, "init_logging", lambda rid=None: "testrun0")
    monkeypatch.chdir(bench)

    rc = setup_configs_cli.main(["cli.local", "secretpw", "secretkey"])

    assert rc == 0
    assert (bench / "sites" / "currentsite.txt").read_text() == "cli.local\n"
    out = capsys.readouterr().out
    assert "Database password: secretpw" in out
    assert "Encryption key: secretkey" in out


def test_cli_defaults_site_when_no_args(tmp_path, monkeypatch):
    monkeypatch.setattr(setup_configs_cli, "init_logging", lambda rid=None: "testrun0")
    monkeypatch.chdir(tmp_path)
    assert setup_configs_cli.main([]) == 0
    assert (tmp_path / "sites" / "currentsite.txt").read_text() == "hrdl8.local\n"
