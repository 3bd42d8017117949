import subprocess

from modules import cache, services


def test_check_service_starts_inactive_unit(monkeypatch):
    started = []
    monkeypatch.setattr(services, "is_active", lambda unit: False)
    monkeypatch.setattr(services, "systemctl", lambda action, unit: started.append((action, unit)) or True)
    assert services.check_service("redis-server") is True
    assert started == [("start", "redis-server")]


def test_check_service_fails_when_start_fails(monkeypatch):
    monkeypatch.setattr(services, "is_active", lambda unit: False)
    monkeypatch.setattr(services, "systemctl", lambda action, unit: False)
    assert services.check_service("redis-server") is False


def test_check_service_noop_when_active(monkeypatch):
    def unexpected(action, unit):
        raise AssertionError(f"systemctl {action} {unit} should not run")

    monkeypatch.setattr(services, "is_active", lambda unit: True)
    monkeypatch.setattr(services, "systemctl", unexpected)
    assert services.check_service("mariadb") is True


def test_stop_existing_ignores_no_match(monkeypatch):
    monkeypatch.setattr(
        services.subprocess, "run",
        lambda argv, text, check: subprocess.CompletedProcess(argv, 1),
    )
    services.stop_existing("[f]rappe")


def test_start_background_writes_to_log(tmp_path):
    proc = services.start_background(["sh", "-c", "echo started"], tmp_path, "bench.log")
    proc.wait(timeout=10)
    assert (tmp_path / "bench.log").read_text().strip() == "started"


def test_start_bench_redis_skips_missing_confs(monkeypatch, recorder, tmp_path):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "redis_queue.conf").write_text("port 11000\n")
    rec = recorder()
    monkeypatch.setattr(cache, "run_cmd", rec)
    assert cache.start_bench_redis(tmp_path) is True
    assert rec.argvs() == [
        ["redis-server", str(tmp_path / "config" / "redis_queue.conf"), "--daemonize", "yes"]
    ]


def test_start_bench_redis_fails_when_server_fails(monkeypatch, recorder, tmp_path):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "redis_cache.conf").write_text("port 13000\n")
    monkeypatch.setattr(cache, "run_cmd", recorder(fail_on=[["redis-server"]]))
    assert cache.start_bench_redis(tmp_path) is False


def test_start_redis_with_config_missing_file(tmp_path):
    assert cache.start_redis_with_config(tmp_path / "nope.conf") is False


def test_missing_binaries_report_failure(monkeypatch):
    def missing(argv, *args, **kwargs):
        raise FileNotFoundError(argv[0])

    monkeypatch.setattr(services, "run_cmd", missing)
    monkeypatch.setattr(services.subprocess, "run", missing)
    assert services.systemctl("start", "mariadb") is False
    assert services.is_active("mariadb") is False
    assert services.check_service("mariadb") is False
    services.stop_existing("[f]rappe")
