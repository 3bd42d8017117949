import os

from modules.bench import installer, repo


def test_remove_install_dir_refuses_outside_root(tmp_path, recorder, monkeypatch):
    rec = recorder()
    monkeypatch.setattr(repo, "run_cmd", rec)
    root = tmp_path / "home"
    outside = tmp_path / "elsewhere"
    root.mkdir()
    outside.mkdir()
    assert repo.remove_install_dir(outside, root=str(root)) is False
    assert repo.remove_install_dir(root, root=str(root)) is False
    assert rec.calls == []


def test_remove_install_dir_inside_root(tmp_path, recorder, monkeypatch):
    rec = recorder()
    monkeypatch.setattr(repo, "run_cmd", rec)
    target = tmp_path / "deploy"
    target.mkdir()
    assert repo.remove_install_dir(target, root=str(tmp_path)) is True
    assert rec.argvs() == [["rm", "-rf", str(target)]]


def test_remove_install_dir_absent_is_ok(tmp_path):
    assert repo.remove_install_dir(tmp_path / "missing", root=str(tmp_path)) is True


def test_clone_and_init_commands(recorder, monkeypatch, tmp_path):
    rec = recorder()
    monkeypatch.setattr(repo, "run_cmd", rec)
    assert repo.clone_repository("https://git.example/x.git", tmp_path / "b") is True
    assert repo.init_bench(tmp_path / "c", "version-15") is True
    assert rec.argvs() == [
        ["git", "clone", "https://git.example/x.git", str(tmp_path / "b")],
        ["bench", "init", "--frappe-branch", "version-15", str(tmp_path / "c")],
    ]


def test_clone_failure(recorder, monkeypatch, tmp_path):
    monkeypatch.setattr(repo, "run_cmd", recorder(fail_on=[["git"]]))
    assert repo.clone_repository("u", tmp_path) is False


def test_local_bin_added_once(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("PATH", "/usr/bin")
    bashrc = tmp_path / ".bashrc"
    assert installer.ensure_local_bin_on_path(bashrc) is True
    assert os.environ["PATH"].split(os.pathsep)[0] == str(tmp_path / ".local" / "bin")
    assert installer.ensure_local_bin_on_path(bashrc) is False
    assert bashrc.read_text().count(installer.PATH_EXPORT) == 1


def test_ensure_bench_cli_skips_when_present(monkeypatch, recorder):
    rec = recorder()
    monkeypatch.setattr(installer, "run_cmd", rec)
    monkeypatch.setattr(installer.shutil, "which", lambda name: "/usr/local/bin/bench")
    assert installer.ensure_bench_cli() is True
    assert rec.calls == []


def test_ensure_bench_cli_installs(monkeypatch, recorder, tmp_path):
    rec = recorder()
    monkeypatch.setattr(installer, "run_cmd", rec)
    monkeypatch.setattr(installer.shutil, "which", lambda name: None)
    monkeypatch.setattr(installer, "ensure_local_bin_on_path", lambda bashrc=None: True)
    assert installer.ensure_bench_cli() is True
    assert rec.argvs() == [["pip3", "install", "frappe-bench"]]


def test_setup_virtualenv_creates_when_missing(monkeypatch, recorder, tmp_path):
    rec = recorder()
    monkeypatch.setattr(installer, "run_cmd", rec)
    assert installer.setup_virtualenv(tmp_path) is True
    argvs = rec.argvs()
    assert argvs[0] == ["python3.11", "-m", "venv", "env"]
    assert argvs[-1] == [str(tmp_path / "env" / "bin" / "pip"), "install", "frappe-bench"]

    (tmp_path / "env").mkdir()
    rec2 = recorder()
    monkeypatch.setattr(installer, "run_cmd", rec2)
    installer.setup_virtualenv(tmp_path)
    assert rec2.argvs()[0][1:] == ["install", "--upgrade", "pip"]


def test_install_apps_editable_runs_in_each_app(monkeypatch, recorder, tmp_path):
    rec = recorder()
    monkeypatch.setattr(installer, "run_cmd", rec)
    assert installer.install_apps_editable(tmp_path, ["frappe", "hrms"]) is True
    assert [cwd for _, cwd in rec.calls] == [
        tmp_path / "apps" / "frappe",
        tmp_path / "apps" / "hrms",
    ]
