from pathlib import Path

from click.testing import CliRunner

from spindle.cli import cli
from spindle.pipeline import PipelineError


def create_site(root: Path) -> None:
    (root / "src").mkdir()
    (root / "src" / "app.js").write_text("var a = 1;\n", encoding="utf-8")
    (root / "spindle.yaml").write_text("source: src\ndestination: public\n", encoding="utf-8")


def test_cli_build(monkeypatch, tmp_path):
    create_site(tmp_path)
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["build"], catch_exceptions=False)
    assert result.exit_code == 0
    assert "Built 1 files into" in result.output
    assert (tmp_path / "public" / "app.min.js").exists()


def test_cli_build_with_overrides_and_config_path(monkeypatch, tmp_path):
    create_site(tmp_path)
    monkeypatch.chdir(tmp_path.parent)
    result = CliRunner().invoke(
        cli,
        ["build", "--config", str(tmp_path / "spindle.yaml"), "--destination", "dist", "-v"],
        catch_exceptions=False,
    )
    assert result.exit_code == 0
    assert "Compiled app.js" in result.output
    assert (tmp_path / "dist" / "app.min.js").exists()


def test_cli_missing_source_is_fatal(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["build"])
    assert result.exit_code == 1
    assert "Invalid configuration, missing source" in result.output


def test_cli_missing_source_directory(monkeypatch, tmp_path):
    (tmp_path / "spindle.yaml").write_text("source: nowhere\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["build"])
    assert result.exit_code == 1
    assert "Expected source directory" in result.output


def test_cli_build_failure(monkeypatch, tmp_path):
    create_site(tmp_path)
    monkeypatch.chdir(tmp_path)

    def failing_build(config, verbose=False):
        raise PipelineError(config.source / "app.js", "Could not write: read-only")

    monkeypatch.setattr("spindle.build.build_site", failing_build)
    result = CliRunner().invoke(cli, ["build"])
    assert result.exit_code == 1
    assert "Build failed:" in result.output
    assert "read-only" in result.output


def test_cli_watch_builds_then_watches(monkeypatch, tmp_path):
    create_site(tmp_path)
    monkeypatch.chdir(tmp_path)
    called = {}

    def fake_run_forever(self):
        called["source"] = self.config.source
        called["verbose"] = self.verbose

    monkeypatch.setattr("spindle.watcher.SourceWatcher.run_forever", fake_run_forever)
    result = CliRunner().invoke(cli, ["watch", "--verbose"], catch_exceptions=False)
    assert result.exit_code == 0
    assert called == {"source": tmp_path / "src", "verbose": True}
    assert (tmp_path / "public" / "app.min.js").exists()


def test_module_main_entrypoint():
    from spindle.__main__ import main

    assert callable(main)


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "spindle" in result.output
