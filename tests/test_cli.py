import json

import httpx
from typer.testing import CliRunner

from stamp_tour_service import cli

runner = CliRunner()


def test_catalog_lists_checkpoints(resources):
    result = runner.invoke(cli.app, ["catalog", str(resources / "api" / "stampList.json")])

    assert result.exit_code == 0
    assert "A1\tWelcome desk\tMain hall" in result.stdout
    assert "3 checkpoints" in result.stdout


def test_admin_posts_command(monkeypatch):
    calls = []

    def fake_post(url, json=None, timeout=None):
        calls.append((url, json))
        return httpx.Response(200, json={"command": json["command"], "output": "All databases saved", "ok": True})

    monkeypatch.setattr(cli.httpx, "post", fake_post)

    result = runner.invoke(cli.app, ["admin", "save all", "--url", "http://127.0.0.1:8080/admin"])

    assert result.exit_code == 0
    assert calls == [("http://127.0.0.1:8080/admin", {"command": "save all"})]
    assert json.loads(result.stdout)["output"] == "All databases saved"


def test_admin_reports_refused_command(monkeypatch):
    monkeypatch.setattr(cli.httpx, "post", lambda *_, **__: httpx.Response(401, text="nope"))

    result = runner.invoke(cli.app, ["admin", "save all"])

    assert result.exit_code == 1


def test_admin_reports_failed_snapshot(monkeypatch):
    reply = {"command": "save all", "output": "Database save failed: disk full", "ok": False}
    monkeypatch.setattr(cli.httpx, "post", lambda *_, **__: httpx.Response(200, json=reply))

    result = runner.invoke(cli.app, ["admin", "save all"])

    assert result.exit_code == 1


def test_show_config(monkeypatch, tmp_path):
    cli.get_settings.cache_clear()
    monkeypatch.setenv("STAMP_TOUR_RESOURCES_DIR", str(tmp_path))
    monkeypatch.setenv("STAMP_TOUR_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("STAMP_TOUR_PORT", "8080")
    try:
        result = runner.invoke(cli.app, ["show-config"])
    finally:
        cli.get_settings.cache_clear()

    assert result.exit_code == 0
    assert json.loads(result.stdout)["port"] == 8080
    assert (tmp_path / "data").is_dir()
