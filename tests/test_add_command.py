from __future__ import annotations

import json
import subprocess
from pathlib import Path

import pytest

from spread_cli.main import main
from spread_core.config import REGISTRY_URL_ENV
from spread_core.install import packages as packages_mod
from spread_core.install import service as service_mod

REGISTRY_URL = "https://registry.test/raw"
CDN = "https://cdn.test/spread"


@pytest.fixture
def world(monkeypatch: pytest.MonkeyPatch, fake_session):
    monkeypatch.setenv(REGISTRY_URL_ENV, REGISTRY_URL)
    monkeypatch.setattr(service_mod.requests, "Session", lambda: fake_session)
    commands: list[list[str]] = []

    def _run(command, **kwargs):
        commands.append(list(command))
        return subprocess.CompletedProcess(command, 0, stdout="", stderr="")

    monkeypatch.setattr(packages_mod.subprocess, "run", _run)
    fake_session.routes[REGISTRY_URL] = {
        "spreads": {
            "button": {"spread": f"{CDN}/button", "versions": ["1.0.0", "1.2.0"]},
            "icons": {"spread": f"{CDN}/icons", "versions": ["0.1.0"]},
        }
    }
    fake_session.routes[f"{CDN}/button@1.2.0.json"] = {
        "name": "button",
        "version": "1.2.0",
        "files": [{"target": "src/button.tsx", "content": "export const Button = () => null;\n"}],
        "spreadDependencies": {"icons": "latest", "ghost": "1.0.0"},
        "dependencies": {"clsx": "2.0.0"},
    }
    fake_session.routes[f"{CDN}/button@1.0.0.json"] = {"name": "button", "version": "1.0.0", "files": []}
    fake_session.routes[f"{CDN}/icons@0.1.0.json"] = {
        "name": "icons",
        "version": "0.1.0",
        "files": [{"target": "src/icons.ts", "content": "export {};\n"}],
        "devDependencies": {"svgo": "3.0.0"},
    }
    return fake_session, commands


def test_add_installs_graph_and_packages(world, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _, commands = world
    code = main(["add", "button", "--conflict", "skip"], start_dir=tmp_path)
    out = capsys.readouterr().out

    assert code == 0
    assert (tmp_path / "src" / "button.tsx").read_text(encoding="utf-8") == "export const Button = () => null;\n"
    assert (tmp_path / "src" / "icons.ts").exists()
    assert "[spread:add] warning: failed to process spread dependency ghost@1.0.0" in out
    assert "[spread:add] installed dependency icons@0.1.0" in out
    assert "[spread:add] packages dependencies=1 devDependencies=1" in out
    assert "[spread:add] successfully installed button@1.2.0" in out
    assert commands == [["npm", "install", "clsx@2.0.0"], ["npm", "install", "--save-dev", "svgo@3.0.0"]]


def test_add_with_version_and_no_install(world, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    session, commands = world
    code = main(["add", "button@1.0.0", "--no-install", "--conflict", "skip"], start_dir=tmp_path)

    assert code == 0
    assert f"{CDN}/button@1.0.0.json" in session.calls
    assert commands == []
    assert "successfully installed button@1.0.0" in capsys.readouterr().out


def test_add_respects_package_json(world, tmp_path: Path) -> None:
    _, commands = world
    (tmp_path / "package.json").write_text(json.dumps({"dependencies": {"clsx": "1.0.0"}}), encoding="utf-8")
    assert main(["add", "button", "--conflict", "existing"], start_dir=tmp_path) == 0
    assert commands[0] == ["npm", "install", "clsx@1.0.0"]


def test_add_unknown_spread_fails(world, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["add", "nope", "--conflict", "skip"], start_dir=tmp_path)
    out = capsys.readouterr().out
    assert code == 1
    assert "[spread:add] failed:" in out
    assert "nope" in out


def test_add_missing_version_fails(world, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["add", "button", "--spread-version", "9.0.0", "--conflict", "skip"], start_dir=tmp_path) == 1
    assert "9.0.0" in capsys.readouterr().out


def test_resolve_prints_location(world, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["resolve", "button"], start_dir=tmp_path) == 0
    assert capsys.readouterr().out.strip() == f"{CDN}/button@1.2.0.json"


def test_homepage_reference_without_homepage_fails(world, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["resolve", "/spread/button"], start_dir=tmp_path) == 1
    assert "[spread:resolve] failed:" in capsys.readouterr().out


def test_back_reference_to_root_is_not_fetched_again(world, tmp_path: Path) -> None:
    session, _ = world
    session.routes[f"{CDN}/icons@0.1.0.json"]["spreadDependencies"] = {"button": "latest"}

    assert main(["add", "button", "--no-install", "--conflict", "skip"], start_dir=tmp_path) == 0
    assert session.calls.count(f"{CDN}/button@1.2.0.json") == 1


def test_missing_dependency_version_aborts_add(world, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    session, commands = world
    session.routes[f"{CDN}/button@1.2.0.json"]["spreadDependencies"] = {"icons": "4.0.0"}

    assert main(["add", "button", "--conflict", "skip"], start_dir=tmp_path) == 1
    out = capsys.readouterr().out
    assert "[spread:add] failed:" in out
    assert "4.0.0" in out
    assert commands == []
