from __future__ import annotations

import json
from pathlib import Path

import pytest

import aware_terminal_uri
from aware_terminal_uri import cli

from conftest import query_params, with_query


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _encode(capsys, *argv: str) -> str:
    exit_code = cli.main(["encode", *argv])
    captured = capsys.readouterr()
    assert exit_code == 0
    return captured.out.strip()


def test_info_outputs_json(capsys) -> None:
    exit_code = cli.main(["info"])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["version"] == aware_terminal_uri.__version__
    assert payload["prefix"] == "aware://terminal-view"
    assert "cwd" in payload["sensitive_fields"]
    assert "title" in payload["cosmetic_fields"]


def test_encode_builds_uri(capsys) -> None:
    uri = _encode(
        capsys,
        "--title",
        "logs",
        "--cwd",
        "/var/log",
        "--env",
        "A=1",
        "--env",
        "B=x=y",
        "--preserved-command",
        "tail -f syslog",
        "--command-json",
        '{"file": "bash", "args": ["-l"]}',
        "--remain-on-clean-exit",
        "--default-location",
        "bottom",
    )

    params = query_params(uri)
    assert uri.startswith("aware://terminal-view?")
    assert params["title"] == "logs"
    assert params["cwd"] == "/var/log"
    assert json.loads(params["environmentVariables"]) == [["A", "1"], ["B", "x=y"]]
    assert json.loads(params["preservedCommands"]) == ["tail -f syslog"]
    assert json.loads(params["command"]) == {"file": "bash", "args": ["-l"]}
    assert params["remainOnCleanExit"] == "true"
    assert params["defaultLocation"] == "bottom"


def test_decode_redacts_token_and_honors_own_uri(capsys) -> None:
    uri = _encode(capsys, "--cwd", "/srv", "--title", "srv")

    exit_code = cli.main(["decode", uri])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["cwd"] == "/srv"
    assert payload["title"] == "srv"
    assert payload["trustToken"] == "<redacted>"


def test_decode_foreign_uri_requires_trusted_flag(capsys) -> None:
    uri = with_query(_encode(capsys, "--cwd", "/srv", "--title", "srv"), trustToken="other-process")

    cli.main(["decode", uri])
    untrusted = json.loads(capsys.readouterr().out)
    cli.main(["decode", uri, "--trusted"])
    trusted = json.loads(capsys.readouterr().out)

    assert untrusted["cwd"] == ""
    assert untrusted["title"] == "srv"
    assert trusted["cwd"] == "/srv"


def test_decode_malformed_uri_reports_error(capsys) -> None:
    exit_code = cli.main(["decode", "aware://terminal-view?command=%7Bbad"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "command" in captured.err


@pytest.mark.parametrize(
    "argv",
    [
        ["encode", "--env", "NOEQUALS"],
        ["encode", "--env", "=value"],
        ["encode", "--command-json", "{bad"],
        ["encode", "--command-json", "[1]"],
        ["encode", "--default-location", "sideways"],
    ],
)
def test_encode_rejects_bad_arguments(argv) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)

    assert excinfo.value.code == 2


def test_config_file_changes_prefix(capsys, tmp_path: Path) -> None:
    config = tmp_path / "uri.yaml"
    config.write_text("scheme: ide\nhost: term\n", encoding="utf-8")

    uri = _encode(capsys, "--config", str(config), "--title", "x")

    assert uri.startswith("ide://term?")


def test_invalid_config_reports_error(capsys, tmp_path: Path) -> None:
    config = tmp_path / "uri.yaml"
    config.write_text("host: 'a/b'\n", encoding="utf-8")

    exit_code = cli.main(["info", "--config", str(config)])

    assert exit_code == 1
    assert "Invalid terminal URI config" in capsys.readouterr().err


def test_dotenv_in_working_directory_is_loaded(capsys, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("AWARE_TERMINAL_URI_HOST", "placeholder")
    monkeypatch.delenv("AWARE_TERMINAL_URI_HOST")
    (tmp_path / ".env").write_text("AWARE_TERMINAL_URI_HOST=dotenv-host\n", encoding="utf-8")

    exit_code = cli.main(["info"])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["prefix"] == "aware://dotenv-host"


def test_parse_env_options() -> None:
    assert cli.parse_env_options(["A=1", " B =two", "C=x=y", "A=2"]) == {"A": "2", "B": "two", "C": "x=y"}
    assert cli.parse_env_options(None) == {}
    with pytest.raises(ValueError, match="expected NAME=VALUE"):
        cli.parse_env_options(["missing"])
    with pytest.raises(ValueError, match="name is empty"):
        cli.parse_env_options([" =value"])
