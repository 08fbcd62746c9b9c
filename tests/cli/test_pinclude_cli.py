"""Tests for CLI parser and main behavior."""

from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from pinclude.cli.main import build_parser, main


@pytest.fixture
def site_copy(site_root: Path, tmp_path: Path) -> Path:
    """Copy the fixture site so tests can add or break files freely."""
    target = tmp_path / "site"
    shutil.copytree(site_root, target)
    return target


def test_build_parser_accepts_compile_flags(tmp_path: Path) -> None:
    args = build_parser().parse_args(
        ["compile", str(tmp_path / "site.pp"), "-c", str(tmp_path / "cfg.yaml"), "-f", "yaml", "-v"]
    )

    assert args.command == "compile"
    assert args.manifest == tmp_path / "site.pp"
    assert args.config == tmp_path / "cfg.yaml"
    assert args.format == "yaml"
    assert args.verbose is True


def test_build_parser_defaults() -> None:
    args = build_parser().parse_args(["compile", "site.pp"])

    assert args.format == "json"
    assert args.config is None
    assert args.verbose is False


def test_build_parser_rejects_unknown_format() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["compile", "site.pp", "-f", "xml"])


def test_command_is_required() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_compile_prints_json(site_copy: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["compile", str(site_copy / "manifests" / "site.pp")])

    captured = capsys.readouterr()
    assert code == 0
    payload = json.loads(captured.out)
    assert payload["environment"] == "staging"
    assert payload["classes"] == ["base"]
    assert [resource["type"] for resource in payload["resources"]][-2:] == ["some::resource", "other::resource"]


@pytest.mark.parametrize(
    ("fmt", "expected"),
    [
        pytest.param("yaml", "environment: staging", id="yaml"),
        pytest.param("text", "Environment: staging", id="text"),
    ],
)
def test_compile_other_formats(site_copy: Path, capsys: pytest.CaptureFixture[str], fmt: str, expected: str) -> None:
    code = main(["compile", str(site_copy / "manifests" / "site.pp"), "--format", fmt])

    assert code == 0
    assert expected in capsys.readouterr().out


def test_compile_with_explicit_config(site_copy: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = tmp_path / "override.yaml"
    config.write_text("environment: qa\nfacts:\n  datacenter: lab\n", encoding="utf-8")

    code = main(["compile", str(site_copy / "manifests" / "site.pp"), "-c", str(config)])

    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["environment"] == "qa"
    assert payload["variables"]["datacenter"] == "lab"


def test_compile_error_returns_1(site_copy: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (site_copy / "inc" / "metavars.pp").write_text("$metavars = \n", encoding="utf-8")

    code = main(["compile", str(site_copy / "manifests" / "site.pp")])

    captured = capsys.readouterr()
    assert code == 1
    assert captured.out == ""
    assert "Compile error: Syntax error at " in captured.err
    assert "metavars.pp" in captured.err


def test_compile_missing_manifest_returns_1(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["compile", str(tmp_path / "nope.pp")])

    assert code == 1
    assert "Could not read manifest" in capsys.readouterr().err


def test_missing_explicit_config_returns_2(site_copy: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["compile", str(site_copy / "manifests" / "site.pp"), "-c", str(site_copy / "missing.yaml")])

    assert code == 2
    assert "Configuration error: [CFG001]" in capsys.readouterr().err


def test_invalid_config_beside_manifest_returns_2(site_copy: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (site_copy / "manifests" / "pinclude.yaml").write_text("log_level: chatty\n", encoding="utf-8")

    code = main(["parse", str(site_copy / "manifests" / "site.pp")])

    captured = capsys.readouterr()
    assert code == 2
    assert "[CFG006]" in captured.err
    assert captured.out == ""


def test_non_manifest_fact_value_returns_2(site_copy: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (site_copy / "manifests" / "pinclude.yaml").write_text("facts:\n  built: 2024-01-01\n", encoding="utf-8")

    code = main(["compile", str(site_copy / "manifests" / "site.pp")])

    captured = capsys.readouterr()
    assert code == 2
    assert "invalid value for fact 'built'" in captured.err
    assert captured.out == ""


def test_parse_reports_statement_count(site_copy: Path, capsys: pytest.CaptureFixture[str]) -> None:
    manifest = site_copy / "manifests" / "site.pp"

    code = main(["parse", str(manifest)])

    assert code == 0
    assert capsys.readouterr().out.strip() == f"{manifest}: syntax OK (6 top-level statements)"


def test_parse_error_returns_1(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    manifest = tmp_path / "bad.pp"
    manifest.write_text("$ok = 1\nfile { 'x': ensure => }\n", encoding="utf-8")

    code = main(["parse", str(manifest)])

    captured = capsys.readouterr()
    assert code == 1
    assert captured.err.startswith(f"Parse error: Syntax error at {manifest}:2:")


def test_parse_empty_file_returns_1(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    manifest = tmp_path / "empty.pp"
    manifest.write_text("\n", encoding="utf-8")

    code = main(["parse", str(manifest)])

    assert code == 1
    assert "is empty" in capsys.readouterr().err
