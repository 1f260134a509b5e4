from __future__ import annotations

import json
import zipfile

import pytest

from samples import ITAU_SVG, SIMPLE_SVG
from logo_studio import cli


@pytest.fixture
def source_dir(tmp_path):
    catalog = tmp_path / "assets" / "logos_bancos"
    catalog.mkdir(parents=True)
    (catalog / "banco-bradesco.svg").write_text(SIMPLE_SVG, encoding="utf-8")
    (catalog / "banco-itau.svg").write_text(ITAU_SVG, encoding="utf-8")
    return tmp_path / "assets"


def test_single_logo_export(source_dir, tmp_path, capsys):
    out = tmp_path / "out"
    code = cli.main(
        [
            "--source", str(source_dir),
            "--logo", "banco-bradesco",
            "--size", "64",
            "--color", "#ff0000",
            "--out", str(out),
        ]
    )
    assert code == 0
    content = (out / "banco-bradesco-64px.svg").read_text(encoding="utf-8")
    assert 'fill="#ff0000"' in content
    printed = capsys.readouterr().out
    assert "[loaded] 2 of 7 logos" in printed
    assert "[saved]" in printed


def test_region_colors_for_multi_color_logo(source_dir, tmp_path):
    out = tmp_path / "out"
    code = cli.main(
        [
            "--source", str(source_dir),
            "--logo", "banco-itau",
            "--region", "bg=#112233",
            "--region", "broken",
            "--out", str(out),
        ]
    )
    assert code == 0
    content = (out / "banco-itau-24px.svg").read_text(encoding="utf-8")
    assert 'fill="#112233"' in content


def test_export_all_writes_archive_and_report(source_dir, tmp_path):
    out = tmp_path / "out"
    report = tmp_path / "report.json"
    code = cli.main(
        ["--source", str(source_dir), "--all", "--size", "32", "--out", str(out), "--report", str(report)]
    )
    assert code == 0
    with zipfile.ZipFile(out / "logos-32px-svg.zip") as archive:
        assert sorted(archive.namelist()) == [
            "logos/banco-bradesco-32px.svg",
            "logos/banco-itau-32px.svg",
        ]
    (entry,) = json.loads(report.read_text(encoding="utf-8"))
    assert entry["count"] == 2
    assert entry["written"] == 2


def test_unknown_logo_fails(source_dir, tmp_path, capsys):
    code = cli.main(["--source", str(source_dir), "--logo", "nope", "--out", str(tmp_path)])
    assert code == 1
    assert "[warn] nope: not loaded" in capsys.readouterr().out


def test_empty_source_reports_error(tmp_path, capsys):
    code = cli.main(["--source", str(tmp_path), "--out", str(tmp_path / "out")])
    assert code == 1
    assert "[error] Failed to load SVG logos" in capsys.readouterr().out


def test_list_logos(source_dir, tmp_path, capsys):
    code = cli.main(["--source", str(source_dir), "--list", "--out", str(tmp_path / "out")])
    assert code == 0
    printed = capsys.readouterr().out
    assert "[logo] banco-itau: Banco Itaú (multi-color)" in printed
    assert "[logo] banco-bradesco: Banco Bradesco (single-color)" in printed
    assert not (tmp_path / "out").exists()


def test_invalid_inputs_are_reported(source_dir, tmp_path, capsys):
    out = tmp_path / "out"
    cli.main(["--source", str(source_dir), "--logo", "banco-bradesco", "--color", "red", "--out", str(out)])
    cli.main(
        ["--source", str(source_dir), "--logo", "banco-itau", "--region", "bg=blue", "--region", "text=auto", "--out", str(out)]
    )
    printed = capsys.readouterr().out
    assert "[warn] ignoring invalid color 'red'" in printed
    assert "[warn] banco-itau: 'blue' is not a valid color for 'bg'" in printed
    assert "[regions] banco-itau: bg=#003399, text=#ffffff" in printed
    assert 'fill="#E51736"' in (out / "banco-bradesco-24px.svg").read_text(encoding="utf-8")
