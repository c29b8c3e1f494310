from pathlib import Path

import pytest
from PIL import Image

from _bpolar import encode_header, encode_polar
from rollpolar.cli import main

SPEEDS = [0.0, 10.0, 20.0]
HEADINGS = [0.0, 90.0, 180.0]
ROLL = [[2.0, 8.0, 4.0], [3.0, 14.0, 6.0], [5.0, 22.0, 9.0]]


def _write_polar(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode_polar(SPEEDS, HEADINGS, ROLL, status="Converged"))
    return path


def test_cli_inspect(tmp_path: Path, capsys):
    p = _write_polar(tmp_path / "roll.bpolar")
    rc = main(["inspect", str(p)])
    out = capsys.readouterr().out
    assert rc == 0
    assert "3 speeds x 3 headings" in out
    assert "Status: Converged" in out
    assert "9/9 valid" in out


def test_cli_inspect_missing_file(tmp_path: Path, capsys):
    rc = main(["inspect", str(tmp_path / "missing.bpolar")])
    assert rc == 2
    assert "[ERROR] File not found" in capsys.readouterr().out


def test_cli_inspect_bad_dimensions(tmp_path: Path, capsys):
    p = tmp_path / "bad.bpolar"
    p.write_bytes(encode_header(0, 10))
    rc = main(["inspect", str(p)])
    assert rc == 3
    assert "Invalid dimensions" in capsys.readouterr().out


def test_cli_render_writes_png(tmp_path: Path):
    p = _write_polar(tmp_path / "roll.bpolar")
    out = tmp_path / "chart.png"
    rc = main(
        [
            "render", str(p), "--out", str(out),
            "--mode", "traffic-light", "--orientation", "heads-up",
            "--heading", "45", "--speed", "12", "--wave-dir", "200",
            "--width", "400", "--height", "360", "--style", "simple",
        ]
    )
    assert rc == 0
    with Image.open(out) as im:
        assert im.size == (400, 360)


def test_cli_render_rejects_unknown_mode(tmp_path: Path, capsys):
    p = _write_polar(tmp_path / "roll.bpolar")
    rc = main(["render", str(p), "--out", str(tmp_path / "x.png"), "--mode", "rainbow"])
    assert rc == 2
    assert "[ERROR]" in capsys.readouterr().out


@pytest.mark.parametrize("size", [["--width", "0"], ["--height", "0"], ["--width", "-5"]])
def test_cli_render_rejects_empty_canvas(tmp_path: Path, capsys, size):
    p = _write_polar(tmp_path / "roll.bpolar")
    out = tmp_path / "x.png"
    rc = main(["render", str(p), "--out", str(out), *size])
    assert rc == 2
    assert "[ERROR] Image size must be positive" in capsys.readouterr().out
    assert not out.exists()


def test_cli_report_rejects_empty_canvas(tmp_path: Path, capsys):
    p = _write_polar(tmp_path / "roll.bpolar")
    rc = main(["report", str(p), "--out", str(tmp_path / "out"), "--width", "0"])
    assert rc == 2
    assert "[ERROR]" in capsys.readouterr().out


def test_cli_locate(tmp_path: Path, capsys):
    target = _write_polar(tmp_path / "Draft=11m" / "GM=1.5m" / "bin" / "MAXROLL_H4.0_T8.0.bpolar")
    rc = main(["locate", str(tmp_path), "--draft", "11.2", "--gm", "1.4", "--hs", "4.2", "--tz", "8.1"])
    out = capsys.readouterr().out
    assert rc == 0
    assert str(target.resolve()) in out
    assert "GM=1.5 m" in out


def test_cli_locate_no_match(tmp_path: Path, capsys):
    (tmp_path / "misc").mkdir()
    rc = main(["locate", str(tmp_path), "--draft", "11", "--gm", "1", "--hs", "4", "--tz", "8"])
    assert rc == 3
    assert "[ERROR] draft" in capsys.readouterr().out


@pytest.mark.slow
def test_cli_report(tmp_path: Path):
    p = _write_polar(tmp_path / "GM=1.5m" / "bin" / "MAXROLL_H4.0_T8.0.bpolar")
    outdir = tmp_path / "out"
    rc = main(["report", str(p), "--out", str(outdir), "--case", "demo", "--max-roll", "15"])
    assert rc == 0
    assert (outdir / "demo_polar.png").exists()
    assert (outdir / "demo_curves.png").exists()
    assert (outdir / "demo_report.pdf").stat().st_size > 0


def test_cli_report_rejects_long_case_id(tmp_path: Path, capsys):
    p = _write_polar(tmp_path / "roll.bpolar")
    rc = main(["report", str(p), "--out", str(tmp_path / "out"), "--case", "x" * 13])
    assert rc == 2
    assert "12 characters" in capsys.readouterr().out
