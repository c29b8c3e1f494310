from pathlib import Path

import pytest

from rollpolar.io.locator import LocateError, find_data_file, fitted_parameters_from_path

DATA_FILES = ("MAXROLL_H4.0_T8.0.bpolar", "MAXROLL_H6.0_T10.0.bpolar", "README.txt")


def _make_tree(root: Path, drafts, gms=("GM=1.0m", "GM=2.0m")) -> None:
    (root / "vessel.ctl").write_text("x", encoding="utf-8")
    for d in drafts:
        for gm in gms:
            bin_dir = root / d / gm / "bin"
            bin_dir.mkdir(parents=True)
            for name in DATA_FILES:
                (bin_dir / name).write_bytes(b"")


def test_find_nearest_in_new_style_tree(tmp_path: Path):
    _make_tree(tmp_path, ("Draft=11m", "Draft=16m"))
    located = find_data_file(tmp_path, draft=12.0, gm=1.8, hs=5.8, tz=9.5)
    assert located.path == tmp_path / "Draft=11m" / "GM=2.0m" / "bin" / "MAXROLL_H6.0_T10.0.bpolar"
    assert located.fitted_draft == 11.0


def test_draft_tie_keeps_first_sorted(tmp_path: Path):
    _make_tree(tmp_path, ("Draft=11m", "Draft=16m"))
    located = find_data_file(tmp_path, draft=13.5, gm=1.0, hs=4.0, tz=8.0)
    assert located.fitted_draft == 11.0
    assert located.path.name == "MAXROLL_H4.0_T8.0.bpolar"


def test_old_style_draft_folders(tmp_path: Path):
    _make_tree(tmp_path, ("design", "intermediate", "scantling"))
    located = find_data_file(tmp_path, draft=14.9, gm=1.0, hs=4.0, tz=8.0, draft_lower=10.0, draft_upper=20.0)
    assert located.path.parts[-4] == "intermediate"
    assert located.fitted_draft == 15.0


def test_old_style_default_range(tmp_path: Path):
    _make_tree(tmp_path, ("design", "scantling"))
    located = find_data_file(tmp_path, draft=15.0, gm=1.0, hs=4.0, tz=8.0)
    assert located.path.parts[-4] == "scantling"
    assert located.fitted_draft == 16.0


def test_no_draft_folder(tmp_path: Path):
    (tmp_path / "misc").mkdir()
    with pytest.raises(LocateError) as ei:
        find_data_file(tmp_path, 10.0, 1.0, 4.0, 8.0)
    assert ei.value.stage == "draft"


def test_no_gm_folder(tmp_path: Path):
    (tmp_path / "Draft=11m" / "notes").mkdir(parents=True)
    with pytest.raises(LocateError) as ei:
        find_data_file(tmp_path, 10.0, 1.0, 4.0, 8.0)
    assert ei.value.stage == "gm"


def test_missing_bin_folder(tmp_path: Path):
    (tmp_path / "Draft=11m" / "GM=1.0m").mkdir(parents=True)
    with pytest.raises(LocateError) as ei:
        find_data_file(tmp_path, 10.0, 1.0, 4.0, 8.0)
    assert ei.value.stage == "data file"


def test_root_must_exist(tmp_path: Path):
    with pytest.raises(LocateError):
        find_data_file(tmp_path / "nope", 10.0, 1.0, 4.0, 8.0)


def test_fitted_parameters_from_path():
    p = Path("/data/Draft=11m/GM=1.5m/bin/MAXROLL_H10.0_T10.5.bpolar")
    fitted = fitted_parameters_from_path(p, hs=9.0, tz=9.0, gm=2.0)
    assert (fitted.gm, fitted.hs, fitted.tz) == (1.5, 10.0, 10.5)


def test_fitted_parameters_fall_back_to_request():
    fitted = fitted_parameters_from_path(Path("/tmp/roll.bpolar"), hs=4.0, tz=8.0, gm=1.2)
    assert (fitted.gm, fitted.hs, fitted.tz) == (1.2, 4.0, 8.0)
