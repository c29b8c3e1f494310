from pathlib import Path

import pytest

from rollpolar.io.control_file import (
    ControlFileError,
    ParameterBounds,
    load_control_file,
    parse_control_text,
)

SAMPLE_CTL = """9876543            !Vessel IMO number
8.0   16.0         !Min, Max Draft
0.5   4.0          !Min, Max GM
0     25           !Min, Max Speed
0     30           !Min, Max Allowed Roll
3.0   11.0         !Min, Max Significant Wave Height (Hs)
5.0   17.0         !Min, Max Wave Period
10.5               !Td - design draft
12.0               !Ti - intermediate draft
14.5               !Ts - scantling draft
"""


def test_parse_full_control_file():
    ctl = parse_control_text(SAMPLE_CTL)
    assert ctl.vessel.imo == "9876543"
    b = ctl.bounds
    assert (b.draft_lower, b.draft_upper) == (8.0, 16.0)
    assert (b.gm_lower, b.gm_upper) == (0.5, 4.0)
    assert (b.speed_lower, b.speed_upper) == (0.0, 25.0)
    assert (b.roll_lower, b.roll_upper) == (0.0, 30.0)
    assert (b.hs_lower, b.hs_upper) == (3.0, 11.0)
    assert (b.tz_lower, b.tz_upper) == (5.0, 17.0)
    assert ctl.drafts.design == 10.5
    assert ctl.drafts.intermediate == 12.0
    assert ctl.drafts.scantling == 14.5


def test_missing_lines_take_defaults():
    ctl = parse_control_text("0.8  3.5   !Min, Max GM\n")
    assert ctl.vessel.imo == "Unknown"
    assert ctl.bounds == ParameterBounds(gm_lower=0.8, gm_upper=3.5)
    assert ctl.drafts.design == 0.0


def test_representative_drafts_key_value_form():
    text = "1234567 !IMO\nTd = 9.5\nTi=11\nscantling = 13.25\n"
    ctl = parse_control_text(text)
    assert ctl.drafts.design == 9.5
    assert ctl.drafts.intermediate == 11.0
    assert ctl.drafts.scantling == 13.25


def test_short_tags_do_not_match_inside_words():
    # "ts" must not pick up "Min, Max Allowed Roll (limits)"
    text = "0 30 !Min, Max Allowed Roll (limits)\n"
    ctl = parse_control_text(text)
    assert ctl.drafts.scantling == 0.0
    assert ctl.bounds.roll_upper == 30.0


def test_non_numeric_bound_raises():
    with pytest.raises(ControlFileError):
        parse_control_text("abc 5 !Min, Max GM\n")


def test_empty_text_raises():
    with pytest.raises(ControlFileError):
        parse_control_text("   \n\n")


def test_load_control_file(tmp_path: Path):
    p = tmp_path / "vessel.ctl"
    p.write_text(SAMPLE_CTL, encoding="utf-8")
    assert load_control_file(p).bounds.draft_upper == 16.0


def test_load_control_file_missing(tmp_path: Path):
    with pytest.raises(ControlFileError):
        load_control_file(tmp_path / "missing.ctl")
