import pytest

from rollpolar.io.control_file import ParameterBounds
from rollpolar.validation import PARAMETER_NAMES, all_valid, validate_all, validate_parameter


def _params(**overrides):
    base = {
        "draft_aft": 10.0,
        "draft_fore": 11.0,
        "gm": 1.5,
        "heading": 45.0,
        "speed": 12.0,
        "max_roll": 20.0,
        "hs": 4.0,
        "tz": 8.0,
        "wave_direction": 180.0,
    }
    base.update(overrides)
    return base


def test_validate_parameter_inclusive_bounds():
    assert validate_parameter(0.0, 0.0, 50.0).is_valid
    assert validate_parameter(50.0, 0.0, 50.0).is_valid
    r = validate_parameter(50.1, 0.0, 50.0)
    assert not r.is_valid
    assert r.out_of_range
    assert (r.min_value, r.max_value) == (0.0, 50.0)


def test_validate_parameter_rejects_nan():
    assert not validate_parameter(float("nan"), 0.0, 1.0).is_valid


def test_all_valid_with_defaults():
    result = validate_all(_params())
    assert set(result) == set(PARAMETER_NAMES)
    assert all_valid(result)


@pytest.mark.parametrize(
    "name,value",
    [("speed", 31.0), ("heading", -1.0), ("max_roll", 61.0), ("draft_fore", 51.0), ("wave_direction", 361.0)],
)
def test_fixed_ranges(name, value):
    result = validate_all(_params(**{name: value}))
    assert not result[name].is_valid
    assert not all_valid(result)


def test_gm_hs_tz_use_control_bounds():
    bounds = ParameterBounds(gm_lower=1.0, gm_upper=2.0, hs_lower=2.0, hs_upper=5.0, tz_lower=6.0, tz_upper=9.0)
    result = validate_all(_params(gm=2.5, hs=4.0, tz=10.0), bounds)
    assert not result["gm"].is_valid
    assert result["hs"].is_valid
    assert not result["tz"].is_valid


def test_missing_parameter():
    params = _params()
    del params["tz"]
    with pytest.raises(KeyError):
        validate_all(params)
