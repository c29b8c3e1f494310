import numpy as np
import pytest

from rollpolar.models.grid import PolarGrid
from rollpolar.models.render import Orientation, RenderConfig
from rollpolar.polar import interpolate_roll
from rollpolar.viz.colormap import TRAFFIC_LIGHT_PALETTE, ColorScale, map_color
from rollpolar.viz.geometry import chart_geometry
from rollpolar.viz.polar_raster import RenderCancelled, query_field, render_heatmap, render_polar_chart


def _grid() -> PolarGrid:
    speeds = [0.0, 10.0, 20.0, 25.0]
    headings = [0.0, 45.0, 90.0, 135.0, 180.0]
    roll = [[2.0 + s * 0.4 + h / 30.0 for h in headings] for s in speeds]
    return PolarGrid.from_lists(speeds, headings, roll)


def test_chart_geometry_480x400():
    g = chart_geometry(480, 400)
    assert (g.centre_x, g.centre_y) == (280.0, 200.0)
    assert g.max_radius == pytest.approx(min(480 - 80 - 60, 400 - 80) * 0.42)
    assert g.drawable


def test_tiny_canvas_is_not_drawable():
    assert not chart_geometry(100, 100).drawable


def test_query_field_directions_north_up():
    geom = chart_geometry(480, 400)
    cfg = RenderConfig(480, 400, wave_direction_deg=0.0)
    q = query_field(geom, cfg)
    # straight up from the centre
    assert q.compass_deg[133, 280] == pytest.approx(0.0)
    assert q.encounter_deg[133, 280] == pytest.approx(0.0)
    assert q.speed_kn[133, 280] == pytest.approx(67.0 / geom.max_radius * 25.0)
    # east, south, west
    assert q.compass_deg[200, 330] == pytest.approx(90.0)
    assert q.compass_deg[250, 280] == pytest.approx(180.0)
    assert q.encounter_deg[250, 280] == pytest.approx(180.0)
    assert q.compass_deg[200, 230] == pytest.approx(270.0)
    assert q.encounter_deg[200, 230] == pytest.approx(90.0)


def test_query_field_centre_is_zero_speed():
    geom = chart_geometry(480, 400)
    q = query_field(geom, RenderConfig(480, 400))
    assert q.speed_kn[200, 280] == 0.0
    assert q.inside[200, 280]


def test_query_field_heads_up_rotates_compass():
    geom = chart_geometry(480, 400)
    cfg = RenderConfig(480, 400, orientation="heads-up", vessel_heading_deg=90.0)
    assert cfg.orientation is Orientation.HEADS_UP
    q = query_field(geom, cfg)
    assert q.compass_deg[133, 280] == pytest.approx(90.0)
    assert q.compass_deg[200, 230] == pytest.approx(0.0)


def test_heatmap_pixels_inside_and_outside_circle():
    grid = _grid()
    cfg = RenderConfig(480, 400, max_roll_deg=20.0, wave_direction_deg=30.0)
    img = render_heatmap(grid, cfg)
    geom = chart_geometry(480, 400)
    assert img.shape == (400, 480, 4)
    assert img.dtype == np.uint8

    outside_x = int(np.ceil(geom.centre_x + geom.max_radius + 1.0))
    assert img[200, outside_x, 3] == 0
    assert img[0, 0, 3] == 0

    # 50 px north of the centre
    y, x = 150, 280
    assert img[y, x, 3] == 255
    q = query_field(geom, cfg, y, y + 1)
    expected = map_color(
        interpolate_roll(grid, q.speed_kn[0, x], q.encounter_deg[0, x]),
        ColorScale.for_render(grid, cfg),
    )
    assert tuple(int(c) for c in img[y, x, :3]) == expected


def test_uniform_low_roll_is_all_green_in_traffic_mode():
    grid = PolarGrid.from_lists([0.0, 25.0], [0.0, 180.0], [[5.0, 5.0], [5.0, 5.0]])
    img = render_heatmap(grid, RenderConfig(300, 300, mode="traffic-light", max_roll_deg=20.0))
    inside = img[..., 3] == 255
    assert inside.any()
    assert (img[inside][:, :3] == np.array(TRAFFIC_LIGHT_PALETTE[0], dtype=np.uint8)).all()


def test_empty_grid_heatmap_is_transparent():
    img = render_heatmap(PolarGrid.empty(), RenderConfig(200, 160))
    assert img.shape == (160, 200, 4)
    assert not img.any()


def test_render_chart_placeholder_for_empty_grid():
    img = render_polar_chart(None, RenderConfig(320, 240))
    assert img.shape == (240, 320, 4)
    assert img[..., 3].max() > 0


def test_render_chart_zero_size():
    img = render_polar_chart(_grid(), RenderConfig(0, 0))
    assert img.shape == (0, 0, 4)


def test_render_chart_canvas_style_keeps_transparent_corners():
    img = render_polar_chart(_grid(), RenderConfig(480, 400, vessel_speed_kn=12.0, vessel_heading_deg=40.0))
    assert img.shape == (400, 480, 4)
    assert img[0, 479, 3] == 0
    assert img[200, 280, 3] == 255


def test_render_chart_simple_style_fills_background():
    cfg = RenderConfig(480, 400, mode="traffic-light", orientation="heads-up", vessel_heading_deg=120.0, wave_direction_deg=200.0)
    img = render_polar_chart(_grid(), cfg, style="simple")
    assert tuple(int(c) for c in img[0, 479]) == (90, 108, 125, 255)


@pytest.mark.parametrize("style", ["canvas", "simple"])
def test_overlays_blend_over_heatmap(style):
    cfg = RenderConfig(480, 400, mode="traffic-light", vessel_speed_kn=12.0, vessel_heading_deg=40.0, wave_direction_deg=200.0)
    heat = render_heatmap(_grid(), cfg)
    img = render_polar_chart(_grid(), cfg, style=style)
    inside = heat[..., 3] == 255
    assert inside.sum() > 10000
    assert (img[..., 3][inside] == 255).all()
    if style == "simple":
        assert img[..., 3].min() == 255


def test_placeholder_text_blends_over_opaque_background():
    img = render_polar_chart(None, RenderConfig(320, 240), style="simple")
    assert img[..., 3].min() == 255


def test_render_chart_unknown_style():
    with pytest.raises(ValueError):
        render_polar_chart(_grid(), RenderConfig(200, 200), style="neon")


def test_cancel_before_first_chunk():
    with pytest.raises(RenderCancelled):
        render_heatmap(_grid(), RenderConfig(480, 400), cancel=lambda: True)


def test_cancel_between_chunks():
    calls = []

    def cancel() -> bool:
        calls.append(1)
        return len(calls) > 2

    with pytest.raises(RenderCancelled):
        render_polar_chart(_grid(), RenderConfig(480, 400), cancel=cancel)
    assert len(calls) == 3


@pytest.mark.parametrize(
    "kwargs",
    [
        {"width": -1, "height": 10},
        {"width": 10, "height": 10, "mode": "rainbow"},
        {"width": 10, "height": 10, "orientation": "sideways"},
        {"width": 10, "height": 10, "vessel_heading_deg": float("nan")},
        {"width": 10, "height": 10, "max_speed_kn": 0.0},
    ],
)
def test_render_config_rejects_bad_input(kwargs):
    with pytest.raises(ValueError):
        RenderConfig(**kwargs)
