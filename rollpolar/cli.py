from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Tuple

from rollpolar.io.control_file import ControlFileError, load_control_file
from rollpolar.io.locator import LocateError, find_data_file, fitted_parameters_from_path
from rollpolar.logging_config import configure_logging
from rollpolar.models.grid import roll_statistics
from rollpolar.models.render import RenderConfig
from rollpolar.parser.bpolar import DecodedPolar, DecodeError, load_polar_file
from rollpolar.plotting.plots import plot_roll_curves
from rollpolar.project.cases import AnalysisCase, CaseError, SeaState, VesselCondition
from rollpolar.reporting.pdf import build_case_report
from rollpolar.viz.export import save_png
from rollpolar.viz.polar_raster import render_polar_chart
from rollpolar.viz.styles import get_style


def _fmt(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:.2f}"


def _load(file: str) -> Tuple[Optional[DecodedPolar], int]:
    path = Path(file).expanduser().resolve()
    if not path.exists():
        print(f"[ERROR] File not found: {path}")
        print("        Provide a valid path to a .bpolar file.")
        return None, 2
    if not path.is_file():
        print(f"[ERROR] Not a file: {path}")
        return None, 2
    try:
        decoded = load_polar_file(path)
    except DecodeError as e:
        print(f"[ERROR] Cannot decode {path.name}: {e}")
        return None, 3
    return decoded, 0


def _render_config(args: argparse.Namespace) -> RenderConfig:
    get_style(args.style)
    if args.width <= 0 or args.height <= 0:
        raise ValueError(f"Image size must be positive, got {args.width}x{args.height}")
    return RenderConfig(
        width=args.width,
        height=args.height,
        mode=args.mode,
        orientation=args.orientation,
        vessel_heading_deg=args.heading,
        vessel_speed_kn=args.speed,
        max_roll_deg=args.max_roll,
        wave_direction_deg=args.wave_dir,
    )


def _cmd_inspect(args: argparse.Namespace) -> int:
    decoded, rc = _load(args.file)
    if decoded is None:
        return rc
    grid = decoded.grid
    stats = roll_statistics(grid)
    print("RollPolar Inspect")
    print(f"  File: {Path(args.file).expanduser().resolve()}")
    print(f"  Header: {decoded.header1} | {decoded.header2}")
    print(f"  Status: {decoded.status}")
    print(f"  Grid: {grid.num_speeds} speeds x {grid.num_headings} headings")
    print(f"  Cells read: {decoded.cells_read} / {decoded.cells_expected}" + (" (truncated)" if decoded.truncated else ""))
    if grid.num_speeds:
        print(f"  Speeds (kn): {', '.join(f'{s:g}' for s in grid.speeds_kn)}")
    if grid.num_headings:
        print(f"  Headings (deg): {', '.join(f'{h:g}' for h in grid.headings_deg)}")
    print(
        f"  Roll: {stats.valid_points}/{stats.total_points} valid, "
        f"min={_fmt(stats.min_roll)} max={_fmt(stats.max_roll)} mean={_fmt(stats.mean_roll)}"
    )
    for note in decoded.notes:
        print(f"  Note: {note.message}")
    return 0


def _cmd_render(args: argparse.Namespace) -> int:
    decoded, rc = _load(args.file)
    if decoded is None:
        return rc
    try:
        config = _render_config(args)
    except ValueError as e:
        print(f"[ERROR] {e}")
        return 2
    image = render_polar_chart(decoded.grid, config, style=args.style)
    out = save_png(image, Path(args.out))
    print("RollPolar Render")
    print(f"  Saved: {out}")
    return 0


def _cmd_locate(args: argparse.Namespace) -> int:
    root = Path(args.root).expanduser().resolve()
    if not root.is_dir():
        print(f"[ERROR] Not a directory: {root}")
        return 2

    draft_lower = draft_upper = None
    if args.control:
        try:
            control = load_control_file(Path(args.control))
        except ControlFileError as e:
            print(f"[ERROR] {e}")
            return 2
        draft_lower, draft_upper = control.bounds.draft_lower, control.bounds.draft_upper

    try:
        located = find_data_file(root, args.draft, args.gm, args.hs, args.tz, draft_lower, draft_upper)
    except LocateError as e:
        print(f"[ERROR] {e}")
        return 3
    fitted = fitted_parameters_from_path(located.path, args.hs, args.tz, args.gm)
    print("RollPolar Locate")
    print(f"  File: {located.path}")
    print(f"  Fitted: draft={located.fitted_draft:g} m  GM={fitted.gm:g} m  Hs={fitted.hs:g} m  Tz={fitted.tz:g} s")
    return 0


def _cmd_report(args: argparse.Namespace) -> int:
    decoded, rc = _load(args.file)
    if decoded is None:
        return rc
    if decoded.grid.is_empty:
        print("[ERROR] Polar file holds no data; cannot report.")
        return 3
    try:
        config = _render_config(args)
    except ValueError as e:
        print(f"[ERROR] {e}")
        return 2

    data_file = Path(args.file).expanduser().resolve()
    fitted = fitted_parameters_from_path(data_file, args.hs or 0.0, args.tz or 0.0, args.gm or 0.0)
    try:
        case = AnalysisCase(
            id=args.case,
            vessel=VesselCondition(
                draft_aft=args.draft_aft,
                draft_fore=args.draft_fore,
                gm=fitted.gm if args.gm is None else args.gm,
                heading=config.vessel_heading_deg,
                speed=config.vessel_speed_kn,
                max_roll=config.max_roll_deg,
            ),
            sea_state=SeaState(
                hs=fitted.hs if args.hs is None else args.hs,
                tz=fitted.tz if args.tz is None else args.tz,
                wave_direction=config.wave_direction_deg,
            ),
            data_file=str(data_file),
        )
    except CaseError as e:
        print(f"[ERROR] {e}")
        return 2

    outdir = Path(args.out).expanduser().resolve()
    outdir.mkdir(parents=True, exist_ok=True)
    chart = save_png(render_polar_chart(decoded.grid, config, style=args.style), outdir / f"{case.id}_polar.png")
    curves = plot_roll_curves(decoded.grid, outdir / f"{case.id}_curves.png", max_roll_deg=config.max_roll_deg)
    pdf = build_case_report(case, decoded.grid, chart, outdir / f"{case.id}_report.pdf", curves_png=curves)

    print("RollPolar Report")
    print(f"  Saved: {chart}")
    print(f"  Saved: {curves}")
    print(f"  Saved: {pdf}")
    return 0


def _add_render_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--mode", default="continuous", help="continuous | traffic-light")
    p.add_argument("--orientation", default="north-up", help="north-up | heads-up")
    p.add_argument("--heading", type=float, default=0.0, help="Vessel heading (deg)")
    p.add_argument("--speed", type=float, default=0.0, help="Vessel speed (kn)")
    p.add_argument("--max-roll", type=float, default=20.0, help="Maximum allowed roll (deg)")
    p.add_argument("--wave-dir", type=float, default=0.0, help="Wave direction (deg)")
    p.add_argument("--width", type=int, default=800, help="Image width (px)")
    p.add_argument("--height", type=int, default=700, help="Image height (px)")
    p.add_argument("--style", default="canvas", help="canvas | simple")


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="rollpolar")
    p.add_argument("--log-level", default=None, help="Logging level (default: $ROLLPOLAR_LOG_LEVEL or INFO)")
    sub = p.add_subparsers(dest="cmd", required=True)

    i = sub.add_parser("inspect", help="Decode a .bpolar file and print its contents.")
    i.add_argument("file", help="Path to .bpolar file")
    i.set_defaults(func=_cmd_inspect)

    r = sub.add_parser("render", help="Render the polar roll chart to PNG.")
    r.add_argument("file", help="Path to .bpolar file")
    r.add_argument("--out", required=True, help="Output .png path")
    _add_render_options(r)
    r.set_defaults(func=_cmd_render)

    loc = sub.add_parser("locate", help="Find the data file nearest a loading condition.")
    loc.add_argument("root", help="Folder holding the draft folders")
    loc.add_argument("--draft", type=float, required=True, help="Mean draft (m)")
    loc.add_argument("--gm", type=float, required=True, help="GM (m)")
    loc.add_argument("--hs", type=float, required=True, help="Significant wave height (m)")
    loc.add_argument("--tz", type=float, required=True, help="Mean wave period (s)")
    loc.add_argument("--control", default=None, help="Control file supplying the draft range")
    loc.set_defaults(func=_cmd_locate)

    rep = sub.add_parser("report", help="Render chart and roll curves and build a PDF report.")
    rep.add_argument("file", help="Path to .bpolar file")
    rep.add_argument("--out", default="out", help="Output directory (default: out)")
    rep.add_argument("--case", default="case1", help="Case id (max 12 characters)")
    rep.add_argument("--draft-aft", type=float, default=0.0, help="Draft aft (m)")
    rep.add_argument("--draft-fore", type=float, default=0.0, help="Draft fore (m)")
    rep.add_argument("--gm", type=float, default=None, help="GM (m); default from the file path")
    rep.add_argument("--hs", type=float, default=None, help="Hs (m); default from the file name")
    rep.add_argument("--tz", type=float, default=None, help="Tz (s); default from the file name")
    _add_render_options(rep)
    rep.set_defaults(func=_cmd_report)

    args = p.parse_args(argv)
    configure_logging(args.log_level)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
