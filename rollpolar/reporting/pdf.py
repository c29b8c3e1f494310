from __future__ import annotations

import time
from pathlib import Path
from typing import List, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from rollpolar.models.grid import PolarGrid, roll_statistics
from rollpolar.project.cases import AnalysisCase


def _kv(rows: List[List[str]]) -> Table:
    t = Table(rows, colWidths=[6.0 * cm, 11.7 * cm])
    t.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("ROWBACKGROUNDS", (0, 0), (-1, -1), [colors.whitesmoke, colors.white]),
                ("BOX", (0, 0), (-1, -1), 0.5, colors.lightgrey),
                ("INNERGRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
            ]
        )
    )
    return t


def _fmt(value: Optional[float], unit: str = "") -> str:
    if value is None:
        return "n/a"
    return f"{value:.2f}{unit}"


def build_case_report(
    case: AnalysisCase,
    grid: PolarGrid,
    chart_png: Path,
    out_path: Path,
    curves_png: Optional[Path] = None,
) -> Path:
    out_path = Path(out_path).expanduser().resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    stats = roll_statistics(grid)
    v = case.vessel
    s = case.sea_state

    styles = getSampleStyleSheet()
    doc = SimpleDocTemplate(str(out_path), pagesize=A4, leftMargin=1.6 * cm, rightMargin=1.6 * cm, topMargin=1.6 * cm, bottomMargin=1.6 * cm)
    story = [Paragraph("Roll Polar Report", styles["Title"]), Spacer(1, 0.2 * cm)]
    stamp = time.strftime("%Y-%m-%d %H:%M", time.localtime(case.timestamp)) if case.timestamp else "-"
    story.append(_kv([["Case", case.id], ["Created", stamp], ["Data file", case.data_file or "-"]]))
    story.append(Spacer(1, 0.2 * cm))

    story.append(Paragraph("Loading Condition", styles["Heading2"]))
    story.append(
        _kv(
            [
                ["Draft aft", _fmt(v.draft_aft, " m")],
                ["Draft fore", _fmt(v.draft_fore, " m")],
                ["Mean draft", _fmt(v.mean_draft, " m")],
                ["GM", _fmt(v.gm, " m")],
                ["Heading", _fmt(v.heading, " deg")],
                ["Speed", _fmt(v.speed, " kn")],
                ["Max allowed roll", _fmt(v.max_roll, " deg")],
            ]
        )
    )
    story.append(Spacer(1, 0.2 * cm))

    story.append(Paragraph("Sea State", styles["Heading2"]))
    story.append(
        _kv(
            [
                ["Hs", _fmt(s.hs, " m")],
                ["Tz", _fmt(s.tz, " s")],
                ["Wave direction", _fmt(s.wave_direction, " deg")],
            ]
        )
    )
    story.append(Spacer(1, 0.2 * cm))

    story.append(Paragraph("Roll Statistics", styles["Heading2"]))
    story.append(
        _kv(
            [
                ["Grid", f"{grid.num_speeds} speeds x {grid.num_headings} headings"],
                ["Valid points", f"{stats.valid_points} / {stats.total_points}"],
                ["Min roll", _fmt(stats.min_roll, " deg")],
                ["Max roll", _fmt(stats.max_roll, " deg")],
                ["Mean roll", _fmt(stats.mean_roll, " deg")],
            ]
        )
    )
    story.append(Spacer(1, 0.2 * cm))

    story.append(Paragraph("Polar Chart", styles["Heading2"]))
    story.append(Image(str(chart_png), width=16 * cm, height=13 * cm, kind="proportional"))
    story.append(Spacer(1, 0.15 * cm))

    if curves_png is not None:
        story.append(Paragraph("Roll Curves", styles["Heading2"]))
        story.append(Image(str(curves_png), width=16 * cm, height=12 * cm, kind="proportional"))

    doc.build(story)
    return out_path
