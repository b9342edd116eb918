from __future__ import annotations

import datetime
from typing import List, Optional, Sequence

from ewcount.ew.core.model import WavePoint


def _fmt_time(t: int) -> str:
    return datetime.datetime.fromtimestamp(int(t), tz=datetime.timezone.utc).strftime("%Y-%m-%d %H:%M")


def _split(points: Sequence[WavePoint]):
    confirmed = [p for p in points if not p.is_projection]
    proj: Optional[WavePoint] = next((p for p in points if p.is_projection), None)
    return confirmed, proj


def _compact_lines(points: Sequence[WavePoint], title: str) -> List[str]:
    confirmed, proj = _split(points)
    if not confirmed:
        return [f"{title} no wave count"]
    degree = confirmed[-1].degree.value if confirmed[-1].degree is not None else "-"
    labels = " ".join(p.label for p in confirmed)
    line = f"{title} degree={degree} waves=[{labels}] last={confirmed[-1].price:.4f}"
    if proj is not None:
        line += f" next={proj.label}@{proj.price:.4f}"
    return [line]


def _pretty_lines(points: Sequence[WavePoint], title: str, markdown: bool) -> List[str]:
    b = "**" if markdown else ""
    confirmed, proj = _split(points)
    lines: List[str] = [f"{b}{title}{b}"]
    if not confirmed:
        lines.append("no interpretable wave count")
        return lines
    degree = confirmed[-1].degree.value if confirmed[-1].degree is not None else "-"
    lines.append(f"degree={degree} points={len(confirmed)}")
    lines.append("")
    lines.append(f"{b}Waves{b}:")
    for p in confirmed:
        kind = p.type.value if p.type is not None else "?"
        desc = f" - {p.description}" if p.description else ""
        lines.append(f" {p.label:>5} {_fmt_time(p.time)} {p.price:.4f} ({kind}){desc}")
    if proj is not None:
        lines.append("")
        lines.append(f"{b}Projection{b}: {proj.label} {_fmt_time(proj.time)} {proj.price:.4f}")
    return lines


def render_waves(
    points: Sequence[WavePoint],
    *,
    fmt: str = "compact",
    markdown: bool = False,
    title: str = "EW",
) -> str:
    """Render a wave count as text.

    fmt:
      - compact: one summary line (default)
      - pretty : one line per wave point plus the projection

    markdown:
      - bold section headers only.
    """
    fmt = (fmt or "compact").strip().lower()
    if fmt not in ("compact", "pretty"):
        fmt = "compact"
    if fmt == "compact":
        lines = _compact_lines(points, title)
    else:
        lines = _pretty_lines(points, title, markdown=markdown)
    return "\n".join(lines)
