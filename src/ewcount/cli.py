"""ewcount CLI.

- Loads candles from a CSV file (time, open, high, low, close[, volume]).
- Runs the multi-degree wave count from --start_index.
- Optionally snaps an assistant reply's wave block onto the same candles.
- Prints a compact/pretty text report or the JSON overlay payload.
"""

from __future__ import annotations

import argparse
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from ewcount.config import load_config
from ewcount.data.bars import CandleSeries
from ewcount.ew.core.model import WavePoint
from ewcount.ew.core.options import WaveOptions
from ewcount.ew.detectors.analyzer import analyze
from ewcount.logging import LogConfig, get_logger, setup_logging
from ewcount.overlay.external import extract_wave_block, snap_to_candles, waves_payload
from ewcount.reporting.render import render_waves

log = get_logger("ewcount.cli")

EXIT_OK = 0
EXIT_BAD_INPUT = 2


def load_candles_csv(path: str) -> CandleSeries:
    df = pd.read_csv(path)
    df.columns = [str(c).strip().lower() for c in df.columns]
    if "time" not in df.columns:
        for alt in ("timestamp", "date", "datetime", "ts"):
            if alt in df.columns:
                df = df.rename(columns={alt: "time"})
                break
    return CandleSeries.from_df(df)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ewcount", description="Elliott wave count + next-wave projection")
    p.add_argument("--csv", required=True, help="candle CSV (time,open,high,low,close[,volume])")
    p.add_argument("--start_index", type=int, default=0, help="bar index the count should start near")
    p.add_argument("--format", default="compact", help="compact|pretty|json")
    p.add_argument("--markdown", action="store_true")
    p.add_argument("--ai_response", default="", help="text file with an assistant reply holding a wave block")
    p.add_argument("--bar_seconds", type=int, default=0, help="nominal bar length for the projection (0 = infer)")

    # logging/config
    p.add_argument("--config", default=os.environ.get("EWCOUNT_CONFIG", ""))
    p.add_argument("--log_level", default=os.environ.get("EWCOUNT_LOG_LEVEL", ""))
    p.add_argument("--log_json", action="store_true")
    return p


def _print_points(title: str, points: List[WavePoint], fmt: str, markdown: bool) -> None:
    if fmt == "json":
        print(json.dumps(waves_payload(points), ensure_ascii=False, indent=2))
    else:
        print(render_waves(points, fmt=fmt, markdown=markdown, title=title))


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    overrides: Dict[str, Any] = {}
    if args.log_level:
        overrides.setdefault("log", {})["level"] = args.log_level
    if args.log_json:
        overrides.setdefault("log", {})["json"] = True
    if args.bar_seconds > 0:
        overrides.setdefault("ew", {})["bar_seconds"] = args.bar_seconds

    try:
        cfg = load_config(defaults={}, file_path=args.config or None, overrides=overrides)
        setup_logging(LogConfig.from_config(cfg))
        opts = WaveOptions.from_config(cfg)
    except (OSError, ValueError, TypeError) as e:
        log.error("bad configuration (%s): %s", args.config or "env/flags", e)
        return EXIT_BAD_INPUT

    try:
        candles = load_candles_csv(args.csv)
    except (OSError, ValueError, TypeError) as e:
        log.error("cannot load candles from %s: %s", args.csv, e)
        return EXIT_BAD_INPUT

    fmt = str(args.format).strip().lower()
    points = analyze(candles, start_index=int(args.start_index), options=opts)
    _print_points("EW engine", points, fmt, args.markdown)

    if args.ai_response:
        try:
            text = Path(args.ai_response).read_text(encoding="utf-8")
        except OSError as e:
            log.error("cannot read assistant reply %s: %s", args.ai_response, e)
            return EXIT_BAD_INPUT
        external = snap_to_candles(extract_wave_block(text), candles)
        _print_points("EW assistant", external, fmt, args.markdown)

    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
