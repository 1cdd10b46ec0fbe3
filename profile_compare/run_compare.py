"""Command-line utility for comparing dosing profiles and sampling window progress.

Profiles are read from profile store JSON files. A specific profile inside a
store is selected with ``path.json:ProfileName``; without a name the store's
default profile is used::

    python -m profile_compare.run_compare compare base.json new.json:Weekend
    python -m profile_compare.run_compare compare base.json --percentage 120 --timeshift 1
    python -m profile_compare.run_compare progress --start 1700000000000 --duration 3600000

When the second profile is omitted the first profile is compared with its own
percentage/timeshift adjusted version.
"""
from __future__ import annotations

import argparse
import json
import logging
from itertools import islice
from pathlib import Path
from typing import Iterable, Optional

from profile_compare.config import load_settings
from profile_compare.engine import ScheduleDiffEngine
from profile_compare.models import ProfileComparison, TimeWindowState
from profile_compare.overview import iter_ticks
from profile_compare.profiles import switch_name
from profile_compare.progress import compute_progress, now_millis
from profile_compare.sources import JsonProfileSource

_TABLE_TITLES = {
    "basal": "Basal",
    "ic": "IC",
    "isf": "ISF",
    "target": "Target",
}


def split_profile_arg(value: str) -> tuple[Path, Optional[str]]:
    """Split ``path.json:Name`` into the file path and optional profile name."""

    marker = ".json:"
    if marker in value:
        path_text, name = value.split(marker, 1)
        return Path(path_text + ".json"), name or None
    return Path(value), None


def render_text(comparison: ProfileComparison) -> str:
    blocks: list[str] = [f"{comparison.name1} vs {comparison.name2} ({comparison.units_text})"]
    for table in comparison.tables():
        title = _TABLE_TITLES.get(table.kind.value, table.kind.value)
        frame = table.to_frame()
        blocks.append(f"\n{title} [{table.unit_label}]")
        blocks.append(frame.to_string(index=False))
    return "\n".join(blocks)


def run_compare(args: argparse.Namespace) -> int:
    settings = load_settings(glucose_unit=args.units)
    engine = ScheduleDiffEngine(settings=settings)

    path1, requested1 = split_profile_arg(args.profile1)
    name1, profile1 = JsonProfileSource(path1).load(requested1)

    if args.profile2 is None:
        comparison = engine.build_effective_comparison(
            profile1,
            name1,
            percentage=args.percentage,
            timeshift_hours=args.timeshift,
        )
    else:
        path2, requested2 = split_profile_arg(args.profile2)
        name2, profile2 = JsonProfileSource(path2).load(
            requested2,
            percentage=args.percentage,
            timeshift_hours=args.timeshift,
        )
        comparison = engine.build_comparison(
            profile1,
            profile2,
            name1,
            switch_name(name2, args.percentage, args.timeshift),
        )

    if args.format == "json":
        output = json.dumps(comparison.to_dict(), indent=2, ensure_ascii=False)
    else:
        output = render_text(comparison)

    if args.output:
        args.output.write_text(output + "\n", encoding="utf-8")
    else:
        print(output)
    return 0


def run_progress(args: argparse.Namespace) -> int:
    window = TimeWindowState(start_timestamp=args.start, duration_millis=args.duration)
    if args.now is not None:
        samples: Iterable[int] = [args.now]
    else:
        settings = load_settings()
        samples = islice(iter_ticks(now_millis, settings.tick_interval_seconds), max(1, args.ticks))

    for now in samples:
        sample = compute_progress(window, now)
        print(
            json.dumps({"start": args.start, "duration": args.duration, "now": now, "ratio": sample.ratio}),
            flush=True,
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compare dosing profiles and compute window progress")
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (default: PROFILE_COMPARE_LOG_LEVEL or WARNING).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    compare = subparsers.add_parser("compare", help="Print the comparison tables for two profiles")
    compare.add_argument("profile1", type=str, help="Profile store JSON, optionally path.json:Name")
    compare.add_argument("profile2", type=str, nargs="?", help="Second profile (default: switched profile1)")
    compare.add_argument("--percentage", type=int, default=100, help="Percentage applied to the second profile")
    compare.add_argument("--timeshift", type=int, default=0, help="Timeshift in hours applied to the second profile")
    compare.add_argument("--units", type=str, help="Display units: mg/dl or mmol (default: first profile's units)")
    compare.add_argument("--format", choices=("text", "json"), default="text", help="Output format")
    compare.add_argument("--output", type=Path, help="Optional path to write the output")
    compare.set_defaults(handler=run_compare)

    progress = subparsers.add_parser("progress", help="Print the elapsed ratio of a time window")
    progress.add_argument("--start", type=int, required=True, help="Window start (epoch ms)")
    progress.add_argument("--duration", type=int, required=True, help="Window duration (ms)")
    progress.add_argument("--now", type=int, help="Sample time (epoch ms, default: current time)")
    progress.add_argument(
        "--ticks",
        type=int,
        default=1,
        help="Number of samples to print, one per tick interval (ignored with --now).",
    )
    progress.set_defaults(handler=run_progress)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(log_level=args.log_level)
    except ValueError as exc:
        parser.error(str(exc))
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        return args.handler(args)
    except (FileNotFoundError, KeyError, ValueError) as exc:
        logging.error(f"{args.command} failed: {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
