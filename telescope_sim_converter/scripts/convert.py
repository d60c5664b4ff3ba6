from __future__ import annotations

"""Command-line entry point: convert simulation logs into binary artifacts."""

from pathlib import Path
from typing import Optional, Sequence
import sys

from telescope_sim_converter.config import ConverterConfig
from telescope_sim_converter.models.outcome import BatchReport
from telescope_sim_converter.pipeline import convert_batch


def prompt_operator(default: str = "unknown") -> str:
    """Ask for an operator identifier when running interactively; otherwise return ``default``."""
    if not sys.stdin.isatty():
        return default
    try:
        answer = input("Operator identifier: ").strip()
    except EOFError:
        return default
    return answer or default


def print_report(report: BatchReport) -> None:
    for w in report.warnings:
        print(f"[warn] {w}")
    for o in report.outcomes:
        name = o.source_path.name
        if o.ok:
            print(f"[info] {name}: wrote {o.output_path} ({o.n_events} events)")
        elif o.status == "skipped":
            print(f"[warn] {name}: skipped ({o.reason}: {o.message})")
        else:
            print(f"[error] {name}: failed ({o.reason}: {o.message})")
        for w in o.warnings:
            print(f"  [warn] {w}")
    print(f"[info] {report.summary()}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    import argparse
    import textwrap

    p = argparse.ArgumentParser(
        prog="python -m telescope_sim_converter.scripts.convert",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Convert telescope Monte-Carlo simulation logs into binary artifacts.

            SOURCE is a single log file or a directory; for a directory every file
            matching --pattern is converted. Output files are named
            <telescope>_<species+energy>_<job>.bin.
            """
        ),
    )
    p.add_argument("source", help="Simulation log file or directory of logs")
    p.add_argument("--pattern", default="*.txt", help="Glob pattern applied when SOURCE is a directory")
    p.add_argument("--suffix", default=".txt", help="Extension stripped before parsing run filenames")
    p.add_argument("--out-dir", default=None, help="Output directory (default: next to each source file)")
    p.add_argument("--operator", default=None, help="Operator identifier (prompted if omitted on a terminal)")
    p.add_argument("--sentinel", default="@@", help="2-character block sentinel prefix")
    p.add_argument(
        "--placeholder-metadata",
        action="store_true",
        help="Convert files with unparsable names using placeholder metadata instead of skipping them",
    )

    ns = p.parse_args(list(argv) if argv is not None else None)

    operator = ns.operator if ns.operator is not None else prompt_operator()
    try:
        cfg = ConverterConfig(
            sentinel=ns.sentinel.encode("ascii"),
            pattern=ns.pattern,
            data_suffix=ns.suffix,
            output_dir=Path(ns.out_dir).expanduser() if ns.out_dir else None,
            operator=operator,
            placeholder_metadata=bool(ns.placeholder_metadata),
        )
    except (ValueError, UnicodeEncodeError) as e:
        p.error(str(e))

    report = convert_batch(ns.source, cfg)
    print_report(report)
    return 0 if report.succeeded else 1


if __name__ == "__main__":
    raise SystemExit(main())
