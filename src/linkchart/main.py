from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, cast

from dotenv import load_dotenv

from linkchart.adapters.interchange import encode, write_csv_dump
from linkchart.adapters.tabular import format_from_suffix
from linkchart.app import run_pipeline
from linkchart.config import ConfigurationError, configure_logging, get_pipeline_config
from linkchart.domain.ingest_pipeline import EventBus
from linkchart.domain.model import CentralityMeasure, InputFormat, ParseError, StageName

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from linkchart.domain.ingest_pipeline import PipelineState, StageEvent

log = logging.getLogger(__name__)

EXIT_PARSE_ERROR = 2
EXIT_STRICT_WARNINGS = 3
EXIT_INTERNAL_ERROR = 4

_COMMAND_STAGES: dict[str, StageName] = {
    "parse": StageName.TYPED,
    "normalize": StageName.NORMALIZED,
    "resolve": StageName.RESOLVED,
    "analyze": StageName.ANALYZED,
}


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--in",
        dest="input",
        type=str,
        help="Input file (reads stdin when omitted)",
    )
    parser.add_argument(
        "--format",
        choices=[item.value for item in InputFormat],
        help="Input format (sniffed from the file suffix or content by default)",
    )
    parser.add_argument(
        "--assignment",
        type=str,
        help='JSON object mapping columns to roles, e.g. \'{"from": "sourceId"}\'',
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 3 when entity resolution reports warnings",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Turn tabular records into an analyzed link chart")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse = subparsers.add_parser("parse", help="Read rows and detect column types")
    _add_common_arguments(parse)

    normalize = subparsers.add_parser("normalize", help="Canonicalize every cell")
    _add_common_arguments(normalize)

    resolve = subparsers.add_parser("resolve", help="Build and deduplicate the graph")
    _add_common_arguments(resolve)
    resolve.add_argument("--csv-dir", type=str, help="Also write entities.csv and links.csv")

    analyze = subparsers.add_parser("analyze", help="Resolve and analyze the graph")
    _add_common_arguments(analyze)
    analyze.add_argument("--csv-dir", type=str, help="Also write entities.csv and links.csv")
    analyze.add_argument(
        "--path",
        nargs=2,
        metavar=("SOURCE", "TARGET"),
        help="Report the shortest path between two node ids",
    )
    analyze.add_argument("--max-depth", type=int, help="Path search depth bound")
    analyze.add_argument("--top-k", type=int, help="Number of central nodes to report")
    analyze.add_argument(
        "--max-iterations",
        type=int,
        help="Community detection sweep cap",
    )
    analyze.add_argument(
        "--centrality",
        nargs="+",
        choices=[item.value for item in CentralityMeasure],
        default=[],
        help="Extra centrality measures to compute",
    )

    return parser.parse_args(list(argv))


def _parse_assignment(raw: str | None) -> dict[str, str] | None:
    if raw is None:
        return None
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"--assignment is not valid JSON: {exc.msg}") from exc
    if not isinstance(payload, dict) or not all(
        isinstance(key, str) and isinstance(value, str)
        for key, value in cast(dict[object, object], payload).items()
    ):
        raise ValueError("--assignment must be a JSON object of column -> role strings")
    return cast(dict[str, str], payload)


def _read_input(path: str | None) -> bytes:
    if path is None:
        return sys.stdin.buffer.read()
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise ParseError(f"Cannot read {path}: {exc.strerror}") from exc


def _stage_output(command: str, state: PipelineState, durations: dict[str, float]) -> object:
    payload: dict[str, object]
    if command == "parse":
        ingested = state.require(state.ingest, StageName.INGESTED)
        payload = {
            "headers": encode(ingested.headers),
            "rows": encode(ingested.rows),
            "profiles": encode(state.profiles),
        }
    elif command == "normalize":
        normalized = state.require(state.normalization, StageName.NORMALIZED)
        payload = {"rows": encode(normalized.rows)}
    elif command == "resolve":
        resolution = state.require(state.resolution, StageName.RESOLVED)
        payload = cast(dict[str, object], encode(resolution))
    else:
        report = state.require(state.report, StageName.ANALYZED)
        payload = cast(dict[str, object], encode(report))
    payload["warnings"] = encode(state.warnings)
    payload["durationMs"] = {stage: round(ms, 3) for stage, ms in durations.items()}
    return payload


def _strict_failure(command: str, state: PipelineState) -> bool:
    if command not in ("resolve", "analyze") or state.resolution is None:
        return False
    return bool(state.resolution.warnings)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        assignment = _parse_assignment(parsed_args.assignment)
        config = get_pipeline_config()
        if parsed_args.command == "analyze":
            config = config.with_overrides(
                max_depth=parsed_args.max_depth,
                top_k=parsed_args.top_k,
                max_iterations=parsed_args.max_iterations,
            )
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(EXIT_PARSE_ERROR)

    command: str = parsed_args.command
    durations: dict[str, float] = {}
    events = EventBus()

    def record_duration(event: StageEvent) -> None:
        durations[event.stage] = event.duration_ms

    for stage in StageName:
        events.subscribe(stage, record_duration)

    try:
        input_format = parsed_args.format
        if input_format is None and parsed_args.input is not None:
            input_format = format_from_suffix(parsed_args.input)
        state = run_pipeline(
            _read_input(parsed_args.input),
            input_format=input_format,
            config=config,
            assignment=assignment,
            events=events,
            stop_after=_COMMAND_STAGES[command],
            path=tuple(parsed_args.path) if getattr(parsed_args, "path", None) else None,
            centrality_measures=tuple(getattr(parsed_args, "centrality", ())),
        )
        output = _stage_output(command, state, durations)
        sys.stdout.write(json.dumps(output, indent=2, ensure_ascii=False, default=str))
        sys.stdout.write("\n")
        csv_dir = getattr(parsed_args, "csv_dir", None)
        if csv_dir and state.resolution is not None:
            write_csv_dump(state.resolution.graph, csv_dir)
    except ParseError:
        log.exception("Could not parse input")
        sys.exit(EXIT_PARSE_ERROR)
    except Exception:
        log.exception("Fatal error while running %s", command)
        sys.exit(EXIT_INTERNAL_ERROR)

    if parsed_args.strict and _strict_failure(command, state):
        log.error("Strict mode: entity resolution reported warnings")
        sys.exit(EXIT_STRICT_WARNINGS)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(130)


def cli() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    cli()
