"""CLI entrypoint for GeoNames postal code lookups and distance queries."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from dataclasses import replace
from pathlib import Path

from geopostal.common.config_loader import Settings, load_settings
from geopostal.common.constants import COMMANDS, EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS, UNITS
from geopostal.common.errors import ConfigError, GeoPostalError, MultipleMatchesWarning
from geopostal.common.fs import write_json
from geopostal.common.geometry import distance_between_points
from geopostal.common.logging import build_logger, close_logger, generate_run_id, log_event, log_warning
from geopostal.common.models import PostalIndex, PostalRecord
from geopostal.common.schema import validate_country_code
from geopostal.loader.dataset import load_dataset
from geopostal.query.engine import calculate_distance, find_codes_within_radius, lookup


def _common_options() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("--dataset", default=None)
    parser.add_argument("--country", default=None)
    parser.add_argument("--full-scan", action="store_true")
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--log-dir", default=None)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--output", default=None)
    return parser


def parse_args(argv: list[str]) -> argparse.Namespace:
    common = _common_options()
    parser = argparse.ArgumentParser(description=__doc__)
    commands = parser.add_subparsers(dest="command", required=True)

    lookup_cmd = commands.add_parser(COMMANDS[0], parents=[common])
    lookup_cmd.add_argument("code")

    distance_cmd = commands.add_parser(COMMANDS[1], parents=[common])
    distance_cmd.add_argument("code_a")
    distance_cmd.add_argument("code_b")
    distance_cmd.add_argument("--unit", default="km", choices=UNITS)

    point_cmd = commands.add_parser(COMMANDS[2], parents=[common])
    point_cmd.add_argument("code")
    point_cmd.add_argument("latitude", type=float)
    point_cmd.add_argument("longitude", type=float)
    point_cmd.add_argument("--unit", default="km", choices=UNITS)

    radius_cmd = commands.add_parser(COMMANDS[3], parents=[common])
    radius_cmd.add_argument("code")
    radius_cmd.add_argument("radius", type=float)
    radius_cmd.add_argument("--unit", default="km", choices=UNITS)

    return parser.parse_args(argv)


def resolve_settings(args: argparse.Namespace) -> Settings:
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    settings = load_settings(Path(args.config_dir), overlay_config_dir=overlay_config_dir)

    overrides = {}
    if args.dataset:
        overrides["dataset_path"] = Path(args.dataset)
    if args.country is not None:
        overrides["country"] = validate_country_code(args.country, "--country")
    if args.full_scan:
        overrides["early_exit"] = False
    if args.log_level:
        overrides["log_level"] = args.log_level
    settings = replace(settings, **overrides)

    if settings.dataset_path is None:
        raise ConfigError("No dataset configured; pass --dataset or set dataset.path")
    return settings


def _load_index(settings: Settings, logger: logging.Logger, run_id: str) -> PostalIndex:
    fields = {
        "run_id": run_id,
        "stage": "load",
        "dataset": str(settings.dataset_path),
        "country": settings.country,
    }
    log_event(logger, "dataset load start", event="LOAD_START", status="ok", **fields)
    started = time.monotonic()
    index = load_dataset(settings.dataset_path, settings.country, early_exit=settings.early_exit)
    log_event(
        logger,
        f"dataset loaded with {len(index)} postal codes",
        event="LOAD_END",
        status="ok",
        duration_ms=int((time.monotonic() - started) * 1000),
        rows_out=index.record_count,
        **fields,
    )
    return index


def _first_record(index: PostalIndex, code: str, warnings: list[MultipleMatchesWarning]) -> PostalRecord:
    result = lookup(index, code)
    if result.warning is not None:
        warnings.append(result.warning)
    return result.records[0]


def execute_command(
    args: argparse.Namespace,
    index: PostalIndex,
    settings: Settings,
) -> tuple[dict, list[MultipleMatchesWarning]]:
    warnings: list[MultipleMatchesWarning] = []

    if args.command == "lookup":
        result = lookup(index, args.code)
        if result.warning is not None:
            warnings.append(result.warning)
        payload = {
            "code": args.code,
            "records": [record.to_dict() for record in result.records],
        }
    elif args.command == "distance":
        earth_radius = settings.earth_radius[args.unit]
        record_a = _first_record(index, args.code_a, warnings)
        record_b = _first_record(index, args.code_b, warnings)
        payload = {
            "from": args.code_a,
            "to": args.code_b,
            "unit": args.unit,
            "distance": calculate_distance(record_a, record_b, earth_radius),
        }
    elif args.command == "distance-to-point":
        earth_radius = settings.earth_radius[args.unit]
        record = _first_record(index, args.code, warnings)
        payload = {
            "from": args.code,
            "to": {"latitude": args.latitude, "longitude": args.longitude},
            "unit": args.unit,
            "distance": distance_between_points(
                record.latitude, record.longitude, args.latitude, args.longitude, earth_radius
            ),
        }
    elif args.command == "radius":
        earth_radius = settings.earth_radius[args.unit]
        origin = _first_record(index, args.code, warnings)
        payload = {
            "origin": args.code,
            "radius": args.radius,
            "unit": args.unit,
            "codes": find_codes_within_radius(index, origin, args.radius, earth_radius),
        }
    else:
        raise ValueError(f"Unknown command: {args.command}")

    payload["warnings"] = [str(warning) for warning in warnings]
    return payload, warnings


def _emit(payload: dict, output: str | None) -> None:
    if output:
        write_json(Path(output), payload)
        return
    sys.stdout.write(json.dumps(payload, ensure_ascii=False, sort_keys=True) + "\n")


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    log_dir = Path(args.log_dir) if args.log_dir else None
    logger = build_logger(run_id, log_dir=log_dir, level=args.log_level or "INFO")

    try:
        settings = resolve_settings(args)
        logger.setLevel(settings.log_level)
        index = _load_index(settings, logger, run_id)
        log_event(logger, f"{args.command} start", run_id=run_id, stage=args.command, event="QUERY_START", status="ok")
        payload, warnings = execute_command(args, index, settings)
    except GeoPostalError as exc:
        logger.error(
            f"{args.command} failed: {exc}",
            extra={
                "run_id": run_id,
                "stage": args.command,
                "event": "COMMAND_FAIL",
                "status": "error",
                "error_code": exc.error_code,
            },
        )
        close_logger(logger)
        return EXIT_HARD_FAIL

    for warning in warnings:
        log_warning(
            logger,
            str(warning),
            run_id=run_id,
            stage=args.command,
            event="MULTIPLE_MATCHES",
            status="warning",
            error_code=warning.error_code,
        )
    log_event(logger, f"{args.command} end", run_id=run_id, stage=args.command, event="QUERY_END", status="ok")
    close_logger(logger)

    _emit(payload, args.output)
    if warnings:
        return EXIT_PARTIAL
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except GeoPostalError:
        return EXIT_HARD_FAIL
    except Exception:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
