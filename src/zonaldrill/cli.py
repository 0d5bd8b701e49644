"""Command-line interface for zonaldrill."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from zonaldrill import __version__
from zonaldrill.contracts import validate_drill_result
from zonaldrill.drill import drill_dataset, json_nodata
from zonaldrill.errors import DrillError, InputError
from zonaldrill.logging_utils import LogOptions, configure_logging, new_request_id
from zonaldrill.raster.source import open_raster
from zonaldrill.request import DrillRequest, load_drill_request, normalize_drill_request

LOGGER = logging.getLogger("zonaldrill.cli")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_BAD_INPUT = 2


def _add_drill_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the drill subcommand."""
    drill = subparsers.add_parser("drill", help="Compute zonal band statistics for a zone.")
    drill.add_argument("--raster", help="Path to the raster band stack.")
    drill.add_argument(
        "--request",
        help="JSON drill request file; command-line options override its fields.",
    )
    drill.add_argument("--geometry", help="GeoJSON file with the zone geometry.")
    drill.add_argument(
        "--geometry-crs",
        help="CRS of the zone geometry (default EPSG:4326).",
    )
    drill.add_argument(
        "--band",
        action="append",
        type=int,
        help="1-based band index to drill (repeatable, default all bands).",
    )
    drill.add_argument(
        "--band-strides",
        type=int,
        help="Read every Nth band and interpolate the bands in between.",
    )
    drill.add_argument(
        "--deciles",
        type=int,
        dest="decile_count",
        help="Number of decile estimates per band.",
    )
    drill.add_argument(
        "--coverage",
        action="store_true",
        help="Report the fraction of valid pixels inside the clip range.",
    )
    drill.add_argument("--clip-lower", type=float, help="Lower clip bound (inclusive).")
    drill.add_argument("--clip-upper", type=float, help="Upper clip bound (inclusive).")
    drill.add_argument(
        "--buffer-distance",
        type=float,
        help="Buffer applied to the zone in raster CRS units.",
    )
    drill.add_argument(
        "--output",
        help="Optional path to write the result JSON (default stdout).",
    )


def _add_info_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the raster info subcommand."""
    info = subparsers.add_parser("info", help="Show raster georeference and band metadata.")
    info.add_argument("raster", help="Path to the raster.")


def _add_version_parser(subparsers: argparse._SubParsersAction) -> None:
    subparsers.add_parser("version", help="Print the zonaldrill version.")


def _request_from_args(args: argparse.Namespace) -> DrillRequest:
    """Merge a request file with command-line overrides."""
    payload: dict[str, Any] = {}
    if args.request:
        payload.update(load_drill_request(Path(args.request)).as_dict())
    if args.raster:
        payload["path"] = args.raster
        payload.pop("vrt", None)
    if args.geometry:
        try:
            payload["geometry"] = json.loads(Path(args.geometry).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise InputError(f"Zone geometry could not be read: {exc}") from exc
    if args.geometry_crs:
        payload["geometry_crs"] = args.geometry_crs
    if args.band:
        payload["bands"] = args.band
    for key in ("band_strides", "decile_count", "clip_lower", "clip_upper", "buffer_distance"):
        value = getattr(args, key)
        if value is not None:
            payload[key] = value
    if args.coverage:
        payload["mode"] = "coverage"
    return normalize_drill_request(payload)


def _write_payload(payload: dict[str, Any], output: str | None) -> None:
    text = json.dumps(payload, indent=2, allow_nan=False)
    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
        LOGGER.info("Drill result written to %s", output_path)
    else:
        print(text)


def _run_drill(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    if not args.request and not args.raster:
        parser.error("--raster or --request is required for drill")
    if not args.request and not args.geometry:
        parser.error("--geometry is required for drill without --request")
    try:
        request = _request_from_args(args)
        result = drill_dataset(request)
    except InputError as exc:
        LOGGER.error("Invalid drill input: %s", exc)
        return EXIT_BAD_INPUT
    except DrillError as exc:
        LOGGER.error("Drill failed: %s", exc)
        return EXIT_FAILED
    payload = result.as_dict()
    validate_drill_result(payload)
    _write_payload(payload, args.output)
    return EXIT_OK


def _run_info(args: argparse.Namespace) -> int:
    try:
        with open_raster(args.raster) as source:
            georef = source.georeference()
            bands = [source.band_info(index) for index in range(1, source.count + 1)]
    except DrillError as exc:
        LOGGER.error("Raster inspection failed: %s", exc)
        return EXIT_FAILED
    payload = {
        "path": args.raster,
        "crs": georef.crs.to_string() if georef.crs else None,
        "transform": list(georef.transform)[:6],
        "width": georef.width,
        "height": georef.height,
        "bands": [
            {
                "index": band.index,
                "dtype": band.dtype,
                "nodata": json_nodata(band.nodata),
                "bytes_per_sample": band.bytes_per_sample,
            }
            for band in bands
        ],
    }
    print(json.dumps(payload, indent=2, allow_nan=False))
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Run the CLI entrypoint and return an exit code."""
    parser = argparse.ArgumentParser(
        prog="zonaldrill",
        description="Zonal band statistics over raster stacks",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (repeatable).",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce log output to warnings and errors.",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Emit logs as JSON on stderr.",
    )
    parser.add_argument(
        "--log-file",
        help="Optional path for JSON log output.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_drill_parser(subparsers)
    _add_info_parser(subparsers)
    _add_version_parser(subparsers)

    args = parser.parse_args(argv)
    log_file_value = getattr(args, "log_file", None)
    log_options = LogOptions(
        verbose=args.verbose or 0,
        quiet=bool(args.quiet),
        log_file=Path(log_file_value) if log_file_value else None,
        json_console=bool(args.log_json),
    )
    configure_logging(log_options, request_id=new_request_id())

    if args.command == "version":
        print(__version__)
        return EXIT_OK
    if args.command == "drill":
        return _run_drill(args, parser)
    if args.command == "info":
        return _run_info(args)

    parser.error("Unknown command")
    return EXIT_BAD_INPUT


if __name__ == "__main__":
    raise SystemExit(main())
