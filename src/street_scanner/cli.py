"""Command-line interface for area scans."""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from street_scanner.cache import ImageCache
from street_scanner.config import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_HEADINGS,
    DEFAULT_LABEL_MIN_WIDTH,
    AppConfig,
    ScanConfig,
)
from street_scanner.detectors.adapter import DetectionAdapter
from street_scanner.errors import ScanError
from street_scanner.preferences import API_KEY, load_preferences, masked, save_preferences
from street_scanner.sampler import Coordinate
from street_scanner.scanner import ScanResult, Scanner
from street_scanner.utils.logging_utils import configure_logging

logger = logging.getLogger(__name__)


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entrypoint.

    @param argv Optional argument list (defaults to sys.argv).
    @return None
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(getattr(args, "debug", False))

    if args.command == "scan":
        if (args.lat is None) != (args.lng is None):
            parser.error("--lat and --lng must be given together")
        try:
            run_scan(args)
        except ScanError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            raise SystemExit(1)
        return

    if args.command == "config":
        config = AppConfig()
        print(json.dumps(masked(load_preferences(config.config_file)), indent=2))
        return


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="street-scanner", description="Scan street-level imagery for objects")
    sub = parser.add_subparsers(dest="command", required=True)

    scan = sub.add_parser("scan", help="Scan the area around an address or coordinate")
    scan.add_argument("--address", type=str, default=None)
    scan.add_argument("--lat", type=float, default=None)
    scan.add_argument("--lng", type=float, default=None)
    scan.add_argument("--radius", type=float, default=None, help="Radius in km")
    scan.add_argument("--density", type=int, default=10, help="Ring steps between center and radius")
    scan.add_argument("--confidence", type=float, default=None, help="Minimum confidence (0 to 1.00)")
    scan.add_argument("--headings", type=int, nargs="+", default=list(DEFAULT_HEADINGS))
    scan.add_argument("--batch-size", type=int, default=DEFAULT_BATCH_SIZE)
    scan.add_argument("--label-min-width", type=int, default=DEFAULT_LABEL_MIN_WIDTH)
    scan.add_argument("--cache-dir", type=Path, default=None)
    scan.add_argument("--output-dir", type=Path, default=None)
    scan.add_argument("--api-key", type=str, default=None)
    scan.add_argument("--debug", action="store_true")

    sub.add_parser("config", help="Show stored preferences")
    return parser


def prompt_value(
    message: str,
    default: Any = None,
    convert: Callable[[str], Any] = str,
    validate: Optional[Callable[[Any], Optional[str]]] = None,
    secret: bool = False,
) -> Any:
    """Ask until a valid value is entered.

    @param message Prompt text.
    @param default Value used for empty input (None means required).
    @param convert Converter from the raw string.
    @param validate Returns an error message for bad values, else None.
    @param secret Hide input.
    @return Converted value.
    """
    suffix = f" [{default}]" if default not in (None, "") and not secret else ""
    while True:
        raw = getpass.getpass(f"{message}: ") if secret else input(f"{message}{suffix}: ")
        raw = raw.strip()
        if not raw:
            if default not in (None, ""):
                return default
            print("A value is required")
            continue
        try:
            value = convert(raw)
        except ValueError:
            print(f"Invalid value: {raw}")
            continue
        error = validate(value) if validate else None
        if error:
            print(error)
            continue
        return value


def _check_radius(value: float) -> Optional[str]:
    return None if value > 0 else "Radius must be greater than 0"


def _check_confidence(value: float) -> Optional[str]:
    return None if 0 <= value <= 1 else "Confidence must be between 0 and 1.00"


def collect_inputs(args: argparse.Namespace, prefs: Dict[str, Any]) -> Dict[str, Any]:
    """Fill scan inputs from args, then env/preferences, then prompts.

    Values entered are written back into prefs.

    @param args Parsed CLI args.
    @param prefs Preferences dict (mutated).
    @return Dict with api_key, address, center, radius, confidence.
    """
    api_key = args.api_key or os.environ.get("GOOGLE_MAPS_API_KEY") or prefs.get(API_KEY)
    if not api_key:
        api_key = prompt_value("Enter your Google Maps API key", secret=True)
        prefs[API_KEY] = api_key

    center = None
    address = args.address
    if args.lat is not None and args.lng is not None:
        center = Coordinate(args.lat, args.lng)
    elif address is None:
        address = prompt_value("Enter an address", default=prefs.get("address"))
    if address is not None:
        prefs["address"] = address

    radius = args.radius
    if radius is None:
        radius = prompt_value("Enter radius in km", prefs.get("radius", 1), float, _check_radius)
    prefs["radius"] = radius

    confidence = args.confidence
    if confidence is None:
        confidence = prompt_value(
            "Enter minimum confidence (0 to 1.00)", prefs.get("confidence", 0.5), float, _check_confidence
        )
    prefs["confidence"] = confidence

    return {
        "api_key": api_key,
        "address": address,
        "center": center,
        "radius": radius,
        "confidence": confidence,
    }


def run_scan(args: argparse.Namespace) -> ScanResult:
    """Resolve inputs, load the model, and run a scan.

    @param args Parsed CLI args.
    @return ScanResult.
    """
    from street_scanner.detectors.torchvision_ssd import TorchvisionDetector
    from street_scanner.providers.google import GoogleGeocoder, StreetViewProvider

    config = AppConfig()
    prefs = load_preferences(config.config_file)
    inputs = collect_inputs(args, prefs)
    save_preferences(config.config_file, prefs)

    # Validate before any network or model activity.
    placeholder = inputs["center"] or Coordinate(0.0, 0.0)
    scan_config = ScanConfig(
        center=placeholder,
        radius_km=inputs["radius"],
        density=args.density,
        headings=tuple(args.headings),
        min_confidence=inputs["confidence"],
        batch_size=args.batch_size,
        label_min_width=args.label_min_width,
    )

    center = inputs["center"]
    if center is None:
        center = GoogleGeocoder(inputs["api_key"], config.provider).resolve(inputs["address"])
    scan_config = replace(scan_config, center=center)

    model = TorchvisionDetector(config.detector)
    scanner = Scanner(
        fetcher=StreetViewProvider(inputs["api_key"], config.provider),
        adapter=DetectionAdapter(model),
        cache=ImageCache(args.cache_dir or config.cache_dir),
        output_dir=args.output_dir or config.output_dir,
        annotator_config=config.annotator,
        log_path=config.log_path,
        progress=_print_progress,
    )
    result = scanner.run(scan_config)
    print_summary(result)
    return result


def _print_progress(done: int, total: int) -> None:
    print(f"Batch {done}/{total} complete")


def print_summary(result: ScanResult) -> None:
    """Print per-class totals.

    @param result Finished scan.
    @return None
    """
    print(
        f"Scanned {result.coordinates} locations: "
        f"{result.samples_fetched} images, {result.samples_missing} without imagery"
    )
    if not result.total_counts:
        print("No objects found")
        return
    for label, count in sorted(result.total_counts.items(), key=lambda kv: (-kv[1], kv[0])):
        print(f"- {label}: {count}")
    print(f"Annotated images written: {len(result.output_files)}")


if __name__ == "__main__":
    main()
